# file: e164lookup/__init__.py
"""
e164lookup - async client for the e164.com phone number lookup API.

A lookup never raises: every outcome (success, not found, upstream error,
transport failure) is returned as a `LookupResult`.
"""

from __future__ import annotations

__all__ = ["E164Client", "LookupResult", "__version__"]

__version__ = "0.1.0"

from e164lookup.client import E164Client  # noqa: E402
from e164lookup.response import LookupResult  # noqa: E402
