# file: e164lookup/core/parser.py
"""
Phone number input handling.

The lookup API does its own validation, so this module only does the minimum:
drop characters that cannot be part of a dialable number and build the
request path. It does not validate.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

_NON_DIALABLE = re.compile(r"[^\d+-]+", re.ASCII)


def sanitize_number(raw: Any) -> str:
    """
    Keep only digits, `+` and `-`.

    Non-string input is converted with `str()` first. An empty return value
    means the input cannot be looked up.
    """

    return _NON_DIALABLE.sub("", str(raw))


def build_lookup_path(sanitized: str) -> str:
    """
    Return the request path for a sanitized number, relative to the base URL.

    The number is percent-encoded as a single path segment (`+` -> `%2B`).
    """

    return "/" + quote(sanitized, safe="-")
