# file: e164lookup/client.py
"""
Lookup client for the e164.com API.

Example:
    async with E164Client() as e164:
        result = await e164.lookup("+14155552671")
        if result.is_success():
            print(result.operator_brand, result.location)
        else:
            print(result.status_code, result.error)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from e164lookup.core.parser import build_lookup_path, sanitize_number
from e164lookup.net.http import (
    HttpClientConfig,
    TransportFailure,
    TransportOk,
    fetch,
    new_async_client,
)
from e164lookup.response import (
    GENERIC_LOOKUP_ERROR,
    INVALID_INPUT_ERROR,
    NOT_FOUND_ERROR,
    UNEXPECTED_FORMAT_ERROR,
    LookupResult,
)

if TYPE_CHECKING:
    from e164lookup.config import E164Settings

logger = logging.getLogger(__name__)


def _is_record(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _upstream_error_text(status: int, payload: Any) -> str:
    if _is_record(payload) and payload.get("error"):
        return str(payload["error"])
    return f"Request failed with status code {status}"


def interpret_response(outcome: TransportOk) -> LookupResult:
    """
    Turn an accepted response into a result.

    Handles non-2xx statuses, empty bodies, list bodies (first element wins)
    and bodies that are not JSON objects.
    """

    status = outcome.status_code
    payload = outcome.payload
    raw = outcome.response

    if not 200 <= status < 300:
        category = "not_found" if status == 404 else "upstream"
        return LookupResult.failure(status, _upstream_error_text(status, payload), raw, category)

    # An empty object is still a record; only null-like bodies and empty lists are misses.
    if not payload and not _is_record(payload):
        return LookupResult.failure(404, NOT_FOUND_ERROR, raw, "not_found")

    if _is_sequence(payload):
        payload = payload[0]

    if not _is_record(payload):
        return LookupResult.failure(500, UNEXPECTED_FORMAT_ERROR, raw, "format")

    return LookupResult.success(status, dict(payload), raw)


def interpret_failure(outcome: TransportFailure) -> LookupResult:
    status = outcome.status_code or 500
    message = outcome.message or GENERIC_LOOKUP_ERROR
    if outcome.response is None:
        return LookupResult.failure(status, message, outcome.received, "transport")
    category = "not_found" if status == 404 else "upstream"
    return LookupResult.failure(status, message, outcome.response, category)


class E164Client:
    """
    Async client for single-number lookups.

    Args:
        client: Optional pre-configured transport (e.g. `httpx.AsyncClient`).
            It must provide an async `get(path)`. A client passed in is never
            closed by `E164Client`.
        config: Settings for the default `httpx.AsyncClient`. Passing both
            `client` and `config` raises `ValueError`.
    """

    def __init__(
        self, client: Any | None = None, *, config: HttpClientConfig | None = None
    ) -> None:
        if client is not None and config is not None:
            raise ValueError("Pass either a pre-configured client or a config, not both.")
        if client is not None:
            self.client = client
            self._owns_client = False
        else:
            self.client = new_async_client(config or HttpClientConfig())
            self._owns_client = True

    @classmethod
    def from_settings(cls, settings: E164Settings) -> E164Client:
        return cls(config=settings.http_config())

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> E164Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def lookup(self, phone_number: Any) -> LookupResult:
        """
        Look up a phone number.

        Never raises (other than on cancellation); check `is_success()` on the
        returned `LookupResult`.
        """

        sanitized = sanitize_number(phone_number)
        if not sanitized:
            logger.info("Rejected lookup input: nothing dialable")
            logger.debug("Rejected input was %r", phone_number)
            return LookupResult.failure(400, INVALID_INPUT_ERROR, None, "input")

        path = build_lookup_path(sanitized)
        logger.debug("Looking up %s", path)

        outcome = await fetch(self.client, path)
        if isinstance(outcome, TransportOk):
            result = interpret_response(outcome)
        else:
            logger.warning("Lookup transport failure: %s", outcome.message)
            logger.debug("Failed lookup path was %s", path)
            result = interpret_failure(outcome)

        if not result.is_success():
            logger.info(
                "Lookup failed: %s %s",
                result.status_code,
                result.error,
                extra={"category": result.category},
            )
        return result
