# file: e164lookup/net/http.py
"""
Async HTTP transport (httpx) for the lookup endpoint.

`fetch` performs exactly one GET and never raises (except on cancellation):
the outcome comes back as `TransportOk` or `TransportFailure`, and the
caller matches on it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from e164lookup import __version__

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://e164.com/"
DEFAULT_REFERER = "https://www.e164.com/"
DEFAULT_USER_AGENT = f"e164lookup/{__version__} (Python)"


@dataclass(frozen=True, slots=True)
class HttpClientConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    referer: str = DEFAULT_REFERER
    api_key: str | None = field(default=None, repr=False)


def default_headers(config: HttpClientConfig) -> dict[str, str]:
    headers = {"User-Agent": config.user_agent, "Referer": config.referer}
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"
    return headers


def new_async_client(config: HttpClientConfig) -> httpx.AsyncClient:
    """Create (but do not enter) the default client for `config`."""

    return httpx.AsyncClient(
        base_url=config.base_url,
        headers=default_headers(config),
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=True,
    )


def accept_status(status: int) -> bool:
    # 4xx bodies are inspected by the caller; only 5xx counts as a failure.
    return 200 <= status < 500


@dataclass(frozen=True, slots=True)
class TransportOk:
    """A response whose status passed `accept_status`, with its decoded body."""

    response: Any
    status_code: int
    payload: Any


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """
    A request that produced no acceptable response.

    `response` is the response attached to the failure (rejected status, or an
    exception with a `.response` attribute). `received` is whatever response
    had already been obtained when an exception was raised.
    """

    message: str | None
    response: Any = None
    received: Any = None

    @property
    def status_code(self) -> int | None:
        status = getattr(self.response, "status_code", None)
        return status if isinstance(status, int) and status else None


TransportResult = TransportOk | TransportFailure


def decode_payload(response: Any) -> Any:
    """
    Return the JSON body of `response`, or its text if it is not JSON.
    """

    try:
        return response.json()
    except ValueError:
        return getattr(response, "text", None)


def _attached_response(exc: BaseException) -> Any:
    # httpx.HTTPStatusError carries one; RequestError does not.
    return getattr(exc, "response", None)


async def fetch(client: Any, path: str) -> TransportResult:
    """
    GET `path` on `client` and classify the outcome.

    Statuses outside `accept_status` become a `TransportFailure` with the
    response attached and the message "Request failed with status code N".
    """

    response: Any = None
    try:
        response = await client.get(path)
        status = int(response.status_code)
        if not accept_status(status):
            return TransportFailure(f"Request failed with status code {status}", response)
        return TransportOk(response=response, status_code=status, payload=decode_payload(response))
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.debug("GET %s raised %s", path, type(exc).__name__, exc_info=True)
        return TransportFailure(str(exc) or None, _attached_response(exc), response)
