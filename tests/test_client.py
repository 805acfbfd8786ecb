# file: tests/test_client.py
from __future__ import annotations

import logging
from typing import Any

import httpx
import pytest

from e164lookup.client import E164Client
from e164lookup.net.http import HttpClientConfig
from e164lookup.response import LookupResult

TEST_NUMBER = "+14155552671"
LOOKUP_URL = "https://e164.com/%2B14155552671"


class _StubClient:
    """Transport double: returns a canned response or raises a canned error."""

    def __init__(self, *, response: Any = None, error: BaseException | None = None) -> None:
        self.response = response
        self.error = error
        self.paths: list[str] = []

    async def get(self, path: str) -> Any:
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        return self.response


def _response(status: int, **kwargs: Any) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", LOOKUP_URL), **kwargs)


def _assert_consistent(result: LookupResult) -> None:
    ok = 200 <= result.status_code < 300
    assert result.is_success() is ok
    assert (result.data is not None) is ok
    assert (result.error is None) is ok


@pytest.mark.asyncio
async def test_lookup_success_with_object_payload() -> None:
    payload = {"prefix": "1415", "location": "San Francisco"}
    raw = _response(200, json=payload)
    stub = _StubClient(response=raw)

    result = await E164Client(stub).lookup(TEST_NUMBER)

    assert stub.paths == ["/%2B14155552671"]
    assert isinstance(result, LookupResult)
    assert result.is_success()
    assert result.status_code == 200
    assert result.data == payload
    assert result.prefix == "1415"
    assert result.location == "San Francisco"
    assert result.error is None
    assert result.raw_response is raw
    assert result.category == "ok"


@pytest.mark.asyncio
async def test_lookup_unwraps_first_array_element() -> None:
    payload = [{"prefix": "1415", "location": "San Francisco"}, {"prefix": "1"}]
    result = await E164Client(_StubClient(response=_response(200, json=payload))).lookup(
        TEST_NUMBER
    )

    assert result.is_success()
    assert result.data == payload[0]
    assert result.prefix == "1415"


@pytest.mark.asyncio
@pytest.mark.parametrize("number", ["", "abc", "   ", "()"])
async def test_lookup_rejects_empty_input_without_network(number: str) -> None:
    stub = _StubClient(response=_response(200, json={"prefix": "1"}))

    result = await E164Client(stub).lookup(number)

    assert stub.paths == []
    assert result.status_code == 400
    assert result.error == "Invalid phone number format provided."
    assert result.data is None
    assert result.raw_response is None
    assert result.category == "input"


@pytest.mark.asyncio
async def test_lookup_forwards_dash_only_input() -> None:
    stub = _StubClient(response=_response(404, json={"error": "Not Found"}))

    result = await E164Client(stub).lookup("invalid-number")

    assert stub.paths == ["/-"]
    assert result.status_code == 404
    assert result.error == "Not Found"


@pytest.mark.asyncio
async def test_lookup_upstream_404_uses_error_field() -> None:
    raw = _response(404, json={"error": "Not Found"})
    result = await E164Client(_StubClient(response=raw)).lookup(TEST_NUMBER)

    assert not result.is_success()
    assert result.status_code == 404
    assert result.error == "Not Found"
    assert result.data is None
    assert result.raw_response is raw
    assert result.category == "not_found"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"message": "Forbidden"}])
async def test_lookup_upstream_error_without_error_field(body: dict[str, Any]) -> None:
    result = await E164Client(_StubClient(response=_response(403, json=body))).lookup(
        TEST_NUMBER
    )

    assert result.status_code == 403
    assert result.error == "Request failed with status code 403"
    assert result.data is None


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs", [{"json": []}, {"content": b""}, {"content": b"null"}])
async def test_lookup_empty_success_body_is_not_found(kwargs: dict[str, Any]) -> None:
    raw = _response(200, **kwargs)
    result = await E164Client(_StubClient(response=raw)).lookup(TEST_NUMBER)

    assert result.status_code == 404
    assert result.error == "Phone number not found or invalid."
    assert result.data is None
    assert result.raw_response is raw
    assert result.category == "not_found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs", [{"json": "unexpected string"}, {"json": 42}, {"json": ["x"]}, {"text": "<html>"}]
)
async def test_lookup_non_record_payload_is_format_error(kwargs: dict[str, Any]) -> None:
    result = await E164Client(_StubClient(response=_response(200, **kwargs))).lookup(TEST_NUMBER)

    assert result.status_code == 500
    assert result.error == "Received unexpected data format from API."
    assert result.data is None
    assert result.category == "format"


@pytest.mark.asyncio
async def test_lookup_network_error_without_response() -> None:
    stub = _StubClient(error=RuntimeError("Network Error"))

    result = await E164Client(stub).lookup(TEST_NUMBER)

    assert result.status_code == 500
    assert result.error == "Network Error"
    assert result.data is None
    assert result.raw_response is None
    assert result.category == "transport"


@pytest.mark.asyncio
async def test_lookup_error_with_attached_response() -> None:
    attached = _response(500, json={"error": "Server Error"})
    error = httpx.HTTPStatusError(
        "Request failed with status code 500", request=attached.request, response=attached
    )

    result = await E164Client(_StubClient(error=error)).lookup(TEST_NUMBER)

    assert not result.is_success()
    assert result.status_code == 500
    assert result.error == "Request failed with status code 500"
    assert result.data is None
    assert result.raw_response is attached


@pytest.mark.asyncio
async def test_lookup_error_with_attached_4xx_response_keeps_its_status() -> None:
    attached = _response(429)
    error = httpx.HTTPStatusError("Too Many Requests", request=attached.request, response=attached)

    result = await E164Client(_StubClient(error=error)).lookup(TEST_NUMBER)

    assert result.status_code == 429
    assert result.error == "Too Many Requests"
    assert result.category == "upstream"


@pytest.mark.asyncio
async def test_lookup_error_without_message_uses_fallback() -> None:
    result = await E164Client(_StubClient(error=RuntimeError())).lookup(TEST_NUMBER)

    assert result.status_code == 500
    assert result.error == "An unexpected error occurred during lookup."


@pytest.mark.asyncio
async def test_lookup_over_httpx_mock_transport() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/+14155552671":
            return httpx.Response(200, json=[{"prefix": "1415", "iso3": "USA"}])
        return httpx.Response(500)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(base_url="https://e164.com/", transport=transport) as http:
        e164 = E164Client(http)
        ok = await e164.lookup("+1 (415) 555 2671")
        server_error = await e164.lookup("1")

    assert len(seen) == 2
    assert ok.is_success()
    assert ok.iso3 == "USA"
    assert server_error.status_code == 500
    assert server_error.error == "Request failed with status code 500"
    assert isinstance(server_error.raw_response, httpx.Response)
    assert server_error.category == "upstream"
    for result in (ok, server_error):
        _assert_consistent(result)


@pytest.mark.asyncio
async def test_default_client_is_configured_and_closed() -> None:
    async with E164Client() as e164:
        assert isinstance(e164.client, httpx.AsyncClient)
        assert str(e164.client.base_url) == "https://e164.com/"
        assert e164.client.headers["Referer"] == "https://www.e164.com/"
        assert "Authorization" not in e164.client.headers

    assert e164.client.is_closed


@pytest.mark.asyncio
async def test_injected_client_is_not_closed() -> None:
    async with httpx.AsyncClient() as http:
        async with E164Client(http) as e164:
            assert e164.client is http
        assert not http.is_closed


def test_client_and_config_together_are_rejected() -> None:
    with pytest.raises(ValueError):
        E164Client(_StubClient(), config=HttpClientConfig())


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, [{}]])
async def test_lookup_empty_object_is_a_success(body: Any) -> None:
    raw = _response(200, json=body)

    result = await E164Client(_StubClient(response=raw)).lookup(TEST_NUMBER)

    assert result.is_success()
    assert result.status_code == 200
    assert result.data == {}
    assert result.error is None
    assert all(value is None for value in result.fields().values())
    assert result.category == "ok"


@pytest.mark.asyncio
async def test_lookup_upstream_5xx_with_body_is_upstream_error() -> None:
    raw = _response(502, json={"error": "Bad Gateway"})

    result = await E164Client(_StubClient(response=raw)).lookup(TEST_NUMBER)

    assert result.status_code == 502
    assert result.error == "Request failed with status code 502"
    assert result.raw_response is raw
    assert result.category == "upstream"


class _BrokenBody:
    """Response whose body blows up on decode with something other than ValueError."""

    status_code = 200

    def json(self) -> Any:
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_lookup_keeps_response_already_received_when_decoding_fails() -> None:
    broken = _BrokenBody()

    result = await E164Client(_StubClient(response=broken)).lookup(TEST_NUMBER)

    assert result.status_code == 500
    assert result.error == "boom"
    assert result.data is None
    assert result.raw_response is broken
    assert result.category == "transport"
    _assert_consistent(result)


@pytest.mark.asyncio
async def test_lookup_logs_do_not_carry_the_number_above_debug(caplog) -> None:
    caplog.set_level(logging.INFO, logger="e164lookup")
    e164 = E164Client(_StubClient(error=RuntimeError("Network Error")))

    await e164.lookup(TEST_NUMBER)
    await e164.lookup("abc")

    assert caplog.records
    for record in caplog.records:
        assert "4155552671" not in record.getMessage()
        assert "abc" not in record.getMessage()
