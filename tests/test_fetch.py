"""Tests for locator resolution, remote fetch and payload shape checks."""

from __future__ import annotations

import httpx
import pytest
import respx

from receipt_service.errors import (
    MalformedPayloadError,
    PayloadShapeError,
    RequestShapeError,
    UnreachableError,
    UpstreamError,
)
from receipt_service.receipts.fetch import fetch_json, resolve_locator, validate_locator
from receipt_service.receipts.shape import ensure_mapping


def test_resolve_locator_encodes_id_and_time() -> None:
    key = resolve_locator("http://api.test/orders", "A 1/2", "2024-05-01T10:00:00+02:00")
    assert key == "http://api.test/orders/A%201%2F2?time=2024-05-01T10%3A00%3A00%2B02%3A00"


def test_resolve_locator_is_deterministic_and_strips_trailing_slash() -> None:
    a = resolve_locator("http://api.test/orders/", "A1", "T")
    b = resolve_locator("http://api.test/orders", "A1", "T")
    assert a == b == "http://api.test/orders/A1?time=T"


@pytest.mark.parametrize("url", ["api.test/orders", "ftp://api.test/x", "/orders", "http://"])
def test_validate_locator_rejects_non_absolute_http(url) -> None:
    with pytest.raises(RequestShapeError):
        validate_locator(url)


def test_validate_locator_accepts_https() -> None:
    validate_locator("https://api.test:8443/orders")


@pytest.mark.asyncio
async def test_fetch_json_returns_parsed_object() -> None:
    with respx.mock(assert_all_called=True) as router:
        route = router.get(host="api.test", path="/orders/A1").respond(200, json={"id": "A1", "apples": "3"})

        async with httpx.AsyncClient() as client:
            data = await fetch_json(client, "http://api.test/orders/A1?time=T")

    assert data == {"id": "A1", "apples": "3"}
    assert route.call_count == 1
    assert route.calls.last.request.url.params["time"] == "T"


@pytest.mark.asyncio
async def test_fetch_json_joins_chunked_body() -> None:
    async def body():
        for part in (b'{"apples"', b': "3", "pe', b'ars": 2}'):
            yield part

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body())

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        data = await fetch_json(client, "http://api.test/orders/A1?time=T")

    assert data == {"apples": "3", "pears": 2}


@pytest.mark.asyncio
async def test_fetch_json_non_success_raises_upstream_error() -> None:
    with respx.mock(assert_all_called=True) as router:
        router.get(host="api.test", path="/orders/missing").respond(404, text="order not found")

        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamError) as exc_info:
                await fetch_json(client, "http://api.test/orders/missing?time=T")

    assert exc_info.value.status_code == 404
    assert exc_info.value.body == "order not found"
    assert exc_info.value.message == "Error from API: order not found"


@pytest.mark.asyncio
async def test_fetch_json_connect_error_raises_unreachable() -> None:
    with respx.mock(assert_all_called=True) as router:
        router.get(host="api.test").mock(side_effect=httpx.ConnectError("connection refused"))

        async with httpx.AsyncClient() as client:
            with pytest.raises(UnreachableError) as exc_info:
                await fetch_json(client, "http://api.test/orders/A1?time=T")

    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Unable to reach the specified API"


@pytest.mark.asyncio
async def test_fetch_json_timeout_raises_unreachable() -> None:
    with respx.mock(assert_all_called=True) as router:
        router.get(host="api.test").mock(side_effect=httpx.ReadTimeout("timed out"))

        async with httpx.AsyncClient() as client:
            with pytest.raises(UnreachableError):
                await fetch_json(client, "http://api.test/orders/A1?time=T")


@pytest.mark.asyncio
async def test_fetch_json_invalid_json_raises_malformed() -> None:
    with respx.mock(assert_all_called=True) as router:
        router.get(host="api.test").respond(200, text="<html>oops</html>")

        async with httpx.AsyncClient() as client:
            with pytest.raises(MalformedPayloadError):
                await fetch_json(client, "http://api.test/orders/A1?time=T")


@pytest.mark.parametrize("value", [{}, {"a": 1}, {"id": "X", "nested": {"b": [1, 2]}}])
def test_ensure_mapping_accepts_objects(value) -> None:
    assert ensure_mapping(value) is value


@pytest.mark.parametrize("value", [[1, 2, 3], [], None, "text", 42, 1.5, True])
def test_ensure_mapping_rejects_non_objects(value) -> None:
    with pytest.raises(PayloadShapeError) as exc_info:
        ensure_mapping(value)
    assert exc_info.value.status_code == 400
