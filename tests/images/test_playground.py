"""Tests for image playgrounds."""

import base64
import json

import httpx
import pytest

from piko.images import HttpImagePlayground, ImagePlayground, NullImagePlayground

PNG = b"\x89PNG\r\n\x1a\n"


def make_playground(handler, **kwargs) -> HttpImagePlayground:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpImagePlayground("https://images.test/v1/images/generations", client=client, **kwargs)


def image_response() -> httpx.Response:
    return httpx.Response(200, json={"data": [{"b64_json": base64.b64encode(PNG).decode()}]})


@pytest.mark.asyncio
async def test_null_playground_cancels():
    playground = NullImagePlayground()
    assert isinstance(playground, ImagePlayground)
    assert await playground.generate("a cat") is None


@pytest.mark.asyncio
async def test_decodes_image():
    playground = make_playground(lambda request: image_response())
    assert await playground.generate("a cat") == PNG


@pytest.mark.asyncio
async def test_request_payload_and_auth():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return image_response()

    playground = make_playground(handler, api_key="secret", model="sdxl")
    await playground.generate("a cat")

    body = json.loads(seen[0].content)
    assert body == {
        "prompt": "a cat",
        "n": 1,
        "size": "1024x1024",
        "response_format": "b64_json",
        "model": "sdxl",
    }
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_no_auth_header_without_key():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return image_response()

    await make_playground(handler).generate("a cat")

    assert "Authorization" not in seen[0].headers
    assert "model" not in json.loads(seen[0].content)


@pytest.mark.asyncio
async def test_http_error_returns_none():
    playground = make_playground(lambda request: httpx.Response(500, text="overloaded"))
    assert await playground.generate("a cat") is None


@pytest.mark.asyncio
async def test_connection_error_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    assert await make_playground(handler).generate("a cat") is None


@pytest.mark.asyncio
async def test_timeout_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    assert await make_playground(handler).generate("a cat") is None


@pytest.mark.asyncio
async def test_malformed_response_returns_none():
    playground = make_playground(lambda request: httpx.Response(200, json={"data": []}))
    assert await playground.generate("a cat") is None


@pytest.mark.asyncio
async def test_invalid_base64_returns_none():
    playground = make_playground(
        lambda request: httpx.Response(200, json={"data": [{"b64_json": "%%%"}]})
    )
    assert await playground.generate("a cat") is None
