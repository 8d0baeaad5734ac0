"""Tests for ServiceClient against a local aiohttp test server."""
import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


def make_app(routes: dict) -> web.Application:
    """Build an app serving fixed responses per path."""
    app = web.Application()
    for path, response_factory in routes.items():
        async def handler(request, factory=response_factory):
            return await factory()
        app.router.add_get(path, handler)
    return app


def test_url_for_joins_paths():
    from candlerunner_client.collectors.candlerunner.client import ServiceClient

    client = ServiceClient("http://127.0.0.1:27001/")

    assert client.base_url == "http://127.0.0.1:27001"
    assert client.url_for("/list-accounts") == "http://127.0.0.1:27001/list-accounts"
    assert client.url_for("list-accounts") == "http://127.0.0.1:27001/list-accounts"


@pytest.mark.asyncio
async def test_get_json_returns_decoded_body():
    from candlerunner_client.collectors.candlerunner.client import ServiceClient

    payload = [{"figi": "BBG000B9XRY4", "ticker": "AAPL", "display_name": "Apple"}]

    async def respond():
        return web.json_response(payload)

    async with TestServer(make_app({"/list-instruments": respond})) as server:
        client = ServiceClient(str(server.make_url("/")))
        data = await client.get_json("/list-instruments")

    assert data == payload


@pytest.mark.asyncio
async def test_error_status_uses_service_message():
    from candlerunner_client.collectors.candlerunner.client import ServiceClient, ApiError

    async def respond():
        return web.json_response({"message": "Strategy `MA` is not found"}, status=404)

    async with TestServer(make_app({"/list-strategies": respond})) as server:
        client = ServiceClient(str(server.make_url("/")))
        with pytest.raises(ApiError) as exc_info:
            await client.get_json("/list-strategies")

    assert exc_info.value.status == 404
    assert exc_info.value.message == "Strategy `MA` is not found"
    assert exc_info.value.url.endswith("/list-strategies")


@pytest.mark.asyncio
async def test_error_status_with_plain_body():
    from candlerunner_client.collectors.candlerunner.client import ServiceClient, ApiError

    async def respond():
        return web.Response(status=500, text="internal failure")

    async with TestServer(make_app({"/list-accounts": respond})) as server:
        client = ServiceClient(str(server.make_url("/")))
        with pytest.raises(ApiError, match="HTTP 500: internal failure"):
            await client.get_json("/list-accounts")


@pytest.mark.asyncio
async def test_invalid_json_raises_decode_error():
    from candlerunner_client.collectors.candlerunner.client import ServiceClient, ResponseDecodeError

    async def respond():
        return web.Response(text="<html>not json</html>")

    async with TestServer(make_app({"/list-accounts": respond})) as server:
        client = ServiceClient(str(server.make_url("/")))
        with pytest.raises(ResponseDecodeError):
            await client.get_json("/list-accounts")


@pytest.mark.asyncio
async def test_shared_session_is_reused_and_closed():
    from candlerunner_client.collectors.candlerunner.client import ServiceClient

    async def respond():
        return web.json_response([])

    async with TestServer(make_app({"/list-accounts": respond})) as server:
        session = aiohttp.ClientSession()
        client = ServiceClient(str(server.make_url("/")), session=session)

        assert await client.get_json("/list-accounts") == []
        assert await client.get_json("/list-accounts") == []

        await client.close()

    assert session.closed


@pytest.mark.asyncio
async def test_timeout_is_applied():
    from candlerunner_client.collectors.candlerunner.client import ServiceClient

    async def respond():
        await asyncio.sleep(0.3)
        return web.json_response([])

    async with TestServer(make_app({"/list-accounts": respond})) as server:
        client = ServiceClient(str(server.make_url("/")), timeout_seconds=0.05)
        with pytest.raises(asyncio.TimeoutError):
            await client.get_json("/list-accounts")
