from __future__ import annotations

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from pycarburanti._transport import HttpFeedTransport
from pycarburanti.exceptions import FetchError


def _app() -> web.Application:
    async def _prices(_request: web.Request) -> web.Response:
        return web.Response(body="header\nCAFFÈ;1\n".encode())

    async def _latin1(_request: web.Request) -> web.Response:
        return web.Response(body="CAFFÈ".encode("latin-1"))

    async def _broken(_request: web.Request) -> web.Response:
        return web.Response(status=503, text="maintenance")

    app = web.Application()
    app.router.add_get("/prices.csv", _prices)
    app.router.add_get("/latin1.csv", _latin1)
    app.router.add_get("/broken.csv", _broken)
    return app


@pytest.mark.asyncio
async def test_fetch_text_returns_decoded_body() -> None:
    async with TestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpFeedTransport(session)
        text = await transport.fetch_text(str(server.make_url("/prices.csv")))

    assert text == "header\nCAFFÈ;1\n"


@pytest.mark.asyncio
async def test_fetch_text_honours_encoding() -> None:
    async with TestServer(_app()) as server, aiohttp.ClientSession() as session:
        latin1 = HttpFeedTransport(session, encoding="latin-1")
        utf8 = HttpFeedTransport(session)
        url = str(server.make_url("/latin1.csv"))

        assert await latin1.fetch_text(url) == "CAFFÈ"
        assert await utf8.fetch_text(url) == "CAFF\ufffd"


@pytest.mark.asyncio
async def test_non_200_is_fetch_error() -> None:
    async with TestServer(_app()) as server, aiohttp.ClientSession() as session:
        url = str(server.make_url("/broken.csv"))
        with pytest.raises(FetchError) as exc_info:
            await HttpFeedTransport(session).fetch_text(url)

    assert exc_info.value.status_code == 503
    assert exc_info.value.url == url


@pytest.mark.asyncio
async def test_connection_failure_is_fetch_error() -> None:
    async with TestServer(_app()) as server:
        url = str(server.make_url("/prices.csv"))
    # The server is closed now, so the connection is refused.
    async with aiohttp.ClientSession() as session:
        with pytest.raises(FetchError) as exc_info:
            await HttpFeedTransport(session).fetch_text(url)

    assert exc_info.value.status_code is None
