"""Metrics HTTP endpoint."""

from __future__ import annotations

import logging

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

_logger = logging.getLogger(__name__)


def create_app(registry: CollectorRegistry, path: str) -> web.Application:
    """Build an application serving *registry* in text format on *path*.

    Requests only read the registry, so they never wait on a refresh.
    """

    async def _metrics(_request: web.Request) -> web.Response:
        response = web.Response(body=generate_latest(registry))
        response.headers["Content-Type"] = CONTENT_TYPE_LATEST
        return response

    app = web.Application()
    app.router.add_get(path, _metrics)
    return app


async def start_server(app: web.Application, host: str, port: int) -> web.AppRunner:
    """Start serving *app*. Bind failures propagate to the caller."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    _logger.info("Starting server on %s:%d", host, port)
    return runner
