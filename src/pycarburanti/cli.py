"""Command-line entry point for the fuel price exporter.

Usage::

    carburanti-exporter -l :9112 -p /metrics -i 6h

Flags override the ``CARBURANTI_*`` environment variables read by
:meth:`pycarburanti.config.ExporterConfig.from_env`.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

import aiohttp

from pycarburanti._cache import RecordCache
from pycarburanti._transport import HttpFeedTransport
from pycarburanti.config import ExporterConfig, parse_duration, split_listen
from pycarburanti.exceptions import CarburantiConfigError
from pycarburanti.scheduler import RefreshScheduler
from pycarburanti.server import create_app, start_server
from pycarburanti.sink import PrometheusPriceSink

_logger = logging.getLogger(__name__)


def _duration_arg(value: str) -> float:
    try:
        return parse_duration(value)
    except CarburantiConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carburanti-exporter",
        description="Expose Osservatorio Carburanti fuel prices as Prometheus metrics.",
    )
    parser.add_argument("-p", "--path", dest="metrics_path", help="HTTP path where to expose metrics to")
    parser.add_argument("-l", "--listen", dest="listen", help="Address to listen to (host:port)")
    parser.add_argument(
        "-i",
        "--interval",
        dest="interval",
        type=_duration_arg,
        help="Interval between data updates, as a duration string (e.g. 6h, 90m)",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CARBURANTI_LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ExporterConfig:
    overrides: dict[str, Any] = {}
    for name in ("metrics_path", "listen", "interval"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return ExporterConfig.from_env(**overrides)


async def run(config: ExporterConfig) -> None:
    """Serve metrics and refresh them until the process is terminated."""
    sink = PrometheusPriceSink()
    cache = RecordCache(config.cache_ttl)
    host, port = split_listen(config.listen)

    runner = await start_server(create_app(sink.registry, config.metrics_path), host, port)
    try:
        async with aiohttp.ClientSession() as http_session:
            transport = HttpFeedTransport(http_session, encoding=config.feed_encoding)
            scheduler = RefreshScheduler(config, transport, cache, sink)
            await scheduler.run_forever()
    finally:
        await runner.cleanup()


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = config_from_args(args)
    except CarburantiConfigError as exc:
        parser.error(str(exc))

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        _logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
