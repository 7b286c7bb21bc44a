"""Refresh loop: fetch prices, cache them, fetch stations, join and emit.

Each iteration runs sequentially and stops at the first failing stage.
Failures are logged and the loop sleeps until the next iteration; nothing
raised inside an iteration terminates :meth:`RefreshScheduler.run_forever`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from pycarburanti._cache import RecordCache
from pycarburanti._transport import FeedTransport
from pycarburanti.config import ExporterConfig
from pycarburanti.exceptions import CarburantiError
from pycarburanti.ingestion.join import join_stations
from pycarburanti.ingestion.prices import parse_prices
from pycarburanti.ingestion.stations import parse_stations
from pycarburanti.models.joined import JoinedPrice
from pycarburanti.models.price import PriceRecord
from pycarburanti.models.station import Station
from pycarburanti.sink import PriceSink

_logger = logging.getLogger(__name__)


class IterationOutcome(StrEnum):
    COMPLETED = "completed"
    PRICES_FAILED = "prices_failed"
    STATIONS_FAILED = "stations_failed"


@dataclass(frozen=True, slots=True)
class IterationResult:
    """Summary of one refresh iteration."""

    outcome: IterationOutcome
    records: int = 0
    emitted: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == IterationOutcome.COMPLETED


class RefreshScheduler:
    """Drive one pipeline iteration per configured interval.

    Usage::

        scheduler = RefreshScheduler(config, transport, cache, sink)
        task = asyncio.create_task(scheduler.run_forever())
    """

    def __init__(
        self,
        config: ExporterConfig,
        transport: FeedTransport,
        cache: RecordCache,
        sink: PriceSink,
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._transport = transport
        self._cache = cache
        self._sink = sink
        self._sleep = sleep

    async def _fetch_prices(self) -> list[PriceRecord]:
        body = await self._transport.fetch_text(self._config.prices_url)
        # Parsing runs in a worker thread; RecordCache is thread-safe.
        return await asyncio.to_thread(parse_prices, body, cache=self._cache, tz=self._config.source_timezone)

    async def _fetch_stations(self) -> dict[int, Station]:
        body = await self._transport.fetch_text(self._config.stations_url)
        return await asyncio.to_thread(parse_stations, body)

    def _join_and_emit(self, records: list[PriceRecord], stations: dict[int, Station]) -> list[JoinedPrice]:
        joined = join_stations(records, stations)
        for item in joined:
            self._sink.emit(item)
        return joined

    async def refresh_once(self) -> IterationResult:
        """Run a single iteration. Never raises for feed or transport errors."""
        try:
            records = await self._fetch_prices()
        except CarburantiError as exc:
            _logger.error("Failed to fetch prices: %s", exc)
            return IterationResult(IterationOutcome.PRICES_FAILED, error=exc)

        try:
            stations = await self._fetch_stations()
        except CarburantiError as exc:
            _logger.error("Failed to update stations: %s", exc)
            return IterationResult(IterationOutcome.STATIONS_FAILED, records=len(records), error=exc)

        joined = await asyncio.to_thread(self._join_and_emit, records, stations)
        unmatched = sum(1 for item in joined if not item.matched)
        _logger.info(
            "Refreshed %d prices across %d stations (%d without station data)",
            len(joined),
            len(stations),
            unmatched,
        )
        return IterationResult(IterationOutcome.COMPLETED, records=len(records), emitted=len(joined))

    async def run_forever(self) -> None:
        """Refresh, then sleep for the configured interval, until cancelled."""
        while True:
            try:
                await self.refresh_once()
            except Exception:
                _logger.exception("Unexpected error during refresh")
            _logger.info("Sleeping for %ss", self._config.interval)
            await self._sleep(self._config.interval)
