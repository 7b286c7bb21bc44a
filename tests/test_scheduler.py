from __future__ import annotations

import asyncio

import pytest

from pycarburanti._cache import RecordCache
from pycarburanti.config import ExporterConfig
from pycarburanti.exceptions import FetchError, MalformedRow
from pycarburanti.models.joined import JoinedPrice
from pycarburanti.scheduler import IterationOutcome, RefreshScheduler

PRICES_URL = "http://feeds.test/prices.csv"
STATIONS_URL = "http://feeds.test/stations.csv"

PRICES = (
    "Estrazione del 2024-03-05\n"
    "idImpianto;descCarburante;prezzo;isSelf;dtComu\n"
    "101;benzina;1.899;true;5/3/2024 8:00:00\n"
)
STATIONS = (
    "idImpianto;Gestore;Bandiera;Tipo Impianto;Nome Impianto;Indirizzo;Comune;Provincia;Latitudine;Longitudine\n"
    "101;ROSSI MARIO;Agip Eni;Stradale;ENI ROMA NORD;VIA SALARIA 1;ROMA;RM;41.93;12.50\n"
)


class _FakeTransport:
    def __init__(self, responses: dict[str, str | Exception]) -> None:
        self.responses = responses
        self.calls: list[str] = []

    async def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


class _ListSink:
    def __init__(self) -> None:
        self.emitted: list[JoinedPrice] = []

    def emit(self, joined: JoinedPrice) -> None:
        self.emitted.append(joined)


def _config() -> ExporterConfig:
    return ExporterConfig(prices_url=PRICES_URL, stations_url=STATIONS_URL, interval=10.0)


@pytest.mark.asyncio
async def test_end_to_end_iteration_emits_joined_record() -> None:
    sink = _ListSink()
    scheduler = RefreshScheduler(
        _config(),
        _FakeTransport({PRICES_URL: PRICES, STATIONS_URL: STATIONS}),
        RecordCache(ttl=3600),
        sink,
    )

    result = await scheduler.refresh_once()

    assert result.ok
    assert result.emitted == 1
    assert len(sink.emitted) == 1
    labels = sink.emitted[0].labels()
    assert labels == {
        "station_id": "101",
        "fuel_type": "benzina",
        "self_service": "true",
        "name": "ENI ROMA NORD",
        "type": "Stradale",
        "municipality": "ROMA",
        "province": "RM",
        "brand": "Agip Eni",
    }
    assert sink.emitted[0].price == 1.899


@pytest.mark.asyncio
async def test_unmatched_station_still_emitted_with_empty_metadata() -> None:
    sink = _ListSink()
    stations = STATIONS.splitlines()[0] + "\n"
    scheduler = RefreshScheduler(
        _config(),
        _FakeTransport({PRICES_URL: PRICES, STATIONS_URL: stations}),
        RecordCache(ttl=3600),
        sink,
    )

    await scheduler.refresh_once()

    joined = sink.emitted[0]
    assert not joined.matched
    assert (joined.name, joined.station_type, joined.municipality, joined.province, joined.brand) == ("",) * 5


@pytest.mark.asyncio
async def test_station_failure_emits_nothing_but_keeps_cache() -> None:
    sink = _ListSink()
    cache = RecordCache(ttl=3600)
    scheduler = RefreshScheduler(
        _config(),
        _FakeTransport({PRICES_URL: PRICES, STATIONS_URL: FetchError("boom", url=STATIONS_URL)}),
        cache,
        sink,
    )

    result = await scheduler.refresh_once()

    assert result.outcome == IterationOutcome.STATIONS_FAILED
    assert result.records == 1
    assert isinstance(result.error, FetchError)
    assert sink.emitted == []
    records, found = cache.get("101-1709625600")
    assert found
    assert records[0].fuel_type == "benzina"


@pytest.mark.asyncio
async def test_malformed_station_table_abandons_iteration() -> None:
    sink = _ListSink()
    stations = STATIONS + "102;too;few\n"
    scheduler = RefreshScheduler(
        _config(),
        _FakeTransport({PRICES_URL: PRICES, STATIONS_URL: stations}),
        RecordCache(ttl=3600),
        sink,
    )

    result = await scheduler.refresh_once()

    assert result.outcome == IterationOutcome.STATIONS_FAILED
    assert isinstance(result.error, MalformedRow)
    assert sink.emitted == []


@pytest.mark.asyncio
async def test_price_failure_skips_station_fetch() -> None:
    sink = _ListSink()
    transport = _FakeTransport({PRICES_URL: FetchError("down", url=PRICES_URL), STATIONS_URL: STATIONS})
    scheduler = RefreshScheduler(_config(), transport, RecordCache(ttl=3600), sink)

    result = await scheduler.refresh_once()

    assert result.outcome == IterationOutcome.PRICES_FAILED
    assert transport.calls == [PRICES_URL]
    assert sink.emitted == []


@pytest.mark.asyncio
async def test_run_forever_survives_failed_iterations() -> None:
    sink = _ListSink()
    transport = _FakeTransport({PRICES_URL: FetchError("down", url=PRICES_URL), STATIONS_URL: STATIONS})
    sleeps: list[float] = []

    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if len(sleeps) == 1:
            transport.responses[PRICES_URL] = RuntimeError("unexpected")
        elif len(sleeps) == 2:
            transport.responses[PRICES_URL] = PRICES
        else:
            raise asyncio.CancelledError

    scheduler = RefreshScheduler(_config(), transport, RecordCache(ttl=3600), sink, sleep=_sleep)

    with pytest.raises(asyncio.CancelledError):
        await scheduler.run_forever()

    assert sleeps == [10.0, 10.0, 10.0]
    assert len(sink.emitted) == 1
    assert transport.calls == [PRICES_URL, PRICES_URL, PRICES_URL, STATIONS_URL]
