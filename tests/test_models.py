"""Tests for the feed models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pycarburanti.models import JoinedPrice, PriceRecord, Station, StationType


def _record(**overrides: object) -> PriceRecord:
    values: dict[str, object] = {
        "station_id": 101,
        "fuel_type": "Benzina",
        "price": 1.899,
        "self_service": False,
        "observed_at": datetime(2024, 3, 5, 8, tzinfo=UTC),
    }
    values.update(overrides)
    return PriceRecord(**values)  # type: ignore[arg-type]


class TestPriceRecord:
    def test_naive_timestamp_assumed_utc(self) -> None:
        record = _record(observed_at=datetime(2024, 3, 5, 8))
        assert record.observed_at.tzinfo is UTC

    def test_cache_key_uses_absolute_time(self) -> None:
        rome = timezone(timedelta(hours=1))
        local = _record(observed_at=datetime(2024, 3, 5, 9, tzinfo=rome))
        assert local.cache_key == _record().cache_key == "101-1709625600"

    def test_frozen(self) -> None:
        record = _record()
        with pytest.raises(ValidationError):
            record.price = 2.0  # type: ignore[misc]


class TestStation:
    def test_known_type_coerced_to_enum(self) -> None:
        station = Station(station_id=1, station_type="Autostradale")
        assert station.station_type is StationType.MOTORWAY

    def test_unknown_type_kept_as_string(self) -> None:
        station = Station(station_id=1, station_type="Lacuale")
        assert station.station_type == "Lacuale"


class TestJoinedPrice:
    def test_match_copies_station_metadata(self) -> None:
        station = Station(
            station_id=101,
            operator="ROSSI",
            brand="Agip Eni",
            station_type="Stradale",
            name="ENI",
            address="VIA ROMA 1",
            municipality="ROMA",
            province="RM",
        )
        joined = JoinedPrice.from_record(_record(), station)

        assert joined.matched
        assert joined.labels() == {
            "station_id": "101",
            "fuel_type": "Benzina",
            "self_service": "false",
            "name": "ENI",
            "type": "Stradale",
            "municipality": "ROMA",
            "province": "RM",
            "brand": "Agip Eni",
        }

    def test_match_without_metadata_still_counts_as_matched(self) -> None:
        joined = JoinedPrice.from_record(_record(), Station(station_id=101))

        assert joined.matched
        labels = joined.labels()
        assert [labels[k] for k in ("name", "type", "municipality", "province", "brand")] == [""] * 5

    def test_miss_has_empty_metadata(self) -> None:
        joined = JoinedPrice.from_record(_record(self_service=True))

        assert not joined.matched
        labels = joined.labels()
        assert labels["self_service"] == "true"
        assert [labels[k] for k in ("name", "type", "municipality", "province", "brand")] == [""] * 5
