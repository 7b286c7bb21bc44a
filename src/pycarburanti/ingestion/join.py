"""Join price records with station metadata."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pycarburanti.models.joined import JoinedPrice
from pycarburanti.models.price import PriceRecord
from pycarburanti.models.station import Station


def join_stations(records: Iterable[PriceRecord], stations: Mapping[int, Station]) -> list[JoinedPrice]:
    """Enrich every record with its station; records without a match keep empty metadata."""
    return [JoinedPrice.from_record(record, stations.get(record.station_id)) for record in records]
