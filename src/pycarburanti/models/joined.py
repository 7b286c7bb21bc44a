"""Price records enriched with station metadata."""

from __future__ import annotations

from pycarburanti.models._base import CarburantiBaseModel
from pycarburanti.models.price import PriceRecord
from pycarburanti.models.station import Station


class JoinedPrice(CarburantiBaseModel):
    """A price record with the metadata of its station.

    Metadata fields are empty strings when the station is not in the registry.
    """

    record: PriceRecord
    name: str = ""
    station_type: str = ""
    municipality: str = ""
    province: str = ""
    brand: str = ""
    matched: bool = False
    """Whether the station was found in the registry."""

    @classmethod
    def from_record(cls, record: PriceRecord, station: Station | None = None) -> JoinedPrice:
        if station is None:
            return cls(record=record)
        return cls(
            record=record,
            name=station.name,
            station_type=str(station.station_type),
            municipality=station.municipality,
            province=station.province,
            brand=station.brand,
            matched=True,
        )

    @property
    def price(self) -> float:
        return self.record.price

    def labels(self) -> dict[str, str]:
        """Label values for the exposition sink, keyed by label name."""
        return {
            "station_id": str(self.record.station_id),
            "fuel_type": self.record.fuel_type,
            "self_service": "true" if self.record.self_service else "false",
            "name": self.name,
            "type": self.station_type,
            "municipality": self.municipality,
            "province": self.province,
            "brand": self.brand,
        }
