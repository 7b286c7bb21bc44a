"""Price observation model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field, field_validator

from pycarburanti.models._base import CarburantiBaseModel


class PriceRecord(CarburantiBaseModel):
    """One observation of a fuel price at a station.

    Parameters
    ----------
    station_id : int
        Station identifier (``idImpianto``).
    fuel_type : str
        Fuel description, verbatim from the feed (e.g. ``"Benzina"``).
    price : float
        Price in euro.
    self_service : bool
        Whether the price applies to self-service pumps.
    observed_at : datetime
        When the price was communicated, timezone-aware.
    """

    station_id: int
    fuel_type: str
    price: float
    self_service: bool
    observed_at: datetime = Field(..., description="Observation timestamp (timezone-aware)")

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def unix_timestamp(self) -> int:
        """Observation time in whole seconds since the epoch."""
        return int(self.observed_at.timestamp())

    @property
    def cache_key(self) -> str:
        """Composite ``"<station id>-<unix timestamp>"`` record cache key."""
        return f"{self.station_id}-{self.unix_timestamp}"
