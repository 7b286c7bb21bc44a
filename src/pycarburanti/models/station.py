"""Station registry model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator

from pycarburanti.models._base import CarburantiBaseModel


class StationType(StrEnum):
    """Known station types published by the registry.

    The set is open: :class:`Station` keeps unknown values as plain strings.
    """

    ROADSIDE = "Stradale"
    MOTORWAY = "Autostradale"


def to_station_type(value: Any) -> StationType | str:
    """Map *value* to a :class:`StationType`, passing unknown strings through."""
    text = str(value)
    try:
        return StationType(text)
    except ValueError:
        return text


class Station(CarburantiBaseModel):
    """Registry entry describing a fuel station.

    Latitude and longitude are kept exactly as published.
    """

    station_id: int
    operator: str = ""
    brand: str = ""
    station_type: StationType | str = Field(default="", union_mode="left_to_right")
    name: str = ""
    address: str = ""
    municipality: str = ""
    province: str = ""
    latitude: str = ""
    longitude: str = ""

    @field_validator("station_type", mode="before")
    @classmethod
    def _coerce_station_type(cls, value: Any) -> StationType | str:
        return to_station_type(value)
