"""Typed models for the price and station feeds."""

from pycarburanti.models.joined import JoinedPrice
from pycarburanti.models.price import PriceRecord
from pycarburanti.models.station import Station, StationType

__all__ = [
    "JoinedPrice",
    "PriceRecord",
    "Station",
    "StationType",
]
