"""Feed ingestion: tolerant CSV parsing and the price/station join."""

from pycarburanti.ingestion.join import join_stations
from pycarburanti.ingestion.prices import parse_prices
from pycarburanti.ingestion.stations import parse_stations

__all__ = ["join_stations", "parse_prices", "parse_stations"]
