"""pycarburanti - Async Prometheus exporter for Italian fuel prices."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycarburanti")
except PackageNotFoundError:
    __version__ = "0+local"
from pycarburanti._cache import RecordCache
from pycarburanti.config import ExporterConfig
from pycarburanti.exceptions import (
    CarburantiConfigError,
    CarburantiError,
    DuplicateKey,
    FetchError,
    MalformedDataError,
    MalformedField,
    MalformedRow,
)
from pycarburanti.ingestion import join_stations, parse_prices, parse_stations
from pycarburanti.models import JoinedPrice, PriceRecord, Station, StationType
from pycarburanti.scheduler import IterationOutcome, IterationResult, RefreshScheduler

__all__ = [
    "__version__",
    "CarburantiConfigError",
    "CarburantiError",
    "DuplicateKey",
    "ExporterConfig",
    "FetchError",
    "IterationOutcome",
    "IterationResult",
    "JoinedPrice",
    "MalformedDataError",
    "MalformedField",
    "MalformedRow",
    "PriceRecord",
    "RecordCache",
    "RefreshScheduler",
    "Station",
    "StationType",
    "join_stations",
    "parse_prices",
    "parse_stations",
]
