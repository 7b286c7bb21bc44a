"""Exporter configuration for pycarburanti."""

from __future__ import annotations

import codecs
import dataclasses
import os
import re
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pycarburanti._constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_LISTEN,
    DEFAULT_METRICS_PATH,
    PRICES_CSV_URL,
    STATIONS_CSV_URL,
)
from pycarburanti.exceptions import CarburantiConfigError

_DURATION_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """Parse a Go-style duration string (``"6h"``, ``"1h30m"``, ``"90s"``) into seconds.

    A bare number is read as seconds. Negative durations are rejected.
    """
    text = value.strip()
    if not text:
        raise CarburantiConfigError("empty duration")
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise CarburantiConfigError(f"duration must not be negative, got {value!r}")
        return seconds

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise CarburantiConfigError(f"invalid duration {value!r}")
    return total


def split_listen(listen: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address. An empty host binds all interfaces."""
    host, sep, port = listen.rpartition(":")
    if not sep:
        raise CarburantiConfigError(f"listen address must be host:port, got {listen!r}")
    try:
        port_number = int(port)
    except ValueError as exc:
        raise CarburantiConfigError(f"invalid port in listen address {listen!r}") from exc
    if not 0 <= port_number <= 65535:
        raise CarburantiConfigError(f"port out of range in listen address {listen!r}")
    return host.strip("[]") or "0.0.0.0", port_number


@dataclasses.dataclass(frozen=True)
class ExporterConfig:
    """Exporter configuration.

    Parameters
    ----------
    prices_url : str
        URL of the daily price CSV feed.
    stations_url : str
        URL of the station registry CSV feed.
    metrics_path : str
        HTTP path where metrics are exposed.
    listen : str
        ``host:port`` address of the metrics server.
    interval : float
        Seconds to sleep between refresh iterations. Defaults to 6 hours.
    cache_ttl : float
        Seconds after which a cached price entry is treated as absent.
        Defaults to 1 hour.
    source_timezone : str
        IANA time zone used to interpret feed timestamps.
    feed_encoding : str
        Text encoding of both feeds.
    """

    prices_url: str = PRICES_CSV_URL
    stations_url: str = STATIONS_CSV_URL
    metrics_path: str = DEFAULT_METRICS_PATH
    listen: str = DEFAULT_LISTEN
    interval: float = DEFAULT_INTERVAL_SECONDS
    cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS
    source_timezone: str = "UTC"
    feed_encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise CarburantiConfigError(f"interval must not be negative, got {self.interval}")
        if self.cache_ttl < 0:
            raise CarburantiConfigError(f"cache_ttl must not be negative, got {self.cache_ttl}")
        if not self.metrics_path.startswith("/"):
            raise CarburantiConfigError(f"metrics_path must start with '/', got {self.metrics_path!r}")
        split_listen(self.listen)
        try:
            ZoneInfo(self.source_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise CarburantiConfigError(f"unknown time zone {self.source_timezone!r}") from exc
        try:
            codecs.lookup(self.feed_encoding)
        except LookupError as exc:
            raise CarburantiConfigError(f"unknown feed encoding {self.feed_encoding!r}") from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> ExporterConfig:
        """Create configuration from ``CARBURANTI_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CARBURANTI_PRICES_URL": "prices_url",
            "CARBURANTI_STATIONS_URL": "stations_url",
            "CARBURANTI_METRICS_PATH": "metrics_path",
            "CARBURANTI_LISTEN": "listen",
            "CARBURANTI_TIMEZONE": "source_timezone",
            "CARBURANTI_FEED_ENCODING": "feed_encoding",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # durations are strings like "6h", handle separately
        interval_env = env.get("CARBURANTI_INTERVAL")
        if interval_env is not None and "interval" not in overrides:
            config_kwargs["interval"] = parse_duration(interval_env)

        ttl_env = env.get("CARBURANTI_CACHE_TTL")
        if ttl_env is not None and "cache_ttl" not in overrides:
            config_kwargs["cache_ttl"] = parse_duration(ttl_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
