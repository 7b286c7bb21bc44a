"""In-memory cache of observed price records.

Entries accumulate every record seen for a ``"<station id>-<unix timestamp>"``
key. Expiry is evaluated when reading: an entry older than the TTL is
reported as missing but stays in memory, and later writes keep appending to
it. Nothing is ever evicted.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from pycarburanti.models.price import PriceRecord


def cache_key(record: PriceRecord) -> str:
    """Return the composite cache key for *record*."""
    return record.cache_key


@dataclass
class RecordCacheEntry:
    """Accumulated records for one key."""

    created_at: float
    records: list[PriceRecord] = field(default_factory=list)


class RecordCache:
    """Thread-safe accumulator with read-time TTL expiry.

    Parameters
    ----------
    ttl : float
        Seconds after creation past which an entry reads as not found.
    clock : callable
        Monotonic clock returning seconds. Injectable for tests.
    """

    def __init__(self, ttl: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, RecordCacheEntry] = {}
        self._lock = threading.Lock()

    def put(self, key: str, record: PriceRecord) -> None:
        """Append *record* to the entry for *key*, creating it on first write."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._entries[key] = RecordCacheEntry(created_at=self._clock(), records=[record])
            else:
                entry.records.append(record)

    def get(self, key: str) -> tuple[list[PriceRecord], bool]:
        """Return ``(records, found)`` for *key*.

        Missing and expired entries both return ``([], False)``.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return [], False
            if self._clock() - entry.created_at > self._ttl:
                return [], False
            return list(entry.records), True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
