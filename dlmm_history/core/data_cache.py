"""Bounded in-memory cache for historical datasets"""

import threading
import time
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from ..config.constants import PRICE_POINT_BYTES, LIQUIDITY_POINT_BYTES
from ..models.market_data import (
    HistoricalDataset,
    Interval,
    CacheEntryStats,
    CacheStats,
    to_epoch_ms,
)


def make_cache_key(pool_address, start: datetime, end: datetime, interval: Interval) -> str:
    """Generate a unique cache key."""
    return f"{pool_address}_{to_epoch_ms(start)}_{to_epoch_ms(end)}_{Interval.parse(interval).value}"


def estimate_dataset_size(dataset: HistoricalDataset) -> int:
    """Rough byte estimate used for cache accounting."""
    return (
        len(dataset.price_data) * PRICE_POINT_BYTES
        + len(dataset.liquidity_data) * LIQUIDITY_POINT_BYTES
    )


class CacheEntry:
    """A cached dataset with hit and age bookkeeping."""

    def __init__(self, key: str, data: HistoricalDataset, created_at: float):
        self.key = key
        self.data = data
        self.created_at = created_at
        self.accessed_at = created_at
        self.size = estimate_dataset_size(data)
        self.hits = 0

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.created_at >= ttl_seconds

    def access(self, now: float) -> HistoricalDataset:
        """Mark as accessed and return data."""
        self.accessed_at = now
        self.hits += 1
        return self.data


class HistoricalDataCache:
    """
    LRU cache of historical datasets with per-entry TTL.

    Entries past their TTL never satisfy a lookup; they are dropped lazily
    on read and actively by purge_expired() and stats(). A hit moves the
    entry to the most-recently-used end, and inserting a new key at capacity
    evicts the least-recently-used one.
    """

    def __init__(
        self,
        max_entries: int = 10,
        ttl_ms: int = 24 * 60 * 60 * 1000,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_entries = max_entries
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_ms / 1000.0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock(), self.ttl_seconds)

    def get(self, key: str) -> Optional[HistoricalDataset]:
        """
        Look up a dataset, counting a hit when found.

        Args:
            key: Cache key from make_cache_key()

        Returns:
            The cached dataset, or None on miss or expiry
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            now = self._clock()
            if entry.is_expired(now, self.ttl_seconds):
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None

            self._entries.move_to_end(key)
            return entry.access(now)

    def put(self, key: str, data: HistoricalDataset) -> None:
        """Store a dataset, replacing any entry under the same key."""
        if self.max_entries <= 0:
            return

        with self._lock:
            if key in self._entries:
                del self._entries[key]

            while len(self._entries) >= self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cache entry: {evicted_key}")

            self._entries[key] = CacheEntry(key, data, self._clock())

    def hits(self, key: str) -> int:
        with self._lock:
            entry = self._entries.get(key)
            return entry.hits if entry else 0

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [
                key for key, entry in self._entries.items()
                if entry.is_expired(now, self.ttl_seconds)
            ]
            for key in expired:
                del self._entries[key]
            if expired:
                logger.debug(f"Purged {len(expired)} expired cache entries")
            return len(expired)

    def stats(self) -> CacheStats:
        """Get cache statistics."""
        with self._lock:
            self.purge_expired()
            entries = [
                CacheEntryStats(key=e.key, hits=e.hits, size=e.size)
                for e in self._entries.values()
            ]

        entries.sort(key=lambda e: e.hits, reverse=True)
        return CacheStats(
            size=len(entries),
            total_hits=sum(e.hits for e in entries),
            total_size=sum(e.size for e in entries),
            entries=entries,
        )

    def clear(self) -> None:
        """Remove all entries and their hit counters."""
        with self._lock:
            self._entries.clear()
