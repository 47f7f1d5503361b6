"""Bounded in-memory cache service.

This module provides the process-local cache shared by every code path that
fetches external data (city lookup, weather forecasts, generated packing
lists). A cache enforces three limits at once:

- entry count: at most ``max_entries`` live entries
- memory: the estimated size of all entries stays within ``max_memory_bytes``
- age: entries older than ``ttl_seconds`` are never returned

When room is needed, the least eligible entry is evicted: the one with the
fewest reads, and among those the one inserted first. Eviction scans every
entry, which is fine for caches bounded to a few thousand entries.

A background thread sweeps expired entries every ``sweep_interval_seconds`` so
that keys which are never read again still release their memory.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from travel_cache.models import CacheOptions, CacheStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

SizeEstimator = Callable[[Any], int]
Clock = Callable[[], float]


class _Missing:
    """Sentinel type for "no cached value", distinct from a cached None."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class CacheAccountingError(RuntimeError):
    """Raised when the running memory total no longer matches the entries."""


def estimate_json_size(value: Any) -> int:
    """Estimate the memory cost of a value from its JSON form.

    Counts two bytes per character of a compact JSON serialization, which
    approximates UTF-16 storage. The result is a size proxy, not an exact
    measurement.

    Args:
        value: Any JSON-serializable value or Pydantic model.

    Returns:
        Estimated size in bytes.

    Raises:
        TypeError: If the value cannot be serialized.
    """
    if isinstance(value, BaseModel):
        serialized = value.model_dump_json()
    else:
        serialized = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return len(serialized) * 2


@dataclass
class CacheEntry(Generic[T]):
    """A single cached value with its bookkeeping.

    ``created_at`` is set once at insertion and never refreshed, so expiry is
    absolute and the eviction tie-break is insertion recency.
    """

    value: T
    created_at: float
    size_bytes: int
    access_count: int = 1

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.created_at >= ttl_seconds


class BoundedCache(Generic[T]):
    """Count-, memory- and TTL-bounded cache with a background sweep.

    All public operations and the sweep share one re-entrant lock, so a
    cache can be used from request handlers and worker threads alike.

    Attributes:
        _entries: Live entries keyed by cache key, in insertion order.
        _memory_usage: Running total of ``size_bytes`` over ``_entries``.
    """

    def __init__(
        self,
        options: CacheOptions,
        *,
        size_estimator: SizeEstimator = estimate_json_size,
        clock: Clock = time.monotonic,
        name: str = "cache",
    ) -> None:
        """Initialize the cache and start its sweep thread.

        Args:
            options: Entry, memory, TTL and sweep limits.
            size_estimator: Callable returning the estimated size of a value
                in bytes. Defaults to the JSON-length estimate.
            clock: Monotonic time source in seconds. Injectable for tests.
            name: Label used in log messages and the sweep thread name.
        """
        self._options = options
        self._size_estimator = size_estimator
        self._clock = clock
        self._name = name
        self._entries: dict[str, CacheEntry[T]] = {}
        self._memory_usage = 0
        self._lock = threading.RLock()
        self._stopped = threading.Event()
        self._sweeper: Optional[threading.Thread] = threading.Thread(
            target=self._sweep_loop,
            name=f"{name}-sweep",
            daemon=True,
        )
        self._sweeper.start()

    def __enter__(self) -> "BoundedCache[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Check for a live entry without counting it as a read."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            return not entry.is_expired(self._clock(), self._options.ttl_seconds)

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def closed(self) -> bool:
        return self._stopped.is_set()

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve a cached value.

        An expired entry is removed on the spot. A hit counts as one access,
        which makes the entry less eligible for eviction.

        Args:
            key: The cache key to look up.
            default: Returned on a miss. Pass ``MISSING`` to tell a cached
                ``None`` apart from an absent entry.

        Returns:
            The cached value, or ``default`` if absent or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if entry.is_expired(self._clock(), self._options.ttl_seconds):
                self._remove(key)
                logger.debug(f"[CACHE] {self._name}: expired on read: {key}")
                return default
            entry.access_count += 1
            return entry.value

    def set(self, key: str, value: T) -> None:
        """Store a value, evicting other entries as needed.

        Expired entries are swept first. Then the least eligible entries are
        evicted until the new value fits in the memory budget, and one more
        if the cache is at its entry limit. A value larger than the whole
        budget is still stored once the cache is empty.

        Args:
            key: The cache key to store under. An existing entry is replaced.
            value: The value to cache.

        Raises:
            TypeError: If the size estimator cannot serialize the value.
        """
        size = self._size_estimator(value)
        if size < 0:
            raise ValueError(f"size estimator returned a negative size: {size}")

        with self._lock:
            now = self._clock()
            if key in self._entries:
                self._remove(key)

            self._purge_expired(now)

            budget = self._options.max_memory_bytes
            while self._entries and self._memory_usage + size > budget:
                self._evict_least_eligible("memory")

            if len(self._entries) >= self._options.max_entries:
                self._evict_least_eligible("capacity")

            if size > budget:
                logger.warning(
                    f"[CACHE] {self._name}: {key} ({size} bytes) exceeds the "
                    f"{budget} byte budget on its own"
                )

            self._entries[key] = CacheEntry(value=value, created_at=now, size_bytes=size)
            self._memory_usage += size

    def delete(self, key: str) -> bool:
        """Delete a specific key from the cache.

        Returns:
            True if the key was deleted, False if it didn't exist.
        """
        with self._lock:
            if key not in self._entries:
                return False
            self._remove(key)
            return True

    def clear(self) -> None:
        """Remove all entries and reset the memory total."""
        with self._lock:
            self._entries.clear()
            self._memory_usage = 0

    def stats(self) -> CacheStats:
        """Report the current entry count and memory total.

        Does not sweep; entries that expired but were not yet removed are
        still counted.
        """
        with self._lock:
            return CacheStats(
                entry_count=len(self._entries),
                memory_usage_bytes=self._memory_usage,
            )

    def sweep(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            return self._purge_expired(self._clock())

    def destroy(self) -> None:
        """Stop the sweep thread and clear the cache.

        Safe to call more than once. Once this returns the sweep never runs
        again.
        """
        self._stopped.set()
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join()
        self.clear()

    close = destroy

    def _sweep_loop(self) -> None:
        interval = self._options.sweep_interval_seconds
        while not self._stopped.wait(interval):
            try:
                removed = self.sweep()
            except Exception:
                logger.exception(f"[CACHE] {self._name}: sweep failed")
                continue
            if removed:
                logger.debug(f"[CACHE] {self._name}: swept {removed} expired entries")

    def _purge_expired(self, now: float) -> int:
        ttl = self._options.ttl_seconds
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now, ttl)]
        for key in expired:
            self._remove(key)
        return len(expired)

    def _evict_least_eligible(self, reason: str) -> None:
        if not self._entries:
            return
        # min() keeps the first of equal candidates, i.e. the earliest inserted
        key, entry = min(
            self._entries.items(),
            key=lambda item: (item[1].access_count, item[1].created_at),
        )
        self._remove(key)
        logger.debug(
            f"[CACHE] {self._name}: evicted {key} for {reason} "
            f"(accesses={entry.access_count}, size={entry.size_bytes})"
        )

    def _remove(self, key: str) -> CacheEntry[T]:
        entry = self._entries.pop(key)
        self._memory_usage -= entry.size_bytes
        if self._memory_usage < 0:
            raise CacheAccountingError(
                f"{self._name}: memory total went negative ({self._memory_usage}) "
                f"after removing {key}"
            )
        return entry
