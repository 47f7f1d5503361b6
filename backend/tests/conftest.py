"""Shared fixtures for cache tests."""

import pytest

from travel_cache.models import CacheOptions
from travel_cache.services.cache import BoundedCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_cache(clock):
    """Factory for caches on the fake clock; destroys them after the test."""
    created: list[BoundedCache] = []

    def _make(
        max_entries: int = 3,
        max_memory_bytes: int = 1024 * 1024,
        ttl_seconds: float = 1.0,
        sweep_interval_seconds: float = 3600.0,
        **kwargs,
    ) -> BoundedCache:
        options = CacheOptions(
            max_entries=max_entries,
            max_memory_bytes=max_memory_bytes,
            ttl_seconds=ttl_seconds,
            sweep_interval_seconds=sweep_interval_seconds,
        )
        kwargs.setdefault("clock", clock)
        cache = BoundedCache(options, **kwargs)
        created.append(cache)
        return cache

    yield _make

    for cache in created:
        cache.destroy()
