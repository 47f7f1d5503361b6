"""Per-domain cache ownership.

A ``CacheDomain`` pairs one bounded cache with one coalescer and implements
cache-aside on top of them. A ``CacheRegistry`` owns every domain for the
lifetime of the service: it is built once at startup and closed at shutdown.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Any, Optional

from travel_cache.models import CacheOptions, CacheStats
from travel_cache.services.coalescer import CallCoalescer

from .config import load_preset, preset_names
from .service import MISSING, BoundedCache

logger = logging.getLogger(__name__)

SOURCE_MEMORY = "memory"
SOURCE_LIVE = "live"


@dataclass
class CacheDomain:
    """Cache and coalescer for one kind of upstream data."""

    name: str
    cache: BoundedCache
    coalescer: CallCoalescer = field(default_factory=CallCoalescer)

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
    ) -> tuple[Any, str]:
        """Generic cache-aside with request coalescing.

        Falsy results (``None``, ``""``, ``[]``) are cached like any other.
        A failing ``fetch_fn`` caches nothing and its exception reaches every
        concurrent caller unchanged.

        Returns:
            (data, source) where source is "memory" or "live".
        """
        cached = self.cache.get(key, MISSING)
        if cached is not MISSING:
            return cached, SOURCE_MEMORY

        async def fetch_and_store() -> Any:
            data = await fetch_fn()
            self.cache.set(key, data)
            return data

        data = await self.coalescer.run(key, fetch_and_store)
        return data, SOURCE_LIVE

    def clear(self) -> None:
        self.cache.clear()
        self.coalescer.clear()

    def close(self) -> None:
        self.cache.destroy()
        self.coalescer.clear()


class CacheRegistry:
    """Owner of all cache domains for one service instance."""

    def __init__(self) -> None:
        self._domains: dict[str, CacheDomain] = {}

    @classmethod
    def from_presets(cls, names: Optional[list[str]] = None) -> "CacheRegistry":
        """Build a registry with one domain per preset.

        Args:
            names: Presets to include. Defaults to every known preset.
        """
        registry = cls()
        for name in names if names is not None else preset_names():
            registry.add(name, load_preset(name))
        return registry

    def add(self, name: str, options: CacheOptions) -> CacheDomain:
        if name in self._domains:
            raise ValueError(f"cache domain already registered: {name}")
        domain = CacheDomain(name=name, cache=BoundedCache(options, name=name))
        self._domains[name] = domain
        logger.info(
            f"[CACHE] {name}: max_entries={options.max_entries}, "
            f"max_memory_bytes={options.max_memory_bytes}, ttl={options.ttl_seconds}s"
        )
        return domain

    def get(self, name: str) -> CacheDomain:
        """Look up a domain by name.

        Raises:
            KeyError: If no domain has that name.
        """
        return self._domains[name]

    def __contains__(self, name: str) -> bool:
        return name in self._domains

    def __iter__(self) -> Iterator[CacheDomain]:
        return iter(self._domains.values())

    def stats(self) -> dict[str, CacheStats]:
        return {name: domain.cache.stats() for name, domain in self._domains.items()}

    def close(self) -> None:
        """Destroy every cache. Safe to call more than once."""
        for domain in self._domains.values():
            domain.close()
