"""Travel Cache Services.

Service layer components:
- Coalescer: single-flight deduplication of concurrent upstream calls
- Cache: bounded in-memory cache (entries, memory, TTL) with domain presets
  for weather forecasts, city lookups and generated packing lists
"""

from .coalescer import CallCoalescer
from .cache import (
    MISSING,
    BoundedCache,
    CacheAccountingError,
    CacheDomain,
    CacheRegistry,
    default_presets,
    estimate_json_size,
    load_preset,
)

__all__ = [
    # Coalescer
    "CallCoalescer",
    # Cache
    "BoundedCache",
    "CacheAccountingError",
    "MISSING",
    "estimate_json_size",
    "default_presets",
    "load_preset",
    "CacheDomain",
    "CacheRegistry",
]
