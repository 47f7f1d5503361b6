"""Cache service module.

Provides the bounded in-memory cache, its domain presets and the registry
that owns one cache per data domain.
"""

from .config import CITIES, PACKING_LIST, WEATHER, default_presets, load_preset, preset_names
from .registry import SOURCE_LIVE, SOURCE_MEMORY, CacheDomain, CacheRegistry
from .service import (
    MISSING,
    BoundedCache,
    CacheAccountingError,
    CacheEntry,
    estimate_json_size,
)

__all__ = [
    "BoundedCache",
    "CacheAccountingError",
    "CacheEntry",
    "MISSING",
    "estimate_json_size",
    "default_presets",
    "CITIES",
    "PACKING_LIST",
    "WEATHER",
    "load_preset",
    "preset_names",
    "CacheDomain",
    "CacheRegistry",
    "SOURCE_LIVE",
    "SOURCE_MEMORY",
]
