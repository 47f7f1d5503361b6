"""Cache presets for each data domain.

Each preset is tuned to how its data ages:
- weather: forecasts change through the day, so a short TTL
- cities: geocoding results are stable, high volume
- packing_list: generated lists are expensive and long-lived, low volume

Every field can be overridden with an environment variable named
``CACHE_<PRESET>_<FIELD>``, e.g. ``CACHE_WEATHER_TTL_SECONDS=600``.
Overrides are read when a preset is loaded, not at import.
"""

import logging
import os

from travel_cache.models import BYTES_PER_MB, CacheOptions

logger = logging.getLogger(__name__)

WEATHER = "weather"
CITIES = "cities"
PACKING_LIST = "packing_list"

# (max_entries, max_memory_mb, ttl_seconds, sweep_interval_seconds)
_PRESET_DEFAULTS: dict[str, tuple[int, float, float, float]] = {
    WEATHER: (1000, 30, 45 * 60, 15 * 60),
    CITIES: (2000, 50, 2 * 60 * 60, 30 * 60),
    PACKING_LIST: (500, 20, 48 * 60 * 60, 60 * 60),
}


def _env_name(preset: str, field: str) -> str:
    return f"CACHE_{preset.upper()}_{field}"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"[CACHE] ignoring {name}={raw!r}: not a number, using {default}")
        return default


def load_preset(name: str) -> CacheOptions:
    """Build the cache options for a preset, applying env overrides.

    A non-numeric override is logged and the default is used instead.

    Args:
        name: One of ``weather``, ``cities`` or ``packing_list``.

    Returns:
        Validated cache options.

    Raises:
        KeyError: If the preset name is unknown.
        pydantic.ValidationError: If an override breaks an option's bounds.
    """
    max_entries, max_memory_mb, ttl_seconds, sweep_interval = _PRESET_DEFAULTS[name]

    max_memory_mb = _env_float(_env_name(name, "MAX_MEMORY_MB"), max_memory_mb)
    return CacheOptions(
        max_entries=int(_env_float(_env_name(name, "MAX_ENTRIES"), max_entries)),
        max_memory_bytes=int(max_memory_mb * BYTES_PER_MB),
        ttl_seconds=_env_float(_env_name(name, "TTL_SECONDS"), ttl_seconds),
        sweep_interval_seconds=_env_float(
            _env_name(name, "SWEEP_INTERVAL_SECONDS"), sweep_interval
        ),
    )


def preset_names() -> list[str]:
    return list(_PRESET_DEFAULTS)


def default_presets() -> dict[str, CacheOptions]:
    """Load every preset with the current environment overrides."""
    return {name: load_preset(name) for name in _PRESET_DEFAULTS}
