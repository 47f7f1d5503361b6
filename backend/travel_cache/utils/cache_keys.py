"""Cache key builders for request handlers.

The cache and coalescer treat keys as opaque, so normalization happens here,
on the caller side.
"""


def build_cache_key(prefix: str, *parts: object) -> str:
    """Build a normalized cache key.

    Each part is stringified, stripped and lowercased; ``None`` becomes an
    empty segment.

    Example:
        >>> build_cache_key("weather", " Paris ", "FR")
        'weather:paris:fr'
    """
    segments = ["" if part is None else str(part).strip().lower() for part in parts]
    return ":".join([prefix, *segments])


def weather_key(city: str, country: str) -> str:
    return build_cache_key("weather", city, country)


def city_search_key(query: str) -> str:
    return build_cache_key("cities", query)


def packing_list_key(country: str, city: str, duration_days: int, trip_type: str) -> str:
    """Key for a generated packing list, one per destination, length and trip type."""
    return build_cache_key("packing_list", country, city, duration_days, trip_type)
