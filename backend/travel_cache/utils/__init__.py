from .cache_keys import build_cache_key, city_search_key, packing_list_key, weather_key

__all__ = ["build_cache_key", "city_search_key", "packing_list_key", "weather_key"]
