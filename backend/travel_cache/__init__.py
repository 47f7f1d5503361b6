"""Travel Cache: bounded in-memory caching and request coalescing."""

__version__ = "0.1.0"
