"""API package."""

from .routes import get_cache_registry, router

__all__ = ["get_cache_registry", "router"]
