"""Request coalescing for concurrent identical upstream calls."""

from .service import CallCoalescer

__all__ = ["CallCoalescer"]
