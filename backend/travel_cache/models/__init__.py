"""Data models for the travel cache."""

from .core import (
    BYTES_PER_MB,
    AppError,
    CacheOptions,
    CacheStats,
    ErrorCode,
)

__all__ = [
    "BYTES_PER_MB",
    "AppError",
    "CacheOptions",
    "CacheStats",
    "ErrorCode",
]
