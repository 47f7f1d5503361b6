"""Core data models for the travel cache.

This module contains the Pydantic models shared by the cache services and the
HTTP layer: the options a bounded cache is constructed with, the statistics it
reports, and the error envelope returned by the API.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

BYTES_PER_MB = 1024 * 1024


class CacheOptions(BaseModel):
    """Limits for a single bounded cache instance.

    All three limits are enforced at the same time:
    - max_entries: hard cap on the number of live entries
    - max_memory_bytes: cap on the estimated aggregate size of live entries
    - ttl_seconds: age after which an entry is dead, measured from insertion

    A ttl of 0 is valid and means nothing survives to the next read.
    """

    model_config = ConfigDict(frozen=True)

    max_entries: int = Field(..., gt=0, description="Maximum number of entries")
    max_memory_bytes: int = Field(
        ..., gt=0, description="Maximum estimated memory for all entries, in bytes"
    )
    ttl_seconds: float = Field(
        ..., ge=0, description="Time-to-live per entry, from insertion"
    )
    sweep_interval_seconds: float = Field(
        ..., gt=0, description="Seconds between background expiry sweeps"
    )


class CacheStats(BaseModel):
    """Snapshot of a cache's live state."""

    entry_count: int = Field(..., ge=0, description="Number of entries held")
    memory_usage_bytes: int = Field(
        ..., ge=0, description="Running estimated memory total, in bytes"
    )

    @property
    def memory_usage_mb(self) -> float:
        return self.memory_usage_bytes / BYTES_PER_MB


class ErrorCode(str, Enum):
    """Error codes returned in the API error envelope."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload returned to API clients."""

    code: ErrorCode
    message: str
    user_message: Optional[str] = None
