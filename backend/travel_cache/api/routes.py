"""API routes for cache administration.

Request handlers that fetch upstream data reach their cache domain through
``get_cache_registry``; these routes expose the registry's state.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from travel_cache.models import AppError, CacheStats, ErrorCode
from travel_cache.services.cache import CacheRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


class CacheStatsResponse(BaseModel):
    """Response body for the cache stats endpoint."""

    success: bool
    caches: dict[str, CacheStats]


class ClearCacheResponse(BaseModel):
    """Response body for the cache clear endpoint."""

    success: bool
    cache: str
    stats: CacheStats


def get_cache_registry(request: Request) -> CacheRegistry:
    """Dependency returning the registry created in the app lifespan."""
    return request.app.state.caches


def _not_found(name: str) -> JSONResponse:
    error = AppError(
        code=ErrorCode.NOT_FOUND,
        message=f"Unknown cache: {name}",
        user_message="That cache does not exist.",
    )
    return JSONResponse(
        status_code=404,
        content={"success": False, "error": error.model_dump(mode="json")},
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(
    registry: CacheRegistry = Depends(get_cache_registry),
) -> CacheStatsResponse:
    """Report entry count and memory usage for every cache domain."""
    return CacheStatsResponse(success=True, caches=registry.stats())


@router.post("/cache/{name}/clear", response_model=ClearCacheResponse)
async def clear_cache(
    name: str,
    registry: CacheRegistry = Depends(get_cache_registry),
):
    """Clear one cache domain and forget its in-flight registrations."""
    if name not in registry:
        return _not_found(name)

    domain = registry.get(name)
    domain.clear()
    logger.info(f"[CACHE] {name}: cleared via API")
    return ClearCacheResponse(success=True, cache=name, stats=domain.cache.stats())
