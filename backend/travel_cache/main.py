"""Travel Cache FastAPI Application.

Main entry point for the backend API server. The cache registry is created
when the app starts and destroyed when it stops, so no cache outlives the
service that owns it.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from travel_cache.api import router
from travel_cache.models import ErrorCode
from travel_cache.services.cache import CacheRegistry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    app.state.caches = CacheRegistry.from_presets()
    try:
        yield
    finally:
        # Shutdown - stop sweep threads and drop cached data
        app.state.caches.close()


app = FastAPI(
    title="Travel Cache API",
    description="Shared caching core for the travel assistant",
    version="0.1.0",
    lifespan=lifespan,
)


# Global exception handlers
@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": str(exc),
                "user_message": "Invalid request format. Please check your input.",
            },
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": ErrorCode.API_ERROR.value,
                "message": str(exc),
                "user_message": "Something went wrong. Please try again.",
            },
        },
    )


# Include API routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
