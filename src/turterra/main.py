# src/turterra/main.py
"""Main entry point for the Turterra community API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from turterra.api.v1 import (
    channels_router,
    comments_router,
    feed_router,
    posts_router,
    profiles_router,
    saved_router,
    species_router,
    votes_router,
)
from turterra.core.errors import CommunityError, Unauthorized
from turterra.core.settings import settings
from turterra.services.images import get_cloudinary_client

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Turterra Community API",
    description="Channels, posts, votes and feeds for the Turterra community",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(feed_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(saved_router, prefix="/api/v1")
app.include_router(channels_router, prefix="/api/v1")
app.include_router(profiles_router, prefix="/api/v1")
app.include_router(species_router, prefix="/api/v1")


@app.exception_handler(CommunityError)
async def community_error_handler(request: Request, exc: CommunityError) -> JSONResponse:
    """Map domain errors onto HTTP responses."""
    if exc.status_code >= 500:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method,
                       request.url.path, exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc)},
        headers=headers,
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_cloudinary_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Turterra Community API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("turterra.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
