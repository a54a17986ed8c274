# src/turterra/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    channels_router,
    comments_router,
    feed_router,
    posts_router,
    profiles_router,
    saved_router,
    species_router,
    votes_router,
)

__all__ = [
    "channels_router",
    "comments_router",
    "feed_router",
    "posts_router",
    "profiles_router",
    "saved_router",
    "species_router",
    "votes_router",
]
