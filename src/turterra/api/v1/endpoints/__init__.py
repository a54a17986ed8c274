"""API endpoint modules for version 1."""

from .channels import router as channels_router
from .comments import router as comments_router
from .feed import router as feed_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .saved import router as saved_router
from .species import router as species_router
from .votes import router as votes_router

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
