"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .channel import ChannelResponse, ChannelStats, ChannelSummary, CommunityStats
from .comment import CommentCreate, CommentView
from .image import SpeciesImage, SpeciesImageMetadata
from .post import FeedPage, PostCreate, PostUpdate, PostView
from .profile import AuthorSummary, ProfilePostCount
from .saved import SavedPostCreate, SavedPostResponse
from .vote import VoteCreate, VoteResponse

__all__ = [
    "AuthorSummary", "ProfilePostCount",
    "ChannelResponse", "ChannelStats", "ChannelSummary", "CommunityStats",
    "CommentCreate", "CommentView",
    "FeedPage", "PostCreate", "PostUpdate", "PostView",
    "SavedPostCreate", "SavedPostResponse",
    "SpeciesImage", "SpeciesImageMetadata",
    "VoteCreate", "VoteResponse",
]
