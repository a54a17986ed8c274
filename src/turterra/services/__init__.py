"""Business logic services for the Turterra community."""

from .channels import ChannelService
from .comments import CommentService
from .feed import FeedService
from .images import CloudinaryClient
from .posts import PostService
from .saved import SavedPostService
from .votes import VoteOutcome, VoteService

__all__ = [
    "ChannelService",
    "CloudinaryClient",
    "CommentService",
    "FeedService",
    "PostService",
    "SavedPostService",
    "VoteOutcome",
    "VoteService",
]
