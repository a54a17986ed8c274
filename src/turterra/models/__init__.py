"""SQLAlchemy models for the Turterra community service."""

from .channel import Channel, ChannelMembership
from .comment import Comment
from .post import Post
from .profile import Profile
from .saved_post import SavedPost
from .vote import Vote

__all__ = [
    "Channel", "ChannelMembership",
    "Comment",
    "Post",
    "Profile",
    "SavedPost",
    "Vote",
]
