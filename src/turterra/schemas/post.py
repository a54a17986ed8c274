"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .channel import ChannelSummary
from .profile import AuthorSummary

SortMode = Literal["hot", "new", "top"]


class PostCreate(BaseModel):
    """Schema for creating a new post or draft."""

    title: str = Field(..., min_length=1, max_length=300)
    body: str | None = Field(None, max_length=40000, description="Rich text HTML body")
    channel_id: int
    image_urls: list[str] = Field(default_factory=list, max_length=10)
    is_draft: bool = Field(False, description="Save without publishing")


class PostUpdate(BaseModel):
    """Partial update of a post; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=300)
    body: str | None = Field(None, max_length=40000)
    channel_id: int | None = None
    image_urls: list[str] | None = Field(None, max_length=10)


class PostView(BaseModel):
    """Post decorated with author, channel and viewer state."""

    id: int
    title: str
    body: str | None
    image_urls: list[str]
    score: int
    hot_score: float
    comment_count: int
    is_draft: bool
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary
    channel: ChannelSummary
    viewer_vote: int | None = Field(None, description="Viewer's vote; null when none")
    is_saved: bool = False


class FeedPage(BaseModel):
    """One offset page of a feed."""

    items: list[PostView]
    sort: SortMode
    limit: int
    offset: int
