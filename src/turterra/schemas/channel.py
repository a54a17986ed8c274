"""Channel-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class ChannelSummary(BaseModel):
    """Channel fields denormalized onto posts."""

    id: int
    slug: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ChannelResponse(BaseModel):
    """Schema for channel information returned by the API."""

    id: int
    slug: str
    name: str
    description: str | None
    icon: str | None
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class ChannelStats(BaseModel):
    """Published post and member counts for a channel."""

    channel_id: int
    slug: str
    post_count: int
    member_count: int


class CommunityStats(BaseModel):
    """Site-wide totals shown on the community page."""

    total_members: int
    total_posts: int
    total_channels: int
