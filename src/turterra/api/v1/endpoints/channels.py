"""Channel-related endpoints for the community API."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from turterra.models import Channel
from turterra.schemas.channel import ChannelResponse, ChannelStats, CommunityStats
from turterra.services.channels import ChannelService

from ..dependencies import CurrentViewerDep, SessionDep

router = APIRouter(prefix="/channels", tags=["channels"])


@router.get("/", response_model=list[ChannelResponse])
async def list_channels(db: SessionDep) -> list[Channel]:
    """List all channels in display order."""
    return await ChannelService.list_channels(db)


@router.get("/stats", response_model=list[ChannelStats])
async def channel_stats(db: SessionDep) -> list[ChannelStats]:
    """Return post and member counts per channel."""
    return await ChannelService.get_channel_stats(db)


@router.get("/community-stats", response_model=CommunityStats)
async def community_stats(db: SessionDep) -> CommunityStats:
    """Return site-wide member, post and channel totals."""
    return await ChannelService.get_community_stats(db)


@router.get("/memberships", response_model=list[int])
async def my_memberships(current_viewer: CurrentViewerDep, db: SessionDep) -> list[int]:
    """Return ids of the channels the caller has joined."""
    return await ChannelService.get_memberships(db, current_viewer.id)


@router.get("/{slug}", response_model=ChannelResponse)
async def get_channel(slug: str, db: SessionDep) -> Channel:
    """Get a channel by slug."""
    return await ChannelService.get_channel_by_slug(db, slug)


@router.post("/{channel_id}/membership", status_code=status.HTTP_201_CREATED)
async def join_channel(
    channel_id: int,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
    response: Response,
) -> dict[str, str]:
    """Join a channel."""
    joined = await ChannelService.join_channel(db, current_viewer.id, channel_id)
    if not joined:
        response.status_code = status.HTTP_200_OK
        return {"status": "already a member"}
    return {"status": "joined"}


@router.delete("/{channel_id}/membership")
async def leave_channel(
    channel_id: int,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> dict[str, str]:
    """Leave a channel."""
    left = await ChannelService.leave_channel(db, current_viewer.id, channel_id)
    return {"status": "left" if left else "not a member"}
