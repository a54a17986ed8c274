"""Feed endpoints for listing published posts in ranked order."""
from __future__ import annotations

from fastapi import APIRouter, Query

from turterra.core.settings import settings
from turterra.schemas.post import FeedPage, SortMode
from turterra.services.channels import ChannelService
from turterra.services.feed import FeedService

from ..dependencies import OptionalViewerDep, SessionDep, viewer_id

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("/", response_model=FeedPage)
async def get_feed(
    db: SessionDep,
    viewer: OptionalViewerDep,
    channel: str | None = Query(None, description="Restrict to this channel slug"),
    sort: SortMode = Query("hot", description="hot, new or top"),
    limit: int = Query(settings.feed_default_limit, ge=1, le=settings.feed_max_limit),
    offset: int = Query(0, ge=0),
) -> FeedPage:
    """Return one page of the community feed.

    Args:
        db: Database session
        viewer: Optional signed-in viewer used for vote/saved decoration
        channel: Channel slug filter
        sort: Ranking mode
        limit: Page size
        offset: Number of posts to skip

    Returns:
        The page with its paging parameters echoed back

    Raises:
        NotFound: If the channel slug is unknown
    """
    channel_id: int | None = None
    if channel:
        channel_id = (await ChannelService.get_channel_by_slug(db, channel)).id

    items = await FeedService.get_feed(
        db,
        channel_id=channel_id,
        sort=sort,
        viewer_id=viewer_id(viewer),
        limit=limit,
        offset=offset,
    )
    return FeedPage(items=items, sort=sort, limit=limit, offset=offset)
