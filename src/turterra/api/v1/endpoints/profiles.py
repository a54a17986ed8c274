"""Profile post listings."""

from fastapi import APIRouter

from turterra.schemas.post import PostView
from turterra.schemas.profile import ProfilePostCount
from turterra.services.feed import FeedService

from ..dependencies import CurrentViewerDep, OptionalViewerDep, SessionDep, viewer_id

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me/drafts", response_model=list[PostView])
async def my_drafts(current_viewer: CurrentViewerDep, db: SessionDep) -> list[PostView]:
    """List the caller's drafts."""
    return await FeedService.get_user_drafts(db, current_viewer.id, current_viewer.id)


@router.get("/{username}/posts", response_model=list[PostView])
async def user_posts(
    username: str,
    db: SessionDep,
    viewer: OptionalViewerDep,
) -> list[PostView]:
    """List a member's published posts, newest first."""
    return await FeedService.get_user_posts(db, username, viewer_id(viewer))


@router.get("/{username}/post-count", response_model=ProfilePostCount)
async def user_post_count(username: str, db: SessionDep) -> ProfilePostCount:
    """Return how many posts a member has published."""
    post_count = await FeedService.get_profile_post_count(db, username)
    return ProfilePostCount(username=username, post_count=post_count)
