"""Saved post (bookmark) endpoints."""

from fastapi import APIRouter, status

from turterra.schemas.post import PostView
from turterra.schemas.saved import SavedPostCreate, SavedPostResponse
from turterra.services.feed import FeedService
from turterra.services.saved import SavedPostService

from ..dependencies import CurrentViewerDep, SessionDep

router = APIRouter(prefix="/saved-posts", tags=["saved-posts"])


@router.get("/", response_model=list[PostView])
async def list_saved_posts(current_viewer: CurrentViewerDep, db: SessionDep) -> list[PostView]:
    """List the caller's saved posts, most recently saved first."""
    return await FeedService.get_saved_posts(db, current_viewer.id)


@router.post("/", response_model=SavedPostResponse, status_code=status.HTTP_201_CREATED)
async def save_post(
    saved_data: SavedPostCreate,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> SavedPostResponse:
    """Bookmark a post; saving twice is harmless."""
    await SavedPostService.save_post(db, current_viewer.id, saved_data.post_id)
    return SavedPostResponse(post_id=saved_data.post_id, is_saved=True)


@router.delete("/{post_id}", response_model=SavedPostResponse)
async def unsave_post(
    post_id: int,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> SavedPostResponse:
    """Remove a bookmark; removing a missing bookmark is harmless."""
    await SavedPostService.unsave_post(db, current_viewer.id, post_id)
    return SavedPostResponse(post_id=post_id, is_saved=False)
