"""Post-related endpoints: lifecycle, publishing and comments."""

from fastapi import APIRouter, status

from turterra.schemas.comment import CommentCreate, CommentView
from turterra.schemas.post import PostCreate, PostUpdate, PostView
from turterra.services.comments import CommentService, to_comment_view
from turterra.services.feed import FeedService
from turterra.services.posts import PostService

from ..dependencies import CurrentViewerDep, OptionalViewerDep, SessionDep, viewer_id

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/{post_id}", response_model=PostView)
async def get_post(post_id: int, db: SessionDep, viewer: OptionalViewerDep) -> PostView:
    """Get a specific post; drafts are only returned to their author."""
    return await FeedService.get_post(db, post_id, viewer_id(viewer))


@router.post("/", response_model=PostView, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> PostView:
    """Create a new post, or a draft when ``is_draft`` is set."""
    post = await PostService.create_post(db, current_viewer.id, post_data)
    return await FeedService.get_post(db, post.id, current_viewer.id)


@router.patch("/{post_id}", response_model=PostView)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> PostView:
    """Edit the caller's own post or draft."""
    post = await PostService.update_post(db, post_id, current_viewer.id, post_data)
    return await FeedService.get_post(db, post.id, current_viewer.id)


@router.post("/{post_id}/publish", response_model=PostView)
async def publish_post(
    post_id: int,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> PostView:
    """Publish the caller's draft."""
    post = await PostService.publish_draft(db, post_id, current_viewer.id)
    return await FeedService.get_post(db, post.id, current_viewer.id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> None:
    """Delete the caller's post together with its comments and votes."""
    await PostService.delete_post(db, post_id, current_viewer.id)


@router.get("/{post_id}/comments", response_model=list[CommentView])
async def list_comments(
    post_id: int,
    db: SessionDep,
    viewer: OptionalViewerDep,
) -> list[CommentView]:
    """List comments on a post in thread order."""
    return await CommentService.list_comments(db, post_id, viewer_id(viewer))


@router.post(
    "/{post_id}/comments",
    response_model=CommentView,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: int,
    comment_data: CommentCreate,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> CommentView:
    """Comment on a post or reply to one of its comments."""
    comment = await CommentService.add_comment(
        db,
        post_id,
        current_viewer.id,
        comment_data.body,
        comment_data.parent_comment_id,
    )
    return to_comment_view(comment, author=current_viewer)
