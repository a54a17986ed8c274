"""Comment endpoints that address a comment directly."""

from fastapi import APIRouter, status

from turterra.services.comments import CommentService

from ..dependencies import CurrentViewerDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    current_viewer: CurrentViewerDep,
    db: SessionDep,
) -> None:
    """Soft-delete the caller's comment."""
    await CommentService.delete_comment(db, comment_id, current_viewer.id)
