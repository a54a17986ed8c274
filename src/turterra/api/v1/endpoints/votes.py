"""Vote endpoints for posts and comments."""

from fastapi import APIRouter, HTTPException, status

from turterra.schemas.vote import VoteCreate, VoteResponse
from turterra.services.votes import VoteService

from ..dependencies import OptionalViewerDep, SessionDep, viewer_id

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResponse)
async def cast_vote(
    vote_data: VoteCreate,
    viewer: OptionalViewerDep,
    db: SessionDep,
) -> VoteResponse:
    """Cast, flip or retract (value 0) the caller's vote.

    Returns the caller's vote and the target's score so the client can
    reconcile its optimistic update.
    """
    try:
        outcome = await VoteService.apply_vote(
            db,
            viewer_id(viewer),
            vote_data.target_id,
            vote_data.target_type,
            vote_data.value,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    return VoteResponse.model_validate(outcome)
