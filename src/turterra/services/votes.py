"""Vote ledger: one vote per (user, target), applied idempotently."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turterra.core.errors import NotFound, StoreUnavailable, Unauthorized
from turterra.db.dialects import conflict_insert
from turterra.db.time import utcnow
from turterra.models import Comment, Post, Vote
from turterra.models.vote import TARGET_COMMENT, TARGET_POST, TARGET_TYPES
from turterra.services import scoring

logger = logging.getLogger(__name__)

VOTE_VALUES = (-1, 0, 1)


@dataclass(frozen=True)
class VoteOutcome:
    """Caller's vote state after a write, for optimistic UI reconciliation."""

    target_id: int
    target_type: str
    value: int
    score: int
    changed: bool


def _load_target(
    db: Session,
    target_type: str,
    target_id: int,
    user_id: str,
) -> Post | Comment:
    if target_type == TARGET_POST:
        post = scoring.lock_row(db, Post, target_id)
        # Drafts are invisible to everyone but their author.
        if post is None or (post.is_draft and post.author_id != user_id):
            raise NotFound("Post not found")
        return post

    comment = scoring.lock_row(db, Comment, target_id)
    if comment is None or comment.is_deleted:
        raise NotFound("Comment not found")
    return comment


def _upsert_vote(db: Session, user_id: str, target_type: str, target_id: int, value: int) -> None:
    values = {
        "user_id": user_id,
        "target_type": target_type,
        "target_id": target_id,
        "value": value,
        "updated_at": utcnow(),
    }
    insert = conflict_insert(db)
    if insert is None:
        # No native upsert; merge inside the current transaction instead.
        db.merge(Vote(**values))
        db.flush()
        return

    stmt = insert(Vote).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "target_type", "target_id"],
        set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
    )
    db.execute(stmt)


class VoteService:
    """Records votes and keeps target scores in step with the ledger."""

    @staticmethod
    async def apply_vote(
        db: Session,
        user_id: str | None,
        target_id: int,
        target_type: str,
        value: int,
    ) -> VoteOutcome:
        """Apply ``value`` as the caller's vote on a post or comment.

        Args:
            db: Database session
            user_id: Authenticated voter, None for anonymous callers
            target_id: Post or comment id
            target_type: ``"post"`` or ``"comment"``
            value: 1 or -1 to vote, 0 to remove the vote

        Returns:
            The caller's vote value and the target's score after the write.

        Raises:
            Unauthorized: If there is no voter.
            NotFound: If the target does not exist or is not visible.
            StoreUnavailable: If the vote write fails.
            ValueError: If ``value`` or ``target_type`` is out of range.
        """
        if user_id is None:
            raise Unauthorized("Sign in to vote")
        if value not in VOTE_VALUES:
            raise ValueError(f"Vote value must be one of {VOTE_VALUES}")
        if target_type not in TARGET_TYPES:
            raise ValueError(f"Vote target must be one of {TARGET_TYPES}")

        target = _load_target(db, target_type, target_id, user_id)

        existing = db.execute(
            select(Vote.value).where(
                Vote.user_id == user_id,
                Vote.target_type == target_type,
                Vote.target_id == target_id,
            )
        ).scalar_one_or_none()

        current = existing or 0
        if current == value:
            return VoteOutcome(
                target_id=target_id,
                target_type=target_type,
                value=value,
                score=target.score,
                changed=False,
            )

        try:
            if value == 0:
                db.execute(
                    delete(Vote).where(
                        Vote.user_id == user_id,
                        Vote.target_type == target_type,
                        Vote.target_id == target_id,
                    )
                )
            else:
                _upsert_vote(db, user_id, target_type, target_id, value)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Vote write failed for %s %s: %s", target_type, target_id, exc)
            raise StoreUnavailable("Could not record vote") from exc

        score = scoring.refresh_target_score(db, target_type, target_id)

        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Vote commit failed for %s %s: %s", target_type, target_id, exc)
            raise StoreUnavailable("Could not record vote") from exc

        if score is None:
            # Recompute failed; report the stale denormalized score.
            db.refresh(target)
            score = target.score

        return VoteOutcome(
            target_id=target_id,
            target_type=target_type,
            value=value,
            score=score,
            changed=True,
        )

    @staticmethod
    async def get_votes_for(
        db: Session,
        user_id: str,
        target_type: str,
        target_ids: Iterable[int],
    ) -> dict[int, int]:
        """Return the user's votes on the given targets in one query.

        Targets without a vote are absent from the mapping.
        """
        ids = list(target_ids)
        if not ids:
            return {}
        rows = db.execute(
            select(Vote.target_id, Vote.value).where(
                Vote.user_id == user_id,
                Vote.target_type == target_type,
                Vote.target_id.in_(ids),
            )
        ).all()
        return {target_id: vote_value for target_id, vote_value in rows}


__all__ = ["VoteOutcome", "VoteService", "TARGET_COMMENT", "TARGET_POST"]
