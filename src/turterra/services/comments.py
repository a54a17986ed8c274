"""Comment threads on posts with soft delete."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from turterra.core.errors import Forbidden, NotFound, StoreUnavailable, Unauthorized
from turterra.db.time import utcnow
from turterra.models import Comment, Post, Profile
from turterra.models.comment import DELETED_COMMENT_BODY
from turterra.models.vote import TARGET_COMMENT
from turterra.schemas.comment import CommentView
from turterra.schemas.profile import AuthorSummary
from turterra.services import scoring
from turterra.services.votes import VoteService

logger = logging.getLogger(__name__)


def _visible_post(db: Session, post_id: int, viewer_id: str | None) -> Post:
    post = db.get(Post, post_id)
    if post is None or (post.is_draft and post.author_id != viewer_id):
        raise NotFound("Post not found")
    return post


def to_comment_view(
    comment: Comment,
    viewer_vote: int | None = None,
    author: Profile | None = None,
) -> CommentView:
    """Convert a Comment ORM instance to a view model.

    ``author`` defaults to the eagerly loaded ``comment.author``.
    """
    return CommentView(
        id=comment.id,
        post_id=comment.post_id,
        parent_comment_id=comment.parent_comment_id,
        body=DELETED_COMMENT_BODY if comment.is_deleted else comment.body,
        score=comment.score,
        is_deleted=comment.is_deleted,
        created_at=comment.created_at,
        author=AuthorSummary.model_validate(author or comment.author),
        viewer_vote=viewer_vote,
    )


class CommentService:
    """Service handling comment creation, listing and soft deletion."""

    @staticmethod
    async def add_comment(
        db: Session,
        post_id: int,
        author_id: str | None,
        body: str,
        parent_comment_id: int | None = None,
    ) -> Comment:
        """Add a comment or a reply to an existing comment on the same post.

        Raises:
            Unauthorized: If there is no author.
            NotFound: If the post or the parent comment is missing.
        """
        if author_id is None:
            raise Unauthorized("Sign in to comment")
        post = scoring.lock_row(db, Post, post_id)
        if post is None or post.is_draft:
            raise NotFound("Post not found")

        if parent_comment_id is not None:
            parent = db.get(Comment, parent_comment_id)
            if parent is None or parent.post_id != post_id:
                raise NotFound("Parent comment not found")

        now = utcnow()
        comment = Comment(
            post_id=post_id,
            parent_comment_id=parent_comment_id,
            author_id=author_id,
            body=body.strip(),
            score=0,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(comment)
            db.flush()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreUnavailable("Could not add comment") from exc

        scoring.refresh_comment_count(db, post_id)
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreUnavailable("Could not add comment") from exc
        db.refresh(comment)
        return comment

    @staticmethod
    async def delete_comment(db: Session, comment_id: int, caller_id: str | None) -> Comment:
        """Soft-delete the caller's comment, keeping its replies in place."""
        if caller_id is None:
            raise Unauthorized("Sign in to delete comments")
        comment = db.get(Comment, comment_id)
        if comment is None or comment.is_deleted:
            raise NotFound("Comment not found")
        if comment.author_id != caller_id:
            raise Forbidden("You can only delete your own comments")

        scoring.lock_row(db, Post, comment.post_id)
        comment.is_deleted = True
        comment.body = DELETED_COMMENT_BODY
        comment.updated_at = utcnow()
        db.flush()
        scoring.refresh_comment_count(db, comment.post_id)

        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreUnavailable("Could not delete comment") from exc
        db.refresh(comment)
        logger.info("Soft-deleted comment %s on post %s", comment.id, comment.post_id)
        return comment

    @staticmethod
    async def list_comments(
        db: Session,
        post_id: int,
        viewer_id: str | None = None,
    ) -> list[CommentView]:
        """Return every comment on a post in thread order (oldest first).

        Deleted comments are returned tombstoned so replies keep their parent.
        """
        _visible_post(db, post_id, viewer_id)
        comments = db.execute(
            select(Comment)
            .options(joinedload(Comment.author))
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        ).scalars().all()

        votes: dict[int, int] = {}
        if viewer_id is not None:
            votes = await VoteService.get_votes_for(
                db, viewer_id, TARGET_COMMENT, [comment.id for comment in comments]
            )
        return [to_comment_view(comment, votes.get(comment.id)) for comment in comments]
