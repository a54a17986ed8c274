"""Post lifecycle: create, edit, publish and delete.

Posts move one way from ``draft`` to ``published``. Publishing stamps
``created_at`` with the publish time, so the "new" order and the hot rank of
a post both reflect when it went public rather than when the draft was begun.
"""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turterra.core.errors import (
    Forbidden,
    InvalidState,
    NotFound,
    StoreUnavailable,
    Unauthorized,
)
from turterra.db.time import utcnow
from turterra.models import Channel, Comment, Post, SavedPost, Vote
from turterra.models.vote import TARGET_COMMENT, TARGET_POST
from turterra.schemas.post import PostCreate, PostUpdate
from turterra.services import scoring

logger = logging.getLogger(__name__)


def _get_owned_post(db: Session, post_id: int, caller_id: str | None) -> Post:
    if caller_id is None:
        raise Unauthorized("Sign in to manage posts")
    post = db.get(Post, post_id)
    if post is None or (post.is_draft and post.author_id != caller_id):
        raise NotFound("Post not found")
    if post.author_id != caller_id:
        raise Forbidden("You can only manage your own posts")
    return post


def _require_channel(db: Session, channel_id: int) -> Channel:
    channel = db.get(Channel, channel_id)
    if channel is None:
        raise NotFound("Channel not found")
    return channel


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Failed to %s: %s", action, exc)
        raise StoreUnavailable(f"Could not {action}") from exc


class PostService:
    """Write paths for posts and the draft/publish state machine."""

    @staticmethod
    async def create_post(db: Session, author_id: str | None, data: PostCreate) -> Post:
        """Persist a new post, either published or as a draft.

        Raises:
            Unauthorized: If there is no author.
            NotFound: If the channel does not exist.
        """
        if author_id is None:
            raise Unauthorized("Sign in to post")
        _require_channel(db, data.channel_id)

        now = utcnow()
        post = Post(
            title=data.title.strip(),
            body=data.body,
            author_id=author_id,
            channel_id=data.channel_id,
            image_urls=list(data.image_urls),
            score=0,
            hot_score=0.0 if data.is_draft else scoring.hot_score(0, now),
            comment_count=0,
            is_draft=data.is_draft,
            created_at=now,
            updated_at=now,
        )
        db.add(post)
        _commit(db, "create post")
        db.refresh(post)
        logger.info("Created %s %s in channel %s", "draft" if post.is_draft else "post",
                    post.id, post.channel_id)
        return post

    @staticmethod
    async def update_post(
        db: Session,
        post_id: int,
        caller_id: str | None,
        data: PostUpdate,
    ) -> Post:
        """Edit title, body, images or channel of the caller's own post."""
        post = _get_owned_post(db, post_id, caller_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("channel_id") is not None:
            _require_channel(db, changes["channel_id"])
        for field_name, value in changes.items():
            if value is None and field_name != "body":
                continue
            if field_name == "title":
                value = value.strip()
            setattr(post, field_name, value)
        post.updated_at = utcnow()

        _commit(db, "update post")
        db.refresh(post)
        return post

    @staticmethod
    async def publish_draft(db: Session, post_id: int, caller_id: str | None) -> Post:
        """Move a draft to published.

        Raises:
            Unauthorized: If there is no caller.
            NotFound: If the post does not exist.
            Forbidden: If the caller is not the author.
            InvalidState: If the post is already published.
        """
        if caller_id is None:
            raise Unauthorized("Sign in to publish")
        post = scoring.lock_row(db, Post, post_id)
        if post is None:
            raise NotFound("Post not found")
        if post.author_id != caller_id:
            raise Forbidden("Only the author can publish this draft")
        if not post.is_draft:
            raise InvalidState("Post is already published")

        now = utcnow()
        post.is_draft = False
        post.created_at = now
        post.updated_at = now
        db.flush()
        scoring.refresh_target_score(db, TARGET_POST, post.id)

        _commit(db, "publish draft")
        db.refresh(post)
        logger.info("Published draft %s", post.id)
        return post

    @staticmethod
    async def delete_post(db: Session, post_id: int, caller_id: str | None) -> None:
        """Hard-delete the caller's post with its comments, votes and bookmarks."""
        post = _get_owned_post(db, post_id, caller_id)

        comment_ids = select(Comment.id).where(Comment.post_id == post.id)
        db.execute(
            delete(Vote).where(
                Vote.target_type == TARGET_COMMENT,
                Vote.target_id.in_(comment_ids),
            )
        )
        db.execute(
            delete(Vote).where(Vote.target_type == TARGET_POST, Vote.target_id == post.id)
        )
        db.execute(delete(SavedPost).where(SavedPost.post_id == post.id))
        db.execute(delete(Comment).where(Comment.post_id == post.id))
        db.delete(post)
        _commit(db, "delete post")
        logger.info("Deleted post %s", post_id)
