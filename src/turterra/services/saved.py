"""Bookmarks: idempotent save and unsave of posts."""
from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turterra.core.errors import NotFound, StoreUnavailable, Unauthorized
from turterra.db.dialects import conflict_insert
from turterra.db.time import utcnow
from turterra.models import Post, SavedPost


class SavedPostService:
    """Pure bookmark joins; saving has no effect on scores."""

    @staticmethod
    async def save_post(db: Session, user_id: str | None, post_id: int) -> bool:
        """Bookmark a post. Saving an already saved post is a no-op.

        Returns:
            True if a new bookmark row was written.
        """
        if user_id is None:
            raise Unauthorized("Sign in to save posts")
        post = db.get(Post, post_id)
        if post is None or post.is_draft:
            raise NotFound("Post not found")

        values = {"user_id": user_id, "post_id": post_id, "saved_at": utcnow()}
        insert = conflict_insert(db)
        try:
            if insert is not None:
                result = db.execute(
                    insert(SavedPost)
                    .values(**values)
                    .on_conflict_do_nothing(index_elements=["user_id", "post_id"])
                )
                created = bool(result.rowcount)
            else:
                created = db.get(SavedPost, (user_id, post_id)) is None
                if created:
                    db.add(SavedPost(**values))
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreUnavailable("Could not save post") from exc
        return created

    @staticmethod
    async def unsave_post(db: Session, user_id: str | None, post_id: int) -> bool:
        """Remove a bookmark. Removing a missing bookmark is a no-op.

        Returns:
            True if a bookmark row was deleted.
        """
        if user_id is None:
            raise Unauthorized("Sign in to manage saved posts")
        try:
            result = db.execute(
                delete(SavedPost).where(
                    SavedPost.user_id == user_id,
                    SavedPost.post_id == post_id,
                )
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreUnavailable("Could not remove saved post") from exc
        return bool(result.rowcount)
