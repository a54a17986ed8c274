# src/turterra/models/vote.py
"""Models capturing voting interactions on posts and comments."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from turterra.db.session import Base
from turterra.db.time import utcnow

TARGET_POST = "post"
TARGET_COMMENT = "comment"
TARGET_TYPES = (TARGET_POST, TARGET_COMMENT)


class Vote(Base):
    """Per-user vote on a post or comment.

    A retracted vote is a deleted row; stored values are only 1 or -1.
    """

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("value IN (1, -1)", name="ck_votes_value"),
        CheckConstraint("target_type IN ('post', 'comment')", name="ck_votes_target_type"),
        Index("ix_votes_target", "target_type", "target_id"),
    )

    # Composite primary key prevents duplicate votes from the same user.
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    target_type: Mapped[str] = mapped_column(String(16), primary_key=True)
    target_id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
