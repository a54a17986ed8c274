# src/turterra/models/post.py
"""SQLAlchemy model for community posts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from turterra.db.session import Base
from turterra.db.time import utcnow

if TYPE_CHECKING:
    from .channel import Channel
    from .profile import Profile


class Post(Base):
    """Primary content entity produced by community members.

    ``score``, ``hot_score`` and ``comment_count`` are denormalized values;
    they are written only by :mod:`turterra.services.scoring`.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_feed_hot", "is_draft", "hot_score"),
        Index("ix_posts_feed_new", "is_draft", "created_at"),
        Index("ix_posts_feed_top", "is_draft", "score"),
        Index("ix_posts_channel_id", "channel_id"),
        Index("ix_posts_author_id", "author_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    # Sanitized HTML produced by the rich text editor.
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    channel_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("channels.id"),
        nullable=False,
    )
    image_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hot_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Publish time for published posts; drives "new" order and hot rank.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    # Last edit by the author; score recomputes leave it alone.
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[Profile] = relationship("Profile", lazy="raise")
    channel: Mapped[Channel] = relationship("Channel", lazy="raise")
