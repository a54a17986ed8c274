"""Channel listings and membership."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turterra.core.errors import NotFound, StoreUnavailable, Unauthorized
from turterra.db.dialects import conflict_insert
from turterra.db.time import utcnow
from turterra.models import Channel, ChannelMembership, Post, Profile
from turterra.schemas.channel import ChannelStats, CommunityStats


class ChannelService:
    """Read access to channels plus join/leave for members."""

    @staticmethod
    async def list_channels(db: Session) -> list[Channel]:
        """List all channels in display order."""
        return list(
            db.execute(select(Channel).order_by(Channel.sort_order, Channel.id)).scalars()
        )

    @staticmethod
    async def get_channel_by_slug(db: Session, slug: str) -> Channel:
        """Return the channel with ``slug``."""
        channel = db.execute(
            select(Channel).where(Channel.slug == slug)
        ).scalar_one_or_none()
        if channel is None:
            raise NotFound("Channel not found")
        return channel

    @staticmethod
    async def get_channel_stats(db: Session) -> list[ChannelStats]:
        """Return published post and member counts for every channel."""
        post_counts = (
            select(Post.channel_id, func.count().label("post_count"))
            .where(Post.is_draft.is_(False))
            .group_by(Post.channel_id)
            .subquery()
        )
        member_counts = (
            select(ChannelMembership.channel_id, func.count().label("member_count"))
            .group_by(ChannelMembership.channel_id)
            .subquery()
        )
        rows = db.execute(
            select(
                Channel.id,
                Channel.slug,
                func.coalesce(post_counts.c.post_count, 0),
                func.coalesce(member_counts.c.member_count, 0),
            )
            .outerjoin(post_counts, post_counts.c.channel_id == Channel.id)
            .outerjoin(member_counts, member_counts.c.channel_id == Channel.id)
            .order_by(Channel.sort_order, Channel.id)
        ).all()
        return [
            ChannelStats(
                channel_id=channel_id,
                slug=slug,
                post_count=post_count,
                member_count=member_count,
            )
            for channel_id, slug, post_count, member_count in rows
        ]

    @staticmethod
    async def get_community_stats(db: Session) -> CommunityStats:
        """Return member, published post and channel totals."""
        total_members = db.execute(select(func.count()).select_from(Profile)).scalar_one()
        total_posts = db.execute(
            select(func.count()).select_from(Post).where(Post.is_draft.is_(False))
        ).scalar_one()
        total_channels = db.execute(select(func.count()).select_from(Channel)).scalar_one()
        return CommunityStats(
            total_members=total_members,
            total_posts=total_posts,
            total_channels=total_channels,
        )

    @staticmethod
    async def join_channel(db: Session, user_id: str | None, channel_id: int) -> bool:
        """Add the user to a channel; joining twice is a no-op."""
        if user_id is None:
            raise Unauthorized("Sign in to join channels")
        if db.get(Channel, channel_id) is None:
            raise NotFound("Channel not found")
        values = {"user_id": user_id, "channel_id": channel_id, "joined_at": utcnow()}
        insert = conflict_insert(db)
        try:
            if insert is not None:
                result = db.execute(
                    insert(ChannelMembership)
                    .values(**values)
                    .on_conflict_do_nothing(index_elements=["user_id", "channel_id"])
                )
                joined = bool(result.rowcount)
            else:
                joined = db.get(ChannelMembership, (user_id, channel_id)) is None
                if joined:
                    db.add(ChannelMembership(**values))
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreUnavailable("Could not join channel") from exc
        return joined

    @staticmethod
    async def leave_channel(db: Session, user_id: str | None, channel_id: int) -> bool:
        """Remove the user from a channel; leaving twice is a no-op."""
        if user_id is None:
            raise Unauthorized("Sign in to leave channels")
        try:
            result = db.execute(
                delete(ChannelMembership).where(
                    ChannelMembership.user_id == user_id,
                    ChannelMembership.channel_id == channel_id,
                )
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreUnavailable("Could not leave channel") from exc
        return bool(result.rowcount)

    @staticmethod
    async def get_memberships(db: Session, user_id: str) -> list[int]:
        """Return ids of the channels the user has joined."""
        return list(
            db.execute(
                select(ChannelMembership.channel_id).where(ChannelMembership.user_id == user_id)
            ).scalars()
        )
