"""Feed assembly: ranked, paginated post listings decorated for a viewer."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, joinedload

from turterra.core.errors import Forbidden, NotFound, Unauthorized
from turterra.core.settings import settings
from turterra.models import Post, Profile, SavedPost
from turterra.models.vote import TARGET_POST
from turterra.schemas.channel import ChannelSummary
from turterra.schemas.post import PostView
from turterra.schemas.profile import AuthorSummary
from turterra.services.votes import VoteService

SORT_MODES = ("hot", "new", "top")

_SORT_COLUMNS = {
    "hot": Post.hot_score,
    "new": Post.created_at,
    "top": Post.score,
}


def _with_author_and_channel(stmt: Select) -> Select:
    return stmt.options(joinedload(Post.author), joinedload(Post.channel))


def _clamp_page(limit: int | None, offset: int | None) -> tuple[int, int]:
    if limit is None:
        limit = settings.feed_default_limit
    limit = max(1, min(int(limit), settings.feed_max_limit))
    offset = max(0, int(offset or 0))
    return limit, offset


def to_post_view(post: Post, viewer_vote: int | None = None, is_saved: bool = False) -> PostView:
    """Convert a Post ORM instance with loaded author/channel to a view model."""
    return PostView(
        id=post.id,
        title=post.title,
        body=post.body,
        image_urls=list(post.image_urls or []),
        score=post.score,
        hot_score=post.hot_score,
        comment_count=post.comment_count,
        is_draft=post.is_draft,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=AuthorSummary.model_validate(post.author),
        channel=ChannelSummary.model_validate(post.channel),
        viewer_vote=viewer_vote,
        is_saved=is_saved,
    )


def _profile_by_username(db: Session, username: str) -> Profile:
    profile = db.execute(
        select(Profile).where(Profile.username == username)
    ).scalar_one_or_none()
    if profile is None:
        raise NotFound("Profile not found")
    return profile


async def _saved_ids_for(db: Session, viewer_id: str, post_ids: Sequence[int]) -> set[int]:
    if not post_ids:
        return set()
    rows = db.execute(
        select(SavedPost.post_id).where(
            SavedPost.user_id == viewer_id,
            SavedPost.post_id.in_(post_ids),
        )
    ).scalars()
    return set(rows)


async def decorate(
    db: Session,
    posts: Sequence[Post],
    viewer_id: str | None,
) -> list[PostView]:
    """Attach the viewer's vote and saved flag to each post.

    Uses one bulk lookup for votes and one for bookmarks, keyed by the post
    ids on the page.
    """
    if viewer_id is None:
        return [to_post_view(post) for post in posts]

    post_ids = [post.id for post in posts]
    votes = await VoteService.get_votes_for(db, viewer_id, TARGET_POST, post_ids)
    saved = await _saved_ids_for(db, viewer_id, post_ids)
    return [
        to_post_view(post, viewer_vote=votes.get(post.id), is_saved=post.id in saved)
        for post in posts
    ]


class FeedService:
    """Read paths over posts for feeds, profiles and bookmarks."""

    @staticmethod
    async def get_feed(
        db: Session,
        *,
        channel_id: int | None = None,
        sort: str = "hot",
        viewer_id: str | None = None,
        limit: int | None = None,
        offset: int | None = 0,
    ) -> list[PostView]:
        """Return one page of published posts in the requested order.

        Args:
            db: Database session
            channel_id: Restrict to this channel when given
            sort: ``hot`` (hot_score), ``new`` (created_at) or ``top`` (score)
            viewer_id: Viewer to decorate with vote and saved state
            limit: Page size, clamped to the configured maximum
            offset: Number of posts to skip

        Returns:
            Decorated posts, ties broken newest first.
        """
        if sort not in SORT_MODES:
            raise ValueError(f"Unknown sort mode {sort!r}")
        limit, offset = _clamp_page(limit, offset)

        stmt = _with_author_and_channel(select(Post)).where(Post.is_draft.is_(False))
        if channel_id is not None:
            stmt = stmt.where(Post.channel_id == channel_id)

        order = [_SORT_COLUMNS[sort].desc()]
        if sort != "new":
            order.append(Post.created_at.desc())
        order.append(Post.id.desc())
        stmt = stmt.order_by(*order).limit(limit).offset(offset)

        posts = db.execute(stmt).scalars().all()
        return await decorate(db, posts, viewer_id)

    @staticmethod
    async def get_post(db: Session, post_id: int, viewer_id: str | None = None) -> PostView:
        """Return a single post; drafts are visible to their author only."""
        post = db.execute(
            _with_author_and_channel(select(Post)).where(Post.id == post_id)
        ).scalar_one_or_none()
        if post is None or (post.is_draft and post.author_id != viewer_id):
            raise NotFound("Post not found")
        views = await decorate(db, [post], viewer_id)
        return views[0]

    @staticmethod
    async def get_user_posts(
        db: Session,
        username: str,
        viewer_id: str | None = None,
    ) -> list[PostView]:
        """Return a profile's published posts, newest first."""
        profile = _profile_by_username(db, username)

        posts = db.execute(
            _with_author_and_channel(select(Post))
            .where(Post.author_id == profile.id, Post.is_draft.is_(False))
            .order_by(Post.created_at.desc(), Post.id.desc())
        ).scalars().all()
        return await decorate(db, posts, viewer_id)

    @staticmethod
    async def get_user_drafts(
        db: Session,
        author_id: str,
        viewer_id: str | None,
    ) -> list[PostView]:
        """Return an author's drafts, most recently edited first.

        Raises:
            Unauthorized: If there is no viewer.
            Forbidden: If the viewer is not the author.
        """
        if viewer_id is None:
            raise Unauthorized("Sign in to view drafts")
        if viewer_id != author_id:
            raise Forbidden("Drafts are visible to their author only")

        posts = db.execute(
            _with_author_and_channel(select(Post))
            .where(Post.author_id == author_id, Post.is_draft.is_(True))
            .order_by(Post.updated_at.desc(), Post.id.desc())
        ).scalars().all()
        return [to_post_view(post) for post in posts]

    @staticmethod
    async def get_user_post_count(db: Session, author_id: str) -> int:
        """Return the number of published posts by an author."""
        return db.execute(
            select(func.count()).select_from(Post).where(
                Post.author_id == author_id,
                Post.is_draft.is_(False),
            )
        ).scalar_one()

    @staticmethod
    async def get_profile_post_count(db: Session, username: str) -> int:
        """Return the number of published posts by the profile named ``username``."""
        profile = _profile_by_username(db, username)
        return await FeedService.get_user_post_count(db, profile.id)

    @staticmethod
    async def get_saved_posts(db: Session, viewer_id: str | None) -> list[PostView]:
        """Return the viewer's bookmarked posts, most recently saved first."""
        if viewer_id is None:
            raise Unauthorized("Sign in to view saved posts")

        posts = db.execute(
            _with_author_and_channel(select(Post))
            .join(SavedPost, SavedPost.post_id == Post.id)
            .where(SavedPost.user_id == viewer_id, Post.is_draft.is_(False))
            .order_by(SavedPost.saved_at.desc(), Post.id.desc())
        ).scalars().all()
        return await decorate(db, posts, viewer_id)
