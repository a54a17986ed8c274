"""Score aggregation for posts and comments.

This module is the single place that writes the denormalized ``score``,
``hot_score`` and ``comment_count`` columns. Every caller that changes votes or
comments asks this module to recompute from the source rows instead of
adjusting counters in place, so ``score == sum(votes)`` holds after any
recompute.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turterra.core.settings import settings
from turterra.db.time import as_utc
from turterra.models import Comment, Post, Vote
from turterra.models.vote import TARGET_COMMENT, TARGET_POST

Target = TypeVar("Target", Post, Comment)

# Configure logger for this module
logger = logging.getLogger(__name__)


def hot_score(score: int, created_at: datetime) -> float:
    """Return the time-decayed rank of a post.

    The vote term is ``sign(score) * log10(|score| + 1)`` so every extra vote
    counts, with diminishing weight. The time term grows linearly with the
    publish time, so for equal scores a newer post always ranks higher and a
    post must gain roughly tenfold votes to keep pace with one published
    ``HOT_DECAY_SECONDS`` later.

    Args:
        score: Net vote sum of the post.
        created_at: Publish time of the post.

    Returns:
        Rank value; larger is hotter.
    """
    sign = (score > 0) - (score < 0)
    order = math.log10(abs(score) + 1)
    seconds = as_utc(created_at).timestamp() - settings.hot_epoch_seconds
    return sign * order + seconds / settings.hot_decay_seconds


def locked_select(model: type[Target], row_id: int) -> Select:
    """Select one post or comment row with FOR UPDATE, refreshing the loaded copy."""
    return (
        select(model)
        .where(model.id == row_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def lock_row(db: Session, model: type[Target], row_id: int) -> Target | None:
    """Load a post or comment and hold its row lock until the transaction ends.

    Every write that is followed by a recompute takes this lock first, so
    writers on one target run one at a time and each recompute sees all
    committed votes and comments. SQLite ignores FOR UPDATE and serializes
    writers on its own.
    """
    return db.execute(locked_select(model, row_id)).scalar_one_or_none()


def vote_sum(db: Session, target_type: str, target_id: int) -> int:
    """Return the live net vote sum for a target."""
    total = db.execute(
        select(func.coalesce(func.sum(Vote.value), 0)).where(
            Vote.target_type == target_type,
            Vote.target_id == target_id,
        )
    ).scalar_one()
    return int(total)


def recompute_post(db: Session, post_id: int) -> Post | None:
    """Recompute ``score`` and ``hot_score`` for a post from its votes."""
    post = db.get(Post, post_id)
    if post is None:
        return None
    post.score = vote_sum(db, TARGET_POST, post_id)
    post.hot_score = hot_score(post.score, post.created_at)
    db.flush()
    return post


def recompute_comment(db: Session, comment_id: int) -> Comment | None:
    """Recompute a comment's own ``score``; the parent post is untouched."""
    comment = db.get(Comment, comment_id)
    if comment is None:
        return None
    comment.score = vote_sum(db, TARGET_COMMENT, comment_id)
    db.flush()
    return comment


def recompute_comment_count(db: Session, post_id: int) -> Post | None:
    """Recompute the number of visible comments on a post."""
    post = db.get(Post, post_id)
    if post is None:
        return None
    post.comment_count = db.execute(
        select(func.count()).select_from(Comment).where(
            Comment.post_id == post_id,
            Comment.is_deleted.is_(False),
        )
    ).scalar_one()
    db.flush()
    return post


def refresh_target_score(db: Session, target_type: str, target_id: int) -> int | None:
    """Best-effort recompute after a vote write.

    Runs inside a SAVEPOINT so a failure rolls back only the recompute and
    leaves the pending vote write intact. Failures are logged and swallowed;
    the stale denormalized score keeps being served until the next recompute.

    Returns:
        The fresh score, or None if the recompute failed.
    """
    try:
        with db.begin_nested():
            if target_type == TARGET_POST:
                target: Post | Comment | None = recompute_post(db, target_id)
            else:
                target = recompute_comment(db, target_id)
    except SQLAlchemyError:
        logger.exception(
            "Score recompute failed for %s %s; serving stale value",
            target_type,
            target_id,
        )
        return None
    return target.score if target is not None else None


def refresh_comment_count(db: Session, post_id: int) -> None:
    """Best-effort comment count recompute, same failure policy as votes."""
    try:
        with db.begin_nested():
            recompute_comment_count(db, post_id)
    except SQLAlchemyError:
        logger.exception("Comment count recompute failed for post %s", post_id)


def reconcile_scores(db: Session) -> int:
    """Recompute every denormalized value from source rows.

    Maintenance path guaranteeing that drift left behind by failed best-effort
    recomputes is never permanent.

    Returns:
        Number of rows whose stored values changed.
    """
    changed = 0
    post_ids = db.execute(select(Post.id)).scalars().all()
    for post_id in post_ids:
        post = db.get(Post, post_id)
        if post is None:
            continue
        before = (post.score, post.hot_score, post.comment_count)
        recompute_post(db, post_id)
        recompute_comment_count(db, post_id)
        if before != (post.score, post.hot_score, post.comment_count):
            changed += 1

    comment_ids = db.execute(select(Comment.id)).scalars().all()
    for comment_id in comment_ids:
        comment = db.get(Comment, comment_id)
        if comment is None:
            continue
        before_score = comment.score
        recompute_comment(db, comment_id)
        if before_score != comment.score:
            changed += 1

    db.commit()
    logger.info("Reconciled scores; %d rows changed", changed)
    return changed
