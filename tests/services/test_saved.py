"""Tests for bookmarks."""

import pytest
from sqlalchemy import func, insert, select

from turterra.core.errors import NotFound, Unauthorized
from turterra.db.time import utcnow
from turterra.models import SavedPost
from turterra.services.saved import SavedPostService


@pytest.mark.asyncio
async def test_save_is_idempotent(db_session, test_post, other_user) -> None:
    assert await SavedPostService.save_post(db_session, other_user.id, test_post.id) is True
    assert await SavedPostService.save_post(db_session, other_user.id, test_post.id) is False


@pytest.mark.asyncio
async def test_unsave_is_idempotent(db_session, test_post, other_user) -> None:
    await SavedPostService.save_post(db_session, other_user.id, test_post.id)

    assert await SavedPostService.unsave_post(db_session, other_user.id, test_post.id) is True
    assert await SavedPostService.unsave_post(db_session, other_user.id, test_post.id) is False


@pytest.mark.asyncio
async def test_saving_does_not_change_score(db_session, test_post, other_user) -> None:
    await SavedPostService.save_post(db_session, other_user.id, test_post.id)
    assert test_post.score == 0


@pytest.mark.asyncio
async def test_cannot_save_drafts_or_missing_posts(db_session, make_post, other_user) -> None:
    draft = make_post("Draft", is_draft=True)

    with pytest.raises(NotFound):
        await SavedPostService.save_post(db_session, other_user.id, draft.id)
    with pytest.raises(NotFound):
        await SavedPostService.save_post(db_session, other_user.id, 31337)
    with pytest.raises(Unauthorized):
        await SavedPostService.save_post(db_session, None, draft.id)


def _bookmark_rows(db_session, user_id: str) -> int:
    return db_session.execute(
        select(func.count()).select_from(SavedPost).where(SavedPost.user_id == user_id)
    ).scalar_one()


@pytest.mark.asyncio
async def test_save_after_concurrent_save_is_a_no_op(db_session, test_post, other_user) -> None:
    """A bookmark written by another request between check and insert is not an error."""
    db_session.execute(
        insert(SavedPost).values(user_id=other_user.id, post_id=test_post.id, saved_at=utcnow())
    )

    assert await SavedPostService.save_post(db_session, other_user.id, test_post.id) is False
    assert _bookmark_rows(db_session, other_user.id) == 1


@pytest.mark.asyncio
async def test_save_without_native_upsert(db_session, test_post, other_user, mocker) -> None:
    mocker.patch("turterra.services.saved.conflict_insert", return_value=None)

    assert await SavedPostService.save_post(db_session, other_user.id, test_post.id) is True
    assert await SavedPostService.save_post(db_session, other_user.id, test_post.id) is False
    assert _bookmark_rows(db_session, other_user.id) == 1
