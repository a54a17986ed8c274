"""Tests for feed ordering, pagination and viewer decoration."""

from datetime import UTC, datetime

import pytest

from turterra.core.errors import Forbidden, NotFound, Unauthorized
from turterra.models.vote import TARGET_POST
from turterra.services import feed as feed_module
from turterra.services.feed import FeedService
from turterra.services.saved import SavedPostService
from turterra.services.votes import VoteService


@pytest.mark.asyncio
async def test_new_feed_excludes_drafts(db_session, make_post, channel) -> None:
    """Three published posts and a draft yield the three, newest first."""
    oldest = make_post("Oldest", age_hours=3)
    middle = make_post("Middle", age_hours=2)
    newest = make_post("Newest", age_hours=1)
    make_post("Draft", is_draft=True)

    feed = await FeedService.get_feed(db_session, channel_id=channel.id, sort="new")

    assert [post.id for post in feed] == [newest.id, middle.id, oldest.id]
    assert all(not post.is_draft for post in feed)


@pytest.mark.asyncio
async def test_channel_filter(db_session, make_post, make_channel) -> None:
    other_channel = make_channel(slug="aquatic")
    make_post("General chatter")
    aquatic = make_post("Filter sizing", channel_id=other_channel.id)

    feed = await FeedService.get_feed(db_session, channel_id=other_channel.id, sort="new")

    assert [post.id for post in feed] == [aquatic.id]
    assert feed[0].channel.slug == "aquatic"


@pytest.mark.asyncio
async def test_top_orders_by_score(db_session, make_post) -> None:
    low = make_post("Low", score=1)
    high = make_post("High", score=12, age_hours=48)
    negative = make_post("Negative", score=-4)

    feed = await FeedService.get_feed(db_session, sort="top")

    assert [post.id for post in feed] == [high.id, low.id, negative.id]


@pytest.mark.asyncio
async def test_hot_prefers_fresh_posts_at_equal_score(db_session, make_post) -> None:
    stale = make_post("Stale", score=5, age_hours=30)
    fresh = make_post("Fresh", score=5, age_hours=1)

    feed = await FeedService.get_feed(db_session, sort="hot")

    assert [post.id for post in feed] == [fresh.id, stale.id]


@pytest.mark.asyncio
async def test_ties_break_newest_first_then_by_id(db_session, make_post) -> None:
    stamp = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
    first = make_post("Twin A", score=2, created_at=stamp)
    second = make_post("Twin B", score=2, created_at=stamp)
    newer = make_post("Newer", score=2, age_hours=1)

    feed = await FeedService.get_feed(db_session, sort="top")

    assert [post.id for post in feed] == [newer.id, second.id, first.id]


@pytest.mark.asyncio
async def test_pagination(db_session, make_post) -> None:
    posts = [make_post(f"Post {i}", age_hours=i) for i in range(5)]

    first_page = await FeedService.get_feed(db_session, sort="new", limit=2, offset=0)
    second_page = await FeedService.get_feed(db_session, sort="new", limit=2, offset=2)
    last_page = await FeedService.get_feed(db_session, sort="new", limit=2, offset=4)

    assert [post.id for post in first_page] == [posts[0].id, posts[1].id]
    assert [post.id for post in second_page] == [posts[2].id, posts[3].id]
    assert [post.id for post in last_page] == [posts[4].id]


@pytest.mark.asyncio
async def test_limit_is_clamped(db_session, make_post, monkeypatch) -> None:
    from turterra.core.settings import settings

    monkeypatch.setattr(settings, "feed_max_limit", 2)
    for i in range(3):
        make_post(f"Post {i}")

    feed = await FeedService.get_feed(db_session, sort="new", limit=50)

    assert len(feed) == 2


@pytest.mark.asyncio
async def test_unknown_sort_mode(db_session) -> None:
    with pytest.raises(ValueError):
        await FeedService.get_feed(db_session, sort="rising")


@pytest.mark.asyncio
async def test_anonymous_feed_has_no_viewer_state(db_session, test_post) -> None:
    feed = await FeedService.get_feed(db_session, sort="hot")

    assert feed[0].viewer_vote is None
    assert feed[0].is_saved is False
    assert feed[0].author.username == "shellshock"


@pytest.mark.asyncio
async def test_viewer_decoration_uses_bulk_lookups(
    db_session, make_post, other_user, mocker
) -> None:
    """Votes and saved flags come from one lookup each, not one per post."""
    upvoted = make_post("Upvoted")
    downvoted = make_post("Downvoted")
    saved = make_post("Saved")
    make_post("Untouched")
    await VoteService.apply_vote(db_session, other_user.id, upvoted.id, TARGET_POST, 1)
    await VoteService.apply_vote(db_session, other_user.id, downvoted.id, TARGET_POST, -1)
    await SavedPostService.save_post(db_session, other_user.id, saved.id)

    vote_spy = mocker.spy(VoteService, "get_votes_for")
    saved_spy = mocker.spy(feed_module, "_saved_ids_for")
    feed = await FeedService.get_feed(db_session, sort="new", viewer_id=other_user.id)

    assert vote_spy.call_count == 1
    assert saved_spy.call_count == 1
    assert set(saved_spy.call_args.args[2]) == {post.id for post in feed}
    by_id = {post.id: post for post in feed}
    assert by_id[upvoted.id].viewer_vote == 1
    assert by_id[downvoted.id].viewer_vote == -1
    assert by_id[saved.id].viewer_vote is None
    assert by_id[saved.id].is_saved is True
    assert by_id[upvoted.id].is_saved is False


@pytest.mark.asyncio
async def test_get_post_hides_drafts_from_others(db_session, make_post, author, other_user) -> None:
    draft = make_post("Secret", is_draft=True)

    with pytest.raises(NotFound):
        await FeedService.get_post(db_session, draft.id, other_user.id)
    with pytest.raises(NotFound):
        await FeedService.get_post(db_session, draft.id, None)

    view = await FeedService.get_post(db_session, draft.id, author.id)
    assert view.is_draft is True


@pytest.mark.asyncio
async def test_user_posts_and_count(db_session, make_post, author) -> None:
    make_post("One", age_hours=2)
    latest = make_post("Two", age_hours=1)
    make_post("Draft", is_draft=True)

    posts = await FeedService.get_user_posts(db_session, author.username)

    assert len(posts) == 2
    assert posts[0].id == latest.id
    assert await FeedService.get_user_post_count(db_session, author.id) == 2


@pytest.mark.asyncio
async def test_user_posts_unknown_profile(db_session) -> None:
    with pytest.raises(NotFound):
        await FeedService.get_user_posts(db_session, "nobody")


@pytest.mark.asyncio
async def test_drafts_are_private_to_author(db_session, make_post, author, other_user) -> None:
    draft = make_post("Work in progress", is_draft=True)
    make_post("Published")

    drafts = await FeedService.get_user_drafts(db_session, author.id, author.id)
    assert [post.id for post in drafts] == [draft.id]

    with pytest.raises(Forbidden):
        await FeedService.get_user_drafts(db_session, author.id, other_user.id)
    with pytest.raises(Unauthorized):
        await FeedService.get_user_drafts(db_session, author.id, None)


@pytest.mark.asyncio
async def test_saved_posts_newest_save_first(db_session, make_post, other_user) -> None:
    first = make_post("First")
    second = make_post("Second")
    await SavedPostService.save_post(db_session, other_user.id, first.id)
    await SavedPostService.save_post(db_session, other_user.id, second.id)

    saved = await FeedService.get_saved_posts(db_session, other_user.id)

    assert {post.id for post in saved} == {first.id, second.id}
    assert all(post.is_saved for post in saved)

    with pytest.raises(Unauthorized):
        await FeedService.get_saved_posts(db_session, None)


@pytest.mark.asyncio
async def test_voting_on_a_draft_keeps_draft_order(db_session, make_post, author) -> None:
    """Drafts stay ordered by their last edit, not by their last vote."""
    older = make_post("Enclosure sketch", is_draft=True, age_hours=48)
    newer = make_post("Diet notes", is_draft=True, age_hours=1)

    await VoteService.apply_vote(db_session, author.id, older.id, TARGET_POST, 1)

    drafts = await FeedService.get_user_drafts(db_session, author.id, author.id)
    assert [post.id for post in drafts] == [newer.id, older.id]


@pytest.mark.asyncio
async def test_profile_post_count_by_username(db_session, make_post, author, other_user) -> None:
    make_post("Published")
    make_post("Draft", is_draft=True)

    assert await FeedService.get_profile_post_count(db_session, author.username) == 1
    assert await FeedService.get_profile_post_count(db_session, other_user.username) == 0
    with pytest.raises(NotFound):
        await FeedService.get_profile_post_count(db_session, "ghost")
