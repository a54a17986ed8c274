# tests/conftest.py
from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from turterra.core.security import create_access_token
from turterra.db.session import Base, build_engine
from turterra.db.session import get_db as app_get_session
from turterra.db.time import utcnow
from turterra.main import app as fastapi_app
from turterra.models import Channel, Post, Profile
from turterra.services.scoring import hot_score

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)
_CHANNEL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool, pool_pre_ping=False)

    # pysqlite SAVEPOINT recipe: let SQLAlchemy emit BEGIN itself so the
    # per-test outer transaction really wraps service commits.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Commits and rollbacks inside services only touch a SAVEPOINT; the outer
    # transaction is discarded after each test.
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
        expire_on_commit=False,
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Return a factory persisting profiles with unique usernames."""

    def _make(username: str | None = None, display_name: str | None = None) -> Profile:
        profile = Profile(
            id=str(uuid.uuid4()),
            username=username or f"keeper{next(_USERNAME_COUNTER)}",
            display_name=display_name,
            avatar_url=None,
            role="user",
        )
        db_session.add(profile)
        db_session.flush()
        return profile

    return _make


@pytest.fixture()
def author(make_profile: Callable[..., Profile]) -> Profile:
    """Primary test user, author of most posts."""
    return make_profile(username="shellshock", display_name="Shell Shock")


@pytest.fixture()
def other_user(make_profile: Callable[..., Profile]) -> Profile:
    """Secondary test user."""
    return make_profile(username="boxturtlefan")


@pytest.fixture()
def make_channel(db_session: Session) -> Callable[..., Channel]:
    """Return a factory persisting channels."""

    def _make(slug: str | None = None, name: str | None = None, sort_order: int = 0) -> Channel:
        number = next(_CHANNEL_COUNTER)
        channel = Channel(
            slug=slug or f"channel-{number}",
            name=name or f"Channel {number}",
            description=None,
            icon=None,
            sort_order=sort_order,
        )
        db_session.add(channel)
        db_session.flush()
        return channel

    return _make


@pytest.fixture()
def channel(make_channel: Callable[..., Channel]) -> Channel:
    """Default channel named general."""
    return make_channel(slug="general", name="General", sort_order=1)


@pytest.fixture()
def make_post(db_session: Session, author: Profile, channel: Channel) -> Callable[..., Post]:
    """Return a factory persisting posts with consistent denormalized values.

    ``age_hours`` places ``created_at`` in the past; ``score`` is stored as
    is, so tests that check score convergence should cast real votes instead.
    """

    def _make(
        title: str = "Hatchling care question",
        *,
        author_id: str | None = None,
        channel_id: int | None = None,
        score: int = 0,
        age_hours: float = 0.0,
        is_draft: bool = False,
        created_at: datetime | None = None,
    ) -> Post:
        created = created_at or utcnow() - timedelta(hours=age_hours)
        post = Post(
            title=title,
            body="<p>Body</p>",
            author_id=author_id or author.id,
            channel_id=channel_id or channel.id,
            image_urls=[],
            score=score,
            hot_score=0.0 if is_draft else hot_score(score, created),
            comment_count=0,
            is_draft=is_draft,
            created_at=created,
            updated_at=created,
        )
        db_session.add(post)
        db_session.flush()
        return post

    return _make


@pytest.fixture()
def test_post(make_post: Callable[..., Post]) -> Post:
    """A baseline published post."""
    return make_post("Basking lamp recommendations")


@pytest.fixture()
def auth_headers() -> Callable[[Profile], dict[str, str]]:
    """Return a helper building bearer headers for a profile."""

    def _headers(profile: Profile) -> dict[str, str]:
        token = create_access_token(profile.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def auth_token(author: Profile, auth_headers: Callable[[Profile], dict[str, str]]) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(author)


@pytest.fixture()
def other_auth_token(
    other_user: Profile,
    auth_headers: Callable[[Profile], dict[str, str]],
) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)
