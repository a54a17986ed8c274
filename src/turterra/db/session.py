"""Engine and session setup for the community store."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from turterra.core.settings import settings
from turterra.db.dialects import enable_sqlite_foreign_keys


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import turterra.models  # noqa: E402,F401


def build_engine(url: str, **overrides: Any) -> Engine:
    """Create an engine for ``url``.

    SQLite connections may be shared with FastAPI's worker threads and get
    foreign key enforcement switched on.
    """
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.sql_debug}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    options.update(overrides)
    new_engine = create_engine(url, **options)
    enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine = build_engine(settings.effective_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session; it is closed when the request ends."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
