"""Dialect-specific helpers for the relational store."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

# Dialects with native INSERT ... ON CONFLICT.
_CONFLICT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def conflict_insert(db: Session) -> Callable[..., Any] | None:
    """Return the session dialect's ``insert`` supporting ON CONFLICT, if any."""
    return _CONFLICT_INSERTS.get(db.get_bind().dialect.name)


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection.

    SQLite ships with foreign keys off per connection; other dialects are
    left untouched.
    """
    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _enable_foreign_keys):
        event.listen(engine, "connect", _enable_foreign_keys)
