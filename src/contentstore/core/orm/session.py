"""SQLAlchemy engine factory and pre-configured session.

This module provides:

* ``create_store_engine``   -- Create a SA engine from a URL.
* ``StoreSession``          -- A ``Session`` subclass with ``expire_on_commit=False``.
* ``store_session_factory`` -- ``sessionmaker`` producing ``StoreSession`` instances.

Tags:
    content-store, orm, sqlalchemy, session, engine
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def create_store_engine(
    url: str = "sqlite:///content-store.db",
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Parameters
    ----------
    url:
        Database URL (``sqlite:///…``, ``postgresql://…``, etc.)
    echo:
        If ``True``, log all SQL.
    pool_size, max_overflow:
        Connection pool parameters (ignored for SQLite).
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """

    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = _sa_create_engine(url, echo=echo, **kwargs)

        # Foreign keys are off by default in SQLite
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    pool_kwargs: dict[str, Any] = {}
    if pool_size is not None:
        pool_kwargs["pool_size"] = pool_size
    if max_overflow is not None:
        pool_kwargs["max_overflow"] = max_overflow

    return _sa_create_engine(url, echo=echo, **pool_kwargs, **kwargs)


class StoreSession(Session):
    """Pre-configured session with ``expire_on_commit=False``.

    Entities returned from a committed write stay readable without a
    round-trip.
    """

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def store_session_factory(engine: Engine) -> sessionmaker[StoreSession]:
    """Return a ``sessionmaker`` bound to *engine* that produces ``StoreSession`` instances."""
    return sessionmaker(bind=engine, class_=StoreSession)
