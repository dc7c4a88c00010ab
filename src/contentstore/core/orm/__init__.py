"""SQLAlchemy 2.0 ORM layer for the content store.

Modules
-------
base        ContentStoreBase (declarative base) + Timestamp/SoftDelete/Fillable mixins
session     Engine factory, StoreSession, session factory
tables      Mapped tables (ContentTable, BlockTable, translations, widgets, ...)

Tags:
    content-store, orm, sqlalchemy, declarative

Doc-Types:
    package-overview, module-index
"""

from __future__ import annotations

from contentstore.core.orm.base import (
    ContentStoreBase,
    FillableMixin,
    SoftDeleteMixin,
    TimestampMixin,
)
from contentstore.core.orm.session import (
    StoreSession,
    create_store_engine,
    store_session_factory,
)
from contentstore.core.orm.tables import *  # noqa: F401,F403
from contentstore.core.orm.tables import __all__ as _tables_all

__all__ = [
    "ContentStoreBase",
    "FillableMixin",
    "SoftDeleteMixin",
    "StoreSession",
    "TimestampMixin",
    "create_store_engine",
    "store_session_factory",
    *_tables_all,
]
