"""
Component factories driven by :class:`ContentStoreSettings`.

Each function builds one backend component from settings. The container
calls them lazily; tests call them directly with explicit settings.
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from contentstore.core.cache import InMemoryCache
from contentstore.core.events.memory import InMemoryEventDispatcher
from contentstore.core.logging import get_logger
from contentstore.core.orm.base import ContentStoreBase
from contentstore.core.orm.session import create_store_engine
from contentstore.core.orm.tables import BlockTypeTable, ContentTypeTable
from contentstore.core.repositories.types import (
    TypeRegistry,
    block_registry,
    content_registry,
)
from contentstore.core.store import Store

from .settings import ContentStoreSettings

logger = get_logger(__name__)


def create_database_engine(settings: ContentStoreSettings) -> Engine:
    engine = create_store_engine(
        settings.database_url,
        echo=settings.echo_sql,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("engine_created", sqlite=settings.is_sqlite)
    return engine


def create_cache(settings: ContentStoreSettings) -> InMemoryCache:
    return InMemoryCache(
        max_size=settings.cache_max_size,
        default_ttl_seconds=settings.cache_ttl_seconds,
    )


def create_event_dispatcher(settings: ContentStoreSettings) -> InMemoryEventDispatcher:
    return InMemoryEventDispatcher()


def create_block_types(settings: ContentStoreSettings) -> TypeRegistry:
    return block_registry(settings.block_types)


def create_content_types(settings: ContentStoreSettings) -> TypeRegistry:
    return content_registry(settings.content_types)


def init_schema(engine: Engine, settings: ContentStoreSettings) -> None:
    """Create every table and seed the configured type rows.

    Type rows back the ``type`` foreign keys of blocks and contents; rows
    that already exist are left alone.
    """
    ContentStoreBase.metadata.create_all(engine)
    store = Store.from_engine(engine)
    try:
        with store.transaction():
            for model, names in (
                (BlockTypeTable, settings.block_types),
                (ContentTypeTable, settings.content_types),
            ):
                for name in names:
                    if store.get(model, name) is None:
                        store.add(model(name=name, is_active=True))
    finally:
        store.close()
    logger.info(
        "schema_initialized",
        block_types=settings.block_types,
        content_types=settings.content_types,
    )


__all__ = [
    "create_block_types",
    "create_cache",
    "create_content_types",
    "create_database_engine",
    "create_event_dispatcher",
    "init_schema",
]
