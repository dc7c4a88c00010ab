"""
Lazy-initialised dependency-injection container.

:class:`ContentStoreContainer` holds references to the engine, the shared
:class:`~contentstore.core.store.Store`, the cache, the event dispatcher,
the type registries and both repositories, and creates each on first
access using the factory functions.

Usage::

    from contentstore.core.config import ContentStoreContainer

    with ContentStoreContainer() as c:
        c.init_schema()
        block = c.blocks.create({...})
        c.events.listen("block.*", handler)

    # Or with explicit settings:
    container = ContentStoreContainer(ContentStoreSettings(database_url="sqlite://"))
"""

from __future__ import annotations

from typing import Any

from contentstore.core.logging import get_logger
from contentstore.core.repositories.block import BlockRepository
from contentstore.core.repositories.content import ContentRepository
from contentstore.core.store import Store

from .factory import (
    create_block_types,
    create_cache,
    create_content_types,
    create_database_engine,
    create_event_dispatcher,
    init_schema,
)
from .settings import ContentStoreSettings, get_settings

logger = get_logger(__name__)


class ContentStoreContainer:
    """Lazy-initialised dependency container.

    Components are created on first property access and disposed via
    :meth:`close` (or the context-manager protocol). Both repositories
    share one Store, so a block and a content written in the same
    ``store.transaction()`` block commit together.
    """

    def __init__(self, settings: ContentStoreSettings | None = None) -> None:
        self._settings = settings
        self._engine: Any | None = None
        self._store: Store | None = None
        self._cache: Any | None = None
        self._events: Any | None = None
        self._blocks: BlockRepository | None = None
        self._contents: ContentRepository | None = None

    # ── Properties (lazy) ────────────────────────────────────────

    @property
    def settings(self) -> ContentStoreSettings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def engine(self) -> Any:
        """SQLAlchemy :class:`~sqlalchemy.engine.Engine`."""
        if self._engine is None:
            self._engine = create_database_engine(self.settings)
        return self._engine

    @property
    def store(self) -> Store:
        if self._store is None:
            self._store = Store.from_engine(self.engine)
        return self._store

    @property
    def cache(self) -> Any:
        if self._cache is None:
            self._cache = create_cache(self.settings)
        return self._cache

    @property
    def events(self) -> Any:
        if self._events is None:
            self._events = create_event_dispatcher(self.settings)
        return self._events

    @property
    def blocks(self) -> BlockRepository:
        if self._blocks is None:
            self._blocks = BlockRepository(
                self.store,
                events=self.events,
                cache=self.cache,
                types=create_block_types(self.settings),
                items_per_page=self.settings.items_per_page,
            )
        return self._blocks

    @property
    def contents(self) -> ContentRepository:
        if self._contents is None:
            self._contents = ContentRepository(
                self.store,
                events=self.events,
                cache=self.cache,
                types=create_content_types(self.settings),
                items_per_page=self.settings.items_per_page,
            )
        return self._contents

    # ── Lifecycle ────────────────────────────────────────────────

    def init_schema(self) -> None:
        """Create tables and seed the configured type rows."""
        init_schema(self.engine, self.settings)

    def close(self) -> None:
        """Dispose of managed resources."""
        if self._store is not None:
            self._store.close()
            self._store = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._blocks = None
        self._contents = None
        logger.debug("container_closed")

    def __enter__(self) -> ContentStoreContainer:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


__all__ = ["ContentStoreContainer"]
