"""Tests for contentstore.core.config.factory and container."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect, select

from contentstore.core.cache import InMemoryCache
from contentstore.core.config.container import ContentStoreContainer
from contentstore.core.config.factory import (
    create_block_types,
    create_cache,
    create_content_types,
    create_database_engine,
    create_event_dispatcher,
    init_schema,
)
from contentstore.core.config.settings import ContentStoreSettings, clear_settings_cache
from contentstore.core.events.memory import InMemoryEventDispatcher
from contentstore.core.orm import BlockTypeTable, ContentTypeTable, LangTable
from contentstore.core.repositories import BlockRepository, ContentRepository
from contentstore.core.repositories.types import WidgetBlockable
from contentstore.core.store import Store


@pytest.fixture(autouse=True)
def _clean():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings():
    return ContentStoreSettings(database_url="sqlite://", items_per_page=5)


# ── Factories ────────────────────────────────────────────────────────────


class TestFactories:
    def test_cache(self):
        cache = create_cache(ContentStoreSettings(cache_max_size=2, cache_ttl_seconds=60))
        assert isinstance(cache, InMemoryCache)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.size() == 2

    def test_event_dispatcher(self, settings):
        assert isinstance(create_event_dispatcher(settings), InMemoryEventDispatcher)

    def test_block_types(self, settings):
        registry = create_block_types(settings)
        assert "basic" in registry
        assert isinstance(registry.blockable_for("widget"), WidgetBlockable)

    def test_block_types_without_widget(self):
        registry = create_block_types(ContentStoreSettings(block_types=["basic"]))
        assert registry.names == ["basic"]
        assert registry.relations == []

    def test_content_types(self, settings):
        assert create_content_types(settings).names == ["category", "content"]

    def test_sqlite_engine_enforces_foreign_keys(self, settings):
        engine = create_database_engine(settings)
        try:
            with engine.connect() as conn:
                assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        finally:
            engine.dispose()


class TestInitSchema:
    def test_creates_tables_and_seeds_types(self, settings):
        engine = create_database_engine(settings)
        try:
            init_schema(engine, settings)
            assert "blocks" in inspect(engine).get_table_names()

            store = Store.from_engine(engine)
            names = [row.name for row in store.scalars(select(BlockTypeTable))]
            assert sorted(names) == sorted(settings.block_types)
            store.close()
        finally:
            engine.dispose()

    def test_idempotent(self, settings):
        engine = create_database_engine(settings)
        try:
            init_schema(engine, settings)
            init_schema(engine, settings)
            store = Store.from_engine(engine)
            assert store.count(select(ContentTypeTable)) == len(settings.content_types)
            store.close()
        finally:
            engine.dispose()


# ── Container ────────────────────────────────────────────────────────────


class TestContainer:
    def test_lazy(self, settings):
        c = ContentStoreContainer(settings)
        assert c._engine is None
        assert c._blocks is None
        c.close()

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("CONTENTSTORE_ITEMS_PER_PAGE", "7")
        c = ContentStoreContainer()
        assert c.settings.items_per_page == 7

    def test_components_cached(self, settings):
        with ContentStoreContainer(settings) as c:
            assert c.store is c.store
            assert c.cache is c.cache
            assert c.events is c.events
            assert isinstance(c.blocks, BlockRepository)
            assert isinstance(c.contents, ContentRepository)
            assert c.blocks is c.blocks

    def test_repositories_share_components(self, settings):
        with ContentStoreContainer(settings) as c:
            assert c.blocks.store is c.contents.store
            assert c.blocks.items_per_page == 5

    def test_close_resets(self, settings):
        c = ContentStoreContainer(settings)
        _ = c.blocks
        c.close()
        assert c._engine is None
        assert c._store is None
        assert c._blocks is None

    def test_end_to_end(self, settings):
        with ContentStoreContainer(settings) as c:
            c.init_schema()
            with c.store.transaction():
                c.store.add(LangTable(code="en", i18n="en_US", is_enabled=True, is_default=True))

            seen = []
            c.events.listen("content.created", seen.append)
            home = c.contents.create(
                {"type": "content", "translations": {"lang_code": "en", "title": "Home"}}
            )
            block = c.blocks.create(
                {
                    "type": "basic",
                    "is_active": True,
                    "translations": {"lang_code": "en", "title": "Hero"},
                }
            )

            assert c.contents.get_by_id(home.id) is home
            assert c.blocks.get_visible_blocks() == [block]
            assert [e.payload["entity"] for e in seen] == [home]
