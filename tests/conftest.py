"""
Shared pytest fixtures for content-store tests.

This module provides:
- An in-memory SQLite engine with every table created
- A Store seeded with languages, type rows and an author
- Event recording and cache fixtures
- Block and content repositories wired to the fixtures above

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments:

    def test_something(block_repo, recorded_events):
        ...
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest

from contentstore.core.cache import InMemoryCache
from contentstore.core.config.settings import DEFAULT_BLOCK_TYPES, DEFAULT_CONTENT_TYPES
from contentstore.core.events import Event
from contentstore.core.events.memory import InMemoryEventDispatcher
from contentstore.core.orm import (
    BlockTypeTable,
    ContentStoreBase,
    ContentTypeTable,
    LangTable,
    UserTable,
    create_store_engine,
)
from contentstore.core.repositories import (
    BlockRepository,
    ContentRepository,
    block_registry,
    content_registry,
)
from contentstore.core.store import Store


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    eng = create_store_engine("sqlite:///:memory:")
    ContentStoreBase.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine) -> Generator[Store, None, None]:
    """Store with languages and type rows seeded."""
    st = Store.from_engine(engine)
    with st.transaction():
        st.add(LangTable(code="en", i18n="en_US", is_enabled=True, is_default=True))
        st.add(LangTable(code="pl", i18n="pl_PL", is_enabled=True, is_default=False))
        st.add(LangTable(code="de", i18n="de_DE", is_enabled=False, is_default=False))
        for name in DEFAULT_BLOCK_TYPES:
            st.add(BlockTypeTable(name=name, is_active=True))
        for name in DEFAULT_CONTENT_TYPES:
            st.add(ContentTypeTable(name=name, is_active=True))
    yield st
    st.close()


@pytest.fixture
def author(store: Store) -> UserTable:
    user = UserTable(email="john.doe@example.com", name="John Doe")
    with store.transaction():
        store.add(user)
    return user


@pytest.fixture
def events() -> InMemoryEventDispatcher:
    return InMemoryEventDispatcher()


@pytest.fixture
def recorded_events(events: InMemoryEventDispatcher) -> list[Event]:
    """Every event fired through ``events``, in order."""
    fired: list[Event] = []
    events.listen("*", fired.append)
    return fired


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache(max_size=100, default_ttl_seconds=None)


@pytest.fixture
def block_repo(store, events, cache) -> BlockRepository:
    return BlockRepository(
        store,
        events=events,
        cache=cache,
        types=block_registry(DEFAULT_BLOCK_TYPES),
    )


@pytest.fixture
def content_repo(store, events, cache) -> ContentRepository:
    return ContentRepository(
        store,
        events=events,
        cache=cache,
        types=content_registry(DEFAULT_CONTENT_TYPES),
    )


@pytest.fixture
def block_payload():
    """Builder for a minimal valid block creation payload."""
    return _block_payload


def _block_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": "basic",
        "region": "header",
        "weight": 0,
        "is_active": True,
        "translations": {"lang_code": "en", "title": "Example block title"},
    }
    data.update(overrides)
    return data


@pytest.fixture
def content_payload():
    """Builder for a minimal valid content creation payload."""
    return _content_payload


def _content_payload(title: str = "Example title", **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": "content",
        "is_active": True,
        "translations": {"lang_code": "en", "title": title},
    }
    data.update(overrides)
    return data
