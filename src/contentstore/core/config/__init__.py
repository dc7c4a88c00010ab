"""Configuration, component factories and the DI container.

Quick start::

    from contentstore.core.config import get_settings, ContentStoreContainer

    settings = get_settings()
    print(settings.database_url)

    with ContentStoreContainer() as c:
        c.init_schema()
        c.blocks.get_visible_blocks()

Architecture::

    settings.py       ContentStoreSettings (Pydantic) + get_settings() cache
    factory.py        create_database_engine / cache / dispatcher / registries
    container.py      ContentStoreContainer (lazy DI)

Guardrails:
    ❌ Parsing env vars ad-hoc in each module
    ✅ ``get_settings().database_url`` from the cached singleton
    ❌ Constructing repositories with hand-picked collaborators in app code
    ✅ ``ContentStoreContainer().blocks`` wired from settings

Tags:
    content-store, configuration, dependency-injection, settings, pydantic
"""

from .container import ContentStoreContainer
from .factory import (
    create_block_types,
    create_cache,
    create_content_types,
    create_database_engine,
    create_event_dispatcher,
    init_schema,
)
from .settings import ContentStoreSettings, clear_settings_cache, get_settings

__all__ = [
    "ContentStoreContainer",
    "ContentStoreSettings",
    "clear_settings_cache",
    "create_block_types",
    "create_cache",
    "create_content_types",
    "create_database_engine",
    "create_event_dispatcher",
    "get_settings",
    "init_schema",
]
