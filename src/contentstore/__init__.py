"""Content store -- access layer for CMS blocks and contents.

Blocks and contents are translatable entities stored through SQLAlchemy.
Contents form a materialized-path tree; every entity keeps exactly one
active translation per language; writes run as transactional pipelines
that fire lifecycle events and invalidate listing caches.

Quick start::

    from contentstore import ContentStoreContainer, ContentStoreSettings

    with ContentStoreContainer(ContentStoreSettings(database_url="sqlite://")) as c:
        c.init_schema()
        page = c.contents.create(
            {"type": "content", "translations": {"lang_code": "en", "title": "Home"}}
        )
"""

from contentstore.core.config import ContentStoreContainer, ContentStoreSettings, get_settings
from contentstore.core.errors import ContentStoreError, TransactionError, ValidationError
from contentstore.core.repositories import BlockRepository, ContentRepository

__version__ = "0.1.0"

__all__ = [
    "BlockRepository",
    "ContentRepository",
    "ContentStoreContainer",
    "ContentStoreError",
    "ContentStoreSettings",
    "TransactionError",
    "ValidationError",
    "get_settings",
]
