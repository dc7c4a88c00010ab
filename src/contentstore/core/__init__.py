"""Content store core -- storage, tree, translations, criteria, writers.

Architecture::

    Layer 1 -- Errors & Logging
        errors.py          Structured error hierarchy (ContentStoreError, ValidationError)
        logging.py         structlog configuration and scoped context

    Layer 2 -- Storage
        orm/               SQLAlchemy 2.0 declarative tables and session
        store.py           Unit of work shared by every repository component
        tree.py            Materialized-path codec (pure functions)
        cache.py           CacheBackend protocol, InMemoryCache, ListingCache
        events/            Lifecycle events and the synchronous dispatcher

    Layer 3 -- Repositories
        repositories/      Tree queries, translations, criteria, paging,
                           write pipelines, block and content repositories

    Layer 4 -- Configuration
        config/            Settings, factories and the lazy DI container

Tags:
    content-store, core, package-overview
"""
