"""
Caching abstraction and coarse listing-cache invalidation.

Listing queries for an entity kind are cached under a small, fixed set of
keys, one per audience (``"blocks:filter:public"``, ``"blocks:filter:admin"``).
Every successful write to that kind forgets all of them. Invalidation is
coarse-grained per entity kind, never per entity.

Architecture:
    ::

        CacheBackend (Protocol)
        └── InMemoryCache  -- single-process, bounded LRU with TTL

        ListingCache(cache, kind)
            key(audience)          → "<kind>:filter:<audience>"
            remember(aud, loader)  → cached listing or loader()
            invalidate()           → forget every audience key

Staleness:
    Writers invalidate before returning. A crash between commit and
    invalidation leaves a stale entry until its TTL expires; there is no
    compensating retry.

Tags:
    cache, caching, in-memory, ttl, invalidation, content-store
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Protocol

from contentstore.core.logging import get_logger

logger = get_logger(__name__)

PUBLIC = "public"
ADMIN = "admin"
AUDIENCES: tuple[str, ...] = (PUBLIC, ADMIN)


class CacheBackend(Protocol):
    """Protocol for cache backend implementations.

    Keys are strings; values are whatever the caller stored.
    """

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` if missing or expired."""
        ...

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        """Store a value with optional TTL (``None`` → backend default)."""
        ...

    def delete(self, key: str) -> None:
        """Forget a key. No-op if the key does not exist."""
        ...

    def exists(self, key: str) -> bool:
        """Check if a key exists and has not expired."""
        ...

    def clear(self) -> None:
        """Remove all keys."""
        ...


class InMemoryCache:
    """Bounded in-memory cache with TTL support.

    Uses LRU eviction when ``max_size`` is reached.

    Example:
        cache = InMemoryCache(max_size=500, default_ttl_seconds=1800)
        cache.set("blocks:filter:public", [1, 2, 3])
        cache.get("blocks:filter:public")
    """

    def __init__(
        self,
        *,
        max_size: int = 10_000,
        default_ttl_seconds: int | None = 3600,
    ):
        self._store: dict[str, tuple[Any, float | None]] = {}
        self._access_order: list[str] = []
        self._max_size = max_size
        self._default_ttl = default_ttl_seconds

    def get(self, key: str) -> Any | None:
        """Retrieve a value by key."""
        if key not in self._store:
            return None

        value, expires_at = self._store[key]

        if expires_at is not None and time.time() > expires_at:
            self.delete(key)
            return None

        self._touch(key)
        return value

    def set(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        """Store a value with optional TTL."""
        ttl = ttl_seconds if ttl_seconds is not None else self._default_ttl
        expires_at = (time.time() + ttl) if ttl else None

        # Evict LRU if at capacity
        if key not in self._store and len(self._store) >= self._max_size:
            if self._access_order:
                lru_key = self._access_order.pop(0)
                self._store.pop(lru_key, None)

        self._store[key] = (value, expires_at)
        self._touch(key)

    def delete(self, key: str) -> None:
        """Remove a key from the cache."""
        self._store.pop(key, None)
        if key in self._access_order:
            self._access_order.remove(key)

    def exists(self, key: str) -> bool:
        """Check if key exists and is not expired."""
        if key not in self._store:
            return False

        _, expires_at = self._store[key]
        if expires_at is not None and time.time() > expires_at:
            self.delete(key)
            return False

        return True

    def clear(self) -> None:
        """Remove all keys."""
        self._store.clear()
        self._access_order.clear()

    def size(self) -> int:
        """Return current number of cached keys."""
        return len(self._store)

    def _touch(self, key: str) -> None:
        if key in self._access_order:
            self._access_order.remove(key)
        self._access_order.append(key)


class ListingCache:
    """Owns the coarse listing keys of one entity kind.

    Args:
        cache: Backend the keys live in.
        kind: Plural entity kind used as key prefix (``blocks``, ``contents``).
        audiences: Audience suffixes that make up the known key set.
    """

    def __init__(
        self,
        cache: CacheBackend,
        kind: str,
        audiences: tuple[str, ...] = AUDIENCES,
    ):
        self.cache = cache
        self.kind = kind
        self.audiences = audiences

    def key(self, audience: str) -> str:
        return f"{self.kind}:filter:{audience}"

    @property
    def keys(self) -> list[str]:
        return [self.key(audience) for audience in self.audiences]

    def remember(self, audience: str, loader: Callable[[], Any]) -> Any:
        """Return the cached listing for *audience*, loading it on a miss."""
        key = self.key(audience)
        value = self.cache.get(key)
        if value is None:
            value = loader()
            self.cache.set(key, value)
        return value

    def invalidate(self) -> None:
        """Forget every known listing key of this kind."""
        for key in self.keys:
            self.cache.delete(key)
        logger.debug("listing_cache_invalidated", kind=self.kind, keys=self.keys)


__all__ = [
    "ADMIN",
    "AUDIENCES",
    "PUBLIC",
    "CacheBackend",
    "InMemoryCache",
    "ListingCache",
]
