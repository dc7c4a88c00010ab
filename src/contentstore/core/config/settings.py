"""
Centralized settings for the content store.

Manifesto:
    One validated, cached settings object replaces scattered constructor
    defaults. Storage URL, listing page size, cache bounds and the
    registered type names resolve in a single place, from ``CONTENTSTORE_*``
    environment variables or a ``.env`` file.

Examples:
    >>> settings = ContentStoreSettings(database_url="sqlite://")
    >>> settings.items_per_page
    20
    >>> settings.block_types
    ['basic', 'menu', 'slider', 'widget', 'content']

Tags:
    content-store, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BLOCK_TYPES = ["basic", "menu", "slider", "widget", "content"]
DEFAULT_CONTENT_TYPES = ["content", "category"]


class ContentStoreSettings(BaseSettings):
    """Content-store configuration.

    All fields can be set via ``CONTENTSTORE_*`` environment variables (e.g.
    ``CONTENTSTORE_DATABASE_URL=postgresql://...``). List fields take JSON
    (``CONTENTSTORE_BLOCK_TYPES='["basic", "menu"]'``).
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENTSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ─────────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///content-store.db")
    echo_sql: bool = Field(default=False)
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)

    # ── Listings ─────────────────────────────────────────────────
    items_per_page: int = Field(default=20, ge=1)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)

    # ── Cache ────────────────────────────────────────────────────
    cache_max_size: int = Field(default=1000, ge=1)
    cache_ttl_seconds: int | None = Field(default=None, ge=1)

    # ── Types ────────────────────────────────────────────────────
    block_types: list[str] = Field(default_factory=lambda: list(DEFAULT_BLOCK_TYPES))
    content_types: list[str] = Field(default_factory=lambda: list(DEFAULT_CONTENT_TYPES))

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("block_types", "content_types")
    @classmethod
    def _require_types(cls, value: list[str]) -> list[str]:
        names = [name.strip() for name in value if name.strip()]
        if not names:
            raise ValueError("at least one type name is required")
        return names

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache(maxsize=1)
def get_settings() -> ContentStoreSettings:
    """Load and cache settings from the environment."""
    return ContentStoreSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    get_settings.cache_clear()


__all__ = [
    "DEFAULT_BLOCK_TYPES",
    "DEFAULT_CONTENT_TYPES",
    "ContentStoreSettings",
    "clear_settings_cache",
    "get_settings",
]
