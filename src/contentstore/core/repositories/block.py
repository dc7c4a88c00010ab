"""
Block repository -- flat, typed, translatable page fragments.

A block's ``filter`` decides the pages it shows on; a null filter means
every page. Blocks of a type with a registered sub-resource strategy (the
``widget`` type) point at that sub-resource through ``blockable``.

Example::

    repo = BlockRepository(store, events=events, cache=cache, types=block_registry(names))

    block = repo.create(
        {
            "type": "widget",
            "region": "sidebar",
            "widget": {"name": "recent_posts", "args": {"limit": 5}},
            "translations": {"lang_code": "en", "title": "Recent"},
        },
        author=user,
    )
    block.blockable.name                       # -> "recent_posts"

    repo.get_visible_blocks([block.id])        # blocks for a page

Tags:
    content-store, repository, block, widget
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from contentstore.core.cache import ADMIN, PUBLIC
from contentstore.core.logging import get_logger
from contentstore.core.orm.tables import BlockTable, BlockTranslationTable
from contentstore.core.repositories.base import BaseRepository
from contentstore.core.repositories.pagination import Page
from contentstore.core.store import Store

logger = get_logger(__name__)


class BlockRepository(BaseRepository):
    entity = "block"
    kind = "blocks"
    model = BlockTable
    translation_model = BlockTranslationTable
    owner_attr = "block_id"
    owner_relation = "block"

    def __init__(self, store: Store, **kwargs: Any) -> None:
        super().__init__(store, **kwargs)
        relations = tuple(self.types.relations)
        self.detail_relations = (*type(self).detail_relations, *relations)
        self.listing_relations = (*type(self).listing_relations, *relations)

    def get_block_translation_by_id(
        self, block: BlockTable, translation_id: int
    ) -> BlockTranslationTable | None:
        """Translation *translation_id* of *block*; None if it belongs elsewhere."""
        return self.translations.get_for(block, translation_id)

    def get_blocks(
        self,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        page: int | None = 1,
        page_size: int | None = None,
    ) -> Page[BlockTable]:
        return self._list(criteria, order_by, page, page_size)

    def get_deleted_blocks(
        self,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        page: int | None = 1,
        page_size: int | None = None,
    ) -> Page[BlockTable]:
        return self._list(criteria, order_by, page, page_size, only_trashed=True)

    def get_visible_blocks(
        self, ids: Iterable[int] = (), only_public: bool = True
    ) -> list[BlockTable]:
        """Blocks listed in *ids* plus every block shown on all pages.

        Ids of the all-pages blocks are cached under the public or admin
        listing key; write pipelines forget both keys.
        """
        audience = PUBLIC if only_public else ADMIN
        everywhere = self.listing_cache.remember(
            audience, lambda: self._unfiltered_ids(only_public)
        )

        wanted = set(ids) | set(everywhere)
        if not wanted:
            return []

        stmt = self._query().where(BlockTable.id.in_(wanted))
        if only_public:
            stmt = stmt.where(BlockTable.is_active.is_(True))
        stmt = stmt.order_by(BlockTable.weight.asc(), BlockTable.id.asc()).options(
            *self.store.eager(BlockTable, *self.listing_relations)
        )
        return self.store.scalars(stmt)

    def _unfiltered_ids(self, only_public: bool) -> list[int]:
        stmt = (
            self._query()
            .with_only_columns(BlockTable.id)
            .where(BlockTable.filter.is_(None))
            .order_by(BlockTable.id)
        )
        if only_public:
            stmt = stmt.where(BlockTable.is_active.is_(True))
        ids = self.store.scalars(stmt)
        logger.debug("unfiltered_blocks_loaded", count=len(ids), public=only_public)
        return ids


__all__ = ["BlockRepository"]
