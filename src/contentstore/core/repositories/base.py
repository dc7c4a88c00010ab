"""Base repository shared by blocks and contents.

Provides :class:`BaseRepository` -- wires the components every entity
kind needs around one :class:`~contentstore.core.store.Store`:

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                       BaseRepository                               │
    │                                                                    │
    │   store: Store              ← shared unit of work                  │
    │   criteria: CriteriaTranslator                                     │
    │   pager: Pager                                                     │
    │   translations: TranslationStore                                   │
    │   writer: TransactionalWriter                                      │
    │   listing_cache: ListingCache  ("<kind>:filter:public|admin")      │
    │                                                                    │
    │   get_by_id(id)             → entity | None                        │
    │   get_by_id_with_trashed(id)→ entity | None                        │
    │   create / update / delete / force_delete                          │
    │   create_translation / delete_translation                          │
    └────────────────────────────────────────────────────────────────────┘

Subclasses declare the mapped classes and relationship names as class
attributes; everything else is shared.

Usage:
    >>> class NoteRepository(BaseRepository):
    ...     entity = "note"
    ...     kind = "notes"
    ...     model = NoteTable
    ...     translation_model = NoteTranslationTable
    ...     owner_attr = "note_id"
    ...     owner_relation = "note"

Tags:
    repository, database, listing, pagination
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from sqlalchemy import Select, select

from contentstore.core.cache import CacheBackend, ListingCache
from contentstore.core.events import EventDispatcher
from contentstore.core.logging import get_logger
from contentstore.core.repositories.criteria import CriteriaTranslator
from contentstore.core.repositories.pagination import Page, Pager
from contentstore.core.repositories.translations import TranslationStore
from contentstore.core.repositories.types import TypeRegistry
from contentstore.core.repositories.writer import TransactionalWriter
from contentstore.core.store import Store

logger = get_logger(__name__)


class BaseRepository:
    """Reads, listings and write pipelines for one translatable entity kind.

    Parameters:
        store: Shared unit of work.
        events: Lifecycle event dispatcher.
        cache: Backend holding the listing keys.
        types: Registered types of this kind.
        items_per_page: Page size used when a listing passes ``page`` only.
    """

    entity: ClassVar[str]
    kind: ClassVar[str]
    model: ClassVar[type]
    translation_model: ClassVar[type]
    owner_attr: ClassVar[str]
    owner_relation: ClassVar[str]

    detail_relations: ClassVar[tuple[str, ...]] = ("active_translations", "author")
    listing_relations: ClassVar[tuple[str, ...]] = ("translations", "author")
    detach: ClassVar[tuple[str, ...]] = ("files",)

    ITEMS_PER_PAGE: ClassVar[int] = 20

    def __init__(
        self,
        store: Store,
        *,
        events: EventDispatcher,
        cache: CacheBackend,
        types: TypeRegistry,
        items_per_page: int | None = None,
    ) -> None:
        self.store = store
        self.events = events
        self.types = types
        self.items_per_page = items_per_page or self.ITEMS_PER_PAGE
        self.listing_cache = ListingCache(cache, self.kind)
        self.criteria = CriteriaTranslator(
            self.model,
            self.translation_model,
            getattr(self.translation_model, self.owner_attr),
        )
        self.pager = Pager(store)
        self.translations = TranslationStore(
            store,
            self.entity,
            self.translation_model,
            self.owner_attr,
            self.owner_relation,
            events,
            self.listing_cache,
        )
        self.writer = TransactionalWriter(
            store,
            self.entity,
            self.model,
            types,
            self.translations,
            events,
            self.listing_cache,
            find=self.get_by_id,
            find_with_trashed=self.get_by_id_with_trashed,
            detach=self.detach,
            before_persist=self._before_persist,
            dependents=self._dependents,
        )

    # -- hooks ---------------------------------------------------------------

    def _before_persist(self, instance: Any, data: Mapping[str, Any]) -> None:
        """Adjust a new entity right before its first flush."""

    def _dependents(self, instance: Any) -> Iterable[Any]:
        """Rows to remove ahead of *instance* on force delete."""
        return ()

    # -- queries -------------------------------------------------------------

    def _query(self, *, with_trashed: bool = False, only_trashed: bool = False) -> Select:
        stmt = select(self.model)
        if only_trashed:
            return stmt.where(self.model.is_deleted.is_(True))
        if not with_trashed:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        return stmt

    def _find(self, entity_id: int, *, with_trashed: bool) -> Any | None:
        stmt = (
            self._query(with_trashed=with_trashed)
            .where(self.model.id == entity_id)
            .options(*self.store.eager(self.model, *self.detail_relations))
            .execution_options(populate_existing=True)
        )
        return self.store.first(stmt)

    def get_by_id(self, entity_id: int) -> Any | None:
        """Entity with its active translations and author; None if absent or deleted."""
        return self._find(entity_id, with_trashed=False)

    def get_by_id_with_trashed(self, entity_id: int) -> Any | None:
        return self._find(entity_id, with_trashed=True)

    def _list(
        self,
        criteria: Mapping[str, Any] | None,
        order_by: Any,
        page: int | None,
        page_size: int | None,
        *,
        only_trashed: bool = False,
    ) -> Page[Any]:
        if page is not None and page_size is None:
            page_size = self.items_per_page
        parsed = self.criteria.parse(criteria, order_by)
        stmt = self.criteria.apply(
            self._query(only_trashed=only_trashed),
            parsed,
            default_order=[self.model.weight.asc()],
        )
        result = self.pager.paginate(
            stmt,
            page,
            page_size,
            options=self.store.eager(self.model, *self.listing_relations),
        )
        logger.debug(
            "listing_loaded",
            kind=self.kind,
            total=result.total,
            page=result.page,
            trashed=only_trashed,
        )
        return result

    # -- writes --------------------------------------------------------------

    def create(self, data: Mapping[str, Any], author: Any = None) -> Any:
        return self.writer.create(data, author)

    def create_translation(self, instance: Any, data: Mapping[str, Any]) -> Any:
        return self.writer.create_translation(instance, data)

    def update(self, instance: Any, data: Mapping[str, Any], modifier: Any = None) -> Any:
        return self.writer.update(instance, data, modifier)

    def delete(self, instance: Any) -> bool:
        return self.writer.soft_delete(instance)

    def force_delete(self, instance: Any) -> bool:
        return self.writer.force_delete(instance)

    def delete_translation(self, translation: Any) -> bool:
        return self.writer.delete_translation(translation)


__all__ = ["BaseRepository"]
