"""
Content repository -- tree-shaped, translatable pages and categories.

Contents form a materialized-path tree. Creating a content with a
``parent_id`` places it under that parent; without one it becomes a root.
Force-deleting a content removes its whole subtree, soft-deleted
descendants included.

Example::

    repo = ContentRepository(store, events=events, cache=cache, types=types)

    news = repo.create({"type": "category", "translations": {"lang_code": "en", "title": "News"}})
    post = repo.create({
        "type": "content",
        "parent_id": news.id,
        "translations": {"lang_code": "en", "title": "Hello", "url": "news/hello"},
    })

    repo.get_by_url("news/hello", "en")        # -> post
    repo.get_children(news)                    # -> [post]
    repo.get_ancestors(post)                   # -> [news]

Tags:
    content-store, repository, content, tree
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import select

from contentstore.core.errors import ValidationError
from contentstore.core.logging import get_logger
from contentstore.core.orm.tables import (
    ContentTable,
    ContentTranslationTable,
    ContentTypeTable,
)
from contentstore.core.repositories.base import BaseRepository
from contentstore.core.repositories.langs import LangLike, LanguageLookup
from contentstore.core.repositories.pagination import Page
from contentstore.core.repositories.tree import TreeQueryEngine
from contentstore.core.store import Store
from contentstore.core.tree import children_path, place

logger = get_logger(__name__)


class ContentRepository(BaseRepository):
    entity = "content"
    kind = "contents"
    model = ContentTable
    translation_model = ContentTranslationTable
    owner_attr = "content_id"
    owner_relation = "content"

    def __init__(self, store: Store, **kwargs: Any) -> None:
        super().__init__(store, **kwargs)
        self.tree = TreeQueryEngine(store, ContentTable, self.criteria, self.detail_relations)
        self.langs = LanguageLookup(store)

    # -- lookups -------------------------------------------------------------

    def get_type_by_id(self, name: str) -> ContentTypeTable | None:
        return self.store.get(ContentTypeTable, name)

    def get_translation_by_id(self, translation_id: int) -> ContentTranslationTable | None:
        return self.translations.get_by_id(translation_id)

    def get_by_url(
        self,
        url: str,
        lang: LangLike,
        is_active_check: bool = True,
    ) -> ContentTable | None:
        """Content whose translation in *lang* carries *url*.

        Only active contents match. With ``is_active_check`` the translation
        must also be the active one.
        """
        code = self.langs.resolve(lang)
        conditions = [
            ContentTranslationTable.url == url,
            ContentTranslationTable.lang_code == code,
        ]
        if is_active_check:
            conditions.append(ContentTranslationTable.is_active.is_(True))

        stmt = (
            self._query()
            .join(ContentTranslationTable, ContentTranslationTable.content_id == ContentTable.id)
            .where(ContentTable.is_active.is_(True), *conditions)
            .order_by(ContentTable.weight.asc(), ContentTable.id.asc())
            .options(*self.store.eager(ContentTable, *self.detail_relations))
        )
        return self.store.first(stmt)

    # -- tree ----------------------------------------------------------------

    def get_ancestors(self, content: ContentTable) -> list[ContentTable]:
        return self.tree.get_ancestors(content)

    def get_descendants(self, content: ContentTable, as_tree: bool = False) -> list[ContentTable]:
        return self.tree.get_descendants(content, as_tree)

    def get_children(
        self,
        content: ContentTable,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ContentTable]:
        return self.tree.get_children(content, criteria, order_by, limit, offset)

    def get_siblings(
        self,
        content: ContentTable,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ContentTable]:
        return self.tree.get_siblings(content, criteria, order_by, limit, offset)

    def get_root_contents(
        self,
        order_by: Any = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ContentTable]:
        return self.tree.get_roots(order_by, limit, offset)

    # -- listings ------------------------------------------------------------

    def get_contents(
        self,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        page: int | None = 1,
        page_size: int | None = None,
    ) -> Page[ContentTable]:
        return self._list(criteria, order_by, page, page_size)

    def get_deleted_contents(
        self,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        page: int | None = 1,
        page_size: int | None = None,
    ) -> Page[ContentTable]:
        return self._list(criteria, order_by, page, page_size, only_trashed=True)

    # -- hooks ---------------------------------------------------------------

    def _before_persist(self, instance: ContentTable, data: Mapping[str, Any]) -> None:
        parent_id = data.get("parent_id")
        if parent_id is None:
            place(instance, None)
            return
        parent = self.store.get(ContentTable, parent_id)
        if parent is None or parent.is_deleted:
            raise ValidationError(
                "Parent content doesn't exist", field="parent_id", value=parent_id
            )
        instance.parent = parent
        place(instance, parent)

    def _dependents(self, instance: ContentTable) -> Iterable[ContentTable]:
        """Whole subtree, soft-deleted nodes included, deepest first."""
        stmt = (
            select(ContentTable)
            .where(ContentTable.path.startswith(children_path(instance), autoescape=True))
            .order_by(ContentTable.level.desc(), ContentTable.id.desc())
        )
        return self.store.scalars(stmt)


__all__ = ["ContentRepository"]
