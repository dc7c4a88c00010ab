"""
Tree query engine -- ancestor, descendant, children, sibling and root queries.

Every query is a single statement against the materialized path:

    ┌──────────────────┬───────────────────────────────────────────────┐
    │ get_ancestors    │ id IN ancestor_ids(node.path)                 │
    │ get_descendants  │ path LIKE children_path(node) || '%'          │
    │ get_children     │ path = children_path(node)                    │
    │ get_siblings     │ path = node.path AND id != node.id            │
    │ get_roots        │ level = 0                                     │
    └──────────────────┴───────────────────────────────────────────────┘

Soft-deleted nodes are excluded from every result.

Tree mode:
    ``get_descendants(node, as_tree=True)`` loads each descendant's direct
    children eagerly and returns only the nodes one level below *node*;
    deeper nodes are reachable through ``.children`` of those nodes.

Tags:
    content-store, tree, materialized-path, query
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from contentstore.core.logging import get_logger
from contentstore.core.repositories.criteria import CriteriaTranslator
from contentstore.core.repositories.pagination import Pager
from contentstore.core.store import Store
from contentstore.core.tree import ROOT_PATH, ancestor_ids, children_path

logger = get_logger(__name__)


class TreeQueryEngine:
    """Read-only tree queries over one materialized-path model.

    Args:
        store: Store the queries run against.
        model: Mapped tree class with ``path``, ``level``, ``weight``,
            ``is_deleted`` columns and a ``children`` relationship.
        criteria: Translator used by the listing-style queries.
        eager: Relationship names loaded with every returned node.
    """

    def __init__(
        self,
        store: Store,
        model: type,
        criteria: CriteriaTranslator,
        eager: Sequence[str] = ("active_translations", "author"),
    ):
        self.store = store
        self.model = model
        self.criteria = criteria
        self.eager = tuple(eager)

    def _base(self) -> Select:
        return (
            select(self.model)
            .where(self.model.is_deleted.is_(False))
            .options(*self.store.eager(self.model, *self.eager))
        )

    def _listing(
        self,
        stmt: Select,
        criteria: Mapping[str, Any] | None,
        order_by: Any,
        limit: int | None,
        offset: int | None,
    ) -> list[Any]:
        parsed = self.criteria.parse(criteria, order_by)
        stmt = self.criteria.apply(stmt, parsed, default_order=[self.model.weight.asc()])
        return self.store.scalars(Pager.bound(stmt, limit, offset))

    def get_ancestors(self, node: Any) -> list[Any]:
        """Ancestors of *node*, root first. Empty for a root node."""
        if node.path == ROOT_PATH:
            return []
        stmt = (
            self._base()
            .where(self.model.id.in_(ancestor_ids(node.path)))
            .order_by(self.model.level.asc())
        )
        return self.store.scalars(stmt)

    def get_descendants(self, node: Any, as_tree: bool = False) -> list[Any]:
        """Every node below *node*, shallowest first.

        With ``as_tree`` only the direct children are returned, each with its
        ``children`` collection loaded.
        """
        stmt = (
            self._base()
            .where(self.model.path.startswith(children_path(node), autoescape=True))
            .order_by(self.model.level.asc(), self.model.weight.asc(), self.model.id.asc())
        )
        if not as_tree:
            return self.store.scalars(stmt)

        children = self.model.children.and_(self.model.is_deleted.is_(False))
        stmt = stmt.options(selectinload(children)).execution_options(
            populate_existing=True
        )
        depth = node.level + 1
        nodes = [n for n in self.store.scalars(stmt) if n.level == depth]
        logger.debug("descendants_as_tree", node_id=node.id, top_level=len(nodes))
        return nodes

    def get_children(
        self,
        node: Any,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Any]:
        """Direct children of *node* only, never deeper descendants."""
        stmt = self._base().where(self.model.path == children_path(node))
        return self._listing(stmt, criteria, order_by, limit, offset)

    def get_siblings(
        self,
        node: Any,
        criteria: Mapping[str, Any] | None = None,
        order_by: Any = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Any]:
        """Nodes sharing *node*'s path, *node* itself excluded."""
        stmt = self._base().where(
            self.model.path == node.path,
            self.model.id != node.id,
        )
        return self._listing(stmt, criteria, order_by, limit, offset)

    def get_roots(
        self,
        order_by: Any = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Any]:
        stmt = self._base().where(self.model.level == 0)
        return self._listing(stmt, None, order_by, limit, offset)


__all__ = ["TreeQueryEngine"]
