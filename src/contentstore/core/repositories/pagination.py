"""Offset/limit computation and paged listing results.

Tags:
    content-store, repository, pagination
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import Select

from contentstore.core.errors import CriteriaError
from contentstore.core.store import Store

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a listing.

    ``page`` and ``page_size`` are ``None`` for an unrestricted result, in
    which case ``items`` holds every match and ``has_more`` is False.
    """

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int | None = None
    page_size: int | None = None

    @property
    def has_more(self) -> bool:
        if self.page is None or self.page_size is None:
            return False
        return self.page * self.page_size < self.total

    @property
    def is_unrestricted(self) -> bool:
        return self.page is None or self.page_size is None

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "has_more": self.has_more,
        }


def offset_for(page: int, page_size: int) -> int:
    """Rows to skip before *page*: ``(page - 1) * page_size``."""
    validate(page, page_size)
    return (page - 1) * page_size


def validate(page: int | None, page_size: int | None) -> None:
    if page is not None and page < 1:
        raise CriteriaError("Page number must be at least 1", field="page", value=page)
    if page_size is not None and page_size < 0:
        raise CriteriaError(
            "Page size must not be negative", field="page_size", value=page_size
        )


class Pager:
    """Applies pagination to listing statements.

    Args:
        store: Store the statements run against.
    """

    def __init__(self, store: Store):
        self.store = store

    def paginate(
        self,
        stmt: Select,
        page: int | None,
        page_size: int | None,
        *,
        options: list[Any] | None = None,
    ) -> Page[Any]:
        """Run *stmt* for one page, or unrestricted when either bound is None.

        ``options`` are loader options applied to the item query only, never
        to the count query.
        """
        validate(page, page_size)
        total = self.store.count(stmt)
        if options:
            stmt = stmt.options(*options)

        if page is None or page_size is None:
            return Page(items=self.store.scalars(stmt), total=total)

        stmt = stmt.offset(offset_for(page, page_size)).limit(page_size)
        return Page(
            items=self.store.scalars(stmt),
            total=total,
            page=page,
            page_size=page_size,
        )

    @staticmethod
    def bound(stmt: Select, limit: int | None = None, offset: int | None = None) -> Select:
        """Apply a raw limit/offset pair, skipping whichever is None."""
        if offset is not None:
            if offset < 0:
                raise CriteriaError("Offset must not be negative", field="offset", value=offset)
            stmt = stmt.offset(offset)
        if limit is not None:
            if limit < 0:
                raise CriteriaError("Limit must not be negative", field="limit", value=limit)
            stmt = stmt.limit(limit)
        return stmt


__all__ = [
    "Page",
    "Pager",
    "offset_for",
    "validate",
]
