"""Language lookup -- resolves language identifiers to the codes used in filters."""

from __future__ import annotations

from typing import Union

from sqlalchemy import select

from contentstore.core.orm.tables import LangTable
from contentstore.core.store import Store

LangLike = Union[LangTable, str]


def lang_code(lang: LangLike) -> str:
    """Code string for a ``LangTable`` row or an already-resolved code."""
    if isinstance(lang, LangTable):
        return lang.code
    return str(lang)


class LanguageLookup:
    """Read-only access to the configured languages."""

    def __init__(self, store: Store):
        self.store = store

    def get_by_code(self, code: str) -> LangTable | None:
        return self.store.get(LangTable, code)

    def get_enabled(self) -> list[LangTable]:
        stmt = (
            select(LangTable)
            .where(LangTable.is_enabled.is_(True))
            .order_by(LangTable.is_default.desc(), LangTable.code)
        )
        return self.store.scalars(stmt)

    def get_default(self) -> LangTable | None:
        return self.store.first(select(LangTable).where(LangTable.is_default.is_(True)))

    def resolve(self, lang: LangLike) -> str:
        return lang_code(lang)


__all__ = ["LangLike", "LanguageLookup", "lang_code"]
