"""
Filter and sort criteria for listing queries.

Raw criteria arrive as plain mappings. :class:`CriteriaTranslator` splits
them into core-entity criteria and relation (translation) criteria, checks
relation preconditions and applies the result to a SQLAlchemy ``Select``.

Input forms::

    filters = {
        "type": "basic",                           # equality
        "weight": (">=", 10),                      # (operator, value)
        "id": [1, 2, 3],                           # membership
        "region": {"operator": "!=", "value": "footer"},
        "translations.title": ("like", "News%"),   # relation-tagged
        "lang": "en",                              # language of the join
    }
    order_by = {"weight": "ASC", "translations.title": "DESC"}
    # or explicit entries, each declaring its relation (even if None):
    order_by = [{"field": "title", "direction": "DESC", "relation": "translations"}]

Rules:
    - Relation-tagged criteria reference translation columns and only make
      sense for one language. Without a ``lang`` filter, relation filters
      are dropped, and a relation-tagged sort fails with ValidationError
      ("'lang' criteria is required") instead of picking a row at random.
    - Every explicit order entry must declare its relation.
    - With ``lang`` present the translation table is left-joined on the
      active translation in that language.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Select, and_, inspect
from sqlalchemy.orm import InstrumentedAttribute

from contentstore.core.errors import CriteriaError, ValidationError
from contentstore.core.logging import get_logger
from contentstore.core.orm.tables import LangTable
from contentstore.core.repositories.langs import lang_code

logger = get_logger(__name__)

LANG_KEY = "lang"
TRANSLATIONS = "translations"

OPERATORS = frozenset({"=", "!=", "<", "<=", ">", ">=", "in", "not in", "like"})
DIRECTIONS = frozenset({"ASC", "DESC"})


@dataclass(frozen=True)
class Filter:
    field: str
    operator: str = "="
    value: Any = None
    relation: str | None = None


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: str = "ASC"
    relation: str | None = None


@dataclass
class ParsedCriteria:
    """Normalized criteria ready to be applied to a statement."""

    filters: list[Filter] = field(default_factory=list)
    relation_filters: list[Filter] = field(default_factory=list)
    order_by: list[OrderBy] = field(default_factory=list)
    lang: str | None = None


def split_key(key: str) -> tuple[str | None, str]:
    """``"translations.title"`` → ``("translations", "title")``."""
    if "." in key:
        relation, _, name = key.partition(".")
        return relation, name
    return None, key


def order_by_translation(order_by: Sequence[OrderBy | Mapping[str, Any]]) -> bool:
    """True if any entry sorts by a relation field.

    Raises:
        ValidationError: an entry does not declare its relation.
    """
    for order in order_by:
        if isinstance(order, OrderBy):
            relation = order.relation
        elif "relation" not in order:
            raise ValidationError(
                "OrderBy should always have relation property",
                field="order_by",
                value=dict(order),
            )
        else:
            relation = order["relation"]
        if relation is not None:
            return True
    return False


class CriteriaTranslator:
    """Normalizes criteria for one entity kind and applies them to queries.

    Args:
        model: Mapped entity class (``BlockTable``, ``ContentTable``).
        translation_model: Mapped translation class of that entity.
        owner_column: Translation column referencing the entity id.
    """

    def __init__(
        self,
        model: type,
        translation_model: type,
        owner_column: InstrumentedAttribute,
    ):
        self.model = model
        self.translation_model = translation_model
        self.owner_column = owner_column
        self._columns = set(inspect(model).columns.keys())
        self._translation_columns = set(inspect(translation_model).columns.keys())

    # -- parsing -------------------------------------------------------------

    def parse(
        self,
        raw_filters: Mapping[str, Any] | None = None,
        raw_order_by: Mapping[str, str] | Sequence[Any] | None = None,
    ) -> ParsedCriteria:
        parsed = ParsedCriteria()

        for key, raw in (raw_filters or {}).items():
            flt = self._filter(key, raw)
            if flt.relation is None and flt.field == LANG_KEY:
                if flt.value is not None:
                    parsed.lang = self._lang(flt)
            elif flt.relation is None:
                parsed.filters.append(flt)
            else:
                parsed.relation_filters.append(flt)

        parsed.order_by = self._order(raw_order_by)

        if parsed.lang is None:
            if parsed.relation_filters:
                logger.warning(
                    "relation_filters_dropped",
                    reason="missing lang criteria",
                    fields=[f.field for f in parsed.relation_filters],
                )
                parsed.relation_filters = []
            if order_by_translation(parsed.order_by):
                raise ValidationError(
                    "Error: 'lang' criteria is required",
                    field=LANG_KEY,
                    constraint="relation sort requires a language",
                )
        return parsed

    def _lang(self, flt: Filter) -> str:
        if flt.operator != "=" or not isinstance(flt.value, (str, LangTable)):
            raise CriteriaError(
                "'lang' criteria must name a single language",
                field=LANG_KEY,
                value=flt.value,
            )
        return lang_code(flt.value)

    def _filter(self, key: str, raw: Any) -> Filter:
        relation, name = split_key(key)
        if isinstance(raw, Filter):
            return raw
        if isinstance(raw, Mapping):
            operator = raw.get("operator", "=")
            value = raw.get("value")
            relation = raw.get("relation", relation)
        elif (
            isinstance(raw, tuple)
            and len(raw) == 2
            and isinstance(raw[0], str)
            and raw[0].lower() in OPERATORS
        ):
            operator, value = raw
        elif isinstance(raw, (list, tuple, set, frozenset)):
            operator, value = "in", list(raw)
        else:
            operator, value = "=", raw

        operator = str(operator).lower()
        if operator not in OPERATORS:
            raise CriteriaError(
                f"Unsupported filter operator: {operator}", field=key, value=operator
            )
        self._check_field(name, relation, key)
        return Filter(field=name, operator=operator, value=value, relation=relation)

    def _order(self, raw: Mapping[str, str] | Sequence[Any] | None) -> list[OrderBy]:
        if not raw:
            return []
        if isinstance(raw, Mapping):
            entries: list[Any] = []
            for key, direction in raw.items():
                relation, name = split_key(key)
                entries.append({"field": name, "direction": direction, "relation": relation})
        else:
            entries = list(raw)

        # Raises before anything else when an entry lacks its relation
        order_by_translation(entries)

        result = []
        for entry in entries:
            if isinstance(entry, OrderBy):
                order = entry
            elif not entry.get("field"):
                raise CriteriaError("OrderBy entry without field", value=dict(entry))
            else:
                order = OrderBy(
                    field=entry["field"],
                    direction=str(entry.get("direction", "ASC")).upper(),
                    relation=entry["relation"],
                )
            if order.direction not in DIRECTIONS:
                raise CriteriaError(
                    f"Unsupported sort direction: {order.direction}",
                    field=order.field,
                    value=order.direction,
                )
            self._check_field(order.field, order.relation, order.field)
            result.append(order)
        return result

    def _check_field(self, name: str, relation: str | None, key: str) -> None:
        if relation is None:
            if name != LANG_KEY and name not in self._columns:
                raise CriteriaError(f"Unknown field: {key}", field=key)
        elif relation != TRANSLATIONS:
            raise CriteriaError(f"Unknown relation: {relation}", field=key, value=relation)
        elif name not in self._translation_columns:
            raise CriteriaError(f"Unknown translation field: {key}", field=key)

    # -- applying ------------------------------------------------------------

    def apply(
        self,
        stmt: Select,
        parsed: ParsedCriteria,
        default_order: Sequence[Any] = (),
    ) -> Select:
        """Join, filter and sort *stmt* according to *parsed*."""
        translation = self.translation_model
        if parsed.lang is not None:
            stmt = stmt.outerjoin(
                translation,
                and_(
                    self.owner_column == self.model.id,
                    translation.lang_code == parsed.lang,
                    translation.is_active.is_(True),
                ),
            )

        for flt in parsed.filters:
            stmt = stmt.where(condition(getattr(self.model, flt.field), flt))
        for flt in parsed.relation_filters:
            stmt = stmt.where(condition(getattr(translation, flt.field), flt))

        if parsed.order_by:
            for order in parsed.order_by:
                owner = translation if order.relation else self.model
                column = getattr(owner, order.field)
                stmt = stmt.order_by(column.desc() if order.direction == "DESC" else column.asc())
        else:
            stmt = stmt.order_by(*default_order)

        return stmt.order_by(self.model.id.asc())


def condition(column: Any, flt: Filter) -> Any:
    """SQL expression for one filter against *column*."""
    op, value = flt.operator, flt.value
    if op == "=":
        return column.is_(None) if value is None else column == value
    if op == "!=":
        return column.is_not(None) if value is None else column != value
    if op == "<":
        return column < value
    if op == "<=":
        return column <= value
    if op == ">":
        return column > value
    if op == ">=":
        return column >= value
    if op == "in":
        return column.in_(list(value))
    if op == "not in":
        return column.not_in(list(value))
    return column.like(value)


__all__ = [
    "LANG_KEY",
    "OPERATORS",
    "CriteriaTranslator",
    "Filter",
    "OrderBy",
    "ParsedCriteria",
    "condition",
    "order_by_translation",
    "split_key",
]
