"""Type registry for polymorphic entity behaviour.

Every block or content carries a ``type`` string. The registry knows which
types exist for an entity kind and, for types that need a sub-resource
(a ``widget`` block points at a widget row), which strategy builds it.
Write pipelines validate against the registry and delegate construction to
the strategy; adding a new type never touches the pipeline.

Usage::

    registry = TypeRegistry("block", ["basic", "menu", "slider", "content"])
    registry.register("widget", blockable=WidgetBlockable())

    registry.validate("widget")            # -> "widget"
    registry.blockable_for("widget")       # -> WidgetBlockable()

Tags:
    content-store, registry, polymorphism, strategy
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from contentstore.core.errors import ConfigError, TypeNotRegisteredError, ValidationError
from contentstore.core.logging import get_logger
from contentstore.core.orm.tables import WidgetTable
from contentstore.core.store import Store

logger = get_logger(__name__)


@runtime_checkable
class Blockable(Protocol):
    """Construction strategy for a type-specific sub-resource.

    Attributes:
        payload_key: Key of the payload mapping holding the sub-resource data.
        relation: Relationship on the owning entity that loads the sub-resource.
    """

    payload_key: str
    relation: str

    def build(self, store: Store, data: Mapping[str, Any]) -> Any:
        """Create and persist the sub-resource; return the mapped instance."""
        ...


class WidgetBlockable:
    """Builds the widget row a ``widget`` block points at."""

    payload_key = "widget"
    relation = "widget"

    def build(self, store: Store, data: Mapping[str, Any]) -> WidgetTable:
        payload = data.get(self.payload_key)
        if not isinstance(payload, Mapping):
            raise ValidationError("Widget is required", field=self.payload_key)
        if not payload.get("name"):
            raise ValidationError("Widget name is required", field="widget.name")
        widget = WidgetTable()
        widget.fill(payload)
        store.add(widget)
        store.flush()
        return widget


class TypeRegistry:
    """Registered type names of one entity kind.

    Args:
        entity: Entity kind the types belong to (``block``, ``content``).
        names: Plain types, without a sub-resource.
    """

    def __init__(self, entity: str, names: Iterable[str] = ()):
        self.entity = entity
        self._types: dict[str, Blockable | None] = {}
        for name in names:
            self.register(name)

    def register(self, name: str, blockable: Blockable | None = None) -> None:
        self._types[name] = blockable
        logger.debug(
            "type_registered",
            entity=self.entity,
            name=name,
            blockable=type(blockable).__name__ if blockable else None,
        )

    def __contains__(self, name: object) -> bool:
        return name in self._types

    @property
    def names(self) -> list[str]:
        return sorted(self._types)

    def validate(self, name: str) -> str:
        """Return *name* if registered.

        Raises:
            TypeNotRegisteredError: *name* is not a registered type.
        """
        if name in self._types:
            return name
        raise TypeNotRegisteredError(
            f"{self.entity.capitalize()} type doesn't exist",
            field="type",
            value=name,
        )

    def blockable_for(self, name: str) -> Blockable | None:
        return self._types.get(name)

    @property
    def relations(self) -> list[str]:
        """Relationship names of every registered sub-resource strategy."""
        return sorted({b.relation for b in self._types.values() if b is not None})


def block_registry(names: Iterable[str]) -> TypeRegistry:
    """Block types from *names*, with the widget strategy attached."""
    names = list(names)
    if not names:
        raise ConfigError("At least one block type must be configured")
    registry = TypeRegistry("block", names)
    if "widget" in registry:
        registry.register("widget", blockable=WidgetBlockable())
    return registry


def content_registry(names: Iterable[str]) -> TypeRegistry:
    names = list(names)
    if not names:
        raise ConfigError("At least one content type must be configured")
    return TypeRegistry("content", names)


__all__ = [
    "Blockable",
    "TypeRegistry",
    "WidgetBlockable",
    "block_registry",
    "content_registry",
]
