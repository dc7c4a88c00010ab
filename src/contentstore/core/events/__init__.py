"""Lifecycle events emitted by the write pipelines.

Why This Package Exists
-----------------------
Cache warmers, search indexers and audit trails need to react when blocks
and contents change, without the repositories importing them. Writers fire
a fixed, ordered set of typed lifecycle events at known pipeline points;
consumers subscribe by name or wildcard.

Dispatch is synchronous and runs inside the writer's transaction. A handler
that raises aborts the enclosing unit of work, so a failing consumer rolls
the write back instead of being silently skipped.

Usage::

    from contentstore.core.events import LifecycleEvent, event_name
    from contentstore.core.events.memory import InMemoryEventDispatcher

    dispatcher = InMemoryEventDispatcher()

    def reindex(event):
        search.index(event.payload["entity"])

    dispatcher.listen("block.created", reindex)
    dispatcher.fire(event_name("block", LifecycleEvent.CREATED), {"entity": block})

Modules
-------
memory      InMemoryEventDispatcher -- synchronous, single-process
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "Event",
    "EventDispatcher",
    "EventHandler",
    "LifecycleEvent",
    "event_name",
]


# ── Lifecycle ────────────────────────────────────────────────────────────


class LifecycleEvent(str, Enum):
    """Pipeline points at which writers fire events, in pipeline order."""

    CREATING = "creating"
    CREATED = "created"
    UPDATING = "updating"
    UPDATED = "updated"
    DELETING = "deleting"
    DELETED = "deleted"
    FORCE_DELETING = "forceDeleting"
    FORCE_DELETED = "forceDeleted"
    TRANSLATION_CREATING = "translation.creating"
    TRANSLATION_CREATED = "translation.created"


def event_name(entity: str, event: LifecycleEvent) -> str:
    """Build the dotted name for *event* on *entity* (``block.created``)."""
    return f"{entity}.{event.value}"


# ── Event Model ──────────────────────────────────────────────────────────


@dataclass
class Event:
    """Event value handed to every matching handler.

    Attributes:
        event_type: Dot-separated name (e.g., ``block.creating``)
        payload: Entity objects and data involved in the step
        timestamp: When the event was fired (UTC)
        event_id: Unique event identifier
    """

    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def matches(self, pattern: str) -> bool:
        """Check if event type matches a pattern (supports wildcards).

        Examples:
            - ``block.*`` matches ``block.created``, ``block.translation.created``
            - ``*`` matches everything
            - ``block.created`` matches exactly ``block.created``
        """
        if pattern == "*":
            return True
        if pattern.endswith(".*"):
            prefix = pattern[:-2]
            return self.event_type.startswith(prefix + ".")
        return self.event_type == pattern


# ── Type Aliases ─────────────────────────────────────────────────────────

EventHandler = Callable[[Event], None]


# ── Dispatcher Protocol ──────────────────────────────────────────────────


@runtime_checkable
class EventDispatcher(Protocol):
    """Protocol for synchronous event dispatchers."""

    def fire(self, event_type: str, payload: dict[str, Any] | None = None) -> Event:
        """Deliver an event to every matching handler, in subscription order.

        Handler exceptions propagate to the caller.
        """
        ...

    def listen(self, pattern: str, handler: EventHandler) -> str:
        """Subscribe *handler* to events matching *pattern*.

        Returns:
            Subscription ID for later removal
        """
        ...

    def forget(self, subscription_id: str) -> None:
        """Remove a subscription."""
        ...
