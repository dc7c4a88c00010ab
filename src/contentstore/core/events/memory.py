"""
In-memory event dispatcher.

Delivers events immediately, in the caller's thread, to every matching
handler in the order they subscribed. Nothing is persisted.

Tags:
    content-store, events, in-memory, synchronous
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from contentstore.core.events import Event, EventHandler
from contentstore.core.logging import get_logger

__all__ = ["InMemoryEventDispatcher"]

logger = get_logger(__name__)


@dataclass
class Subscription:
    """Internal subscription record."""

    id: str
    pattern: str
    handler: EventHandler


class InMemoryEventDispatcher:
    """Synchronous, single-process event dispatcher.

    A handler failure is logged and re-raised so the write pipeline that
    fired the event rolls back.

    Example::

        dispatcher = InMemoryEventDispatcher()
        dispatcher.listen("block.*", lambda event: print(event.event_type))
        dispatcher.fire("block.created", {"entity": block})
        # Output: block.created
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, Subscription] = {}

    def fire(self, event_type: str, payload: dict[str, Any] | None = None) -> Event:
        event = Event(event_type=event_type, payload=payload or {})
        for sub in list(self._subscriptions.values()):
            if not event.matches(sub.pattern):
                continue
            try:
                sub.handler(event)
            except Exception as exc:
                logger.warning(
                    "event_handler_failed",
                    subscription_id=sub.id,
                    event_type=event_type,
                    error=str(exc),
                )
                raise
        logger.debug("event_fired", event_type=event_type)
        return event

    def listen(self, pattern: str, handler: EventHandler) -> str:
        sub_id = f"sub_{uuid.uuid4().hex[:12]}"
        self._subscriptions[sub_id] = Subscription(
            id=sub_id,
            pattern=pattern,
            handler=handler,
        )
        return sub_id

    def forget(self, subscription_id: str) -> None:
        self._subscriptions.pop(subscription_id, None)

    @property
    def subscription_count(self) -> int:
        """Number of active subscriptions."""
        return len(self._subscriptions)
