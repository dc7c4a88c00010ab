"""
Transactional write pipelines -- create, update, delete, force delete.

Each pipeline runs inside one ``Store.transaction()``; a failure at any
step (validation, a sub-resource strategy, an event handler, the database)
rolls back every write the pipeline made.

Pipeline order::

    create        validate ─▶ fill ─▶ <e>.creating ─▶ sub-resource ─▶ author
                  ─▶ placement ─▶ persist ─▶ first translation ─▶ <e>.created
                  ─▶ invalidate listings ─▶ commit ─▶ reload

    update        <e>.updating ─▶ fill ─▶ persist ─▶ <e>.updated ─▶ invalidate
    soft delete   <e>.deleting ─▶ detach m2m ─▶ flag ─▶ <e>.deleted ─▶ invalidate
    force delete  lookup (with trashed) ─▶ <e>.forceDeleting ─▶ dependents
                  ─▶ remove ─▶ <e>.forceDeleted ─▶ invalidate

Concurrency:
    Last writer wins. There is no version column; two writers updating the
    same entity serialize at the transaction boundary and the later commit
    overwrites the earlier one.

Tags:
    content-store, repository, transaction, pipeline, events, cache
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from contentstore.core.cache import ListingCache
from contentstore.core.errors import ValidationError
from contentstore.core.events import EventDispatcher, LifecycleEvent, event_name
from contentstore.core.logging import LogContext, get_logger
from contentstore.core.repositories.translations import TranslationStore
from contentstore.core.repositories.types import TypeRegistry
from contentstore.core.store import Store

logger = get_logger(__name__)

PersistHook = Callable[[Any, Mapping[str, Any]], None]
DependentsHook = Callable[[Any], Iterable[Any]]


def first_translation(translations: Any) -> Mapping[str, Any] | None:
    """The translation payload to create: a mapping, or the first of a list."""
    if isinstance(translations, Mapping):
        return translations or None
    if isinstance(translations, (list, tuple)) and translations:
        first = translations[0]
        return first if isinstance(first, Mapping) else None
    return None


class TransactionalWriter:
    """Write pipelines for one entity kind.

    Args:
        store: Shared unit of work.
        entity: Entity kind used in event names and messages.
        model: Mapped entity class.
        types: Registered types of this kind.
        translations: Translation store of this kind.
        events: Lifecycle event dispatcher.
        listing_cache: Coarse listing keys of this kind.
        find: Reload by id after a committed write.
        find_with_trashed: Lookup including soft-deleted rows.
        detach: Many-to-many relationships emptied on soft delete.
        before_persist: Called with ``(entity, data)`` right before the first
            flush of a new entity (tree placement).
        dependents: Rows removed ahead of the entity on force delete.
    """

    def __init__(
        self,
        store: Store,
        entity: str,
        model: type,
        types: TypeRegistry,
        translations: TranslationStore,
        events: EventDispatcher,
        listing_cache: ListingCache,
        *,
        find: Callable[[int], Any],
        find_with_trashed: Callable[[int], Any],
        detach: Iterable[str] = ("files",),
        before_persist: PersistHook | None = None,
        dependents: DependentsHook | None = None,
    ):
        self.store = store
        self.entity = entity
        self.model = model
        self.types = types
        self.translations = translations
        self.events = events
        self.listing_cache = listing_cache
        self.find = find
        self.find_with_trashed = find_with_trashed
        self.detach = tuple(detach)
        self.before_persist = before_persist
        self.dependents = dependents

    def _fire(self, event: LifecycleEvent, **payload: Any) -> None:
        self.events.fire(event_name(self.entity, event), payload)

    def create(self, data: Mapping[str, Any], author: Any = None) -> Any:
        """Create an entity with its first translation; return it reloaded.

        Raises:
            ValidationError: translations or type missing, type unregistered,
                or a sub-resource payload the type requires is missing.
        """
        translation = first_translation(data.get("translations"))
        if translation is None or not data.get("type"):
            raise ValidationError(
                f"{self.entity.capitalize()} type and translation is required",
                field="translations" if translation is None else "type",
            )
        self.types.validate(data["type"])

        with LogContext(entity=self.entity, operation="create"):
            with self.store.transaction():
                instance = self.model()
                instance.fill(data)
                self._fire(LifecycleEvent.CREATING, entity=instance, author=author)

                blockable = self.types.blockable_for(instance.type)
                if blockable is not None:
                    resource = blockable.build(self.store, data)
                    instance.blockable_type = blockable.relation
                    instance.blockable_id = resource.id

                if author is not None:
                    instance.author = author
                if self.before_persist is not None:
                    self.before_persist(instance, data)

                self.store.add(instance)
                self.store.flush()
                self.translations.create(instance, translation)

                self._fire(LifecycleEvent.CREATED, entity=instance)
                self.listing_cache.invalidate()

            logger.info(f"{self.entity}_created", entity_id=instance.id, type=instance.type)
        return self.find(instance.id)

    def create_translation(self, instance: Any, data: Mapping[str, Any]) -> Any:
        return self.translations.create(instance, data)

    def update(self, instance: Any, data: Mapping[str, Any], modifier: Any = None) -> Any:
        """Apply mass-assignable fields of *data*; translations are untouched."""
        if data.get("type"):
            self.types.validate(data["type"])

        with LogContext(entity=self.entity, operation="update", entity_id=instance.id):
            with self.store.transaction():
                self._fire(
                    LifecycleEvent.UPDATING,
                    entity=instance,
                    data=data,
                    modifier=modifier,
                )
                instance.fill(data)
                self.store.add(instance)
                self.store.flush()
                self._fire(LifecycleEvent.UPDATED, entity=instance)
                self.listing_cache.invalidate()

            logger.info(f"{self.entity}_updated", fields=sorted(data))
        return self.find(instance.id)

    def soft_delete(self, instance: Any) -> bool:
        """Flag *instance* deleted and detach its many-to-many associations."""
        with LogContext(entity=self.entity, operation="delete", entity_id=instance.id):
            with self.store.transaction():
                self._fire(LifecycleEvent.DELETING, entity=instance)
                for relation in self.detach:
                    getattr(instance, relation).clear()
                instance.mark_deleted()
                self.store.flush()
                self._fire(LifecycleEvent.DELETED, entity=instance)
                self.listing_cache.invalidate()

            logger.info(f"{self.entity}_deleted")
        return True

    def force_delete(self, instance: Any) -> bool:
        """Remove *instance* and its dependent rows permanently.

        Soft-deleted rows are found too. Returns False when the row is
        already gone.
        """
        entity_id = instance.id
        with LogContext(entity=self.entity, operation="force_delete", entity_id=entity_id):
            with self.store.transaction():
                target = self.find_with_trashed(entity_id)
                if target is None:
                    logger.info(f"{self.entity}_force_delete_skipped", reason="not found")
                    return False

                self._fire(LifecycleEvent.FORCE_DELETING, entity=target)
                removed = 0
                if self.dependents is not None:
                    for dependent in self.dependents(target):
                        self.store.delete(dependent)
                        self.store.flush()
                        removed += 1
                self.store.delete(target)
                self.store.flush()
                self._fire(LifecycleEvent.FORCE_DELETED, entity=target)
                self.listing_cache.invalidate()

            logger.info(f"{self.entity}_force_deleted", dependents=removed)
        return True

    def delete_translation(self, translation: Any) -> bool:
        return self.translations.delete(translation)


__all__ = ["TransactionalWriter", "first_translation"]
