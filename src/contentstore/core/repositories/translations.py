"""
Translation store -- one active translation per (entity, language).

States of a pair::

    NoActive(entity, lang) ──create──▶ OneActive(entity, lang)
    OneActive(entity, lang) ──create──▶ OneActive(entity, lang)   (swap)

``create`` is the only mutator of activity: inside one transaction it
deactivates every existing row of the pair, then inserts the new row as
active. Superseded rows are kept, inactive. ``delete`` refuses an active
row; it has to be superseded first. Both steps of the swap run in the same
unit of work, and the translation tables carry a partial unique index so
the database rejects a second active row even if this code is bypassed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select, update

from contentstore.core.cache import ListingCache
from contentstore.core.errors import ActiveTranslationError, ValidationError
from contentstore.core.events import EventDispatcher, LifecycleEvent, event_name
from contentstore.core.logging import get_logger
from contentstore.core.store import Store

logger = get_logger(__name__)

REQUIRED_FIELDS = ("lang_code", "title")


class TranslationStore:
    """Reads and swaps translations of one entity kind.

    Args:
        store: Shared unit of work.
        entity: Entity kind used in event names (``block``, ``content``).
        model: Mapped translation class.
        owner_attr: Translation attribute holding the owner id (``block_id``).
        owner_relation: Translation relationship to the owner (``block``).
        events: Dispatcher for ``<entity>.translation.*`` events.
        listing_cache: Listing keys forgotten after every swap.
    """

    def __init__(
        self,
        store: Store,
        entity: str,
        model: type,
        owner_attr: str,
        owner_relation: str,
        events: EventDispatcher,
        listing_cache: ListingCache,
    ):
        self.store = store
        self.entity = entity
        self.model = model
        self.owner_attr = owner_attr
        self.owner_relation = owner_relation
        self.events = events
        self.listing_cache = listing_cache

    @property
    def owner_column(self) -> Any:
        return getattr(self.model, self.owner_attr)

    # -- reads ---------------------------------------------------------------

    def get_active(self, entity_id: int, lang_code: str) -> Any | None:
        stmt = select(self.model).where(
            self.owner_column == entity_id,
            self.model.lang_code == lang_code,
            self.model.is_active.is_(True),
        )
        return self.store.first(stmt)

    def get_by_id(self, translation_id: int) -> Any | None:
        """Translation by id, active or not."""
        return self.store.get(self.model, translation_id)

    def get_for(self, owner: Any, translation_id: int) -> Any | None:
        """Translation *translation_id* of *owner*, active or not."""
        stmt = select(self.model).where(
            self.model.id == translation_id,
            self.owner_column == owner.id,
        )
        return self.store.first(stmt)

    def list_for(self, owner: Any, lang_code: str | None = None) -> list[Any]:
        """Every translation row of *owner*, oldest first."""
        stmt = select(self.model).where(self.owner_column == owner.id)
        if lang_code is not None:
            stmt = stmt.where(self.model.lang_code == lang_code)
        stmt = stmt.order_by(self.model.id).execution_options(populate_existing=True)
        return self.store.scalars(stmt)

    # -- writes --------------------------------------------------------------

    def create(self, owner: Any, data: Mapping[str, Any]) -> Any:
        """Make a new active translation of *owner*, superseding the current one.

        Raises:
            ValidationError: ``lang_code`` or ``title`` is missing.
        """
        missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise ValidationError(
                "Language code and title of translation is required",
                field=missing[0],
            )
        lang_code = data["lang_code"]

        with self.store.transaction():
            superseded = self.store.execute(
                update(self.model)
                .where(
                    self.owner_column == owner.id,
                    self.model.lang_code == lang_code,
                )
                .values(is_active=False)
            ).rowcount

            translation = self.model()
            translation.fill(data)
            self.events.fire(
                event_name(self.entity, LifecycleEvent.TRANSLATION_CREATING),
                {"entity": owner, "translation": translation},
            )
            translation.is_active = True
            setattr(translation, self.owner_relation, owner)
            self.store.add(translation)
            self.store.flush()

            self.events.fire(
                event_name(self.entity, LifecycleEvent.TRANSLATION_CREATED),
                {"entity": owner, "translation": translation},
            )
            self.listing_cache.invalidate()

        logger.info(
            "translation_swapped",
            entity=self.entity,
            entity_id=owner.id,
            lang_code=lang_code,
            translation_id=translation.id,
            superseded=superseded,
        )
        return translation

    def delete(self, translation: Any) -> bool:
        """Remove an inactive translation row.

        Raises:
            ActiveTranslationError: *translation* is the active one.
        """
        if translation.is_active:
            raise ActiveTranslationError(
                "Cannot delete active translation",
                field="is_active",
                value=translation.id,
            )
        translation_id = translation.id
        owner = getattr(translation, self.owner_relation)
        with self.store.transaction():
            self.store.delete(translation)
            self.store.flush()
            if owner is not None:
                self.store.session.expire(owner, ["translations"])

        logger.info(
            "translation_deleted",
            entity=self.entity,
            translation_id=translation_id,
        )
        return True


__all__ = ["REQUIRED_FIELDS", "TranslationStore"]
