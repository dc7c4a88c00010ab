"""Declarative base, mixins and type-map for all content-store ORM models.

Uses SQLAlchemy 2.0 ``DeclarativeBase`` with a ``type_annotation_map``
that maps Python built-in types to portable SA column types.

Mixins
------
* **TimestampMixin** -- ``created_at`` / ``updated_at`` with server defaults.
* **SoftDeleteMixin** -- ``is_deleted`` flag plus ``deleted_at`` timestamp.
* **FillableMixin** -- ``fill(data)`` mass-assignment over ``__fillable__``.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from typing import Any, ClassVar

from sqlalchemy import JSON, Boolean, DateTime, Integer, Text, false, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class ContentStoreBase(DeclarativeBase):
    """Shared declarative base for every content-store table.

    * ``str``   → ``Text``
    * ``int``   → ``Integer``
    * ``bool``  → ``Boolean``
    * ``datetime.datetime`` → ``DateTime``
    * ``dict``  → ``JSON``
    * ``list``  → ``JSON``
    """

    type_annotation_map = {
        str: Text,
        int: Integer,
        bool: Boolean,
        datetime.datetime: DateTime,
        dict: JSON,
        list: JSON,
    }


class TimestampMixin:
    """Adds ``created_at`` and ``updated_at`` maintained by the database."""

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        server_default=func.now(),
        onupdate=func.now(),
    )


class SoftDeleteMixin:
    """Soft-delete columns. Rows flagged here are hidden from default queries."""

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    deleted_at: Mapped[datetime.datetime | None] = mapped_column(DateTime)

    def mark_deleted(self) -> None:
        self.is_deleted = True
        self.deleted_at = datetime.datetime.now(datetime.timezone.utc)


class FillableMixin:
    """Whitelisted mass assignment.

    Only attribute names listed in ``__fillable__`` are copied from the
    payload; everything else (ids, tree columns, relations) is ignored.
    """

    __fillable__: ClassVar[tuple[str, ...]] = ()

    def fill(self, data: Mapping[str, Any]) -> None:
        for key in self.__fillable__:
            if key in data:
                setattr(self, key, data[key])
