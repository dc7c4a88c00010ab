"""Table definitions -- authors, languages, types, contents, blocks, widgets, files.

Contents form a materialized-path tree (``path`` + ``level``) with an
adjacency ``parent_id`` kept alongside for nested rendering. Blocks are
flat and may point at a polymorphic sub-resource through
``blockable_type`` / ``blockable_id``.

Both translation tables carry a partial unique index over
``(owner, lang_code)`` where ``is_active`` so the database itself refuses a
second active translation for the same pair.

Tags:
    content-store, orm, sqlalchemy, tables

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

import datetime
from typing import Any, ClassVar

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Table,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from contentstore.core.orm.base import (
    ContentStoreBase,
    FillableMixin,
    SoftDeleteMixin,
    TimestampMixin,
)

# --- association tables ---

content_files = Table(
    "content_files",
    ContentStoreBase.metadata,
    Column("content_id", ForeignKey("contents.id", ondelete="CASCADE"), primary_key=True),
    Column("file_id", ForeignKey("files.id", ondelete="CASCADE"), primary_key=True),
)

block_files = Table(
    "block_files",
    ContentStoreBase.metadata,
    Column("block_id", ForeignKey("blocks.id", ondelete="CASCADE"), primary_key=True),
    Column("file_id", ForeignKey("files.id", ondelete="CASCADE"), primary_key=True),
)


class UserTable(TimestampMixin, ContentStoreBase):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(Text)


class LangTable(ContentStoreBase):
    __tablename__ = "langs"

    code: Mapped[str] = mapped_column(Text, primary_key=True)
    i18n: Mapped[str] = mapped_column(Text, nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ContentTypeTable(ContentStoreBase):
    __tablename__ = "content_types"

    name: Mapped[str] = mapped_column(Text, primary_key=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class BlockTypeTable(ContentStoreBase):
    __tablename__ = "block_types"

    name: Mapped[str] = mapped_column(Text, primary_key=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class FileTable(TimestampMixin, ContentStoreBase):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    extension: Mapped[str | None] = mapped_column(Text)
    mime_type: Mapped[str | None] = mapped_column(Text)
    size: Mapped[int | None] = mapped_column(Integer)


class WidgetTable(FillableMixin, TimestampMixin, ContentStoreBase):
    __tablename__ = "widgets"
    __fillable__ = ("name", "args", "is_active", "is_cacheable")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    args: Mapped[dict | None] = mapped_column(JSON(none_as_null=True))
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_cacheable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


# --- contents ---


class ContentTable(FillableMixin, SoftDeleteMixin, TimestampMixin, ContentStoreBase):
    __tablename__ = "contents"
    __fillable__ = (
        "type",
        "weight",
        "rating",
        "is_active",
        "is_on_home",
        "is_comment_allowed",
        "is_promoted",
        "is_sticky",
        "published_at",
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(
        Text, ForeignKey("content_types.name"), nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("contents.id"), default=None
    )
    path: Mapped[str] = mapped_column(Text, nullable=False, default="/", index=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_on_home: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_comment_allowed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_promoted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_sticky: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    published_at: Mapped[datetime.datetime | None] = mapped_column(DateTime)
    author_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), default=None
    )

    # --- relationships ---
    author: Mapped[UserTable | None] = relationship("UserTable")
    parent: Mapped[ContentTable | None] = relationship(
        "ContentTable", remote_side="ContentTable.id", back_populates="children"
    )
    children: Mapped[list[ContentTable]] = relationship(
        "ContentTable", back_populates="parent", order_by="ContentTable.weight"
    )
    translations: Mapped[list[ContentTranslationTable]] = relationship(
        "ContentTranslationTable",
        back_populates="content",
        cascade="all, delete-orphan",
        order_by="ContentTranslationTable.id",
    )
    active_translations: Mapped[list[ContentTranslationTable]] = relationship(
        "ContentTranslationTable",
        primaryjoin=(
            "and_(ContentTable.id == ContentTranslationTable.content_id, "
            "ContentTranslationTable.is_active == True)"
        ),
        viewonly=True,
    )
    files: Mapped[list[FileTable]] = relationship("FileTable", secondary=content_files)

    def __repr__(self) -> str:
        return f"ContentTable(id={self.id!r}, path={self.path!r}, level={self.level!r})"


class ContentTranslationTable(FillableMixin, TimestampMixin, ContentStoreBase):
    __tablename__ = "content_translations"
    __fillable__ = (
        "lang_code",
        "title",
        "teaser",
        "body",
        "url",
        "seo_title",
        "seo_description",
    )
    __table_args__ = (
        Index(
            "uq_content_translations_active",
            "content_id",
            "lang_code",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    lang_code: Mapped[str] = mapped_column(Text, ForeignKey("langs.code"), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    teaser: Mapped[str | None] = mapped_column(Text)
    body: Mapped[str | None] = mapped_column(Text)
    url: Mapped[str | None] = mapped_column(Text, index=True)
    seo_title: Mapped[str | None] = mapped_column(Text)
    seo_description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # --- relationships ---
    content: Mapped[ContentTable] = relationship(
        "ContentTable", back_populates="translations"
    )
    lang: Mapped[LangTable] = relationship("LangTable")


# --- blocks ---


class BlockTable(FillableMixin, SoftDeleteMixin, TimestampMixin, ContentStoreBase):
    __tablename__ = "blocks"
    __fillable__ = (
        "type",
        "region",
        "filter",
        "options",
        "weight",
        "is_active",
        "is_cacheable",
    )
    # blockable_type → relationship holding the sub-resource
    __blockables__: ClassVar[dict[str, str]] = {"widget": "widget"}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(Text, ForeignKey("block_types.name"), nullable=False)
    region: Mapped[str | None] = mapped_column(Text)
    filter: Mapped[dict | None] = mapped_column(JSON(none_as_null=True))
    options: Mapped[dict | None] = mapped_column(JSON(none_as_null=True))
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_cacheable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    blockable_type: Mapped[str | None] = mapped_column(Text)
    blockable_id: Mapped[int | None] = mapped_column(Integer)
    author_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), default=None
    )

    # --- relationships ---
    author: Mapped[UserTable | None] = relationship("UserTable")
    translations: Mapped[list[BlockTranslationTable]] = relationship(
        "BlockTranslationTable",
        back_populates="block",
        cascade="all, delete-orphan",
        order_by="BlockTranslationTable.id",
    )
    active_translations: Mapped[list[BlockTranslationTable]] = relationship(
        "BlockTranslationTable",
        primaryjoin=(
            "and_(BlockTable.id == BlockTranslationTable.block_id, "
            "BlockTranslationTable.is_active == True)"
        ),
        viewonly=True,
    )
    files: Mapped[list[FileTable]] = relationship("FileTable", secondary=block_files)
    widget: Mapped[WidgetTable | None] = relationship(
        "WidgetTable",
        primaryjoin="remote(WidgetTable.id) == foreign(BlockTable.blockable_id)",
        viewonly=True,
    )

    @property
    def blockable(self) -> Any | None:
        """The sub-resource this block points at, resolved by ``blockable_type``."""
        relation = self.__blockables__.get(self.blockable_type or "")
        if relation is None:
            return None
        return getattr(self, relation)

    def __repr__(self) -> str:
        return f"BlockTable(id={self.id!r}, type={self.type!r}, weight={self.weight!r})"


class BlockTranslationTable(FillableMixin, TimestampMixin, ContentStoreBase):
    __tablename__ = "block_translations"
    __fillable__ = ("lang_code", "title", "body", "custom_fields")
    __table_args__ = (
        Index(
            "uq_block_translations_active",
            "block_id",
            "lang_code",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    block_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    lang_code: Mapped[str] = mapped_column(Text, ForeignKey("langs.code"), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str | None] = mapped_column(Text)
    custom_fields: Mapped[dict | None] = mapped_column(JSON(none_as_null=True))
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # --- relationships ---
    block: Mapped[BlockTable] = relationship("BlockTable", back_populates="translations")
    lang: Mapped[LangTable] = relationship("LangTable")


__all__ = [
    "BlockTable",
    "BlockTranslationTable",
    "BlockTypeTable",
    "ContentTable",
    "ContentTranslationTable",
    "ContentTypeTable",
    "FileTable",
    "LangTable",
    "UserTable",
    "WidgetTable",
    "block_files",
    "content_files",
]
