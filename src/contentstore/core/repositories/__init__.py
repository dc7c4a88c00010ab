"""Repository components for blocks and contents.

Modules
-------
criteria        CriteriaTranslator -- filter/sort normalization and application
pagination      Pager, Page -- offset/limit and paged results
tree            TreeQueryEngine -- materialized-path tree queries
translations    TranslationStore -- single active translation per language
types           TypeRegistry, WidgetBlockable -- type-keyed sub-resources
writer          TransactionalWriter -- create/update/delete pipelines
langs           LanguageLookup -- language codes
base            BaseRepository -- shared wiring for one entity kind
block           BlockRepository
content         ContentRepository
"""

from contentstore.core.repositories.base import BaseRepository
from contentstore.core.repositories.block import BlockRepository
from contentstore.core.repositories.content import ContentRepository
from contentstore.core.repositories.criteria import CriteriaTranslator, Filter, OrderBy
from contentstore.core.repositories.langs import LanguageLookup
from contentstore.core.repositories.pagination import Page, Pager
from contentstore.core.repositories.translations import TranslationStore
from contentstore.core.repositories.tree import TreeQueryEngine
from contentstore.core.repositories.types import (
    TypeRegistry,
    WidgetBlockable,
    block_registry,
    content_registry,
)
from contentstore.core.repositories.writer import TransactionalWriter

__all__ = [
    "BaseRepository",
    "BlockRepository",
    "ContentRepository",
    "CriteriaTranslator",
    "Filter",
    "LanguageLookup",
    "OrderBy",
    "Page",
    "Pager",
    "TransactionalWriter",
    "TranslationStore",
    "TreeQueryEngine",
    "TypeRegistry",
    "WidgetBlockable",
    "block_registry",
    "content_registry",
]
