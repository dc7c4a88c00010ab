"""Unit of work over a single SQLAlchemy session.

Provides :class:`Store` -- the storage collaborator every repository
component shares. It owns the transaction boundary and a handful of query
helpers so that tree queries, translation swaps and write pipelines all
read and write through the same session.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                             Store                                  │
    │                                                                    │
    │   session: Session                                                 │
    │                                                                    │
    │   transaction()        → context manager, all-or-nothing           │
    │   scalars(stmt)        → list[entity]                              │
    │   first(stmt)          → entity | None                             │
    │   count(stmt)          → int                                       │
    │   get(model, id)       → entity | None                             │
    │   add / flush / delete                                             │
    │   eager(model, *names) → loader options by relationship name       │
    └────────────────────────────────────────────────────────────────────┘

Transactions:
    The outermost ``transaction()`` commits on success and rolls back on
    any exception. Nested calls join the outer unit instead of opening a
    savepoint, so a failure anywhere unwinds every write in the pipeline.
    SQLAlchemy errors are re-raised as :class:`TransactionError`; handler
    failures are wrapped the same way; library errors pass through as-is.
    Interrupts (``KeyboardInterrupt``, cancellation) roll back and propagate
    unchanged.

Tags:
    repository, database, unit-of-work, transaction, sqlalchemy
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from contentstore.core.errors import ContentStoreError, TransactionError
from contentstore.core.logging import get_logger
from contentstore.core.orm.session import StoreSession

logger = get_logger(__name__)


class Store:
    """Transactional unit of work shared by the repository components.

    Parameters:
        session: SQLAlchemy session every read and write goes through.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self._depth = 0

    @classmethod
    def from_engine(cls, engine: Engine) -> Store:
        return cls(StoreSession(bind=engine))

    # -- Transactions ------------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        """True while a ``transaction()`` block is open."""
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run the block as one atomic unit.

        Example::

            with store.transaction():
                store.add(block)
                store.add(translation)
            # both committed, or neither
        """
        if self._depth:
            self._depth += 1
            try:
                yield self.session
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield self.session
            self.session.commit()
        except ContentStoreError:
            self._rollback()
            raise
        except SQLAlchemyError as exc:
            self._rollback()
            raise TransactionError(f"Transaction aborted: {exc}", cause=exc) from exc
        except Exception as exc:
            self._rollback()
            raise TransactionError(
                f"Transaction aborted by {type(exc).__name__}: {exc}", cause=exc
            ) from exc
        except BaseException:
            self._rollback()
            raise
        finally:
            self._depth = 0

    def _rollback(self) -> None:
        self.session.rollback()
        logger.info("transaction_rolled_back")

    # -- Query helpers -----------------------------------------------------

    def scalars(self, stmt: Select) -> list[Any]:
        """Execute a SELECT and return the first column of every row."""
        return list(self.session.scalars(stmt).unique())

    def first(self, stmt: Select) -> Any | None:
        """Execute a SELECT and return the first entity (or None)."""
        return self.session.scalars(stmt.limit(1)).unique().first()

    def count(self, stmt: Select) -> int:
        """Count the rows *stmt* would return, ignoring its ordering."""
        subquery = stmt.order_by(None).subquery()
        return self.session.scalar(select(func.count()).select_from(subquery)) or 0

    def get(self, model: type, ident: Any) -> Any | None:
        return self.session.get(model, ident)

    # -- Mutation helpers --------------------------------------------------

    def add(self, entity: Any) -> None:
        self.session.add(entity)

    def flush(self) -> None:
        self.session.flush()

    def delete(self, entity: Any) -> None:
        self.session.delete(entity)

    def execute(self, stmt: Any) -> Any:
        return self.session.execute(stmt)

    # -- Eager loading -----------------------------------------------------

    @staticmethod
    def eager(model: type, *names: str) -> list[LoaderOption]:
        """Build ``selectinload`` options for *model*'s relationships by name."""
        return [selectinload(getattr(model, name)) for name in names]

    def close(self) -> None:
        self.session.close()


__all__ = [
    "Store",
]
