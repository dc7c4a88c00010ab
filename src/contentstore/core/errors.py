"""
Structured error types for the content store.

Every failure raised by a repository operation is a :class:`ContentStoreError`
subclass carrying a category, structured context and an optional chained
cause. Absence is never an error: lookups return ``None`` and listings
return empty pages.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                    ContentStoreError                         │
        │             (category, context, cause)                       │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  ValidationError        TransactionError      ConfigError   │
        │  (VALIDATION)           (DATABASE)            (CONFIG)      │
        │       │                                                      │
        │  TypeNotRegisteredError                                      │
        │  ActiveTranslationError                                      │
        │  CriteriaError                                               │
        └─────────────────────────────────────────────────────────────┘

Propagation:
    - Validation runs as early as possible, before side effects where the
      pipeline allows it.
    - Once a transaction is open, any failure rolls back the whole unit.
      Library errors pass through unchanged; driver and handler failures
      are wrapped in :class:`TransactionError` with the original chained.

Examples:
    >>> error = ValidationError("Block type doesn't exist", field="type", value="foo")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.to_dict()["field"]
    'type'

Tags:
    error-handling, exception-hierarchy, error-context, content-store
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    VALIDATION = "VALIDATION"     # Malformed input, broken invariants
    DATABASE = "DATABASE"         # Store failures, aborted transactions
    CONFIG = "CONFIG"             # Missing or invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        entity: Entity kind the operation targeted (``block``, ``content``)
        entity_id: Identifier of the targeted entity, if known
        operation: Repository operation name (``create``, ``force_delete``)
        lang_code: Language code involved, if any
        metadata: Additional key-value pairs
    """

    entity: str | None = None
    entity_id: int | None = None
    operation: str | None = None
    lang_code: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["entity", "entity_id", "operation", "lang_code"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ContentStoreError(Exception):
    """
    Base exception for all content store errors.

    Subclasses set ``default_category`` to route themselves; callers may
    attach context fluently with :meth:`with_context`.

    Examples:
        >>> error = ContentStoreError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = ContentStoreError("Swap failed").with_context(
        ...     entity="block", entity_id=7, lang_code="en"
        ... )
        >>> error.context.entity_id
        7
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ContentStoreError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ValidationError("Widget is required").with_context(
                entity="block", operation="create"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ContentStoreError):
    """
    Missing or malformed input.

    Raised for an absent translation payload, an unregistered type, a missing
    required translation field, deleting an active translation, a translation
    sort without a language filter, an order entry without its relation
    declaration, and a missing sub-resource payload.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        if self.constraint:
            result["constraint"] = self.constraint
        return result


class TypeNotRegisteredError(ValidationError):
    """Entity type is not a member of the registered type set."""

    pass


class ActiveTranslationError(ValidationError):
    """An active translation cannot be removed before it is superseded."""

    pass


class CriteriaError(ValidationError):
    """Filter, sort or pagination input cannot be resolved."""

    pass


# =============================================================================
# STORE ERRORS
# =============================================================================


class TransactionError(ContentStoreError):
    """A unit of work was aborted and every write in it rolled back."""

    default_category = ErrorCategory.DATABASE


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ContentStoreError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ContentStoreError",
    "ValidationError",
    "TypeNotRegisteredError",
    "ActiveTranslationError",
    "CriteriaError",
    "TransactionError",
    "ConfigError",
]
