"""
Structured error types for the unit-constant generator.

Every failure the generator can hit is fatal: a missing table, a malformed
row, a colliding constant name or an unwritable output path all abort the
run before any file is written. The hierarchy gives each failure a category
and a structured context so the CLI and the logs can report *where* it
happened (table path, row number, partition index, output path).

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                      CodegenError                         │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │  SourceError          ValidationError     ConfigError     │
        │  (SOURCE)             (VALIDATION)        (CONFIG)        │
        │       │                     │                  │          │
        │  SourceNotFoundError  DuplicateSymbolError InvalidConfig  │
        │  RecordParseError                                         │
        │  (PARSE)                                                  │
        │                                                           │
        │  StorageError         RenderError                         │
        │  (STORAGE)            (INTERNAL)                          │
        │       │                                                   │
        │  OutputWriteError                                         │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = RecordParseError("unit id is not an integer")
    >>> error.with_context(source_path="units.csv", row_number=12)
    RecordParseError('unit id is not an integer', category=PARSE)
    >>> error.context.row_number
    12

Tags:
    error-handling, exception-hierarchy, error-context, codegen
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification and reporting."""

    SOURCE = "SOURCE"             # Input table missing or unreadable
    PARSE = "PARSE"               # Malformed row
    VALIDATION = "VALIDATION"     # Generated names collide
    CONFIG = "CONFIG"             # Invalid settings
    STORAGE = "STORAGE"           # Output directory / file errors
    INTERNAL = "INTERNAL"         # Template or unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a :class:`CodegenError`.

    Attributes:
        source_path: Input table being read
        row_number: 1-based row in the input table
        partition_index: Partition being emitted
        output_path: File being written
        metadata: Additional key-value pairs
    """

    source_path: str | None = None
    row_number: int | None = None
    partition_index: int | None = None
    output_path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["source_path", "row_number", "partition_index", "output_path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CodegenError(Exception):
    """
    Base exception for all generator errors.

    Subclasses set ``default_category``; callers may attach context with
    :meth:`with_context` and chain the underlying exception with ``cause=``.

    Examples:
        >>> try:
        ...     int("abc")
        ... except ValueError as e:
        ...     error = CodegenError("bad id", category=ErrorCategory.PARSE, cause=e)
        >>> error.to_dict()["category"]
        'PARSE'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CodegenError:
        """
        Add context to this error (fluent API).

        Usage:
            raise RecordParseError("Bad row").with_context(
                source_path="units.csv",
                row_number=7,
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
        result: dict[str, Any] = {
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
# SOURCE ERRORS
# =============================================================================


class SourceError(CodegenError):
    """Error reading the input table."""

    default_category = ErrorCategory.SOURCE


class SourceNotFoundError(SourceError):
    """Input table does not exist."""

    pass


class RecordParseError(SourceError):
    """A row of the input table is malformed."""

    default_category = ErrorCategory.PARSE


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(CodegenError):
    """Generated definitions would be invalid."""

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class DuplicateSymbolError(ValidationError):
    """Two records normalize to the same constant name."""

    pass


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(CodegenError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# OUTPUT ERRORS
# =============================================================================


class StorageError(CodegenError):
    """Filesystem error while writing output."""

    default_category = ErrorCategory.STORAGE


class OutputWriteError(StorageError):
    """A generated module could not be written."""

    pass


class RenderError(CodegenError):
    """A template failed to render."""

    default_category = ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "CodegenError",
    "SourceError",
    "SourceNotFoundError",
    "RecordParseError",
    "ValidationError",
    "DuplicateSymbolError",
    "ConfigError",
    "InvalidConfigError",
    "StorageError",
    "OutputWriteError",
    "RenderError",
]
