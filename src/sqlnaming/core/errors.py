"""
Structured error types for sqlnaming.

Provides a small hierarchy of typed errors that carry a category, a
structured context (file, line, column, statement, rule) and an optional
chained cause.  The CLI turns any ``SqlNamingError`` into a one-line
message and a non-zero exit code; library callers can catch the base
class or a specific subclass.

Manifesto:
    - **Typed Error Hierarchy:** Config, source, parse and rule errors
      are different things and are raised as different types
    - **Rich Context:** Errors carry the location of the offending input
    - **Error Chaining:** The original exception is kept as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     SqlNamingError                        │
        │             (category, context, cause)                    │
        ├──────────────────────────────────────────────────────────┤
        │  ConfigError        SourceError         ParseError        │
        │  (CONFIG)           (SOURCE)            (PARSE)           │
        │      │                  │                                 │
        │  InvalidConfigError SourceNotFoundError                   │
        │  UnknownDialectError                                      │
        │                                                           │
        │  RuleError                                                │
        │  (RULE)                                                   │
        │      │                                                    │
        │  UnknownRuleError                                         │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = ParseError("Unterminated string", line=3, column=14)
    >>> error.context.line
    3
    >>> error.with_context(path="schema.sql").context.path
    'schema.sql'

Tags:
    error-handling, exception-hierarchy, error-context, sqlnaming
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"       # Missing or invalid settings
    SOURCE = "SOURCE"       # Input file missing or unreadable
    PARSE = "PARSE"         # Malformed SQL
    RULE = "RULE"           # Rule registry problems
    INTERNAL = "INTERNAL"   # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Only non-``None`` fields are serialized by ``to_dict()``; anything that
    does not fit a typed field goes into ``metadata``.

    Attributes:
        path: File being processed
        line: 1-based line of the offending input
        column: 1-based column of the offending input
        statement: Leading text of the offending SQL statement
        rule: Rule code involved (e.g. ``"N004"``)
        metadata: Additional key-value pairs
    """

    path: str | None = None
    line: int | None = None
    column: int | None = None
    statement: str | None = None
    rule: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["path", "line", "column", "statement", "rule"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SqlNamingError(Exception):
    """
    Base exception for all sqlnaming errors.

    Subclasses set ``default_category`` so callers rarely need to pass a
    category explicitly.

    Examples:
        >>> error = SqlNamingError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> try:
        ...     open("missing.sql")
        ... except OSError as e:
        ...     error = SourceError("Cannot read file", cause=e)
        >>> isinstance(error.cause, OSError)
        True
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

    def with_context(self, **kwargs: Any) -> SqlNamingError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SourceError("Failed").with_context(path="schema.sql")
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

    def __str__(self) -> str:
        ctx = self.context
        if ctx.path and ctx.line is not None:
            return f"{ctx.path}:{ctx.line}:{ctx.column or 1}: {self.message}"
        if ctx.path:
            return f"{ctx.path}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(SqlNamingError):
    """Configuration error: missing file, bad value, unknown option."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration file or values failed validation."""

    def __init__(self, message: str, *, path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        if path:
            self.context.path = path


class UnknownDialectError(ConfigError):
    """Requested SQL dialect is not registered."""

    def __init__(self, dialect: str, supported: list[str], **kwargs: Any):
        super().__init__(
            f"Unknown dialect '{dialect}'. Supported: {', '.join(supported)}",
            **kwargs,
        )
        self.dialect = dialect
        self.supported = supported


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(SqlNamingError):
    """Input could not be read."""

    default_category = ErrorCategory.SOURCE


class SourceNotFoundError(SourceError):
    """Input file or directory does not exist."""

    def __init__(self, path: str, **kwargs: Any):
        super().__init__(f"No such file or directory: {path}", **kwargs)
        self.context.path = path


# =============================================================================
# PARSE ERRORS
# =============================================================================


class ParseError(SqlNamingError):
    """SQL text could not be tokenized or parsed."""

    default_category = ErrorCategory.PARSE

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        path: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if line is not None:
            self.context.line = line
        if column is not None:
            self.context.column = column
        if path is not None:
            self.context.path = path

    @property
    def line(self) -> int | None:
        return self.context.line

    @property
    def column(self) -> int | None:
        return self.context.column


# =============================================================================
# RULE ERRORS
# =============================================================================


class RuleError(SqlNamingError):
    """Rule registry misuse (duplicate code, bad definition)."""

    default_category = ErrorCategory.RULE


class UnknownRuleError(RuleError):
    """Rule code is not registered."""

    def __init__(self, code: str, **kwargs: Any):
        super().__init__(f"Unknown rule '{code}'", **kwargs)
        self.context.rule = code


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SqlNamingError",
    "ConfigError",
    "InvalidConfigError",
    "UnknownDialectError",
    "SourceError",
    "SourceNotFoundError",
    "ParseError",
    "RuleError",
    "UnknownRuleError",
]
