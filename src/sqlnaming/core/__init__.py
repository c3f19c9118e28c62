"""Core primitives: errors, logging, settings and SQL dialects."""

from sqlnaming.core.dialect import Dialect, get_dialect, list_dialects, register_dialect
from sqlnaming.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    ParseError,
    RuleError,
    SourceError,
    SourceNotFoundError,
    SqlNamingError,
    UnknownDialectError,
    UnknownRuleError,
)

__all__ = [
    "Dialect",
    "get_dialect",
    "list_dialects",
    "register_dialect",
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidConfigError",
    "ParseError",
    "RuleError",
    "SourceError",
    "SourceNotFoundError",
    "SqlNamingError",
    "UnknownDialectError",
    "UnknownRuleError",
]
