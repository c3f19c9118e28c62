"""SQL dialect descriptions for identifier checks.

Naming rules need to know a few facts about the target database: which
words its parser reserves, how long an identifier may be, which
characters quote an identifier and how unquoted identifiers are folded.
Each backend is described by a small stateless class implementing the
``Dialect`` protocol.

Manifesto:
    A name that is legal on SQLite may be truncated on PostgreSQL or
    rejected on Oracle.  Rules never hard-code those facts; they ask the
    dialect.

    - **One interface:** Dialect protocol for every backend
    - **Portable by default:** ``ansi`` combines the SQL standard reserved
      words with a conservative length limit
    - **Extensible:** register_dialect() for in-house backends

Architecture::

    ┌──────────┐ ┌──────────────┐ ┌────────┐ ┌────────┐ ┌──────────┐ ┌────────┐
    │  ANSI    │ │ PostgreSQL   │ │ MySQL  │ │ SQLite │ │SQLServer │ │ Oracle │
    │ len 128  │ │ len 63       │ │ len 64 │ │ no max │ │ len 128  │ │len 128 │
    │ "x"      │ │ "x"          │ │ `x`    │ │ "x" `x`│ │ [x] "x"  │ │ "x"    │
    │ fold up  │ │ fold lower   │ │preserve│ │preserve│ │ preserve │ │fold up │
    └──────────┘ └──────────────┘ └────────┘ └────────┘ └──────────┘ └────────┘

Examples:
    >>> from sqlnaming.core.dialect import get_dialect
    >>> d = get_dialect("postgresql")
    >>> d.max_identifier_length
    63
    >>> d.is_reserved("USER")
    True

Tags:
    dialect, sql, reserved-words, identifiers, sqlnaming
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlnaming.core.errors import UnknownDialectError
from sqlnaming.core.keywords import (
    MYSQL_RESERVED,
    ORACLE_RESERVED,
    POSTGRESQL_RESERVED,
    SQL_RESERVED,
    SQLITE_RESERVED,
    SQLSERVER_RESERVED,
)

_DOUBLE = ('"', '"')
_BACKTICK = ("`", "`")
_BRACKET = ("[", "]")


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract used by the tokenizer and the naming rules."""

    @property
    def name(self) -> str:
        """Canonical dialect name (e.g. ``'postgresql'``)."""
        ...

    @property
    def max_identifier_length(self) -> int | None:
        """Longest identifier the backend keeps intact; ``None`` = unlimited."""
        ...

    @property
    def reserved_words(self) -> frozenset[str]:
        """Lower-case words that cannot be used as bare identifiers."""
        ...

    @property
    def identifier_quotes(self) -> tuple[tuple[str, str], ...]:
        """Open/close character pairs that delimit a quoted identifier."""
        ...

    @property
    def unquoted_case(self) -> str:
        """How unquoted identifiers are folded: ``lower``, ``upper`` or ``preserve``."""
        ...

    def is_reserved(self, word: str) -> bool:
        """Case-insensitive reserved-word check."""
        ...


class BaseDialect:
    """Shared implementation; subclasses only declare class attributes."""

    name: str = "ansi"
    max_identifier_length: int | None = 128
    reserved_words: frozenset[str] = SQL_RESERVED
    identifier_quotes: tuple[tuple[str, str], ...] = (_DOUBLE,)
    unquoted_case: str = "upper"

    def is_reserved(self, word: str) -> bool:
        return word.lower() in self.reserved_words

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


# =========================================================================
# Concrete Dialect Implementations
# =========================================================================


class AnsiDialect(BaseDialect):
    """SQL standard: reserved words of SQL:2016, 128-character identifiers."""

    name = "ansi"


class PostgreSQLDialect(BaseDialect):
    """PostgreSQL: NAMEDATALEN - 1 = 63 bytes, unquoted names fold to lower case."""

    name = "postgresql"
    max_identifier_length = 63
    reserved_words = SQL_RESERVED | POSTGRESQL_RESERVED
    unquoted_case = "lower"


class MySQLDialect(BaseDialect):
    """MySQL / MariaDB: backtick quoting, 64-character identifiers."""

    name = "mysql"
    max_identifier_length = 64
    reserved_words = SQL_RESERVED | MYSQL_RESERVED
    identifier_quotes = (_BACKTICK, _DOUBLE)
    unquoted_case = "preserve"


class SQLiteDialect(BaseDialect):
    """SQLite: no identifier limit, accepts every common quoting style."""

    name = "sqlite"
    max_identifier_length = None
    reserved_words = SQL_RESERVED | SQLITE_RESERVED
    identifier_quotes = (_DOUBLE, _BACKTICK, _BRACKET)
    unquoted_case = "preserve"


class SQLServerDialect(BaseDialect):
    """Microsoft SQL Server: bracket quoting, 128-character ``sysname``."""

    name = "sqlserver"
    max_identifier_length = 128
    reserved_words = SQL_RESERVED | SQLSERVER_RESERVED
    identifier_quotes = (_BRACKET, _DOUBLE)
    unquoted_case = "preserve"


class OracleDialect(BaseDialect):
    """Oracle 12.2+: 128-byte identifiers, unquoted names fold to upper case."""

    name = "oracle"
    max_identifier_length = 128
    reserved_words = SQL_RESERVED | ORACLE_RESERVED
    unquoted_case = "upper"


# =========================================================================
# Registry / Factory
# =========================================================================

# Pre-instantiated singletons (dialects are stateless)
_DIALECTS: dict[str, Dialect] = {
    "ansi": AnsiDialect(),
    "postgresql": PostgreSQLDialect(),
    "mysql": MySQLDialect(),
    "sqlite": SQLiteDialect(),
    "sqlserver": SQLServerDialect(),
    "oracle": OracleDialect(),
}

_ALIASES: dict[str, str] = {
    "postgres": "postgresql",
    "pg": "postgresql",
    "mariadb": "mysql",
    "mssql": "sqlserver",
    "tsql": "sqlserver",
}


def get_dialect(name: str) -> Dialect:
    """Get a dialect by name or alias.

    Raises:
        UnknownDialectError: If ``name`` is not registered.

    Example:
        >>> get_dialect("Postgres").name
        'postgresql'
    """
    key = name.lower().strip()
    key = _ALIASES.get(key, key)
    if key not in _DIALECTS:
        raise UnknownDialectError(name, list_dialects())
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation.

    Args:
        name: Lookup key (lower-cased automatically).
        dialect: Instance implementing :class:`Dialect`.
    """
    _DIALECTS[name.lower()] = dialect


def list_dialects() -> list[str]:
    """Canonical dialect names, aliases excluded."""
    return sorted(_DIALECTS)


__all__ = [
    "Dialect",
    "BaseDialect",
    "AnsiDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "SQLiteDialect",
    "SQLServerDialect",
    "OracleDialect",
    "get_dialect",
    "register_dialect",
    "list_dialects",
]
