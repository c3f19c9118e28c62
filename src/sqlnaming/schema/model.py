"""
Catalog model - the schema objects recovered from DDL.

The parser produces a ``Catalog``; rules only ever read it.  Every named
object keeps the ``Identifier`` exactly as written (quoting, case and
location) because that is what naming rules judge, while lookups use the
normalized form so ``Orders`` and ``orders`` resolve to the same table.

Architecture:
    ::

        Catalog
          ├── schemas:   [Schema]
          ├── tables:    {name: Table}
          │                 ├── columns:     [Column]
          │                 └── constraints: [Constraint]
          ├── indexes:   [Index]
          ├── views:     [View]
          ├── sequences: [Sequence]
          └── issues:    [ParseIssue]
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlnaming.parser.suppressions import Suppressions


@dataclass(frozen=True)
class SourceLocation:
    """Position of a token in a source file (1-based)."""

    path: str | None
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path or '<sql>'}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Identifier:
    """A single name as written in the DDL."""

    name: str
    quoted: bool = False
    location: SourceLocation | None = None

    @property
    def normalized(self) -> str:
        """Key used to match references to definitions."""
        return self.name if self.quoted else self.name.lower()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class QualifiedName:
    """A possibly schema-qualified object name (``billing.invoice``)."""

    parts: tuple[Identifier, ...]

    @property
    def identifier(self) -> Identifier:
        return self.parts[-1]

    @property
    def name(self) -> str:
        return self.parts[-1].name

    @property
    def schema(self) -> str | None:
        return self.parts[-2].name if len(self.parts) > 1 else None

    @property
    def normalized(self) -> str:
        return ".".join(p.normalized for p in self.parts)

    @property
    def location(self) -> SourceLocation | None:
        return self.parts[0].location

    @classmethod
    def of(cls, *names: str) -> QualifiedName:
        return cls(tuple(Identifier(n) for n in names))

    def __str__(self) -> str:
        return ".".join(p.name for p in self.parts)


class ConstraintKind(str, Enum):
    """Constraint kinds that carry a name in the catalog."""

    PRIMARY_KEY = "primary_key"
    FOREIGN_KEY = "foreign_key"
    UNIQUE = "unique"
    CHECK = "check"
    EXCLUDE = "exclude"


@dataclass
class Column:
    name: Identifier
    data_type: str
    table: str

    @property
    def location(self) -> SourceLocation | None:
        return self.name.location


@dataclass
class Constraint:
    """A table or column constraint.

    ``table`` is the owning table's unqualified name; ``columns`` are the
    constrained column names as written.  For foreign keys ``ref_table``
    and ``ref_columns`` describe the target; an empty ``ref_columns`` means
    the target's primary key.
    """

    kind: ConstraintKind
    table: str
    columns: list[str] = field(default_factory=list)
    name: Identifier | None = None
    ref_table: QualifiedName | None = None
    ref_columns: list[str] = field(default_factory=list)
    inline: bool = False
    location: SourceLocation | None = None

    @property
    def is_named(self) -> bool:
        return self.name is not None


@dataclass
class Index:
    table: str
    columns: list[str] = field(default_factory=list)
    name: Identifier | None = None
    unique: bool = False
    location: SourceLocation | None = None


@dataclass
class Table:
    name: QualifiedName
    columns: list[Column] = field(default_factory=list)
    constraints: list[Constraint] = field(default_factory=list)
    location: SourceLocation | None = None

    def column(self, name: str) -> Column | None:
        """Look up a column by name (case-insensitive for unquoted names)."""
        key = name.lower()
        for col in self.columns:
            if col.name.normalized == name or col.name.name.lower() == key:
                return col
        return None

    @property
    def primary_key(self) -> Constraint | None:
        for constraint in self.constraints:
            if constraint.kind == ConstraintKind.PRIMARY_KEY:
                return constraint
        return None

    def rename_column(self, old: str, new: Identifier) -> bool:
        col = self.column(old)
        if col is None:
            return False
        col.name = new
        for constraint in self.constraints:
            constraint.columns = [new.name if c.lower() == old.lower() else c for c in constraint.columns]
        return True


@dataclass
class View:
    name: QualifiedName
    materialized: bool = False


@dataclass
class Sequence:
    name: QualifiedName


@dataclass
class Schema:
    name: Identifier


@dataclass
class ParseIssue:
    """A statement the parser could not understand."""

    message: str
    location: SourceLocation | None = None
    statement: str = ""


@dataclass
class Catalog:
    """All schema objects parsed from one or more SQL sources."""

    tables: dict[str, Table] = field(default_factory=dict)
    indexes: list[Index] = field(default_factory=list)
    views: list[View] = field(default_factory=list)
    sequences: list[Sequence] = field(default_factory=list)
    schemas: list[Schema] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    suppressions: dict[str | None, Suppressions] = field(default_factory=dict)

    # -- Mutation ----------------------------------------------------------

    def add_table(self, table: Table) -> Table:
        self.tables[table.name.normalized] = table
        return table

    def add_index(self, index: Index) -> None:
        self.indexes.append(index)

    def add_view(self, view: View) -> None:
        self.views.append(view)

    def add_sequence(self, sequence: Sequence) -> None:
        self.sequences.append(sequence)

    def add_schema(self, schema: Schema) -> None:
        self.schemas.append(schema)

    def add_issue(self, issue: ParseIssue) -> None:
        self.issues.append(issue)

    def rename_table(self, old: str, new: QualifiedName) -> Table | None:
        """Re-key the table stored under ``old`` (a catalog key)."""
        table = self.tables.pop(old, None) or self.tables.pop(old.lower(), None)
        if table is None:
            return None
        table.name = new
        for col in table.columns:
            col.table = new.name
        for constraint in table.constraints:
            constraint.table = new.name
        return self.add_table(table)

    def merge(self, other: Catalog) -> Catalog:
        """Fold ``other`` into this catalog (later definitions win)."""
        self.tables.update(other.tables)
        self.indexes.extend(other.indexes)
        self.views.extend(other.views)
        self.sequences.extend(other.sequences)
        self.schemas.extend(other.schemas)
        self.issues.extend(other.issues)
        self.sources.extend(s for s in other.sources if s not in self.sources)
        self.suppressions.update(other.suppressions)
        return self

    # -- Queries -----------------------------------------------------------

    def get_table(self, name: str | QualifiedName) -> Table | None:
        """Find a table by (possibly schema-qualified) name.

        An exact key wins.  Otherwise an unqualified name matches the one
        table with that name in any schema, and a qualified name matches
        an unqualified definition of the same table.
        """
        if isinstance(name, QualifiedName):
            key, last, qualified = name.normalized, name.identifier.normalized, len(name.parts) > 1
        else:
            key, last, qualified = name, name.split(".")[-1], "." in name
        found = self.tables.get(key) or self.tables.get(key.lower())
        if found is not None:
            return found

        candidates = (last, last.lower())
        matches = [
            table for table in self.tables.values()
            if table.name.identifier.normalized in candidates
            and (not qualified or table.name.schema is None)
        ]
        return matches[0] if len(matches) == 1 else None

    def constraints(self) -> Iterator[Constraint]:
        for table in self.tables.values():
            yield from table.constraints

    def identifiers(self) -> Iterator[tuple[str, str | None, Identifier]]:
        """Yield ``(object_type, owner, identifier)`` for every named object.

        ``owner`` is the table a column, constraint or index belongs to.
        """
        for schema in self.schemas:
            yield "schema", None, schema.name
        for table in self.tables.values():
            yield "table", None, table.name.identifier
            for col in table.columns:
                yield "column", table.name.name, col.name
            for constraint in table.constraints:
                if constraint.name is not None:
                    yield "constraint", table.name.name, constraint.name
        for index in self.indexes:
            if index.name is not None:
                yield "index", index.table, index.name
        for view in self.views:
            yield "view", None, view.name.identifier
        for sequence in self.sequences:
            yield "sequence", None, sequence.name.identifier


__all__ = [
    "SourceLocation",
    "Identifier",
    "QualifiedName",
    "ConstraintKind",
    "Column",
    "Constraint",
    "Index",
    "Table",
    "View",
    "Sequence",
    "Schema",
    "ParseIssue",
    "Catalog",
]
