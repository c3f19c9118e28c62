"""Catalog model for parsed schema objects."""

from sqlnaming.schema.model import (
    Catalog,
    Column,
    Constraint,
    ConstraintKind,
    Identifier,
    Index,
    ParseIssue,
    QualifiedName,
    Schema,
    Sequence,
    SourceLocation,
    Table,
    View,
)

__all__ = [
    "Catalog",
    "Column",
    "Constraint",
    "ConstraintKind",
    "Identifier",
    "Index",
    "ParseIssue",
    "QualifiedName",
    "Schema",
    "Sequence",
    "SourceLocation",
    "Table",
    "View",
]
