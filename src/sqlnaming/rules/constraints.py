"""Constraint, index and sequence rules (K0xx).

Constraint and index names follow ``constraint_pattern``, by default
PostgreSQL's own ``{table}_{columns}_{suffix}``::

    team_pkey                 PRIMARY KEY (id)
    person_team_id_fkey       FOREIGN KEY (team_id)
    person_email_key          UNIQUE (email)
    person_created_at_idx     INDEX (created_at)
    person_age_check          CHECK (age >= 0)
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from sqlnaming.naming.words import to_snake_case
from sqlnaming.rules.base import Diagnostic, RuleContext, Severity, rule
from sqlnaming.schema.model import ConstraintKind

if TYPE_CHECKING:
    from sqlnaming.config import LintConfig

_PLAIN_COLUMN = re.compile(r"^[A-Za-z_][A-Za-z0-9_$#@]*$")
_REPEATED_UNDERSCORE = re.compile(r"_{2,}")

_KIND_LABELS = {
    ConstraintKind.PRIMARY_KEY: "primary key",
    ConstraintKind.FOREIGN_KEY: "foreign key",
    ConstraintKind.UNIQUE: "unique",
    ConstraintKind.CHECK: "check",
    ConstraintKind.EXCLUDE: "exclusion",
}

# Kinds whose columns are not part of the expected name
_LOOSE_KINDS = (ConstraintKind.PRIMARY_KEY, ConstraintKind.CHECK, ConstraintKind.EXCLUDE)


def _kind_key(kind: ConstraintKind | str) -> str:
    return kind.value if isinstance(kind, ConstraintKind) else kind


def _tidy(name: str) -> str:
    return _REPEATED_UNDERSCORE.sub("_", name).strip("_")


def expected_constraint_name(
    config: LintConfig,
    table: str,
    columns: list[str],
    kind: ConstraintKind | str,
) -> str:
    """Name ``constraint_pattern`` gives a constraint or index.

    ``kind`` is a :class:`ConstraintKind` or one of ``"index"`` and
    ``"sequence"``.
    """
    suffix = config.constraint_suffixes[_kind_key(kind)]
    if kind == ConstraintKind.PRIMARY_KEY:
        columns = []
    return _tidy(config.constraint_pattern.format(
        table=table.lower(),
        columns="_".join(to_snake_case(c) for c in columns),
        suffix=suffix,
    ))


def _pattern_bounds(config: LintConfig, table: str, suffix: str) -> tuple[str, str]:
    """Text the pattern puts before and after ``{columns}``."""
    pattern = config.constraint_pattern
    if "{columns}" not in pattern:
        full = _tidy(pattern.format(table=table.lower(), columns="", suffix=suffix))
        return full, ""
    head, tail = pattern.split("{columns}", 1)
    return head.format(table=table.lower(), suffix=suffix), tail.format(table=table.lower(), suffix=suffix)


def matches_pattern(
    config: LintConfig,
    name: str,
    table: str,
    columns: list[str],
    kinds: list[ConstraintKind | str],
    limit: int | None = None,
) -> bool:
    """Whether ``name`` is an acceptable name for the object.

    Columns given as expressions, primary keys and CHECK/EXCLUDE
    constraints only need the text around ``{columns}``.  A name truncated to ``limit`` counts as
    a match.
    """
    actual = name.lower()
    for kind in kinds:
        suffix = config.constraint_suffixes[_kind_key(kind)]
        loose = kind in _LOOSE_KINDS or not columns or any(not _PLAIN_COLUMN.match(c) for c in columns)
        if loose:
            head, tail = _pattern_bounds(config, table, suffix)
            if actual == _tidy(head + tail):
                return True
            if actual.startswith(head) and actual.endswith(tail) and len(actual) > len(head) + len(tail):
                return True
            continue
        expected = expected_constraint_name(config, table, columns, kind)
        if actual == expected:
            return True
        if limit is not None and len(expected) > limit and actual == expected[:limit]:
            return True
    return False


@rule(
    "K001",
    "named-constraints",
    "Constraints should be given explicit names.",
    Severity.WARNING,
    rationale=(
        "Generated names differ between databases and versions ('SYS_C0012345', "
        "'team_ibfk_1'), so migrations that drop or alter a constraint by name "
        "break on the next environment. Name every constraint yourself."
    ),
)
def check_unnamed_constraints(ctx: RuleContext) -> list[Diagnostic]:
    diagnostics = []
    for table in ctx.catalog.tables.values():
        for constraint in table.constraints:
            if constraint.is_named:
                continue
            label = _KIND_LABELS[constraint.kind]
            columns = f" ({', '.join(constraint.columns)})" if constraint.columns else ""
            diagnostics.append(ctx.diagnostic(
                f"Unnamed {label} constraint{columns} on table '{table.name.name}'.",
                location=constraint.location,
                object_type="constraint",
                object_name=table.name.name,
                suggestion=expected_constraint_name(ctx.config, table.name.name, constraint.columns, constraint.kind),
            ))
    return diagnostics


@rule(
    "K002",
    "named-indexes",
    "Indexes should be given explicit names.",
    Severity.WARNING,
    rationale=(
        "An unnamed index gets a generated name that cannot be referenced "
        "reliably from a later migration, and running the script twice may "
        "create a duplicate index instead of failing."
    ),
)
def check_unnamed_indexes(ctx: RuleContext) -> list[Diagnostic]:
    diagnostics = []
    for index in ctx.catalog.indexes:
        if index.name is not None:
            continue
        kind = "unique index" if index.unique else "index"
        columns = f" ({', '.join(index.columns)})" if index.columns else ""
        diagnostics.append(ctx.diagnostic(
            f"Unnamed {kind}{columns} on table '{index.table}'.",
            location=index.location,
            object_type="index",
            object_name=index.table,
            suggestion=expected_constraint_name(ctx.config, index.table, index.columns, "index"),
        ))
    return diagnostics


@rule(
    "K003",
    "constraint-name-pattern",
    "Constraint and index names should follow '{table}_{columns}_{suffix}'.",
    Severity.INFO,
    rationale=(
        "A name built from the table, the columns and the kind tells you what "
        "failed when an error message mentions only the constraint, and it is "
        "what PostgreSQL generates, so hand-written and generated names agree."
    ),
)
def check_constraint_pattern(ctx: RuleContext) -> list[Diagnostic]:
    limit = ctx.config.effective_max_length(ctx.dialect)
    diagnostics = []
    for table in ctx.catalog.tables.values():
        for constraint in table.constraints:
            if constraint.name is None:
                continue
            if matches_pattern(ctx.config, constraint.name.name, table.name.name,
                               constraint.columns, [constraint.kind], limit):
                continue
            expected = expected_constraint_name(ctx.config, table.name.name, constraint.columns, constraint.kind)
            diagnostics.append(ctx.diagnostic(
                f"Constraint name '{constraint.name.name}' does not follow the naming pattern.",
                identifier=constraint.name,
                object_type="constraint",
                object_name=f"{table.name.name}.{constraint.name.name}",
                suggestion=expected,
            ))

    for index in ctx.catalog.indexes:
        if index.name is None:
            continue
        kinds: list[ConstraintKind | str] = ["index"]
        if index.unique:
            kinds.append(ConstraintKind.UNIQUE)
        if matches_pattern(ctx.config, index.name.name, index.table, index.columns, kinds, limit):
            continue
        diagnostics.append(ctx.diagnostic(
            f"Index name '{index.name.name}' does not follow the naming pattern.",
            identifier=index.name,
            object_type="index",
            object_name=f"{index.table}.{index.name.name}",
            suggestion=expected_constraint_name(ctx.config, index.table, index.columns, "index"),
        ))
    return diagnostics


@rule(
    "K004",
    "sequence-suffix",
    "Sequence names should end in '_seq'.",
    Severity.INFO,
    rationale=(
        "Sequences share a namespace with tables; the suffix keeps 'invoice' the "
        "table and 'invoice_id_seq' its counter. PostgreSQL names the sequences "
        "behind serial columns the same way."
    ),
)
def check_sequence_suffix(ctx: RuleContext) -> list[Diagnostic]:
    suffix = "_" + ctx.config.constraint_suffixes["sequence"]
    return [
        ctx.diagnostic(
            f"Sequence '{sequence.name.name}' does not end in '{suffix}'.",
            identifier=sequence.name.identifier,
            object_type="sequence",
            suggestion=sequence.name.name.lower() + suffix,
        )
        for sequence in ctx.catalog.sequences
        if not sequence.name.name.lower().endswith(suffix)
    ]
