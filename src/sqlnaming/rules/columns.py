"""Column rules (C0xx) - keys and table-name repetition."""

from __future__ import annotations

from sqlnaming.naming.words import DATA_TYPE_NAMES, singularize, split_words
from sqlnaming.rules.base import Diagnostic, RuleContext, Severity, rule
from sqlnaming.schema.model import Constraint, ConstraintKind, Table


def singular_table_name(name: str) -> str:
    """``order_items`` -> ``order_item``; used to build foreign key names."""
    words = split_words(name)
    if not words:
        return name.lower()
    return "_".join([*words[:-1], singularize(words[-1])])


def foreign_key_column_name(ctx: RuleContext, referenced_table: str) -> str:
    return ctx.config.foreign_key_pattern.format(table=singular_table_name(referenced_table))


def _fk_suffix(ctx: RuleContext) -> str:
    return ctx.config.foreign_key_pattern.split("{table}", 1)[1]


def _is_single_fk(table: Table, column: str) -> bool:
    return any(
        c.kind == ConstraintKind.FOREIGN_KEY and len(c.columns) == 1 and c.columns[0].lower() == column.lower()
        for c in table.constraints
    )


@rule(
    "C001",
    "primary-key-name",
    "A single-column surrogate primary key should be named 'id'.",
    Severity.WARNING,
    rationale=(
        "When every table's key is 'id', joins read the same everywhere "
        "(team.id = person.team_id) and nobody has to look up whether the key "
        "is team_id, teamid or team_key. The expected name is configurable as "
        "primary_key_name."
    ),
)
def check_primary_key_name(ctx: RuleContext) -> list[Diagnostic]:
    expected = ctx.config.primary_key_name
    diagnostics = []
    for table in ctx.catalog.tables.values():
        pk = table.primary_key
        if pk is None or len(pk.columns) != 1:
            continue
        column = pk.columns[0]
        if column.lower() == expected.lower():
            continue
        # A key that is also a foreign key (one-to-one extension tables)
        # carries the referenced table's name on purpose
        if _is_single_fk(table, column):
            continue
        col = table.column(column)
        diagnostics.append(ctx.diagnostic(
            f"Primary key column '{column}' of table '{table.name.name}' should be named '{expected}'.",
            identifier=col.name if col else None,
            location=None if col else pk.location,
            object_type="column",
            object_name=f"{table.name.name}.{column}",
            suggestion=expected,
        ))
    return diagnostics


def _references_primary_key(ctx: RuleContext, constraint: Constraint) -> bool:
    if not constraint.ref_columns:
        return True
    if len(constraint.ref_columns) != 1:
        return False
    target = ctx.catalog.get_table(constraint.ref_table) if constraint.ref_table else None
    pk = target.primary_key if target else None
    if pk is not None and len(pk.columns) == 1:
        return pk.columns[0].lower() == constraint.ref_columns[0].lower()
    return constraint.ref_columns[0].lower() == ctx.config.primary_key_name.lower()


@rule(
    "C002",
    "foreign-key-name",
    "A foreign key column should be named after the table it references ('team_id').",
    Severity.WARNING,
    rationale=(
        "A column named '<table>_id' says what it points to without reading the "
        "constraint. When a table references another more than once, prefix the "
        "role: 'manager_person_id', 'home_team_id'."
    ),
)
def check_foreign_key_name(ctx: RuleContext) -> list[Diagnostic]:
    suffix = _fk_suffix(ctx)
    diagnostics = []
    for table in ctx.catalog.tables.values():
        for constraint in table.constraints:
            if constraint.kind != ConstraintKind.FOREIGN_KEY or len(constraint.columns) != 1:
                continue
            if constraint.ref_table is None or not _references_primary_key(ctx, constraint):
                continue
            column = constraint.columns[0].lower()
            referenced = constraint.ref_table.name
            expected = foreign_key_column_name(ctx, referenced)
            if column == expected or column.endswith("_" + expected):
                continue
            # parent_id, previous_version_id
            if referenced.lower() == table.name.name.lower() and suffix and column.endswith(suffix):
                continue
            col = table.column(constraint.columns[0])
            diagnostics.append(ctx.diagnostic(
                f"Foreign key column '{constraint.columns[0]}' references '{referenced}'; "
                f"expected '{expected}' or '<role>_{expected}'.",
                identifier=col.name if col else None,
                location=None if col else constraint.location,
                object_type="column",
                object_name=f"{table.name.name}.{constraint.columns[0]}",
                suggestion=expected,
            ))
    return diagnostics


@rule(
    "C003",
    "no-table-name-prefix",
    "Column names should not repeat the table name.",
    Severity.INFO,
    rationale=(
        "Inside table 'team', 'team_name' is just 'name'; queries already say "
        "team.name. The foreign key pattern for the table itself is allowed, as "
        "are names whose remainder would be a reserved word or type name."
    ),
)
def check_table_prefix(ctx: RuleContext) -> list[Diagnostic]:
    diagnostics = []
    for table in ctx.catalog.tables.values():
        table_name = table.name.name.lower()
        prefixes = {table_name + "_", singular_table_name(table_name) + "_"}
        own_fk = foreign_key_column_name(ctx, table_name)
        for col in table.columns:
            column = col.name.name.lower()
            if column == own_fk:
                continue
            prefix = next((p for p in sorted(prefixes, key=len, reverse=True) if column.startswith(p)), None)
            if prefix is None:
                continue
            remainder = column[len(prefix):]
            if not remainder or remainder in DATA_TYPE_NAMES or ctx.dialect.is_reserved(remainder):
                continue
            diagnostics.append(ctx.diagnostic(
                f"Column '{col.name.name}' repeats the table name '{table.name.name}'.",
                identifier=col.name,
                object_type="column",
                object_name=f"{table.name.name}.{col.name.name}",
                suggestion=remainder,
            ))
    return diagnostics
