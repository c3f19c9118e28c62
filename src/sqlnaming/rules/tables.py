"""Relation rules (T0xx) - table and view names."""

from __future__ import annotations

from sqlnaming.naming.words import is_plural, is_uncountable, pluralize, singularize, split_words
from sqlnaming.rules.base import Diagnostic, RuleContext, Severity, rule
from sqlnaming.schema.model import QualifiedName


def _relations(ctx: RuleContext) -> list[tuple[str, QualifiedName]]:
    relations = [("table", t.name) for t in ctx.catalog.tables.values()]
    relations.extend(("view", v.name) for v in ctx.catalog.views)
    return relations


@rule(
    "T001",
    "singular-relation-names",
    "Table and view names should be singular (or plural, if configured).",
    Severity.WARNING,
    rationale=(
        "A table describes one kind of thing; each row is one of them. Singular "
        "names read naturally in joins (team.id, person.team_id) and avoid "
        "irregular plurals. Set table_names: plural to enforce the opposite."
    ),
)
def check_relation_number(ctx: RuleContext) -> list[Diagnostic]:
    want_plural = ctx.config.table_names == "plural"
    diagnostics = []
    for object_type, qname in _relations(ctx):
        words = split_words(qname.name)
        if not words or ctx.is_allowed(qname.name):
            continue
        last = words[-1]
        if ctx.is_allowed(last) or last.isdigit() or is_uncountable(last):
            continue
        if want_plural and not is_plural(last):
            fixed = pluralize(last)
            message = f"{object_type.capitalize()} name '{qname.name}' is singular."
        elif not want_plural and is_plural(last):
            fixed = singularize(last)
            message = f"{object_type.capitalize()} name '{qname.name}' is plural."
        else:
            continue
        diagnostics.append(ctx.diagnostic(
            message,
            identifier=qname.identifier,
            object_type=object_type,
            suggestion="_".join([*words[:-1], fixed]),
        ))
    return diagnostics


@rule(
    "T002",
    "no-relation-prefixes",
    "Table and view names should not carry type prefixes such as tbl_ or vw_.",
    Severity.WARNING,
    rationale=(
        "Whether a relation is a table or a view is visible in the catalog; "
        "encoding it in the name means renaming everything when a table becomes "
        "a view. Use schemas to group related relations."
    ),
)
def check_relation_prefix(ctx: RuleContext) -> list[Diagnostic]:
    prefixes = sorted(ctx.config.forbidden_prefixes, key=len, reverse=True)
    diagnostics = []
    for object_type, qname in _relations(ctx):
        lowered = qname.name.lower()
        for prefix in prefixes:
            if lowered.startswith(prefix) and len(lowered) > len(prefix):
                diagnostics.append(ctx.diagnostic(
                    f"{object_type.capitalize()} name '{qname.name}' starts with the prefix '{prefix}'.",
                    identifier=qname.identifier,
                    object_type=object_type,
                    suggestion=qname.name[len(prefix):],
                ))
                break
    return diagnostics
