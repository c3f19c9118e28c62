"""Parse issue rule (P001)."""

from __future__ import annotations

from sqlnaming.rules.base import Diagnostic, RuleContext, Severity, rule


@rule(
    "P001",
    "parse-issue",
    "Statements the parser could not follow are reported, not silently skipped.",
    Severity.WARNING,
    rationale=(
        "Names inside a statement that failed to parse are never checked. Fix "
        "the statement, suppress it with '-- sqlnaming: disable', or ignore P001 "
        "if the file mixes in SQL the linter does not understand."
    ),
)
def check_parse_issues(ctx: RuleContext) -> list[Diagnostic]:
    return [
        ctx.diagnostic(
            f"Could not parse statement: {issue.message}",
            location=issue.location,
            object_type="statement",
            object_name=issue.statement or None,
        )
        for issue in ctx.catalog.issues
    ]
