"""
CLI: ``sqlnaming rules``, ``sqlnaming explain`` and ``sqlnaming dialects``.
"""

from __future__ import annotations

import json

import typer
from rich.table import Table

from sqlnaming.cli.utils import console, fail
from sqlnaming.core.dialect import get_dialect, list_dialects
from sqlnaming.core.errors import SqlNamingError
from sqlnaming.rules import get_rule, list_rules


def rules_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """List every naming rule."""
    rules = list_rules()
    if json_out:
        data = [
            {
                "code": r.code,
                "name": r.name,
                "category": r.category,
                "severity": r.default_severity.value,
                "summary": r.summary,
            }
            for r in rules
        ]
        typer.echo(json.dumps(data, indent=2))
        return

    table = Table(title="Naming rules")
    table.add_column("Code", style="bold")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Summary")
    for r in rules:
        table.add_row(r.code, r.name, r.category, r.default_severity.value, r.summary)
    console.print(table)


def explain_cmd(
    code: str = typer.Argument(..., help="Rule code, e.g. N004."),
) -> None:
    """Explain what a rule checks and why."""
    try:
        r = get_rule(code)
    except SqlNamingError as e:
        raise fail(e) from e

    console.print(f"[bold]{r.code}[/bold] {r.name} ({r.default_severity.value}, {r.category})")
    console.print(r.summary)
    if r.rationale:
        console.print()
        console.print(r.rationale)


def dialects_cmd() -> None:
    """List the supported SQL dialects."""
    table = Table(title="Dialects")
    table.add_column("Name", style="bold")
    table.add_column("Max identifier length", justify="right")
    table.add_column("Unquoted case")
    table.add_column("Quotes")
    table.add_column("Reserved words", justify="right")
    for name in list_dialects():
        d = get_dialect(name)
        limit = str(d.max_identifier_length) if d.max_identifier_length else "none"
        quotes = " ".join(f"{o}{c}" for o, c in d.identifier_quotes)
        table.add_row(d.name, limit, d.unquoted_case, quotes, str(len(d.reserved_words)))
    console.print(table)
