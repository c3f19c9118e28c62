"""
Report formatters.

Every formatter takes a :class:`LintReport` and returns a string, except
``render_rich`` which prints straight to a rich console:

* ``text``   - one line per diagnostic plus a summary (default)
* ``json``   - machine-readable payload
* ``github`` - GitHub Actions workflow commands (``::error file=...::``)
* ``rich``   - coloured tables grouped by file
"""

from __future__ import annotations

import json
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sqlnaming.core.errors import ConfigError
from sqlnaming.linter import LintReport
from sqlnaming.rules import Diagnostic, Severity

Formatter = Callable[[LintReport], str]

_SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}

_GITHUB_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def format_text(report: LintReport) -> str:
    lines = [str(d) for d in report.diagnostics]
    lines.append(report.summary())
    return "\n".join(lines)


def format_json(report: LintReport) -> str:
    data = {
        "passed": report.passed,
        "files_checked": report.files_checked,
        "error_count": report.error_count,
        "warning_count": report.warning_count,
        "info_count": report.info_count,
        "by_code": report.by_code(),
        "diagnostics": [d.to_dict() for d in report.diagnostics],
    }
    return json.dumps(data, indent=2)


def _escape_github(value: str, *, property_value: bool = False) -> str:
    value = value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    if property_value:
        value = value.replace(":", "%3A").replace(",", "%2C")
    return value


def _github_line(diagnostic: Diagnostic) -> str:
    props = []
    if diagnostic.path:
        props.append(f"file={_escape_github(diagnostic.path, property_value=True)}")
    if diagnostic.line:
        props.append(f"line={diagnostic.line}")
    if diagnostic.column:
        props.append(f"col={diagnostic.column}")
    props.append(f"title={diagnostic.code}")
    message = f"[{diagnostic.code}] {diagnostic.message}"
    if diagnostic.suggestion:
        message += f" (suggestion: {diagnostic.suggestion})"
    return f"::{_GITHUB_LEVELS[diagnostic.severity]} {','.join(props)}::{_escape_github(message)}"


def format_github(report: LintReport) -> str:
    """GitHub Actions annotations, one per diagnostic."""
    return "\n".join(_github_line(d) for d in report.diagnostics)


def render_rich(report: LintReport, console: Console | None = None) -> None:
    """Print one table per file with findings, then the summary."""
    console = console or Console()
    for result in report.results:
        if not result.diagnostics:
            continue
        table = Table(title=escape(result.source), title_justify="left", show_lines=False)
        table.add_column("Line", justify="right", style="dim")
        table.add_column("Code", style="bold")
        table.add_column("Severity")
        table.add_column("Object")
        table.add_column("Message")
        table.add_column("Suggestion", style="green")
        for d in result.diagnostics:
            location = f"{d.line}:{d.column}" if d.line else ""
            style = _SEVERITY_STYLES[d.severity]
            table.add_row(
                location,
                d.code,
                f"[{style}]{d.severity.value}[/{style}]",
                escape(d.object_name or ""),
                escape(d.message),
                escape(d.suggestion or ""),
            )
        console.print(table)

    style = "green" if report.passed else "bold red"
    console.print(f"[{style}]{report.summary()}[/{style}]")


FORMATTERS: dict[str, Formatter] = {
    "text": format_text,
    "json": format_json,
    "github": format_github,
}

FORMAT_NAMES = (*FORMATTERS, "rich")


def get_formatter(name: str) -> Formatter:
    """Look up a string formatter by name.

    Raises:
        ConfigError: If the name is unknown (``rich`` renders directly and
            is handled by the CLI).
    """
    try:
        return FORMATTERS[name.lower()]
    except KeyError:
        raise ConfigError(
            f"Unknown output format '{name}'. Supported: {', '.join(FORMAT_NAMES)}"
        ) from None


__all__ = [
    "FORMATTERS",
    "FORMAT_NAMES",
    "Formatter",
    "format_text",
    "format_json",
    "format_github",
    "render_rich",
    "get_formatter",
]
