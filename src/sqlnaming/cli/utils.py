"""
CLI utility helpers - consoles, error reporting and option parsing.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from sqlnaming.core.errors import SqlNamingError

console = Console()
err_console = Console(stderr=True)

# Exit codes
EXIT_OK = 0
EXIT_LINT_FAILED = 1
EXIT_USAGE_ERROR = 2


def fail(error: SqlNamingError) -> typer.Exit:
    """Print ``error`` to stderr and return the exit to raise."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", soft_wrap=True)
    return typer.Exit(code=EXIT_USAGE_ERROR)


def split_codes(values: list[str] | None) -> list[str] | None:
    """Flatten ``--ignore N001,N002 --ignore K`` into ``['N001', 'N002', 'K']``."""
    if not values:
        return None
    return [code.strip() for value in values for code in value.split(",") if code.strip()]
