"""
Root Typer application for the sqlnaming CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from sqlnaming.cli.utils import console, err_console

app = Typer(
    name="sqlnaming",
    help="sqlnaming - lint SQL schema definitions for naming conventions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from sqlnaming import __version__

        typer.echo(f"sqlnaming {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR); default from SQLNAMING_LOG_LEVEL."
    ),
    log_json: bool | None = typer.Option(
        None, "--log-json/--log-console", help="Force JSON or console log lines (default: JSON when not a TTY)."
    ),
) -> None:
    """sqlnaming CLI - check tables, columns, keys and indexes against naming rules."""
    from sqlnaming.core.logging import configure_logging
    from sqlnaming.core.settings import get_settings

    settings = get_settings()
    try:
        configure_logging(
            level=log_level or settings.log_level,
            json_format=log_json if log_json is not None else settings.log_json,
        )
    except ValueError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=2) from e

    if not settings.color:
        console.no_color = True
        err_console.no_color = True


# ── Sub-command registration ─────────────────────────────────────────────

from sqlnaming.cli.config import app as config_app  # noqa: E402
from sqlnaming.cli.lint import lint_cmd  # noqa: E402
from sqlnaming.cli.rules import dialects_cmd, explain_cmd, rules_cmd  # noqa: E402

app.command("lint")(lint_cmd)
app.command("rules")(rules_cmd)
app.command("explain")(explain_cmd)
app.command("dialects")(dialects_cmd)
app.add_typer(config_app, name="config", help="Configuration management.")
