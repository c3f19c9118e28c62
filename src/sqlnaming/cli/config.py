"""
CLI: ``sqlnaming config`` - inspect and create lint configuration.
"""

from __future__ import annotations

from pathlib import Path

import typer

from sqlnaming.cli.utils import EXIT_USAGE_ERROR, console, fail
from sqlnaming.config import (
    CONFIG_FILENAMES,
    DEFAULT_CONFIG_TEMPLATE,
    LintConfig,
    discover_config,
    load_config,
)
from sqlnaming.core.errors import SqlNamingError

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Path to a .sqlnaming.yaml file."),
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Show the effective configuration (file values merged over defaults)."""
    try:
        found = config_file or discover_config()
        config = load_config(found)
    except SqlNamingError as e:
        raise fail(e) from e

    if json_out:
        console.print_json(config.model_dump_json())
        return

    source = str(found) if found else "defaults (no configuration file found)"
    console.print(f"[bold]Source:[/bold] {source}")
    typer.echo(config.to_yaml())


@app.command("validate")
def validate_config(
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Path to a .sqlnaming.yaml file."),
) -> None:
    """Validate a configuration file."""
    found = config_file or discover_config()
    if found is None:
        console.print("[yellow]No configuration file found; defaults apply.[/yellow]")
        return
    try:
        load_config(found)
    except SqlNamingError as e:
        raise fail(e) from e
    console.print(f"[green]✓[/green] {found} is valid")


@app.command("init")
def init_config(
    dialect: str = typer.Option("ansi", "--dialect", "-d", help="Dialect to write into the file."),
    directory: Path = typer.Option(Path("."), "--dir", help="Directory to create the file in."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write a commented .sqlnaming.yaml with the default settings."""
    target = directory / CONFIG_FILENAMES[0]
    if target.exists() and not force:
        console.print(f"[yellow]Warning:[/yellow] {target} already exists. Use --force to overwrite.")
        raise typer.Exit(EXIT_USAGE_ERROR)

    content = DEFAULT_CONFIG_TEMPLATE.format(dialect=dialect)
    try:
        # Reject an unknown dialect before writing anything
        LintConfig.from_dict({"dialect": dialect})
    except SqlNamingError as e:
        raise fail(e) from e

    target.write_text(content, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {target}")
    console.print("Run `sqlnaming config validate` to check it after editing.")
