"""
CLI: ``sqlnaming lint`` - check SQL files against the naming rules.
"""

from __future__ import annotations

from pathlib import Path

import typer

from sqlnaming.cli.utils import EXIT_LINT_FAILED, console, fail, split_codes
from sqlnaming.config import LintConfig, discover_config, load_config
from sqlnaming.core.errors import SqlNamingError
from sqlnaming.core.logging import get_logger
from sqlnaming.core.settings import get_settings

logger = get_logger(__name__)


def build_config(
    paths: list[Path],
    config_file: Path | None = None,
    dialect: str | None = None,
    select: list[str] | None = None,
    ignore: list[str] | None = None,
) -> LintConfig:
    """Combine the config file, ``SQLNAMING_*`` settings and CLI options.

    Precedence: CLI option > config file > environment default.
    ``--ignore`` adds to the file's ``ignore`` list; ``--select`` replaces
    the file's ``select`` list.
    """
    settings = get_settings()
    path = config_file or settings.config_file
    start = paths[0] if paths else None
    found = path or discover_config(start)
    if dialect is None and found is None:
        dialect = settings.dialect

    config = load_config(path, start=start, dialect=dialect, select=select)
    if ignore:
        config = LintConfig.from_dict({**config.model_dump(), "ignore": [*config.ignore, *ignore]})
    logger.debug("config_resolved", config_file=str(found) if found else None, dialect=config.dialect)
    return config


def lint_cmd(
    paths: list[Path] = typer.Argument(..., help="SQL files or directories (searched for *.sql)."),
    dialect: str | None = typer.Option(None, "--dialect", "-d", help="SQL dialect (overrides the config file)."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Path to a .sqlnaming.yaml file."),
    select: list[str] | None = typer.Option(None, "--select", "-s", help="Only run these rule codes or prefixes."),
    ignore: list[str] | None = typer.Option(None, "--ignore", "-i", help="Skip these rule codes or prefixes."),
    output_format: str | None = typer.Option(
        None, "--format", "-f", help="Output format: text, json, github, rich."
    ),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero on warnings too."),
    no_infos: bool = typer.Option(False, "--no-infos", help="Hide info-level diagnostics."),
) -> None:
    """Lint SQL schema files for naming convention violations.

    All files are parsed into one schema, so foreign keys may reference
    tables created in other files.

    Example:
        sqlnaming lint migrations/
        sqlnaming lint schema.sql --dialect postgresql --ignore N008 --format json
    """
    from sqlnaming.linter import Linter
    from sqlnaming.reporting import get_formatter, render_rich

    fmt = (output_format or get_settings().output_format).lower()
    try:
        formatter = None if fmt == "rich" else get_formatter(fmt)
        config = build_config(paths, config_file, dialect, split_codes(select), split_codes(ignore))
        report = Linter(config, include_infos=not no_infos).lint_paths(paths)
    except SqlNamingError as e:
        raise fail(e) from e

    if formatter is None:
        render_rich(report, console)
    else:
        output = formatter(report)
        if output:
            typer.echo(output)

    if report.failed(strict):
        raise typer.Exit(code=EXIT_LINT_FAILED)
