"""SQL naming linter - runs the rule registry over parsed DDL.

Architecture::

    Linter.lint_paths(paths)
    │
    ├── collect_files()          directories → **/*.sql, minus ``exclude``
    ├── DDLParser.parse_file()   every file into ONE catalog
    ├── run_rules(catalog)
    │   ├── N0xx / T0xx / C0xx / K0xx / P001   (enabled rules, in code order)
    │   └── rule crash → X001 warning
    ├── suppressions             inline ``-- sqlnaming: disable`` directives
    └── split per file
    │
    ▼
    LintReport
    ├── results: list[LintResult]
    ├── passed → bool (no errors)
    └── summary() → str

Parsing every file into one catalog lets a foreign key in
``002_orders.sql`` resolve the table created in ``001_init.sql``.

Example::

    from sqlnaming.linter import lint_sql

    result = lint_sql('CREATE TABLE "Users" (UserID int PRIMARY KEY);')
    for d in result.diagnostics:
        print(d)
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sqlnaming.config import LintConfig
from sqlnaming.core.errors import SourceNotFoundError
from sqlnaming.core.logging import LogContext, get_logger
from sqlnaming.parser.ddl import DDLParser
from sqlnaming.rules import Diagnostic, Rule, RuleContext, Severity, list_rules
from sqlnaming.schema.model import Catalog

logger = get_logger(__name__)

INTERNAL_ERROR_CODE = "X001"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Diagnostics for one source (a file, or ``<sql>`` for inline text).

    Attributes:
        source: Path of the linted file.
        diagnostics: All findings for that source, sorted by position.
    """

    source: str
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if there are no error-level diagnostics."""
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def infos(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.INFO]

    def summary(self) -> str:
        """One-line summary of the lint result."""
        counts = {
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "infos": len(self.infos),
        }
        status = "PASS" if self.passed else "FAIL"
        parts = [f"{status}: {self.source}"]
        for label, count in counts.items():
            if count:
                parts.append(f"{count} {label}")
        return " | ".join(parts)

    def __str__(self) -> str:
        lines = [self.summary()]
        for d in self.diagnostics:
            lines.append(f"  {d}")
        return "\n".join(lines)


@dataclass
class LintReport:
    """Results for every linted source."""

    results: list[LintResult] = field(default_factory=list)
    files_checked: int = 0

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for result in self.results for d in result.diagnostics]

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def error_count(self) -> int:
        return sum(len(r.errors) for r in self.results)

    @property
    def warning_count(self) -> int:
        return sum(len(r.warnings) for r in self.results)

    @property
    def info_count(self) -> int:
        return sum(len(r.infos) for r in self.results)

    def by_code(self) -> dict[str, int]:
        """Diagnostic count per rule code, sorted by code."""
        counts = Counter(d.code for d in self.diagnostics)
        return dict(sorted(counts.items()))

    def failed(self, strict: bool = False) -> bool:
        """Whether the report should fail a build (warnings too when strict)."""
        return not self.passed or (strict and self.warning_count > 0)

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        noun = "file" if self.files_checked == 1 else "files"
        return (
            f"{status}: {self.files_checked} {noun} checked | "
            f"{self.error_count} errors | {self.warning_count} warnings | {self.info_count} infos"
        )

    def __str__(self) -> str:
        lines = [str(result) for result in self.results if result.diagnostics]
        lines.append(self.summary())
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Linter
# ---------------------------------------------------------------------------


def collect_files(paths: Iterable[str | Path], config: LintConfig | None = None) -> list[Path]:
    """Expand directories to their ``*.sql`` files and drop excluded ones.

    Raises:
        SourceNotFoundError: If a path does not exist.
    """
    config = config or LintConfig()
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = sorted(p for p in path.rglob("*.sql") if p.is_file())
        elif path.is_file():
            candidates = [path]
        else:
            raise SourceNotFoundError(str(path))
        for candidate in candidates:
            if config.should_exclude(candidate):
                logger.debug("file_excluded", path=str(candidate))
                continue
            if candidate not in files:
                files.append(candidate)
    return files


class Linter:
    """Parse DDL and run the enabled naming rules over it.

    Args:
        config: Lint configuration (defaults to :class:`LintConfig`).
        include_infos: If ``False``, info-level diagnostics are dropped.
        extra_rules: One-shot rules to run in addition to registered rules.
    """

    def __init__(
        self,
        config: LintConfig | None = None,
        *,
        include_infos: bool = True,
        extra_rules: list[Rule] | None = None,
    ):
        self.config = config or LintConfig()
        self.dialect = self.config.get_dialect()
        self.include_infos = include_infos
        self.extra_rules = list(extra_rules or [])

    def _parser(self) -> DDLParser:
        return DDLParser(self.dialect, strict=self.config.strict_parse)

    def enabled_rules(self) -> list[Rule]:
        rules = [r for r in [*list_rules(), *self.extra_rules] if self.config.is_enabled(r.code)]
        return sorted(rules, key=lambda r: r.code)

    def run_rules(self, catalog: Catalog) -> list[Diagnostic]:
        """Run every enabled rule and post-process the findings."""
        diagnostics: list[Diagnostic] = []
        for rule in self.enabled_rules():
            ctx = RuleContext(catalog, self.dialect, self.config, rule)
            try:
                diagnostics.extend(rule.check(ctx))
            except Exception as exc:
                logger.warning("rule_failed", code=rule.code, rule=rule.name, exc_info=True)
                diagnostics.append(Diagnostic(
                    code=INTERNAL_ERROR_CODE,
                    severity=Severity.WARNING,
                    message=f"Rule {rule.code} ({rule.name}) raised {type(exc).__name__}: {exc}",
                ))

        diagnostics = [d for d in diagnostics if not self._suppressed(catalog, d)]
        if not self.include_infos:
            diagnostics = [d for d in diagnostics if d.severity != Severity.INFO]
        return sorted(set(diagnostics), key=Diagnostic.sort_key)

    @staticmethod
    def _suppressed(catalog: Catalog, diagnostic: Diagnostic) -> bool:
        suppressions = catalog.suppressions.get(diagnostic.path)
        return bool(suppressions) and suppressions.is_suppressed(diagnostic)

    def lint_catalog(self, catalog: Catalog, source: str = "<catalog>") -> LintResult:
        result = LintResult(source=source, diagnostics=self.run_rules(catalog))
        logger.debug("lint_finished", source=source, summary=result.summary())
        return result

    def lint_text(self, sql: str, path: str | None = None) -> LintResult:
        """Lint SQL text; ``path`` is only used for locations."""
        with LogContext(path=path or "<sql>"):
            catalog = self._parser().parse(sql, path)
            return self.lint_catalog(catalog, source=path or "<sql>")

    def lint_file(self, path: str | Path) -> LintResult:
        with LogContext(path=str(path)):
            catalog = self._parser().parse_file(path)
            return self.lint_catalog(catalog, source=str(path))

    def lint_paths(self, paths: Iterable[str | Path]) -> LintReport:
        """Lint files and directories as one schema.

        Raises:
            SourceNotFoundError: If a path does not exist.
        """
        files = collect_files(paths, self.config)
        parser = self._parser()
        catalog = Catalog()
        for file in files:
            with LogContext(path=str(file)):
                parser.parse_file(file, catalog)

        diagnostics = self.run_rules(catalog)
        per_source: dict[str, list[Diagnostic]] = {str(f): [] for f in files}
        for diagnostic in diagnostics:
            per_source.setdefault(diagnostic.path or "<catalog>", []).append(diagnostic)

        report = LintReport(
            results=[LintResult(source, diags) for source, diags in per_source.items()],
            files_checked=len(files),
        )
        logger.info("lint_paths_finished", files=len(files), summary=report.summary())
        return report


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------


def lint_sql(sql: str, *, path: str | None = None, include_infos: bool = True, **config: Any) -> LintResult:
    """Lint SQL text with configuration given as keyword arguments.

    >>> lint_sql("CREATE TABLE team (id int PRIMARY KEY);", ignore=["K"]).passed
    True
    """
    return Linter(LintConfig.from_dict(config), include_infos=include_infos).lint_text(sql, path)


def lint_paths(paths: Iterable[str | Path], config: LintConfig | None = None) -> LintReport:
    return Linter(config).lint_paths(paths)


__all__ = [
    "INTERNAL_ERROR_CODE",
    "LintResult",
    "LintReport",
    "Linter",
    "collect_files",
    "lint_sql",
    "lint_paths",
]
