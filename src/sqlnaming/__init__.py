"""
sqlnaming - a linter for naming conventions in SQL schema definitions.

Parses DDL (``CREATE TABLE``, ``CREATE INDEX``, ``ALTER TABLE`` ...) into
a catalog of schema objects and checks every name against a registry of
rules: quoting, case, reserved words, singular table names, key column
names and explicitly named constraints and indexes.

Example::

    from sqlnaming import lint_sql

    result = lint_sql("CREATE TABLE Users (UserID int PRIMARY KEY);", dialect="postgresql")
    for diagnostic in result.diagnostics:
        print(diagnostic)
"""

__version__ = "0.1.0"

from sqlnaming.config import LintConfig, load_config
from sqlnaming.core.errors import SqlNamingError
from sqlnaming.linter import LintReport, LintResult, Linter, lint_paths, lint_sql
from sqlnaming.parser import parse_file, parse_sql
from sqlnaming.rules import Diagnostic, Rule, Severity, register_rule

__all__ = [
    "__version__",
    "Diagnostic",
    "LintConfig",
    "LintReport",
    "LintResult",
    "Linter",
    "Rule",
    "Severity",
    "SqlNamingError",
    "lint_paths",
    "lint_sql",
    "load_config",
    "parse_file",
    "parse_sql",
    "register_rule",
]
