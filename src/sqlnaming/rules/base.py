"""Diagnostic model and rule registry.

Every naming convention is a *rule*: a function that receives a
``RuleContext`` (catalog, dialect, configuration) and returns a list of
``Diagnostic`` objects.  Built-in rules register themselves with the
``@rule`` decorator when their module is imported; projects add their own
with ``register_rule``.

Architecture::

    @rule("N004", ...)            register_rule(Rule(...))
          │                              │
          ▼                              ▼
    _BUILT_IN_RULES              _CUSTOM_RULES
          └──────────┬───────────────────┘
                     ▼
               list_rules()  ──►  Linter runs each enabled rule
                                        │
                                        ▼
                               list[Diagnostic]

Example::

    from sqlnaming.rules.base import Rule, Severity, register_rule

    def no_legacy_prefix(ctx):
        return [
            ctx.diagnostic("X100", f"Table '{t.name.name}' uses the legacy prefix.",
                           identifier=t.name.identifier, object_type="table")
            for t in ctx.catalog.tables.values()
            if t.name.name.startswith("legacy_")
        ]

    register_rule(Rule("X100", "no-legacy-prefix", "Tables must not use legacy_",
                       Severity.WARNING, no_legacy_prefix))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from sqlnaming.core.dialect import Dialect
from sqlnaming.core.errors import RuleError, UnknownRuleError
from sqlnaming.core.logging import get_logger
from sqlnaming.schema.model import Catalog, Identifier, SourceLocation

if TYPE_CHECKING:
    from sqlnaming.config import LintConfig

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Diagnostic model
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    """Severity level for a diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return {"error": 3, "warning": 2, "info": 1}[self.value]


@dataclass(frozen=True)
class Diagnostic:
    """A single lint finding.

    Attributes:
        code: Rule code (e.g. ``"N004"``).
        severity: ``error``, ``warning`` or ``info``.
        message: Human-readable description.
        object_type: Kind of object (``table``, ``column``, ``index``, ...).
        object_name: Name of the offending object, qualified by its table
            for columns, constraints and indexes.
        location: Where the offending name appears.
        suggestion: Recommended fix (optional).
    """

    code: str
    severity: Severity
    message: str
    object_type: str | None = None
    object_name: str | None = None
    location: SourceLocation | None = None
    suggestion: str | None = None

    @property
    def path(self) -> str | None:
        return self.location.path if self.location else None

    @property
    def line(self) -> int | None:
        return self.location.line if self.location else None

    @property
    def column(self) -> int | None:
        return self.location.column if self.location else None

    def sort_key(self) -> tuple:
        return (self.path or "", self.line or 0, self.column or 0, self.code, self.message)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "object_type": self.object_type,
            "object_name": self.object_name,
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        prefix = f"{self.location}: " if self.location else ""
        head = f"[{self.code}] {self.severity.value.upper()}"
        where = f" in {self.object_type} '{self.object_name}'" if self.object_type and self.object_name else ""
        hint = f" (suggestion: {self.suggestion})" if self.suggestion else ""
        return f"{prefix}{head}{where}: {self.message}{hint}"


# ---------------------------------------------------------------------------
# Rule model
# ---------------------------------------------------------------------------


@dataclass
class RuleContext:
    """Everything a rule may look at."""

    catalog: Catalog
    dialect: Dialect
    config: LintConfig
    rule: Rule | None = None

    def diagnostic(
        self,
        message: str,
        *,
        identifier: Identifier | None = None,
        location: SourceLocation | None = None,
        object_type: str | None = None,
        object_name: str | None = None,
        suggestion: str | None = None,
        code: str | None = None,
        severity: Severity | None = None,
    ) -> Diagnostic:
        """Build a diagnostic for the running rule, applying severity overrides."""
        code = code or (self.rule.code if self.rule else "X000")
        default = severity or (self.rule.default_severity if self.rule else Severity.WARNING)
        return Diagnostic(
            code=code,
            severity=self.config.severity_for(code, default),
            message=message,
            object_type=object_type,
            object_name=object_name if object_name is not None else (identifier.name if identifier else None),
            location=location or (identifier.location if identifier else None),
            suggestion=suggestion,
        )

    def is_allowed(self, word: str) -> bool:
        return self.config.is_allowed(word)


RuleCheck = Callable[[RuleContext], list[Diagnostic]]


@dataclass(frozen=True)
class Rule:
    """A registered naming rule."""

    code: str
    name: str
    summary: str
    default_severity: Severity
    check: RuleCheck
    rationale: str = ""

    @property
    def category(self) -> str:
        return {
            "N": "identifiers",
            "T": "tables",
            "C": "columns",
            "K": "constraints",
            "P": "parsing",
        }.get(self.code[:1], "custom")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_BUILT_IN_RULES: dict[str, Rule] = {}
_CUSTOM_RULES: dict[str, Rule] = {}


def rule(
    code: str,
    name: str,
    summary: str,
    severity: Severity = Severity.WARNING,
    rationale: str = "",
) -> Callable[[RuleCheck], RuleCheck]:
    """Decorator registering a built-in rule."""

    def decorator(func: RuleCheck) -> RuleCheck:
        if code in _BUILT_IN_RULES:
            raise RuleError(f"Rule code '{code}' is already registered")
        _BUILT_IN_RULES[code] = Rule(code, name, summary, severity, func, rationale)
        return func

    return decorator


def register_rule(custom: Rule) -> None:
    """Register a custom rule.

    Raises:
        RuleError: If the code is already taken by a built-in or custom rule.
    """
    code = custom.code.upper()
    if code in _BUILT_IN_RULES or code in _CUSTOM_RULES:
        raise RuleError(f"Rule code '{code}' is already registered").with_context(rule=code)
    _CUSTOM_RULES[code] = custom
    logger.debug("rule_registered", code=code, name=custom.name)


def get_rule(code: str) -> Rule:
    key = code.upper()
    found = _BUILT_IN_RULES.get(key) or _CUSTOM_RULES.get(key)
    if found is None:
        raise UnknownRuleError(code)
    return found


def list_rules() -> list[Rule]:
    """All registered rules (built-in + custom) sorted by code."""
    return sorted([*_BUILT_IN_RULES.values(), *_CUSTOM_RULES.values()], key=lambda r: r.code)


def clear_custom_rules() -> None:
    """Remove all custom rules (built-in rules are preserved)."""
    _CUSTOM_RULES.clear()


__all__ = [
    "Severity",
    "Diagnostic",
    "RuleContext",
    "Rule",
    "RuleCheck",
    "rule",
    "register_rule",
    "get_rule",
    "list_rules",
    "clear_custom_rules",
]
