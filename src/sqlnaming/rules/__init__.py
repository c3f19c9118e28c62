"""
Naming rules.

Importing this package registers every built-in rule:

* ``N0xx`` identifiers (quoting, case, characters, reserved words, length)
* ``T0xx`` tables and views (singular names, no type prefixes)
* ``C0xx`` columns (primary and foreign key names)
* ``K0xx`` constraints, indexes and sequences
* ``P001`` statements the parser could not follow
"""

from sqlnaming.rules import columns, constraints, identifiers, parsing, tables  # noqa: F401
from sqlnaming.rules.base import (
    Diagnostic,
    Rule,
    RuleCheck,
    RuleContext,
    Severity,
    clear_custom_rules,
    get_rule,
    list_rules,
    register_rule,
    rule,
)
from sqlnaming.rules.constraints import expected_constraint_name

__all__ = [
    "Diagnostic",
    "Rule",
    "RuleCheck",
    "RuleContext",
    "Severity",
    "clear_custom_rules",
    "expected_constraint_name",
    "get_rule",
    "list_rules",
    "register_rule",
    "rule",
]
