"""Inline suppression directives.

Directives live in SQL comments::

    CREATE TABLE "Users" (id int);   -- sqlnaming: disable=N001
    -- sqlnaming: disable=T001
    CREATE TABLE settings (id int PRIMARY KEY);
    -- sqlnaming: disable-file=N004

* A directive that shares its line with code applies to that line.
* A directive on a line of its own applies to the next piece of code: the
  whole statement when that code starts a statement, otherwise just the
  line it is on (e.g. one column of a ``CREATE TABLE``).
* ``disable-file`` applies to every line of the file.
* Without ``=CODES`` every rule is suppressed.  Codes may be prefixes
  (``N`` suppresses every identifier rule).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlnaming.parser.tokenizer import Token, TokenKind

if TYPE_CHECKING:
    from sqlnaming.rules import Diagnostic

ALL = "*"

_DIRECTIVE = re.compile(
    r"sqlnaming:\s*(?P<kind>disable-file|disable)(?:\s*=\s*(?P<codes>[A-Za-z0-9_]+(?:\s*,\s*[A-Za-z0-9_]+)*))?",
    re.IGNORECASE,
)


def _parse_codes(raw: str | None) -> set[str]:
    if not raw:
        return {ALL}
    codes = {code.strip().upper() for code in raw.split(",") if code.strip()}
    return codes or {ALL}


def _matches(code: str, selected: set[str]) -> bool:
    return ALL in selected or any(code.startswith(prefix) for prefix in selected)


@dataclass
class Suppressions:
    """Suppressed rule codes for one file."""

    path: str | None = None
    file_codes: set[str] = field(default_factory=set)
    line_codes: dict[int, set[str]] = field(default_factory=dict)

    def add_line(self, line: int, codes: set[str]) -> None:
        self.line_codes.setdefault(line, set()).update(codes)

    def is_suppressed(self, code: str | Diagnostic, line: int | None = None) -> bool:
        """Whether ``code`` is disabled at ``line``.

        A ``Diagnostic`` may be passed instead; its code and line are used.
        """
        if not isinstance(code, str):
            code, line = code.code, code.line
        if self.file_codes and _matches(code, self.file_codes):
            return True
        if line is None:
            return False
        selected = self.line_codes.get(line)
        return bool(selected) and _matches(code, selected)

    def __bool__(self) -> bool:
        return bool(self.file_codes or self.line_codes)


def _statement_spans(tokens: list[Token]) -> dict[int, int]:
    """Map each statement's first-token index to its last line."""
    spans: dict[int, int] = {}
    start: int | None = None
    last_line = 0
    for idx, token in enumerate(tokens):
        if token.kind is TokenKind.COMMENT:
            continue
        if token.is_punct(";"):
            if start is not None:
                spans[start] = token.line
            start = None
            continue
        if start is None:
            start = idx
        last_line = token.line
    if start is not None:
        spans[start] = last_line
    return spans


def collect_suppressions(tokens: list[Token], path: str | None = None) -> Suppressions:
    """Read every ``sqlnaming:`` directive from the comment tokens."""
    result = Suppressions(path=path)
    spans = _statement_spans(tokens)
    code_lines = {t.line for t in tokens if t.kind is not TokenKind.COMMENT}

    for idx, token in enumerate(tokens):
        if token.kind is not TokenKind.COMMENT:
            continue
        match = _DIRECTIVE.search(token.value)
        if match is None:
            continue
        codes = _parse_codes(match.group("codes"))

        if match.group("kind").lower() == "disable-file":
            result.file_codes.update(codes)
            continue

        if token.line in code_lines:
            result.add_line(token.line, codes)
            continue

        target = next(
            (j for j in range(idx + 1, len(tokens)) if tokens[j].kind is not TokenKind.COMMENT),
            None,
        )
        if target is None:
            continue
        first_line = tokens[target].line
        last_line = spans.get(target, first_line)
        for line in range(first_line, last_line + 1):
            result.add_line(line, codes)

    return result


__all__ = ["Suppressions", "collect_suppressions", "ALL"]
