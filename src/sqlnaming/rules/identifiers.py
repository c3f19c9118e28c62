"""Identifier rules (N0xx) - apply to every named object.

==== ============================== ========
Code Convention                     Severity
==== ============================== ========
N001 avoid quoted identifiers       warning
N002 lowercase only                 warning
N003 only ``[a-z0-9_]``             error
N004 avoid reserved words           error
N005 respect the length limit       error
N006 data types are not names       warning
N007 single underscores between     warning
N008 full words, not abbreviations  info
==== ============================== ========
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from sqlnaming.naming.words import DATA_TYPE_NAMES, expand_abbreviation, split_words, to_snake_case
from sqlnaming.rules.base import Diagnostic, RuleContext, Severity, rule
from sqlnaming.schema.model import Identifier

_VALID_CHARS = re.compile(r"^[A-Za-z0-9_]*$")

# Object types whose names are chosen freely (constraint and index names
# are derived from them, so word-level rules would only repeat findings)
_CHOSEN_NAMES = ("schema", "table", "column", "view", "sequence")


def _display_name(object_type: str, owner: str | None, identifier: Identifier) -> str:
    if object_type == "column" and owner:
        return f"{owner}.{identifier.name}"
    return identifier.name


def iter_names(ctx: RuleContext, object_types: tuple[str, ...] | None = None) -> Iterator[tuple[str, str, Identifier]]:
    """Yield ``(object_type, display_name, identifier)`` for catalog names."""
    for object_type, owner, identifier in ctx.catalog.identifiers():
        if object_types is None or object_type in object_types:
            yield object_type, _display_name(object_type, owner, identifier), identifier


@rule(
    "N001",
    "no-quoted-identifiers",
    "Identifiers should not need quoting.",
    Severity.WARNING,
    rationale=(
        "A quoted identifier must be quoted, with exactly the same case, in every "
        "query that uses it. Names that never need quotes are easier to type and "
        "portable across databases."
    ),
)
def check_quoted(ctx: RuleContext) -> list[Diagnostic]:
    return [
        ctx.diagnostic(
            f"Identifier \"{ident.name}\" is quoted.",
            identifier=ident,
            object_type=object_type,
            object_name=name,
            suggestion=to_snake_case(ident.name),
        )
        for object_type, name, ident in iter_names(ctx)
        if ident.quoted
    ]


@rule(
    "N002",
    "lowercase",
    "Identifiers should be lowercase snake_case.",
    Severity.WARNING,
    rationale=(
        "Databases fold unquoted names to one case (PostgreSQL to lower, Oracle to "
        "upper). Writing names in lowercase with underscores between words keeps "
        "the DDL, the catalog and the queries looking the same."
    ),
)
def check_lowercase(ctx: RuleContext) -> list[Diagnostic]:
    return [
        ctx.diagnostic(
            f"Identifier '{ident.name}' contains uppercase letters.",
            identifier=ident,
            object_type=object_type,
            object_name=name,
            suggestion=to_snake_case(ident.name),
        )
        for object_type, name, ident in iter_names(ctx)
        if any(ch.isupper() for ch in ident.name)
    ]


@rule(
    "N003",
    "valid-characters",
    "Identifiers should use only letters, digits and underscores, starting with a letter.",
    Severity.ERROR,
    rationale=(
        "Spaces, hyphens and other punctuation force quoting and break tools that "
        "generate code from the schema. A leading digit is not a valid unquoted "
        "identifier in most databases."
    ),
)
def check_characters(ctx: RuleContext) -> list[Diagnostic]:
    diagnostics = []
    for object_type, name, ident in iter_names(ctx):
        if not _VALID_CHARS.match(ident.name):
            bad = sorted({ch for ch in ident.name if not (ch.isascii() and (ch.isalnum() or ch == "_"))})
            diagnostics.append(ctx.diagnostic(
                f"Identifier '{ident.name}' contains invalid characters: {' '.join(repr(c) for c in bad)}.",
                identifier=ident,
                object_type=object_type,
                object_name=name,
                suggestion=to_snake_case(ident.name),
            ))
        elif ident.name[:1].isdigit():
            diagnostics.append(ctx.diagnostic(
                f"Identifier '{ident.name}' starts with a digit.",
                identifier=ident,
                object_type=object_type,
                object_name=name,
            ))
    return diagnostics


@rule(
    "N004",
    "no-reserved-words",
    "Identifiers should not be reserved words.",
    Severity.ERROR,
    rationale=(
        "A reserved word used as a name has to be quoted everywhere, and a word "
        "that is harmless today may become reserved in the next release. Prefer "
        "a more specific name: 'user' becomes 'app_user', 'order' becomes "
        "'purchase_order'."
    ),
)
def check_reserved(ctx: RuleContext) -> list[Diagnostic]:
    extra = set(ctx.config.extra_reserved_words)
    diagnostics = []
    for object_type, name, ident in iter_names(ctx):
        word = ident.name.lower()
        if ctx.is_allowed(word):
            continue
        if ctx.dialect.is_reserved(word) or word in extra:
            diagnostics.append(ctx.diagnostic(
                f"'{ident.name}' is a reserved word in {ctx.dialect.name}.",
                identifier=ident,
                object_type=object_type,
                object_name=name,
            ))
    return diagnostics


@rule(
    "N005",
    "max-length",
    "Identifiers should fit the dialect's maximum identifier length.",
    Severity.ERROR,
    rationale=(
        "PostgreSQL silently truncates names longer than 63 bytes, so two long "
        "names can collide; other databases reject them outright."
    ),
)
def check_length(ctx: RuleContext) -> list[Diagnostic]:
    limit = ctx.config.effective_max_length(ctx.dialect)
    if limit is None:
        return []
    return [
        ctx.diagnostic(
            f"Identifier is {len(ident.name.encode('utf-8'))} bytes long (limit: {limit}).",
            identifier=ident,
            object_type=object_type,
            object_name=name,
        )
        for object_type, name, ident in iter_names(ctx)
        if len(ident.name.encode("utf-8")) > limit
    ]


@rule(
    "N006",
    "no-type-names",
    "Data type names are not names.",
    Severity.WARNING,
    rationale=(
        "A column called 'timestamp' or 'text' says how a value is stored, not "
        "what it means. Name the meaning: 'created_at', 'body'."
    ),
)
def check_type_names(ctx: RuleContext) -> list[Diagnostic]:
    return [
        ctx.diagnostic(
            f"'{ident.name}' is a data type name; describe what the value means instead.",
            identifier=ident,
            object_type=object_type,
            object_name=name,
        )
        for object_type, name, ident in iter_names(ctx, ("table", "column", "view"))
        if ident.name.lower() in DATA_TYPE_NAMES and not ctx.is_allowed(ident.name)
    ]


@rule(
    "N007",
    "underscore-separators",
    "Underscores separate words: no leading, trailing or doubled underscores.",
    Severity.WARNING,
    rationale=(
        "Leading underscores read as 'private' or generated, doubled ones are easy "
        "to mistype, and trailing ones are invisible in most output."
    ),
)
def check_underscores(ctx: RuleContext) -> list[Diagnostic]:
    diagnostics = []
    for object_type, name, ident in iter_names(ctx):
        value = ident.name
        if value.startswith("_") or value.endswith("_") or "__" in value:
            cleaned = "_".join(part for part in value.split("_") if part)
            diagnostics.append(ctx.diagnostic(
                f"Identifier '{value}' has misplaced underscores.",
                identifier=ident,
                object_type=object_type,
                object_name=name,
                suggestion=cleaned or None,
            ))
    return diagnostics


@rule(
    "N008",
    "no-abbreviations",
    "Use full words rather than abbreviations.",
    Severity.INFO,
    rationale=(
        "'mid_name' could be a middle name or a message id. Full words are "
        "unambiguous; widely known abbreviations can be listed under "
        "allowed_words."
    ),
)
def check_abbreviations(ctx: RuleContext) -> list[Diagnostic]:
    extra = ctx.config.abbreviations
    diagnostics = []
    for object_type, name, ident in iter_names(ctx, _CHOSEN_NAMES):
        words = split_words(ident.name)
        found = {
            word: full
            for word in words
            if not ctx.is_allowed(word) and (full := expand_abbreviation(word, extra))
        }
        if not found:
            continue
        suggestion = "_".join(found.get(word, word) for word in words)
        listed = ", ".join(f"'{w}' ({full})" for w, full in found.items())
        diagnostics.append(ctx.diagnostic(
            f"Identifier '{ident.name}' uses abbreviations: {listed}.",
            identifier=ident,
            object_type=object_type,
            object_name=name,
            suggestion=suggestion,
        ))
    return diagnostics
