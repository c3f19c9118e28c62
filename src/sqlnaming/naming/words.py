"""Word-level helpers for identifier analysis.

Splitting identifiers into words, rule-based English inflection for the
singular/plural table-name rule, the abbreviation dictionary and the set
of data type names that should never be used as names.

The inflector is intentionally small: it handles the regular English
suffix rules plus the irregular and uncountable nouns that show up in
schemas.  Projects with unusual vocabulary list their exceptions under
``allowed_words`` in the lint configuration.
"""

from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SNAKE_CASE = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")
_DIGITS = re.compile(r"(?<=[A-Za-z])(?=\d)|(?<=\d)(?=[A-Za-z])")

# singular -> plural
IRREGULAR: dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "foot": "feet",
    "tooth": "teeth",
    "ox": "oxen",
    "criterion": "criteria",
    "phenomenon": "phenomena",
    "datum": "data",
    "medium": "media",
    "analysis": "analyses",
    "axis": "axes",
    "index": "indexes",
    "matrix": "matrices",
    "vertex": "vertices",
    "quiz": "quizzes",
    "leaf": "leaves",
    "life": "lives",
    "knife": "knives",
    "wife": "wives",
    "half": "halves",
    "shelf": "shelves",
    "movie": "movies",
    "cookie": "cookies",
    "thief": "thieves",
    "wolf": "wolves",
    "calf": "calves",
    "self": "selves",
    "elf": "elves",
    "loaf": "loaves",
    "scarf": "scarves",
    "wharf": "wharves",
}
_IRREGULAR_PLURALS = {plural: singular for singular, plural in IRREGULAR.items()}

# Words whose singular and plural are the same, or that are mass nouns
UNCOUNTABLE = frozenset({
    "data", "metadata", "information", "equipment", "series", "species",
    "news", "status", "sheep", "fish", "deer", "money", "software",
    "hardware", "feedback", "staff", "inventory", "audio", "media",
    "analytics", "access", "progress", "research", "traffic",
    "weather", "stuff", "rice", "police", "aircraft", "bus", "gas",
    "campus", "virus", "alias", "canvas", "census", "corpus", "radius",
    "bonus", "chassis", "lens", "address", "class", "process", "business",
    "success", "loss", "glass", "boss", "pass", "bias", "atlas", "analysis",
    "axis", "basis", "crisis", "diagnosis", "thesis", "synopsis", "chaos",
    "kudos",
})

ABBREVIATIONS: dict[str, str] = {
    "acct": "account",
    "addr": "address",
    "amt": "amount",
    "attr": "attribute",
    "avg": "average",
    "cfg": "config",
    "cnt": "count",
    "cust": "customer",
    "dept": "department",
    "desc": "description",
    "dob": "date_of_birth",
    "dt": "date",
    "emp": "employee",
    "fname": "first_name",
    "lname": "last_name",
    "mid": "middle",
    "mgr": "manager",
    "msg": "message",
    "num": "number",
    "nbr": "number",
    "org": "organization",
    "pwd": "password",
    "passwd": "password",
    "qty": "quantity",
    "ref": "reference",
    "src": "source",
    "tmp": "temporary",
    "ts": "timestamp",
    "txn": "transaction",
    "usr": "user",
    "val": "value",
}

DATA_TYPE_NAMES = frozenset({
    "bigint", "binary", "bit", "blob", "bool", "boolean", "bytea", "char",
    "character", "clob", "date", "datetime", "decimal", "double", "float",
    "int", "integer", "interval", "json", "jsonb", "money", "nchar",
    "numeric", "nvarchar", "real", "serial", "smallint", "string", "text",
    "time", "timestamp", "timestamptz", "tinyint", "uuid", "varbinary",
    "varchar", "xml",
})

_VOWELS = set("aeiou")


def split_words(name: str) -> list[str]:
    """Split an identifier into lower-case words.

    >>> split_words("customerOrder_line2")
    ['customer', 'order', 'line', '2']
    """
    words: list[str] = []
    for chunk in re.split(r"[_\W]+", name):
        if not chunk:
            continue
        for piece in _CAMEL_BOUNDARY.split(chunk):
            words.extend(p.lower() for p in _DIGITS.split(piece) if p)
    return words


def is_snake_case(name: str) -> bool:
    return bool(_SNAKE_CASE.match(name))


def to_snake_case(name: str) -> str:
    """Best-effort snake_case form of ``name``."""
    return "_".join(split_words(name)) or name.lower()


def is_uncountable(word: str) -> bool:
    return word.lower() in UNCOUNTABLE


def singularize(word: str) -> str:
    """Singular form of an English noun (lower-case input expected)."""
    w = word.lower()
    if is_uncountable(w) or len(w) < 3:
        return w
    if w in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[w]
    if w in IRREGULAR:
        return w
    if w.endswith("ies") and len(w) > 4:
        return w[:-3] + "y"
    if w.endswith("ves"):
        return w[:-1]
    for suffix in ("sses", "shes", "ches", "xes", "zzes"):
        if w.endswith(suffix):
            return w[:-2]
    if w.endswith("uses") and w[:-2] in UNCOUNTABLE:
        return w[:-2]
    if w.endswith("s") and not w.endswith(("ss", "us", "is")):
        return w[:-1]
    return w


def pluralize(word: str) -> str:
    """Plural form of an English noun (lower-case input expected)."""
    w = word.lower()
    if is_uncountable(w):
        return w
    if w in IRREGULAR:
        return IRREGULAR[w]
    if w in _IRREGULAR_PLURALS:
        return w
    if w.endswith("y") and len(w) > 1 and w[-2] not in _VOWELS:
        return w[:-1] + "ies"
    if w.endswith(("s", "sh", "ch", "x", "z")):
        return w + "es"
    return w + "s"


def is_plural(word: str) -> bool:
    w = word.lower()
    if is_uncountable(w):
        return False
    if w in _IRREGULAR_PLURALS:
        return True
    return singularize(w) != w


def is_singular(word: str) -> bool:
    w = word.lower()
    return is_uncountable(w) or not is_plural(w)


def expand_abbreviation(word: str, extra: dict[str, str] | None = None) -> str | None:
    """Full word for a known abbreviation, else ``None``."""
    w = word.lower()
    if extra and w in extra:
        return extra[w]
    return ABBREVIATIONS.get(w)


__all__ = [
    "ABBREVIATIONS",
    "DATA_TYPE_NAMES",
    "IRREGULAR",
    "UNCOUNTABLE",
    "split_words",
    "is_snake_case",
    "to_snake_case",
    "singularize",
    "pluralize",
    "is_plural",
    "is_singular",
    "is_uncountable",
    "expand_abbreviation",
]
