"""Word-level naming helpers (splitting, inflection, abbreviations)."""

from sqlnaming.naming.words import (
    ABBREVIATIONS,
    DATA_TYPE_NAMES,
    expand_abbreviation,
    is_plural,
    is_singular,
    is_snake_case,
    pluralize,
    singularize,
    split_words,
    to_snake_case,
)

__all__ = [
    "ABBREVIATIONS",
    "DATA_TYPE_NAMES",
    "expand_abbreviation",
    "is_plural",
    "is_singular",
    "is_snake_case",
    "pluralize",
    "singularize",
    "split_words",
    "to_snake_case",
]
