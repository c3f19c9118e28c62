"""
Parser module for sqlnaming.

Tokenizes SQL scripts and recovers the named schema objects (tables,
columns, constraints, indexes, views, sequences) into a ``Catalog``.
"""

from sqlnaming.parser.ddl import DDLParser, parse_file, parse_sql
from sqlnaming.parser.suppressions import Suppressions, collect_suppressions
from sqlnaming.parser.tokenizer import Token, TokenKind, split_statements, tokenize

__all__ = [
    "DDLParser",
    "parse_file",
    "parse_sql",
    "Suppressions",
    "collect_suppressions",
    "Token",
    "TokenKind",
    "split_statements",
    "tokenize",
]
