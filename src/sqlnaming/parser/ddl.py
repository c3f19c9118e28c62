"""DDL parser - recovers schema objects from SQL scripts.

Only the statements that *name* things are understood; everything else
(DML, grants, functions, ``SET`` commands) is skipped with a debug log.
The parser is deliberately forgiving: a statement it cannot follow is
recorded as a ``ParseIssue`` and parsing resumes at the next ``;``.
Pass ``strict=True`` to raise ``ParseError`` instead.

Architecture::

    parse(text, path)
    │
    ├── tokenize()              (ParseError on unterminated literals)
    ├── collect_suppressions()  (inline ``sqlnaming:`` directives)
    └── for each statement:
        ├── CREATE SCHEMA
        ├── CREATE TABLE        → Table, Column, Constraint
        ├── CREATE INDEX        → Index
        ├── CREATE VIEW         → View
        ├── CREATE SEQUENCE     → Sequence
        ├── ALTER TABLE         → ADD / RENAME
        └── anything else       → skipped

Example::

    catalog = parse_sql(
        "CREATE TABLE team (id int PRIMARY KEY, name text NOT NULL);"
    )
    catalog.get_table("team").primary_key.columns
    # ['id']
"""

from __future__ import annotations

from pathlib import Path

from sqlnaming.core.dialect import Dialect, get_dialect
from sqlnaming.core.errors import ParseError, SourceError, SourceNotFoundError
from sqlnaming.core.logging import get_logger
from sqlnaming.parser.suppressions import collect_suppressions
from sqlnaming.parser.tokenizer import Token, TokenKind, split_statements, tokenize
from sqlnaming.schema.model import (
    Catalog,
    Column,
    Constraint,
    ConstraintKind,
    Identifier,
    Index,
    ParseIssue,
    QualifiedName,
    Schema,
    Sequence,
    SourceLocation,
    Table,
    View,
)

logger = get_logger(__name__)

# Keywords that end the data type of a column definition
_COLUMN_CONSTRAINT_START = frozenset({
    "CONSTRAINT", "PRIMARY", "UNIQUE", "REFERENCES", "CHECK", "NOT", "NULL",
    "DEFAULT", "COLLATE", "GENERATED", "AUTO_INCREMENT", "AUTOINCREMENT",
    "IDENTITY", "COMMENT", "ON", "AS", "CHARACTER", "CHARSET", "KEY",
})

_TABLE_CONSTRAINT_START = frozenset({
    "CONSTRAINT", "PRIMARY", "UNIQUE", "FOREIGN", "CHECK", "EXCLUDE",
})

_TABLE_MODIFIERS = ("TEMP", "TEMPORARY", "UNLOGGED", "GLOBAL", "LOCAL", "EXTERNAL", "VIRTUAL")


class _Cursor:
    """Sequential reader over the tokens of one statement (or a fragment)."""

    def __init__(self, tokens: list[Token], path: str | None):
        self.tokens = tokens
        self.path = path
        self.i = 0

    @property
    def at_end(self) -> bool:
        return self.i >= len(self.tokens)

    def peek(self, offset: int = 0) -> Token | None:
        idx = self.i + offset
        return self.tokens[idx] if idx < len(self.tokens) else None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise self.error("Unexpected end of statement")
        self.i += 1
        return token

    def location(self, token: Token | None = None) -> SourceLocation:
        token = token or self.peek() or (self.tokens[-1] if self.tokens else None)
        if token is None:
            return SourceLocation(self.path, 1, 1)
        return SourceLocation(self.path, token.line, token.column)

    def error(self, message: str) -> ParseError:
        token = self.peek() or (self.tokens[-1] if self.tokens else None)
        return ParseError(
            message,
            line=token.line if token else None,
            column=token.column if token else None,
            path=self.path,
        )

    # -- Keywords / punctuation -------------------------------------------

    def accept(self, *keywords: str) -> bool:
        """Consume the keyword sequence if it is next; all-or-nothing."""
        for offset, keyword in enumerate(keywords):
            token = self.peek(offset)
            if token is None or not token.is_keyword(keyword):
                return False
        self.i += len(keywords)
        return True

    def accept_any(self, *keywords: str) -> str | None:
        token = self.peek()
        if token is not None and token.is_keyword(*keywords):
            self.i += 1
            return token.upper
        return None

    def expect(self, *keywords: str) -> None:
        if not self.accept(*keywords):
            found = self.peek()
            raise self.error(
                f"Expected {' '.join(keywords)}, found {found.text if found else 'end of statement'}"
            )

    def accept_punct(self, char: str) -> bool:
        token = self.peek()
        if token is not None and token.is_punct(char):
            self.i += 1
            return True
        return False

    def at_keyword(self, *keywords: str) -> bool:
        token = self.peek()
        return token is not None and token.is_keyword(*keywords)

    def at_punct(self, char: str) -> bool:
        token = self.peek()
        return token is not None and token.is_punct(char)

    # -- Names -------------------------------------------------------------

    def read_name(self) -> Identifier:
        token = self.next()
        if not token.is_name:
            self.i -= 1
            raise self.error(f"Expected a name, found {token.text!r}")
        return Identifier(
            token.value,
            quoted=token.kind is TokenKind.QUOTED,
            location=SourceLocation(self.path, token.line, token.column),
        )

    def read_qualified_name(self) -> QualifiedName:
        parts = [self.read_name()]
        while self.at_punct(".") and self.peek(1) is not None and self.peek(1).is_name:
            self.i += 1
            parts.append(self.read_name())
        return QualifiedName(tuple(parts))

    # -- Groups ------------------------------------------------------------

    def read_group(self) -> list[Token]:
        """Consume a balanced ``( ... )`` group and return its inner tokens."""
        if not self.accept_punct("("):
            found = self.peek()
            raise self.error(f"Expected '(', found {found.text if found else 'end of statement'}")
        start = self.i
        depth = 1
        while not self.at_end:
            token = self.next()
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth -= 1
                if depth == 0:
                    return self.tokens[start:self.i - 1]
        raise self.error("Unbalanced parentheses")

    def skip_item(self) -> None:
        """Skip one token, or a whole parenthesised group."""
        if self.at_punct("("):
            self.read_group()
        else:
            self.i += 1

    def read_name_list(self) -> list[str]:
        """Read ``(a, b DESC, lower(c))`` into ``['a', 'b', 'lower(c)']``."""
        names: list[str] = []
        for part in split_top_level(self.read_group()):
            if not part:
                continue
            if len(part) == 1 or (part[0].is_name and not part[1].is_punct("(")):
                names.append(part[0].value)
            else:
                names.append(_join(part))
        return names


def split_top_level(tokens: list[Token], separator: str = ",") -> list[list[Token]]:
    """Split tokens on a separator that is not nested inside parentheses."""
    parts: list[list[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.is_punct("("):
            depth += 1
        elif token.is_punct(")"):
            depth -= 1
        elif depth == 0 and token.is_punct(separator):
            parts.append([])
            continue
        parts[-1].append(token)
    return parts


def _join(tokens: list[Token]) -> str:
    out = ""
    for token in tokens:
        if out and not (token.is_punct("(") or token.is_punct(")") or token.is_punct(",")
                        or out.endswith("(")):
            out += " "
        out += token.text
    return out


class DDLParser:
    """Parse DDL scripts into a :class:`Catalog`.

    Args:
        dialect: Dialect (or dialect name) used for identifier quoting.
        strict: Raise :class:`ParseError` instead of recording issues.
    """

    def __init__(self, dialect: Dialect | str = "ansi", strict: bool = False):
        self.dialect = get_dialect(dialect) if isinstance(dialect, str) else dialect
        self.strict = strict

    # -- Entry points ------------------------------------------------------

    def parse(self, text: str, path: str | None = None, catalog: Catalog | None = None) -> Catalog:
        catalog = catalog if catalog is not None else Catalog()
        if path is not None and path not in catalog.sources:
            catalog.sources.append(path)

        try:
            tokens = tokenize(text, self.dialect, path)
        except ParseError as exc:
            if self.strict:
                raise
            logger.warning("tokenize_failed", path=path, error=exc.message)
            catalog.add_issue(ParseIssue(
                exc.message,
                SourceLocation(path, exc.line or 1, exc.column or 1),
            ))
            return catalog

        catalog.suppressions[path] = collect_suppressions(tokens, path)

        statements = split_statements(tokens)
        logger.debug("statements_found", path=path, count=len(statements))
        for statement in statements:
            try:
                self._parse_statement(_Cursor(statement, path), catalog)
            except ParseError as exc:
                if self.strict:
                    raise
                snippet = _join(statement[:8])
                logger.debug("statement_unparsed", path=path, line=exc.line, error=exc.message)
                catalog.add_issue(ParseIssue(
                    exc.message,
                    SourceLocation(path, exc.line or statement[0].line, exc.column or statement[0].column),
                    snippet,
                ))
        return catalog

    def parse_file(self, path: str | Path, catalog: Catalog | None = None) -> Catalog:
        file_path = Path(path)
        if not file_path.is_file():
            raise SourceNotFoundError(str(file_path))
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(f"Cannot read {file_path}: {exc}", cause=exc).with_context(
                path=str(file_path)
            ) from exc
        return self.parse(text, str(file_path), catalog)

    # -- Statements --------------------------------------------------------

    def _parse_statement(self, c: _Cursor, catalog: Catalog) -> None:
        first = c.peek()
        if c.accept("CREATE"):
            c.accept("OR", "REPLACE")
            while c.accept_any(*_TABLE_MODIFIERS):
                pass
            if c.accept("TABLE"):
                self._create_table(c, catalog)
            elif c.accept("UNIQUE"):
                c.accept_any("CLUSTERED", "NONCLUSTERED")
                c.expect("INDEX")
                self._create_index(c, catalog, unique=True, start=first)
            elif c.accept_any("CLUSTERED", "NONCLUSTERED", "BITMAP") and c.accept("INDEX"):
                self._create_index(c, catalog, unique=False, start=first)
            elif c.accept("INDEX"):
                self._create_index(c, catalog, unique=False, start=first)
            elif c.accept("MATERIALIZED", "VIEW"):
                self._create_view(c, catalog, materialized=True)
            elif c.accept("VIEW"):
                self._create_view(c, catalog, materialized=False)
            elif c.accept("SEQUENCE"):
                c.accept("IF", "NOT", "EXISTS")
                catalog.add_sequence(Sequence(c.read_qualified_name()))
            elif c.accept("SCHEMA"):
                self._create_schema(c, catalog)
            else:
                self._skip(c, first)
        elif c.accept("ALTER", "TABLE"):
            self._alter_table(c, catalog)
        else:
            self._skip(c, first)

    def _skip(self, c: _Cursor, first: Token | None) -> None:
        if first is not None:
            logger.debug("statement_skipped", keyword=first.text.upper(), line=first.line)

    def _create_schema(self, c: _Cursor, catalog: Catalog) -> None:
        c.accept("IF", "NOT", "EXISTS")
        if c.at_keyword("AUTHORIZATION"):
            return
        catalog.add_schema(Schema(c.read_name()))

    def _create_view(self, c: _Cursor, catalog: Catalog, materialized: bool) -> None:
        c.accept("IF", "NOT", "EXISTS")
        catalog.add_view(View(c.read_qualified_name(), materialized=materialized))

    def _create_table(self, c: _Cursor, catalog: Catalog) -> None:
        c.accept("IF", "NOT", "EXISTS")
        name = c.read_qualified_name()
        table = Table(name=name, location=name.location)
        catalog.add_table(table)

        if not c.at_punct("("):
            # CREATE TABLE ... AS SELECT / PARTITION OF / LIKE
            return

        body = c.read_group()
        if not body:
            return
        for element in split_top_level(body):
            if not element:
                raise ParseError(
                    "Empty element in table definition",
                    line=name.location.line if name.location else None,
                    path=c.path,
                )
            ec = _Cursor(element, c.path)
            if ec.at_keyword(*_TABLE_CONSTRAINT_START):
                self._table_constraint(ec, table)
            elif ec.at_keyword("KEY", "INDEX", "FULLTEXT", "SPATIAL"):
                self._inline_index(ec, table, catalog)
            elif ec.at_keyword("LIKE", "PERIOD"):
                continue
            else:
                self._column_def(ec, table)

    def _inline_index(self, c: _Cursor, table: Table, catalog: Catalog) -> None:
        """MySQL ``KEY name (cols)`` / ``INDEX name (cols)`` inside CREATE TABLE."""
        start = c.next()
        if start.is_keyword("FULLTEXT", "SPATIAL"):
            c.accept_any("KEY", "INDEX")
        name = None if c.at_punct("(") else c.read_name()
        catalog.add_index(Index(
            table=table.name.name,
            columns=c.read_name_list(),
            name=name,
            location=name.location if name else c.location(start),
        ))

    def _column_def(self, c: _Cursor, table: Table) -> None:
        name = c.read_name()
        type_tokens: list[Token] = []
        while not c.at_end:
            token = c.peek()
            if token.is_keyword("CHARACTER"):
                # CHARACTER VARYING is a type, CHARACTER SET a column option
                following = c.peek(1)
                if following is not None and following.is_keyword("SET"):
                    break
                type_tokens.append(c.next())
                continue
            if token.is_keyword(*_COLUMN_CONSTRAINT_START):
                break
            if token.is_punct("("):
                start = c.i
                c.read_group()
                type_tokens.extend(c.tokens[start:c.i])
            else:
                type_tokens.append(c.next())
        column = Column(name=name, data_type=_join(type_tokens), table=table.name.name)
        table.columns.append(column)

        pending_name: Identifier | None = None
        while not c.at_end:
            start = c.peek()
            if c.accept("CONSTRAINT"):
                pending_name = c.read_name()
                continue
            ref: QualifiedName | None = None
            ref_cols: list[str] = []
            if c.accept("PRIMARY", "KEY"):
                kind = ConstraintKind.PRIMARY_KEY
            elif c.accept("UNIQUE"):
                c.accept("KEY")
                kind = ConstraintKind.UNIQUE
            elif c.accept("REFERENCES"):
                kind = ConstraintKind.FOREIGN_KEY
                ref = c.read_qualified_name()
                ref_cols = c.read_name_list() if c.at_punct("(") else []
            elif c.accept("CHECK"):
                c.read_group()
                kind = ConstraintKind.CHECK
            else:
                # NOT NULL, DEFAULT ... are not named constraints here
                pending_name = None
                c.skip_item()
                continue
            table.constraints.append(Constraint(
                kind=kind,
                table=table.name.name,
                columns=[name.name],
                name=pending_name,
                ref_table=ref,
                ref_columns=ref_cols,
                inline=True,
                location=pending_name.location if pending_name else c.location(start),
            ))
            pending_name = None

    def _table_constraint(self, c: _Cursor, table: Table) -> Constraint:
        start = c.peek()
        name: Identifier | None = None
        if c.accept("CONSTRAINT"):
            name = c.read_name()

        ref: QualifiedName | None = None
        ref_cols: list[str] = []
        columns: list[str] = []
        if c.accept("PRIMARY", "KEY"):
            kind = ConstraintKind.PRIMARY_KEY
            columns = c.read_name_list()
        elif c.accept("UNIQUE"):
            kind = ConstraintKind.UNIQUE
            c.accept_any("KEY", "INDEX")
            if name is None and not c.at_punct("(") and not c.at_keyword("NULLS"):
                name = c.read_name()
            c.accept("NULLS", "NOT", "DISTINCT")
            columns = c.read_name_list()
        elif c.accept("FOREIGN", "KEY"):
            kind = ConstraintKind.FOREIGN_KEY
            columns = c.read_name_list()
            c.expect("REFERENCES")
            ref = c.read_qualified_name()
            ref_cols = c.read_name_list() if c.at_punct("(") else []
        elif c.accept("CHECK"):
            kind = ConstraintKind.CHECK
            c.read_group()
        elif c.accept("EXCLUDE"):
            kind = ConstraintKind.EXCLUDE
            if c.accept("USING"):
                c.next()
            if c.at_punct("("):
                columns = [part[0].value for part in split_top_level(c.read_group())
                           if part and part[0].is_name]
        else:
            raise c.error("Expected a table constraint")

        constraint = Constraint(
            kind=kind,
            table=table.name.name,
            columns=columns,
            name=name,
            ref_table=ref,
            ref_columns=ref_cols,
            inline=False,
            location=name.location if name else c.location(start),
        )
        table.constraints.append(constraint)
        return constraint

    def _create_index(self, c: _Cursor, catalog: Catalog, unique: bool, start: Token | None) -> None:
        c.accept("CONCURRENTLY")
        c.accept("IF", "NOT", "EXISTS")
        name: Identifier | None = None
        if not c.at_keyword("ON"):
            name = c.read_qualified_name().identifier
        c.expect("ON")
        c.accept("ONLY")
        table = c.read_qualified_name()
        if c.accept("USING"):
            c.next()
        columns = c.read_name_list() if c.at_punct("(") else []
        catalog.add_index(Index(
            table=table.name,
            columns=columns,
            name=name,
            unique=unique,
            location=name.location if name else c.location(start),
        ))

    def _alter_table(self, c: _Cursor, catalog: Catalog) -> None:
        c.accept("IF", "EXISTS")
        c.accept("ONLY")
        name = c.read_qualified_name()
        table = catalog.get_table(name)
        if table is None:
            logger.debug("alter_unknown_table", table=str(name))
            table = catalog.add_table(Table(name=name, location=name.location))

        rest = c.tokens[c.i:]
        for action in split_top_level(rest):
            ac = _Cursor(action, c.path)
            if ac.accept("ADD"):
                if ac.at_keyword(*_TABLE_CONSTRAINT_START):
                    self._table_constraint(ac, table)
                elif ac.at_keyword("KEY", "INDEX", "FULLTEXT", "SPATIAL"):
                    self._inline_index(ac, table, catalog)
                else:
                    ac.accept("COLUMN")
                    ac.accept("IF", "NOT", "EXISTS")
                    self._column_def(ac, table)
            elif ac.accept("RENAME", "TO"):
                new_name = ac.read_qualified_name()
                if len(new_name.parts) == 1:
                    # RENAME TO keeps the table in its schema
                    new_name = QualifiedName((*table.name.parts[:-1], new_name.identifier))
                table = catalog.rename_table(table.name.normalized, new_name) or table
            elif ac.accept("RENAME", "CONSTRAINT"):
                old = ac.read_name()
                ac.expect("TO")
                new = ac.read_name()
                for constraint in table.constraints:
                    if constraint.name is not None and constraint.name.normalized == old.normalized:
                        constraint.name = new
                        constraint.location = new.location
            elif ac.accept("RENAME"):
                ac.accept("COLUMN")
                old = ac.read_name()
                ac.expect("TO")
                table.rename_column(old.name, ac.read_name())
            else:
                first = ac.peek()
                if first is not None:
                    logger.debug("alter_action_skipped", action=first.text.upper(), line=first.line)


def parse_sql(
    text: str,
    path: str | None = None,
    dialect: Dialect | str = "ansi",
    strict: bool = False,
    catalog: Catalog | None = None,
) -> Catalog:
    """Parse SQL text into a catalog."""
    return DDLParser(dialect, strict=strict).parse(text, path, catalog)


def parse_file(
    path: str | Path,
    dialect: Dialect | str = "ansi",
    strict: bool = False,
    catalog: Catalog | None = None,
) -> Catalog:
    """Parse a ``.sql`` file into a catalog."""
    return DDLParser(dialect, strict=strict).parse_file(path, catalog)


__all__ = ["DDLParser", "parse_sql", "parse_file", "split_top_level"]
