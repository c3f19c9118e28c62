"""SQL tokenizer.

Turns SQL text into a flat list of tokens with 1-based line/column
positions.  It knows just enough SQL lexical structure to find names
reliably: comments, string literals (including PostgreSQL dollar quoting)
and quoted identifiers in whatever quote styles the dialect accepts.

Comments are kept as ``COMMENT`` tokens so that suppression directives can
be read from them; ``split_statements`` drops them.

Example::

    tokens = tokenize('CREATE TABLE "Users" (id int); -- note')
    [t.value for t in tokens if t.kind is TokenKind.QUOTED]
    # ['Users']
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlnaming.core.dialect import Dialect
from sqlnaming.core.errors import ParseError

_DEFAULT_QUOTES: tuple[tuple[str, str], ...] = (('"', '"'), ("`", "`"), ("[", "]"))
_PUNCT = "(),;."
_TWO_CHAR_OPERATORS = ("::", "<=", ">=", "<>", "!=", "||", "->", "=>")


class TokenKind(str, Enum):
    WORD = "word"
    QUOTED = "quoted"
    STRING = "string"
    NUMBER = "number"
    PUNCT = "punct"
    OPERATOR = "operator"
    COMMENT = "comment"


@dataclass(frozen=True)
class Token:
    """One lexical token.

    For ``QUOTED`` tokens ``value`` is the identifier without its quotes
    (escaped quotes collapsed); ``text`` is always the raw source slice.
    """

    kind: TokenKind
    value: str
    line: int
    column: int
    text: str = ""

    @property
    def upper(self) -> str:
        """Keyword form of a bare word; empty for every other kind."""
        return self.value.upper() if self.kind is TokenKind.WORD else ""

    def is_keyword(self, *keywords: str) -> bool:
        return self.kind is TokenKind.WORD and self.value.upper() in keywords

    def is_punct(self, char: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.value == char

    @property
    def is_name(self) -> bool:
        return self.kind in (TokenKind.WORD, TokenKind.QUOTED)


class _Scanner:
    def __init__(self, text: str, quotes: tuple[tuple[str, str], ...], path: str | None):
        self.text = text
        self.quotes = dict(quotes)
        self.path = path
        self.pos = 0
        self.line = 1
        self.line_start = 0
        self.tokens: list[Token] = []

    # -- Position helpers --------------------------------------------------

    def _advance_to(self, end: int) -> None:
        segment = self.text[self.pos:end]
        newlines = segment.count("\n")
        if newlines:
            self.line += newlines
            self.line_start = self.pos + segment.rindex("\n") + 1
        self.pos = end

    def _emit(self, kind: TokenKind, value: str, end: int) -> None:
        line, column = self.line, self.pos - self.line_start + 1
        text = self.text[self.pos:end]
        self._advance_to(end)
        self.tokens.append(Token(kind, value, line, column, text))

    def _error(self, message: str) -> ParseError:
        return ParseError(
            message,
            line=self.line,
            column=self.pos - self.line_start + 1,
            path=self.path,
        )

    # -- Scanning ----------------------------------------------------------

    def run(self) -> list[Token]:
        text = self.text
        length = len(text)
        while self.pos < length:
            ch = text[self.pos]
            nxt = text[self.pos + 1] if self.pos + 1 < length else ""

            if ch.isspace():
                self._advance_to(self.pos + 1)
            elif ch == "-" and nxt == "-":
                end = text.find("\n", self.pos)
                end = length if end == -1 else end
                self._emit(TokenKind.COMMENT, text[self.pos + 2:end].strip(), end)
            elif ch == "/" and nxt == "*":
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error("Unterminated block comment")
                self._emit(TokenKind.COMMENT, text[self.pos + 2:end].strip(), end + 2)
            elif ch == "'":
                self._scan_string()
            elif ch == "$" and self._scan_dollar_quote():
                pass
            elif ch in self.quotes:
                self._scan_quoted(ch, self.quotes[ch])
            elif ch.isalpha() or ch == "_":
                end = self.pos + 1
                while end < length and (text[end].isalnum() or text[end] in "_$#@"):
                    end += 1
                self._emit(TokenKind.WORD, text[self.pos:end], end)
            elif ch.isdigit():
                self._scan_number()
            elif ch in _PUNCT:
                self._emit(TokenKind.PUNCT, ch, self.pos + 1)
            elif text[self.pos:self.pos + 2] in _TWO_CHAR_OPERATORS:
                self._emit(TokenKind.OPERATOR, text[self.pos:self.pos + 2], self.pos + 2)
            else:
                self._emit(TokenKind.OPERATOR, ch, self.pos + 1)
        return self.tokens

    def _scan_string(self) -> None:
        text = self.text
        end = self.pos + 1
        while True:
            end = text.find("'", end)
            if end == -1:
                raise self._error("Unterminated string literal")
            if text[end + 1:end + 2] == "'":
                end += 2
                continue
            break
        raw = text[self.pos:end + 1]
        self._emit(TokenKind.STRING, raw[1:-1].replace("''", "'"), end + 1)

    def _scan_dollar_quote(self) -> bool:
        text = self.text
        end = self.pos + 1
        while end < len(text) and (text[end].isalnum() or text[end] == "_"):
            end += 1
        if end >= len(text) or text[end] != "$":
            return False
        tag = text[self.pos:end + 1]
        if tag[1:-1][:1].isdigit():
            return False
        close = text.find(tag, end + 1)
        if close == -1:
            raise self._error(f"Unterminated dollar-quoted string {tag}")
        self._emit(TokenKind.STRING, text[end + 1:close], close + len(tag))
        return True

    def _scan_quoted(self, open_char: str, close_char: str) -> None:
        text = self.text
        end = self.pos + 1
        while True:
            end = text.find(close_char, end)
            if end == -1:
                raise self._error(f"Unterminated quoted identifier starting with {open_char}")
            if text[end + 1:end + 2] == close_char:
                end += 2
                continue
            break
        inner = text[self.pos + 1:end].replace(close_char * 2, close_char)
        self._emit(TokenKind.QUOTED, inner, end + 1)

    def _scan_number(self) -> None:
        text = self.text
        end = self.pos
        length = len(text)
        while end < length and (text[end].isdigit() or text[end] == "."):
            end += 1
        if end < length and text[end] in "eE":
            probe = end + 1
            if probe < length and text[probe] in "+-":
                probe += 1
            if probe < length and text[probe].isdigit():
                end = probe
                while end < length and text[end].isdigit():
                    end += 1
        self._emit(TokenKind.NUMBER, text[self.pos:end], end)


def tokenize(text: str, dialect: Dialect | None = None, path: str | None = None) -> list[Token]:
    """Tokenize SQL text.

    Args:
        text: SQL source.
        dialect: Supplies the accepted identifier quote pairs; every common
            style is accepted when omitted.
        path: File name used in error locations.

    Raises:
        ParseError: On an unterminated string, comment or quoted identifier.
    """
    quotes = dialect.identifier_quotes if dialect is not None else _DEFAULT_QUOTES
    return _Scanner(text, quotes, path).run()


def split_statements(tokens: list[Token]) -> list[list[Token]]:
    """Split tokens into statements on ``;`` and drop comments.

    Empty statements are discarded.
    """
    statements: list[list[Token]] = []
    current: list[Token] = []
    for token in tokens:
        if token.kind is TokenKind.COMMENT:
            continue
        if token.is_punct(";"):
            if current:
                statements.append(current)
            current = []
            continue
        current.append(token)
    if current:
        statements.append(current)
    return statements


__all__ = ["Token", "TokenKind", "tokenize", "split_statements"]
