"""Tests for the sqlnaming error hierarchy."""

from __future__ import annotations

import pytest

from sqlnaming.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    ParseError,
    RuleError,
    SourceError,
    SourceNotFoundError,
    SqlNamingError,
    UnknownDialectError,
    UnknownRuleError,
)


class TestErrorContext:
    def test_to_dict_drops_none(self):
        ctx = ErrorContext(path="schema.sql", line=3)
        assert ctx.to_dict() == {"path": "schema.sql", "line": 3}

    def test_metadata_is_merged(self):
        ctx = ErrorContext(rule="N004", metadata={"dialect": "postgresql"})
        assert ctx.to_dict() == {"rule": "N004", "dialect": "postgresql"}


class TestSqlNamingError:
    def test_defaults(self):
        err = SqlNamingError("boom")
        assert err.message == "boom"
        assert err.category == ErrorCategory.INTERNAL
        assert err.cause is None
        assert str(err) == "boom"

    def test_cause_is_chained(self):
        original = OSError("disk")
        err = SourceError("Cannot read", cause=original)
        assert err.cause is original
        assert err.__cause__ is original

    def test_with_context_sets_fields_and_metadata(self):
        err = SqlNamingError("boom").with_context(path="a.sql", statement="CREATE", attempt=2)
        assert err.context.path == "a.sql"
        assert err.context.statement == "CREATE"
        assert err.context.metadata == {"attempt": 2}

    def test_str_includes_location(self):
        err = ParseError("Unterminated string literal", line=4, column=9, path="a.sql")
        assert str(err) == "a.sql:4:9: Unterminated string literal"

    def test_str_with_path_only(self):
        assert str(SourceNotFoundError("missing.sql")).startswith("missing.sql: ")

    def test_to_dict(self):
        err = ConfigError("bad", cause=ValueError("x")).with_context(path="cfg.yaml")
        data = err.to_dict()
        assert data["error_type"] == "ConfigError"
        assert data["category"] == "CONFIG"
        assert data["context"] == {"path": "cfg.yaml"}
        assert data["cause"] == "x"

    def test_repr(self):
        assert repr(RuleError("dup")) == "RuleError('dup', category=RULE)"


class TestSubclasses:
    @pytest.mark.parametrize(
        "error,category",
        [
            (ConfigError("x"), ErrorCategory.CONFIG),
            (InvalidConfigError("x"), ErrorCategory.CONFIG),
            (UnknownDialectError("db2", ["ansi"]), ErrorCategory.CONFIG),
            (SourceNotFoundError("x.sql"), ErrorCategory.SOURCE),
            (ParseError("x"), ErrorCategory.PARSE),
            (UnknownRuleError("Z999"), ErrorCategory.RULE),
        ],
    )
    def test_categories(self, error, category):
        assert error.category == category
        assert isinstance(error, SqlNamingError)

    def test_unknown_dialect_lists_supported(self):
        err = UnknownDialectError("db2", ["ansi", "mysql"])
        assert err.dialect == "db2"
        assert "ansi, mysql" in err.message

    def test_invalid_config_path(self):
        assert InvalidConfigError("bad", path="x.yaml").context.path == "x.yaml"

    def test_parse_error_position(self):
        err = ParseError("bad", line=2, column=5)
        assert (err.line, err.column) == (2, 5)

    def test_unknown_rule_context(self):
        assert UnknownRuleError("Z999").context.rule == "Z999"

    def test_catch_by_base_class(self):
        with pytest.raises(ConfigError):
            raise UnknownDialectError("db2", [])
