"""Tests for SQL dialect descriptions and the dialect registry."""

from __future__ import annotations

import pytest

from sqlnaming.core.dialect import (
    AnsiDialect,
    BaseDialect,
    get_dialect,
    list_dialects,
    register_dialect,
)
from sqlnaming.core.errors import UnknownDialectError
from sqlnaming.core import dialect as dialect_module


class TestGetDialect:
    def test_canonical_names(self):
        assert list_dialects() == ["ansi", "mysql", "oracle", "postgresql", "sqlite", "sqlserver"]

    @pytest.mark.parametrize(
        "alias,name",
        [
            ("postgres", "postgresql"),
            ("PG", "postgresql"),
            ("mariadb", "mysql"),
            ("mssql", "sqlserver"),
            ("tsql", "sqlserver"),
            (" Oracle ", "oracle"),
        ],
    )
    def test_aliases(self, alias, name):
        assert get_dialect(alias).name == name

    def test_unknown(self):
        with pytest.raises(UnknownDialectError) as exc_info:
            get_dialect("db2")
        assert "postgresql" in exc_info.value.message


class TestDialectProperties:
    def test_limits(self):
        assert get_dialect("postgresql").max_identifier_length == 63
        assert get_dialect("mysql").max_identifier_length == 64
        assert get_dialect("sqlite").max_identifier_length is None
        assert get_dialect("ansi").max_identifier_length == 128

    def test_case_folding(self):
        assert get_dialect("postgresql").unquoted_case == "lower"
        assert get_dialect("oracle").unquoted_case == "upper"
        assert get_dialect("mysql").unquoted_case == "preserve"

    def test_quotes(self):
        assert ("`", "`") in get_dialect("mysql").identifier_quotes
        assert ("[", "]") in get_dialect("sqlserver").identifier_quotes
        assert get_dialect("postgresql").identifier_quotes == (('"', '"'),)

    @pytest.mark.parametrize("name", ["ansi", "postgresql", "mysql", "sqlite", "sqlserver", "oracle"])
    def test_core_words_reserved_everywhere(self, name):
        d = get_dialect(name)
        for word in ("select", "from", "where", "table", "user", "order", "group"):
            assert d.is_reserved(word)

    def test_is_reserved_case_insensitive(self):
        assert get_dialect("ansi").is_reserved("SeLeCt")
        assert not get_dialect("ansi").is_reserved("team")

    def test_backend_specific_words(self):
        assert get_dialect("postgresql").is_reserved("limit")
        assert not get_dialect("ansi").is_reserved("limit")
        assert get_dialect("oracle").is_reserved("number")
        assert get_dialect("mysql").is_reserved("key")


class TestRegisterDialect:
    def test_register_custom(self, monkeypatch):
        monkeypatch.setattr(dialect_module, "_DIALECTS", dict(dialect_module._DIALECTS))

        class ShortDialect(BaseDialect):
            name = "short"
            max_identifier_length = 30

        register_dialect("Short", ShortDialect())
        assert get_dialect("short").max_identifier_length == 30
        assert "short" in list_dialects()

    def test_repr(self):
        assert repr(AnsiDialect()) == "AnsiDialect()"
