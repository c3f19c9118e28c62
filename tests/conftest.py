"""
Shared pytest fixtures for sqlnaming tests.

This module provides:
- Isolation from ``SQLNAMING_*`` environment variables and cached settings
- Custom-rule registry cleanup
- Sample DDL (a clean schema that passes every rule, and a messy one)
- Helpers for writing SQL files into ``tmp_path``
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from sqlnaming.core import settings as settings_module
from sqlnaming.linter import lint_sql
from sqlnaming.rules import clear_custom_rules

# A schema that follows every convention
CLEAN_SQL = """\
CREATE TABLE team (
    id integer NOT NULL,
    name varchar(100) NOT NULL,
    CONSTRAINT team_pkey PRIMARY KEY (id)
);

CREATE TABLE person (
    id integer NOT NULL,
    team_id integer NOT NULL,
    email varchar(255) NOT NULL,
    created_at timestamp NOT NULL,
    CONSTRAINT person_pkey PRIMARY KEY (id),
    CONSTRAINT person_team_id_fkey FOREIGN KEY (team_id) REFERENCES team (id),
    CONSTRAINT person_email_key UNIQUE (email)
);

CREATE INDEX person_created_at_idx ON person (created_at);

CREATE SEQUENCE invoice_number_seq;
"""

# Breaks most conventions
MESSY_SQL = """\
CREATE TABLE "Users" (
    UserID int PRIMARY KEY,
    user_name varchar(50),
    "order" int
);

CREATE TABLE tbl_orders (
    id int PRIMARY KEY,
    customer int REFERENCES "Users"
);

CREATE INDEX ON tbl_orders (customer);
"""


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch):
    """Reset environment-driven settings, custom rules and logging per test."""
    for key in list(os.environ):
        if key.startswith("SQLNAMING_"):
            monkeypatch.delenv(key)
    settings_module._settings = None
    yield
    clear_custom_rules()
    settings_module._settings = None
    structlog.reset_defaults()


@pytest.fixture
def clean_sql() -> str:
    return CLEAN_SQL


@pytest.fixture
def messy_sql() -> str:
    return MESSY_SQL


@pytest.fixture
def write_sql(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing ``content`` to ``tmp_path / name``."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def migrations_dir(write_sql) -> Path:
    """Two migration files where the second references a table from the first."""
    write_sql(
        "migrations/001_team.sql",
        "CREATE TABLE team (id int, CONSTRAINT team_pkey PRIMARY KEY (id));\n",
    )
    write_sql(
        "migrations/002_person.sql",
        "CREATE TABLE person (\n"
        "    id int,\n"
        "    team_id int,\n"
        "    CONSTRAINT person_pkey PRIMARY KEY (id),\n"
        "    CONSTRAINT person_team_id_fkey FOREIGN KEY (team_id) REFERENCES team (id)\n"
        ");\n",
    )
    return write_sql("migrations/README.txt", "not sql").parent


@pytest.fixture
def lint_codes() -> Callable[..., list[str]]:
    """Rule codes reported for some SQL (duplicates kept, sorted by position)."""

    def _codes(sql: str, **config) -> list[str]:
        return [d.code for d in lint_sql(sql, **config).diagnostics]

    return _codes
