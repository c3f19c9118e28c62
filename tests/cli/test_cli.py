"""Tests for the sqlnaming CLI (lint, rules, explain, dialects, config)."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from sqlnaming.cli.app import app
from sqlnaming.config import LintConfig

runner = CliRunner()

WARNING_ONLY_SQL = "CREATE TABLE teams (id int, CONSTRAINT teams_pkey PRIMARY KEY (id));\n"


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "lint" in result.output
        assert "config" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == "sqlnaming 0.1.0"

    def test_invalid_log_level(self):
        result = runner.invoke(app, ["--log-level", "LOUD", "rules"])
        assert result.exit_code == 2
        assert "Invalid log level" in result.output


class TestLintCommand:
    def test_clean_file(self, write_sql, clean_sql):
        path = write_sql("schema.sql", clean_sql)
        result = runner.invoke(app, ["lint", str(path)])
        assert result.exit_code == 0
        assert "PASS: 1 file checked | 0 errors | 0 warnings | 0 infos" in result.output

    def test_messy_file_fails(self, write_sql, messy_sql):
        path = write_sql("schema.sql", messy_sql)
        result = runner.invoke(app, ["lint", str(path)])
        assert result.exit_code == 1
        assert "[N004] ERROR" in result.output
        assert "FAIL: 1 file checked" in result.output

    def test_strict_fails_on_warnings(self, write_sql):
        path = write_sql("schema.sql", WARNING_ONLY_SQL)
        assert runner.invoke(app, ["lint", str(path)]).exit_code == 0
        assert runner.invoke(app, ["lint", str(path), "--strict"]).exit_code == 1

    def test_json_format(self, write_sql, messy_sql):
        path = write_sql("schema.sql", messy_sql)
        result = runner.invoke(app, ["lint", str(path), "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["passed"] is False
        assert data["files_checked"] == 1
        assert data["by_code"]["N004"] == 1

    def test_github_format(self, write_sql):
        path = write_sql("schema.sql", WARNING_ONLY_SQL)
        result = runner.invoke(app, ["lint", str(path), "-f", "github"])
        assert result.exit_code == 0
        assert result.stdout.startswith("::warning file=")
        assert "title=T001::[T001]" in result.stdout

    def test_rich_format(self, write_sql, messy_sql):
        path = write_sql("schema.sql", messy_sql)
        result = runner.invoke(app, ["lint", str(path), "--format", "rich"])
        assert result.exit_code == 1
        assert "N004" in result.output

    def test_select_and_ignore_accept_commas(self, write_sql, messy_sql):
        path = write_sql("schema.sql", messy_sql)
        result = runner.invoke(app, ["lint", str(path), "--ignore", "N,T", "-i", "C,K", "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["diagnostics"] == []

        result = runner.invoke(app, ["lint", str(path), "--select", "T002", "--format", "json"])
        assert json.loads(result.stdout)["by_code"] == {"T002": 1}

    def test_no_infos(self, write_sql):
        path = write_sql("schema.sql", "CREATE SEQUENCE invoice_number;\n")
        result = runner.invoke(app, ["lint", str(path), "--no-infos", "--format", "json"])
        assert json.loads(result.stdout)["info_count"] == 0

    def test_directory(self, migrations_dir):
        result = runner.invoke(app, ["lint", str(migrations_dir)])
        assert result.exit_code == 0
        assert "PASS: 2 files checked" in result.output

    def test_discovered_config_file(self, tmp_path, write_sql, messy_sql):
        path = write_sql("schema.sql", messy_sql)
        (tmp_path / ".sqlnaming.yaml").write_text("ignore: [N004]\n")
        result = runner.invoke(app, ["lint", str(path)])
        assert result.exit_code == 0
        assert "N004" not in result.output

    def test_explicit_config_and_dialect(self, tmp_path, write_sql):
        config = tmp_path / "lint.yaml"
        config.write_text("dialect: postgresql\nmax_identifier_length: 10\n")
        path = write_sql("schema.sql", "CREATE TABLE organization (id int, CONSTRAINT organization_pkey PRIMARY KEY (id));")
        result = runner.invoke(app, ["lint", str(path), "--config", str(config), "--select", "N005"])
        assert result.exit_code == 1
        assert "limit: 10" in result.output

    def test_dialect_from_environment(self, monkeypatch, write_sql, clean_sql):
        monkeypatch.setenv("SQLNAMING_DIALECT", "bogus")
        path = write_sql("schema.sql", clean_sql)
        result = runner.invoke(app, ["lint", str(path)])
        assert result.exit_code == 2
        assert "bogus" in result.output

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["lint", str(tmp_path / "missing.sql")])
        assert result.exit_code == 2
        assert "No such file or directory" in result.output
        error_lines = [line for line in result.output.splitlines() if line.startswith("Error:")]
        assert len(error_lines) == 1
        assert error_lines[0].endswith("missing.sql")

    def test_unknown_format(self, write_sql, clean_sql):
        path = write_sql("schema.sql", clean_sql)
        result = runner.invoke(app, ["lint", str(path), "--format", "xml"])
        assert result.exit_code == 2
        assert "Unknown output format" in result.output


class TestRulesCommands:
    def test_rules_table(self):
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "N004" in result.output
        assert "K003" in result.output

    def test_rules_json(self):
        result = runner.invoke(app, ["rules", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        codes = [r["code"] for r in data]
        assert codes == sorted(codes)
        assert "P001" in codes
        reserved = next(r for r in data if r["code"] == "N004")
        assert reserved == {
            "code": "N004",
            "name": "no-reserved-words",
            "category": "identifiers",
            "severity": "error",
            "summary": "Identifiers should not be reserved words.",
        }

    def test_explain(self):
        result = runner.invoke(app, ["explain", "n004"])
        assert result.exit_code == 0
        assert "N004 no-reserved-words (error, identifiers)" in result.output
        assert "purchase_order" in result.output

    def test_explain_unknown(self):
        result = runner.invoke(app, ["explain", "Z999"])
        assert result.exit_code == 2
        assert "Unknown rule 'Z999'" in result.output

    def test_dialects(self):
        result = runner.invoke(app, ["dialects"])
        assert result.exit_code == 0
        assert "postgresql" in result.output
        assert "63" in result.output


class TestConfigCommands:
    @pytest.fixture(autouse=True)
    def _in_tmp(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

    def test_init_creates_loadable_file(self, tmp_path):
        result = runner.invoke(app, ["config", "init", "--dialect", "postgresql"])
        assert result.exit_code == 0
        assert "Created" in result.output
        config = LintConfig.from_yaml(tmp_path / ".sqlnaming.yaml")
        assert config.dialect == "postgresql"

    def test_init_refuses_to_overwrite(self, tmp_path):
        (tmp_path / ".sqlnaming.yaml").write_text("dialect: mysql\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 2
        assert "already exists" in result.output
        assert (tmp_path / ".sqlnaming.yaml").read_text() == "dialect: mysql\n"

        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert LintConfig.from_yaml(tmp_path / ".sqlnaming.yaml").dialect == "ansi"

    def test_init_rejects_unknown_dialect(self, tmp_path):
        result = runner.invoke(app, ["config", "init", "-d", "bogus"])
        assert result.exit_code == 2
        assert not (tmp_path / ".sqlnaming.yaml").exists()

    def test_init_into_directory(self, tmp_path):
        target = tmp_path / "db"
        target.mkdir()
        result = runner.invoke(app, ["config", "init", "--dir", str(target)])
        assert result.exit_code == 0
        assert (target / ".sqlnaming.yaml").is_file()

    def test_show(self, tmp_path):
        (tmp_path / ".sqlnaming.yaml").write_text("dialect: mysql\n")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "Source:" in result.output
        assert "dialect: mysql" in result.output

    def test_show_defaults_json(self):
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["dialect"] == "ansi"

    def test_validate(self, tmp_path):
        result = runner.invoke(app, ["config", "validate"])
        assert result.exit_code == 0
        assert "No configuration file found" in result.output

        (tmp_path / "lint.yaml").write_text("dialect: sqlite\n")
        result = runner.invoke(app, ["config", "validate", "--config", "lint.yaml"])
        assert result.exit_code == 0
        assert "lint.yaml is valid" in result.output

    def test_validate_invalid(self, tmp_path):
        (tmp_path / "lint.yaml").write_text("dialect: sqlite\ntable_names: both\n")
        result = runner.invoke(app, ["config", "validate", "-c", "lint.yaml"])
        assert result.exit_code == 2
        assert "table_names" in result.output
