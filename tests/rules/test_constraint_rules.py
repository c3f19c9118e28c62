"""Tests for constraint, index and sequence rules K001-K004."""

from __future__ import annotations

from sqlnaming.config import LintConfig
from sqlnaming.linter import lint_sql
from sqlnaming.rules import expected_constraint_name
from sqlnaming.schema.model import ConstraintKind


def _run(sql, code, **config):
    return lint_sql(sql, select=[code], **config).diagnostics


class TestExpectedConstraintName:
    def test_default_pattern(self):
        config = LintConfig()
        assert expected_constraint_name(config, "team", ["id"], ConstraintKind.PRIMARY_KEY) == "team_pkey"
        assert expected_constraint_name(config, "person", ["team_id"], ConstraintKind.FOREIGN_KEY) == (
            "person_team_id_fkey"
        )
        assert expected_constraint_name(config, "person", ["first_name", "last_name"], "index") == (
            "person_first_name_last_name_idx"
        )

    def test_names_are_snake_cased(self):
        config = LintConfig()
        assert expected_constraint_name(config, "Person", ["TeamId"], ConstraintKind.UNIQUE) == "person_team_id_key"

    def test_custom_pattern_and_suffix(self):
        config = LintConfig(constraint_pattern="{suffix}_{table}_{columns}", constraint_suffixes={"unique": "uq"})
        assert expected_constraint_name(config, "person", ["email"], ConstraintKind.UNIQUE) == "uq_person_email"
        assert config.constraint_suffixes["foreign_key"] == "fkey"


class TestNamedConstraints:
    def test_inline_constraints(self):
        sql = "CREATE TABLE team (id int PRIMARY KEY, code text UNIQUE);"
        diags = _run(sql, "K001")
        assert [d.suggestion for d in diags] == ["team_pkey", "team_code_key"]
        assert diags[0].message == "Unnamed primary key constraint (id) on table 'team'."
        assert diags[0].object_type == "constraint"

    def test_untyped_primary_key_column(self):
        diags = _run("CREATE TABLE team (id PRIMARY KEY, name text);", "K001", dialect="sqlite")
        assert [(d.code, d.suggestion) for d in diags] == [("K001", "team_pkey")]

    def test_table_level_foreign_key(self):
        sql = "CREATE TABLE person (id int, team_id int, FOREIGN KEY (team_id) REFERENCES team (id));"
        diags = _run(sql, "K001")
        assert [d.suggestion for d in diags] == ["person_team_id_fkey"]

    def test_named_constraints_pass(self, clean_sql):
        assert _run(clean_sql, "K001") == []


class TestNamedIndexes:
    def test_unnamed_index(self):
        diags = _run("CREATE INDEX ON person (email);", "K002")
        assert len(diags) == 1
        assert diags[0].message == "Unnamed index (email) on table 'person'."
        assert diags[0].suggestion == "person_email_idx"
        assert (diags[0].line, diags[0].column) == (1, 1)

    def test_unnamed_unique_expression_index(self):
        diags = _run("CREATE UNIQUE INDEX ON person (lower(email));", "K002")
        assert diags[0].message == "Unnamed unique index (lower(email)) on table 'person'."

    def test_named_index_passes(self):
        assert _run("CREATE INDEX person_email_idx ON person (email);", "K002") == []


class TestConstraintPattern:
    SQL = (
        "CREATE TABLE person (\n"
        "    id int,\n"
        "    email text,\n"
        "    age int,\n"
        "    CONSTRAINT pk_person PRIMARY KEY (id),\n"
        "    CONSTRAINT person_email_key UNIQUE (email),\n"
        "    CONSTRAINT person_age_check CHECK (age >= 0),\n"
        "    CONSTRAINT age_positive CHECK (age >= 0)\n"
        ");\n"
        "CREATE INDEX idx_person_email ON person (email);\n"
        "CREATE UNIQUE INDEX person_email_key ON person (email);\n"
        "CREATE INDEX person_lower_email_idx ON person (lower(email));\n"
    )

    def test_pattern_violations(self):
        diags = _run(self.SQL, "K003")
        found = [(d.object_name, d.suggestion, d.line) for d in diags]
        assert found == [
            ("person.pk_person", "person_pkey", 5),
            ("person.age_positive", "person_check", 8),
            ("person.idx_person_email", "person_email_idx", 10),
        ]
        assert diags[0].message == "Constraint name 'pk_person' does not follow the naming pattern."
        assert diags[2].message == "Index name 'idx_person_email' does not follow the naming pattern."

    def test_custom_suffix(self):
        sql = (
            "CREATE TABLE person (id int, team_id int, other_team_id int,"
            " CONSTRAINT person_team_id_fk FOREIGN KEY (team_id) REFERENCES team (id),"
            " CONSTRAINT person_other_team_id_fkey FOREIGN KEY (other_team_id) REFERENCES team (id));"
        )
        diags = _run(sql, "K003", constraint_suffixes={"foreign_key": "fk"})
        assert [d.suggestion for d in diags] == ["person_other_team_id_fk"]

    def test_truncated_name_accepted(self):
        sql = (
            "CREATE TABLE organization_member (organization_id int,"
            " CONSTRAINT organization_member_organizati FOREIGN KEY (organization_id)"
            " REFERENCES organization (id));"
        )
        assert _run(sql, "K003", max_identifier_length=30) == []
        assert [d.suggestion for d in _run(sql, "K003")] == ["organization_member_organization_id_fkey"]


class TestSequenceSuffix:
    def test_sequence_without_suffix(self):
        diags = _run("CREATE SEQUENCE invoice_number;\nCREATE SEQUENCE order_id_seq;", "K004")
        assert len(diags) == 1
        d = diags[0]
        assert d.message == "Sequence 'invoice_number' does not end in '_seq'."
        assert (d.object_type, d.object_name, d.suggestion) == ("sequence", "invoice_number", "invoice_number_seq")
        assert d.severity.value == "info"

    def test_custom_sequence_suffix(self):
        diags = _run("CREATE SEQUENCE invoice_number_seq;", "K004", constraint_suffixes={"sequence": "sq"})
        assert [d.suggestion for d in diags] == ["invoice_number_seq_sq"]
