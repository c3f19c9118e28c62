"""Tests for the DDL parser."""

from __future__ import annotations

import pytest

from sqlnaming.core.errors import ParseError, SourceNotFoundError
from sqlnaming.parser.ddl import DDLParser, parse_file, parse_sql
from sqlnaming.schema.model import Catalog, ConstraintKind


class TestCreateTable:
    def test_columns_and_types(self):
        catalog = parse_sql("CREATE TABLE team (id integer NOT NULL, name varchar(100) DEFAULT 'x');")
        team = catalog.get_table("team")
        assert [c.name.name for c in team.columns] == ["id", "name"]
        assert team.column("name").data_type == "varchar(100)"
        assert team.constraints == []

    def test_schema_qualified_name(self):
        catalog = parse_sql("CREATE TABLE IF NOT EXISTS billing.invoice (id int);")
        table = catalog.get_table("invoice")
        assert table.name.schema == "billing"
        assert str(table.name) == "billing.invoice"

    def test_modifiers(self):
        catalog = parse_sql("CREATE OR REPLACE TEMPORARY TABLE scratch (id int);")
        assert catalog.get_table("scratch") is not None

    def test_quoted_names_keep_quoting(self):
        catalog = parse_sql('CREATE TABLE "Users" ("UserID" int);')
        table = catalog.get_table('Users')
        assert table.name.identifier.quoted
        assert table.columns[0].name.quoted
        assert table.columns[0].name.name == "UserID"

    def test_locations(self):
        catalog = parse_sql("CREATE TABLE team (\n    id int,\n    name text\n);", path="s.sql")
        name = catalog.get_table("team").column("name").name
        assert str(name.location) == "s.sql:3:5"

    def test_inline_constraints(self):
        catalog = parse_sql(
            "CREATE TABLE person ("
            " id int PRIMARY KEY,"
            " email text CONSTRAINT person_email_key UNIQUE,"
            " team_id int REFERENCES team,"
            " age int CHECK (age >= 0)"
            ");"
        )
        person = catalog.get_table("person")
        kinds = [(c.kind, c.columns, c.name.name if c.name else None) for c in person.constraints]
        assert kinds == [
            (ConstraintKind.PRIMARY_KEY, ["id"], None),
            (ConstraintKind.UNIQUE, ["email"], "person_email_key"),
            (ConstraintKind.FOREIGN_KEY, ["team_id"], None),
            (ConstraintKind.CHECK, ["age"], None),
        ]
        fk = person.constraints[2]
        assert fk.ref_table.name == "team"
        assert fk.ref_columns == []
        assert all(c.inline for c in person.constraints)

    def test_table_constraints(self):
        catalog = parse_sql(
            "CREATE TABLE membership ("
            " person_id int, team_id int,"
            " CONSTRAINT membership_pkey PRIMARY KEY (person_id, team_id),"
            " FOREIGN KEY (team_id) REFERENCES public.team (id) ON DELETE CASCADE,"
            " UNIQUE (team_id, person_id),"
            " CHECK (person_id <> team_id)"
            ");"
        )
        table = catalog.get_table("membership")
        assert [c.name.name for c in table.columns] == ["person_id", "team_id"]
        pk, fk, unique, check = table.constraints
        assert pk.columns == ["person_id", "team_id"]
        assert pk.name.name == "membership_pkey"
        assert table.primary_key is pk
        assert fk.ref_table.schema == "public"
        assert fk.ref_columns == ["id"]
        assert unique.columns == ["team_id", "person_id"]
        assert check.kind == ConstraintKind.CHECK and check.name is None
        assert not any(c.inline for c in table.constraints)

    def test_exclude_constraint(self):
        catalog = parse_sql(
            "CREATE TABLE booking (room int, during tsrange,"
            " EXCLUDE USING gist (room WITH =, during WITH &&));"
        )
        exclude = catalog.get_table("booking").constraints[0]
        assert exclude.kind == ConstraintKind.EXCLUDE
        assert exclude.columns == ["room", "during"]

    def test_mysql_inline_index(self):
        catalog = parse_sql(
            "CREATE TABLE person (id int, email varchar(255), KEY person_email_idx (email), INDEX (id));",
            dialect="mysql",
        )
        assert [(i.name.name if i.name else None, i.columns) for i in catalog.indexes] == [
            ("person_email_idx", ["email"]),
            (None, ["id"]),
        ]

    def test_create_table_as_select(self):
        catalog = parse_sql("CREATE TABLE report AS SELECT * FROM person;")
        assert catalog.get_table("report").columns == []

    def test_empty_body(self):
        catalog = parse_sql("CREATE TABLE nothing ();")
        assert catalog.get_table("nothing").columns == []

    def test_untyped_primary_key_column(self):
        catalog = parse_sql("CREATE TABLE team (id PRIMARY KEY, name text);", dialect="sqlite")
        team = catalog.get_table("team")
        assert team.column("id").data_type == ""
        assert team.primary_key.columns == ["id"]
        assert team.column("name").data_type == "text"

    def test_character_varying_and_character_set(self):
        catalog = parse_sql(
            "CREATE TABLE team (name character varying(50) NOT NULL,"
            " code char(3) CHARACTER SET latin1 UNIQUE);",
            dialect="mysql",
        )
        team = catalog.get_table("team")
        assert team.column("name").data_type == "character varying(50)"
        assert team.column("code").data_type == "char(3)"
        assert [(c.kind, c.columns) for c in team.constraints] == [(ConstraintKind.UNIQUE, ["code"])]

    def test_constraint_name_on_not_null_does_not_leak(self):
        catalog = parse_sql("CREATE TABLE team (id int CONSTRAINT team_id_nn NOT NULL UNIQUE);")
        unique = catalog.get_table("team").constraints[0]
        assert unique.kind == ConstraintKind.UNIQUE
        assert unique.name is None

    def test_same_table_name_in_two_schemas(self):
        catalog = parse_sql(
            "CREATE TABLE sales.Orders (id int);"
            "CREATE TABLE audit.orders (id int);"
            "ALTER TABLE audit.orders ADD COLUMN changed_at timestamp;"
        )
        assert sorted(catalog.tables) == ["audit.orders", "sales.orders"]
        sales, audit = catalog.get_table("sales.orders"), catalog.get_table("audit.orders")
        assert sales.name.identifier.name == "Orders"
        assert [c.name.name for c in sales.columns] == ["id"]
        assert [c.name.name for c in audit.columns] == ["id", "changed_at"]
        assert catalog.get_table("orders") is None

    def test_unqualified_lookup_finds_single_schema_table(self):
        catalog = parse_sql("CREATE TABLE app.team (id int); ALTER TABLE team ADD COLUMN name text;")
        assert list(catalog.tables) == ["app.team"]
        assert [c.name.name for c in catalog.get_table("team").columns] == ["id", "name"]


class TestOtherStatements:
    def test_index(self):
        catalog = parse_sql(
            "CREATE UNIQUE INDEX CONCURRENTLY IF NOT EXISTS person_email_key"
            " ON ONLY public.person USING btree (lower(email), created_at DESC);"
        )
        index = catalog.indexes[0]
        assert index.name.name == "person_email_key"
        assert index.table == "person"
        assert index.unique
        assert index.columns == ["lower(email)", "created_at"]

    def test_unnamed_index_location(self):
        catalog = parse_sql("\nCREATE INDEX ON person (email);", path="i.sql")
        index = catalog.indexes[0]
        assert index.name is None
        assert (index.location.line, index.location.column) == (2, 1)

    def test_views_sequences_schemas(self):
        catalog = parse_sql(
            "CREATE SCHEMA billing;"
            "CREATE MATERIALIZED VIEW billing.monthly_total AS SELECT 1;"
            "CREATE OR REPLACE VIEW active_person AS SELECT 1;"
            "CREATE SEQUENCE IF NOT EXISTS invoice_number_seq START 100;"
        )
        assert [s.name.name for s in catalog.schemas] == ["billing"]
        assert [(v.name.name, v.materialized) for v in catalog.views] == [
            ("monthly_total", True),
            ("active_person", False),
        ]
        assert [s.name.name for s in catalog.sequences] == ["invoice_number_seq"]

    def test_other_statements_are_skipped(self):
        catalog = parse_sql(
            "INSERT INTO team VALUES (1); GRANT SELECT ON team TO reader;"
            "CREATE FUNCTION f() RETURNS int AS $$ SELECT 1; $$ LANGUAGE sql;"
        )
        assert catalog.tables == {}
        assert catalog.issues == []


class TestAlterTable:
    def test_add_constraint_and_column(self):
        catalog = parse_sql(
            "CREATE TABLE person (id int);"
            "ALTER TABLE person ADD COLUMN team_id int,"
            " ADD CONSTRAINT person_team_id_fkey FOREIGN KEY (team_id) REFERENCES team (id);"
        )
        person = catalog.get_table("person")
        assert [c.name.name for c in person.columns] == ["id", "team_id"]
        assert person.constraints[0].name.name == "person_team_id_fkey"

    def test_unknown_table_gets_stub(self):
        catalog = parse_sql("ALTER TABLE ONLY public.person ADD PRIMARY KEY (id);")
        assert catalog.get_table("person").primary_key.columns == ["id"]

    def test_renames(self):
        catalog = parse_sql(
            "CREATE TABLE people (id int, Name text, CONSTRAINT c1 UNIQUE (Name));"
            "ALTER TABLE people RENAME COLUMN Name TO name;"
            "ALTER TABLE people RENAME CONSTRAINT c1 TO person_name_key;"
            "ALTER TABLE people RENAME TO person;"
        )
        assert catalog.get_table("people") is None
        person = catalog.get_table("person")
        assert person.column("name").name.name == "name"
        assert person.constraints[0].columns == ["name"]
        assert person.constraints[0].name.name == "person_name_key"
        assert person.columns[0].table == "person"

    def test_rename_keeps_schema(self):
        catalog = parse_sql("CREATE TABLE billing.invoices (id int); ALTER TABLE billing.invoices RENAME TO invoice;")
        assert list(catalog.tables) == ["billing.invoice"]
        assert str(catalog.get_table("invoice").name) == "billing.invoice"


class TestErrorHandling:
    def test_bad_statement_becomes_issue(self):
        catalog = parse_sql("CREATE TABLE (id int); CREATE TABLE team (id int);", path="x.sql")
        assert len(catalog.issues) == 1
        issue = catalog.issues[0]
        assert issue.location.path == "x.sql"
        assert "Expected a name" in issue.message
        assert catalog.get_table("team") is not None

    def test_strict_raises(self):
        with pytest.raises(ParseError):
            parse_sql("CREATE TABLE (id int);", strict=True)

    def test_unterminated_literal_is_one_issue(self):
        catalog = parse_sql("CREATE TABLE team (name text DEFAULT 'oops);")
        assert len(catalog.issues) == 1
        assert catalog.tables == {}

    def test_unbalanced_parentheses(self):
        catalog = parse_sql("CREATE TABLE team (id int;")
        assert "Unbalanced" in catalog.issues[0].message

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFoundError):
            parse_file(tmp_path / "missing.sql")


class TestFiles:
    def test_parse_file_records_source(self, write_sql):
        path = write_sql("schema.sql", "CREATE TABLE team (id int);")
        catalog = parse_file(path)
        assert catalog.sources == [str(path)]
        assert catalog.get_table("team").location.path == str(path)

    def test_shared_catalog(self, write_sql):
        parser = DDLParser("postgresql")
        catalog = Catalog()
        parser.parse_file(write_sql("a.sql", "CREATE TABLE team (id int);"), catalog)
        parser.parse_file(write_sql("b.sql", "CREATE TABLE person (id int);"), catalog)
        assert sorted(catalog.tables) == ["person", "team"]
        assert len(catalog.sources) == 2
