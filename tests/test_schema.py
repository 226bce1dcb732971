"""
cqldoc Schema Extraction Tests
==============================
End-to-end tests: CQL text -> Schema, through tokenizer, parser and walker.

Focus:
1. Comments attached to the right table/column
2. ALTER TABLE ADD / DROP / RENAME applied in statement order
3. Schema errors abort the whole parse (no partial result)
"""

import io
import os
import sys
import tempfile

import pytest

# Ensure project root is on path
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
sys.path.insert(0, parent_dir)

import cqlparser
from cqlparser import ParseError
from cqlschema import (
    parse, parse_stream, parse_file, SchemaWalker,
    SchemaError, TableNotFound, ColumnNotFound, DuplicateColumn
)
from cqlschema.model import Schema


class TestCreateTable:

    def test_create_table_single(self):
        schema = parse("""-- random comment

-- table comment line 1
-- table comment line 2
CREATE TABLE sp.mytable (
    -- random comment in table

    -- column comment
    -- column comment line 2
    col1 text,

    col2 int
);""")
        assert len(schema.tables) == 1
        table = schema.get_table("sp", "mytable")
        assert table is not None
        assert table.comment == "table comment line 1\ntable comment line 2"
        assert len(table.columns) == 2

        col1 = table.get_column("col1")
        assert col1 is not None
        assert col1.comment == "column comment\ncolumn comment line 2"
        assert col1.cql_type == "text"
        assert col1.name == "col1"

        col2 = table.get_column("col2")
        assert col2 is not None
        assert col2.comment == ""
        assert col2.cql_type == "int"
        assert col2.name == "col2"

    def test_block_comment_on_table(self):
        schema = parse("/*\n * Users of the service.\n */\nCREATE TABLE ks.users (id uuid PRIMARY KEY);")
        assert schema.get_table("ks", "users").comment == "\nUsers of the service.\n"

    def test_comment_for_later_statement(self):
        schema = parse("CREATE TABLE a (x int);\n-- second table\nCREATE TABLE b (y int);")
        assert schema.get_table("", "a").comment == ""
        assert schema.get_table("", "b").comment == "second table"

    def test_table_without_keyspace(self):
        schema = parse("CREATE TABLE t (a int)")
        table = schema.tables[0]
        assert table.keyspace == ""
        assert table.qualified_name == "t"
        assert schema.get_table("", "t") is table
        assert schema.get_table("ks", "t") is None

    def test_primary_key_and_options(self):
        schema = parse("""
CREATE TABLE IF NOT EXISTS ks.events (
    -- partition
    day date,
    /* clustering */ ts timestamp,
    payload blob,
    PRIMARY KEY ((day), ts)
) WITH CLUSTERING ORDER BY (ts DESC) AND comment = 'ignored';
""")
        table = schema.get_table("ks", "events")
        assert [(c.name, c.cql_type, c.comment) for c in table.columns] == [
            ("day", "date", "partition"),
            ("ts", "timestamp", "clustering "),
            ("payload", "blob", ""),
        ]

    def test_other_statements_ignored(self):
        schema = parse("""
CREATE KEYSPACE ks WITH replication = {'class': 'SimpleStrategy', 'replication_factor': 1};
USE ks;
-- doc
CREATE TABLE ks.t (a int);
INSERT INTO ks.t (a) VALUES (1);
""")
        assert len(schema.tables) == 1
        assert schema.tables[0].comment == "doc"

    def test_duplicate_tables_first_match(self):
        schema = parse(
            "CREATE TABLE ks.t (a int);\n"
            "CREATE TABLE ks.t (b int);\n"
            "ALTER TABLE ks.t ADD c int;"
        )
        assert len(schema.tables) == 2
        assert [c.name for c in schema.tables[0].columns] == ["a", "c"]
        assert [c.name for c in schema.tables[1].columns] == ["b"]


class TestAlterTable:

    def test_alter_table_add(self):
        schema = parse("""CREATE TABLE ab.tbl (col1 text, col2 text);
ALTER TABLE ab.tbl ADD
	-- col3 comment
	col3 map<string, int>, /* col4 comment */col4 blob
	;
""")
        assert len(schema.tables) == 1
        table = schema.get_table("ab", "tbl")
        assert len(table.columns) == 4

        for name in ("col1", "col2"):
            column = table.get_column(name)
            assert column.comment == ""
            assert column.cql_type == "text"

        col3 = table.get_column("col3")
        assert col3.comment == "col3 comment"
        assert col3.cql_type == "map<string,int>"

        col4 = table.get_column("col4")
        assert col4.comment == "col4 comment "
        assert col4.cql_type == "blob"

    def test_alter_table_rename(self):
        schema = parse("""CREATE TABLE ab.tbl (col1 text, -- second
col2 text);
ALTER TABLE ab.tbl RENAME col2 TO col5;
""")
        table = schema.get_table("ab", "tbl")
        assert [c.name for c in table.columns] == ["col1", "col5"]
        col5 = table.get_column("col5")
        assert col5.cql_type == "text"
        assert col5.comment == "second"
        assert table.get_column("col2") is None

    def test_alter_table_rename_chain(self):
        schema = parse("CREATE TABLE t (a int, b int);\nALTER TABLE t RENAME a TO x AND b TO y;")
        assert [c.name for c in schema.tables[0].columns] == ["x", "y"]

    def test_alter_table_rename_swap_fails(self):
        with pytest.raises(DuplicateColumn):
            parse("CREATE TABLE t (a int, b int);\nALTER TABLE t RENAME a TO b AND b TO a;")

    def test_alter_table_rename_non_existing_table(self):
        with pytest.raises(TableNotFound) as exc:
            parse("CREATE TABLE ab.tbl (col1 text, col2 text);\nALTER TABLE ab.tbl2 RENAME col1 TO col5;\n")
        assert exc.value.keyspace == "ab"
        assert exc.value.table == "tbl2"
        assert str(exc.value) == "Table not found: ab.tbl2"

    def test_alter_table_rename_non_existing_column(self):
        with pytest.raises(ColumnNotFound) as exc:
            parse("CREATE TABLE ab.tbl (col1 text, col2 text);\nALTER TABLE ab.tbl RENAME col3 TO col5;\n")
        assert exc.value.column == "col3"
        assert "Column does not exist" in exc.value.message

    def test_alter_table_rename_duplicate_column(self):
        with pytest.raises(DuplicateColumn) as exc:
            parse("CREATE TABLE ab.tbl (col1 text, col2 text);\nALTER TABLE ab.tbl RENAME col1 TO col2;\n")
        assert exc.value.column == "col2"
        assert str(exc.value) == "Duplicate column found: col2 in ab.tbl"

    def test_alter_table_drop(self):
        schema = parse("CREATE TABLE ab.tbl (col1 text, col2 text);\nALTER TABLE ab.tbl DROP col1;\n")
        table = schema.get_table("ab", "tbl")
        assert len(table.columns) == 1
        col2 = table.get_column("col2")
        assert col2.comment == ""
        assert col2.cql_type == "text"

    def test_alter_table_drop_non_existing_table(self):
        with pytest.raises(TableNotFound):
            parse("CREATE TABLE ab.tbl (col1 text, col2 text);\nALTER TABLE ab2.tbl DROP col1;\n")

    def test_alter_table_drop_non_existing_column(self):
        schema = parse("CREATE TABLE ab.tbl (col1 text, col2 text);\nALTER TABLE ab.tbl DROP col3;\n")
        table = schema.get_table("ab", "tbl")
        assert [c.name for c in table.columns] == ["col1", "col2"]

    def test_alter_table_drop_column_named_compact(self):
        schema = parse("CREATE TABLE t (compact int, b int);\nALTER TABLE t DROP compact;")
        assert [c.name for c in schema.tables[0].columns] == ["b"]

    def test_alter_table_drop_compact_storage_keeps_columns(self):
        schema = parse("CREATE TABLE t (compact int, b int);\nALTER TABLE t DROP COMPACT STORAGE;")
        assert [c.name for c in schema.tables[0].columns] == ["compact", "b"]

    def test_alter_table_drop_using_timestamp(self):
        schema = parse("CREATE TABLE t (a int, b int);\nALTER TABLE t DROP b USING TIMESTAMP 1;")
        assert [c.name for c in schema.tables[0].columns] == ["a"]

    def test_alter_unqualified_does_not_match_qualified(self):
        with pytest.raises(TableNotFound) as exc:
            parse("CREATE TABLE ks.t (a int);\nALTER TABLE t ADD b int;")
        assert str(exc.value) == "Table not found: t"

    def test_alter_with_options_ignored(self):
        schema = parse("CREATE TABLE t (a int);\nALTER TABLE t WITH comment = 'x';")
        assert [c.name for c in schema.tables[0].columns] == ["a"]

    def test_alter_with_options_on_missing_table(self):
        with pytest.raises(TableNotFound):
            parse("ALTER TABLE t WITH comment = 'x';")

    def test_add_and_drop_keep_statement_order(self):
        schema = parse("""
CREATE TABLE ks.t (a int);
ALTER TABLE ks.t ADD b int;
ALTER TABLE ks.t ADD (c int, d int);
ALTER TABLE ks.t ADD e int;
ALTER TABLE ks.t DROP (b, d);
ALTER TABLE ks.t ADD f int;
""")
        assert [c.name for c in schema.tables[0].columns] == ["a", "c", "e", "f"]


class TestErrors:

    def test_error_aborts_remaining_statements(self):
        cql = (
            "CREATE TABLE a.t (x int);\n"
            "ALTER TABLE a.missing ADD y int;\n"
            "CREATE TABLE a.u (z int);\n"
        )
        root, stream = cqlparser.parse(cql)
        walker = SchemaWalker(stream)
        with pytest.raises(TableNotFound):
            walker.walk(root)
        assert [t.name for t in walker.schema.tables] == ["t"]

    def test_failed_rename_leaves_table_unchanged(self):
        root, stream = cqlparser.parse(
            "CREATE TABLE t (a int, b text);\nALTER TABLE t RENAME a TO b;"
        )
        walker = SchemaWalker(stream)
        with pytest.raises(DuplicateColumn):
            walker.walk(root)
        table = walker.schema.tables[0]
        assert [(c.name, c.cql_type) for c in table.columns] == [("a", "int"), ("b", "text")]

    def test_schema_errors_share_base(self):
        for cls in (TableNotFound, ColumnNotFound, DuplicateColumn):
            assert issubclass(cls, SchemaError)

    def test_syntax_error_propagates(self):
        with pytest.raises(ParseError):
            parse("CREATE TABLE t (a int")

    def test_walker_appends_to_given_schema(self):
        schema = Schema()
        root, stream = cqlparser.parse("CREATE TABLE t (a int)")
        assert SchemaWalker(stream, schema).walk(root) is schema
        assert len(schema.tables) == 1


class TestEntryPoints:

    CQL = "-- doc\nCREATE TABLE ks.t (a int);"

    def test_parse_stream(self):
        schema = parse_stream(io.StringIO(self.CQL))
        assert schema.get_table("ks", "t").comment == "doc"

    def test_parse_file(self):
        fd, path = tempfile.mkstemp(suffix=".cql")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(self.CQL)
            schema = parse_file(path)
            assert schema.get_table("ks", "t").comment == "doc"
        finally:
            os.remove(path)

    def test_parse_file_missing(self):
        with pytest.raises(FileNotFoundError):
            parse_file(os.path.join(tempfile.gettempdir(), "cqldoc-no-such-file.cql"))

    def test_to_dict(self):
        schema = parse("-- doc\nCREATE TABLE ks.t (\n  -- the key\n  a map<text, int>);")
        assert schema.to_dict() == {
            "Tables": [{
                "Comment": "doc",
                "Keyspace": "ks",
                "Name": "t",
                "Columns": [{"Comment": "the key", "Name": "a", "CqlType": "map<text,int>"}],
            }]
        }

    def test_empty_document(self):
        assert parse("").to_dict() == {"Tables": []}


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
