"""
cqldoc Schema Extraction
========================
Builds a documented schema model (tables, columns, comments) from CQL
data-definition statements, without a database connection.

Usage:
    from cqlschema import parse

    schema = parse(open("schema.cql").read())
    table = schema.get_table("ks", "users")
    print(table.comment, [c.name for c in table.columns])
"""

from typing import TextIO

import cqlparser
from cqlschema.errors import SchemaError, TableNotFound, ColumnNotFound, DuplicateColumn
from cqlschema.model import Schema, Table, Column
from cqlschema.walker import SchemaWalker


def parse(cql: str) -> Schema:
    """
    Parse a CQL document into a Schema.
    Raises cqlparser.CqlSyntaxError for invalid syntax and SchemaError when a
    statement contradicts the schema built so far. There is no partial result.
    """
    root, stream = cqlparser.parse(cql)
    return SchemaWalker(stream).walk(root)


def parse_stream(stream: TextIO) -> Schema:
    """Read a whole text stream, then parse it."""
    return parse(stream.read())


def parse_file(path: str, encoding: str = "utf-8") -> Schema:
    with open(path, "r", encoding=encoding) as f:
        return parse_stream(f)
