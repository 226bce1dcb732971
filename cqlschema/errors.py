"""
Schema-level errors raised while applying statements to a Schema.

Syntax problems are reported by cqlparser (CqlSyntaxError / ParseError),
never by these.
"""


def _qualified(keyspace: str, name: str) -> str:
    return f"{keyspace}.{name}" if keyspace else name


class SchemaError(Exception):
    """Base class: a statement is inconsistent with the schema built so far."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TableNotFound(SchemaError):
    """ALTER TABLE names a (keyspace, table) pair that was never created."""
    def __init__(self, keyspace: str, table: str):
        super().__init__(f"Table not found: {_qualified(keyspace, table)}")
        self.keyspace = keyspace
        self.table = table


class ColumnNotFound(SchemaError):
    """RENAME names a column the table does not have."""
    def __init__(self, column: str, keyspace: str, table: str):
        super().__init__(f"Column does not exist: {column} in {_qualified(keyspace, table)}")
        self.column = column
        self.keyspace = keyspace
        self.table = table


class DuplicateColumn(SchemaError):
    """RENAME target name is already taken on the table."""
    def __init__(self, column: str, keyspace: str, table: str):
        super().__init__(f"Duplicate column found: {column} in {_qualified(keyspace, table)}")
        self.column = column
        self.keyspace = keyspace
        self.table = table
