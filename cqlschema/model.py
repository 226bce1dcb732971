"""
Schema Model
============
In-memory result of parsing a CQL document:
- Schema owns Tables, in creation order
- Table owns Columns, in declaration order (kept through add/drop/rename)
- Lookups return the first match; duplicates are not rejected
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cqlschema.errors import ColumnNotFound, DuplicateColumn

logger = logging.getLogger(__name__)


@dataclass
class Column:
    name: str
    cql_type: str
    comment: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Comment": self.comment,
            "Name": self.name,
            "CqlType": self.cql_type,
        }


@dataclass
class Table:
    name: str
    keyspace: str = ""  # "" when the statement did not qualify the table
    comment: str = ""
    columns: List[Column] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        if self.keyspace:
            return f"{self.keyspace}.{self.name}"
        return self.name

    def get_column(self, name: str) -> Optional[Column]:
        """First column called `name`, or None."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def add_column(self, column: Column) -> Column:
        self.columns.append(column)
        return column

    def drop_column(self, name: str) -> Optional[Column]:
        """
        Remove the first column called `name` and return it.
        Dropping a column that does not exist does nothing.
        """
        for idx, column in enumerate(self.columns):
            if column.name == name:
                return self.columns.pop(idx)
        logger.debug("drop of absent column %s in %s ignored", name, self.qualified_name)
        return None

    def rename_column(self, old_name: str, new_name: str) -> Column:
        """
        Rename a column in place; its position, type and comment are kept.
        Raises ColumnNotFound / DuplicateColumn without touching the table.
        """
        column = self.get_column(old_name)
        if column is None:
            raise ColumnNotFound(old_name, self.keyspace, self.name)
        if self.get_column(new_name) is not None:
            raise DuplicateColumn(new_name, self.keyspace, self.name)
        column.name = new_name
        return column

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Comment": self.comment,
            "Keyspace": self.keyspace,
            "Name": self.name,
            "Columns": [c.to_dict() for c in self.columns],
        }


@dataclass
class Schema:
    tables: List[Table] = field(default_factory=list)

    def add_table(self, table: Table) -> Table:
        self.tables.append(table)
        return table

    def get_table(self, keyspace: str, name: str) -> Optional[Table]:
        """First table matching (keyspace, name) exactly, or None."""
        for table in self.tables:
            if table.keyspace == keyspace and table.name == name:
                return table
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"Tables": [t.to_dict() for t in self.tables]}
