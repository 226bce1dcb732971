"""
Schema Walker
=============
Applies a parsed CQL document to a Schema, statement by statement.

Single pass in source order. The only context is the table being created
or altered; it is passed down to the nodes of that statement and is gone
once the statement is done (table definitions never nest).
The first SchemaError aborts the walk and reaches the caller.
"""

import logging
from typing import Optional

from cqlparser.tokenizer import TokenStream
from cqlparser.ast_nodes import (
    ASTNode, Root, CreateTable, AlterTable, ColumnDefinition,
    AlterAddColumn, AlterDropColumnList, AlterRename, Other, TableRef
)
from cqlschema.comments import get_comment
from cqlschema.errors import TableNotFound
from cqlschema.model import Schema, Table, Column

logger = logging.getLogger(__name__)


class SchemaWalker:
    """
    Visits a syntax tree and mutates a Schema.
    Usage: SchemaWalker(stream).walk(root) -> Schema
    """

    def __init__(self, stream: TokenStream, schema: Optional[Schema] = None):
        self.stream = stream
        self.schema = schema if schema is not None else Schema()

    def walk(self, root: Root) -> Schema:
        for statement in root.statements:
            self.visit(statement, None)
        return self.schema

    def visit(self, node: ASTNode, table: Optional[Table]) -> None:
        """Dispatch on node kind. `table` is the current table, if any."""
        if isinstance(node, CreateTable):
            table = self._create_table(node)
            for column in node.columns:
                self.visit(column, table)
            return
        if isinstance(node, AlterTable):
            table = self._alter_table(node)
            for operation in node.operations:
                self.visit(operation, table)
            return
        if isinstance(node, ColumnDefinition):
            self._add_column(node, table)
            return
        if isinstance(node, AlterAddColumn):
            for column in node.columns:
                self.visit(column, table)
            return
        if isinstance(node, AlterDropColumnList):
            self._drop_columns(node, table)
            return
        if isinstance(node, AlterRename):
            table.rename_column(node.old_name, node.new_name)
            return
        if isinstance(node, Other):
            logger.debug("skipping statement at line %d: %s", node.start.line, node.text[:60])
            return

        raise TypeError(f"Unknown node type {type(node).__name__}")

    # ─── Statement Handlers ─────────────────────────────────────────

    def _create_table(self, node: CreateTable) -> Table:
        table = Table(
            name=node.table.name,
            keyspace=_keyspace(node.table),
            comment=self._comment(node),
        )
        logger.debug("create table %s", table.qualified_name)
        return self.schema.add_table(table)

    def _alter_table(self, node: AlterTable) -> Table:
        keyspace = _keyspace(node.table)
        table = self.schema.get_table(keyspace, node.table.name)
        if table is None:
            logger.debug("alter of unknown table %s", node.table)
            raise TableNotFound(keyspace, node.table.name)
        return table

    def _add_column(self, node: ColumnDefinition, table: Table) -> None:
        table.add_column(Column(
            name=node.name,
            cql_type=node.data_type,
            comment=self._comment(node),
        ))

    def _drop_columns(self, node: AlterDropColumnList, table: Table) -> None:
        for name in node.columns:
            table.drop_column(name)

    def _comment(self, node) -> str:
        return get_comment(self.stream.hidden_tokens_to_left(node.start))


def _keyspace(ref: TableRef) -> str:
    return ref.keyspace or ""
