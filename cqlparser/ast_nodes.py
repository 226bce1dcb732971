"""
cqldoc AST Nodes
================
Syntax tree for the CQL data-definition statements cqldoc understands.

Design:
- Closed set of node kinds: CreateTable, ColumnDefinition, AlterTable,
  AlterAddColumn, AlterDropColumnList, AlterRename, Other
- Every node keeps its first significant token (`start`), which is where
  the trivia (comments) attached to the node is looked up
- Names and type text are kept exactly as written in the source
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from cqlparser.tokenizer import Token


class ASTNode:
    """Base class for all AST nodes."""
    pass


@dataclass
class TableRef(ASTNode):
    """[keyspace.]table reference."""
    keyspace: Optional[str]
    name: str

    def __str__(self) -> str:
        if self.keyspace:
            return f"{self.keyspace}.{self.name}"
        return self.name


# ═══════════════════════════════════════════════════════════════════════════
# Declarations
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ColumnDefinition(ASTNode):
    """Column definition in CREATE TABLE or ALTER TABLE ... ADD."""
    start: Token
    name: str
    data_type: str
    static: bool = False
    primary_key: bool = False

    def __repr__(self) -> str:
        extra = " STATIC" if self.static else ""
        if self.primary_key:
            extra += " PRIMARY KEY"
        return f"ColumnDefinition({self.name} {self.data_type}{extra})"


# ═══════════════════════════════════════════════════════════════════════════
# ALTER TABLE operations
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class AlterAddColumn(ASTNode):
    """ADD col type [, col type ...]"""
    start: Token
    columns: List[ColumnDefinition]


@dataclass
class AlterDropColumnList(ASTNode):
    """DROP col [, col ...]"""
    start: Token
    columns: List[str]


@dataclass
class AlterRename(ASTNode):
    """RENAME old TO new. One node per pair of a RENAME ... AND ... chain."""
    start: Token
    old_name: str
    new_name: str


@dataclass
class Other(ASTNode):
    """
    Anything cqldoc does not model: whole statements (CREATE KEYSPACE, USE,
    INSERT, ...) or ALTER TABLE operations (WITH ..., ALTER col TYPE ...).
    """
    start: Token
    text: str


AlterOperation = Union[AlterAddColumn, AlterDropColumnList, AlterRename, Other]


# ═══════════════════════════════════════════════════════════════════════════
# Statements
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class CreateTable(ASTNode):
    """
    CREATE TABLE [IF NOT EXISTS] [ks.]table (col type ..., PRIMARY KEY (...)) [WITH ...]
    """
    start: Token
    table: TableRef
    columns: List[ColumnDefinition]
    if_not_exists: bool = False

    def __repr__(self) -> str:
        cols = ", ".join(map(repr, self.columns))
        return f"CreateTable({self.table} ({cols}))"


@dataclass
class AlterTable(ASTNode):
    """
    ALTER TABLE [ks.]table <operation>
    """
    start: Token
    table: TableRef
    operations: List[AlterOperation] = field(default_factory=list)

    def __repr__(self) -> str:
        ops = ", ".join(map(repr, self.operations))
        return f"AlterTable({self.table} [{ops}])"


Statement = Union[CreateTable, AlterTable, Other]


@dataclass
class Root(ASTNode):
    """A whole document: statements in source order."""
    statements: List[Statement] = field(default_factory=list)
