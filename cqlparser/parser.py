"""
cqldoc CQL Parser
=================
Recursive-descent parser for the data-definition subset of CQL.
Converts a stream of tokens into a syntax tree (Root).

Architecture:
- Input: Immutable list of Tokens (from Tokenizer, all channels)
- Only DEFAULT channel tokens are parsed; trivia stays in the TokenStream
- Output: Root node with one node per statement
- Lookahead: 1 token, 2 for CREATE/ALTER TABLE, 3 for DROP COMPACT STORAGE
"""

from typing import List

from cqlparser.tokenizer import Token, TokenType, Channel, CqlSyntaxError
from cqlparser.ast_nodes import (
    Root, Statement, CreateTable, AlterTable, ColumnDefinition, TableRef,
    AlterOperation, AlterAddColumn, AlterDropColumnList, AlterRename, Other
)


class ParseError(CqlSyntaxError):
    """Error during parsing with position info."""
    def __init__(self, message: str, token: Token):
        super().__init__(message, token.line, token.col)
        self.token = token


_TABLE_KEYWORDS = (TokenType.TABLE, TokenType.COLUMNFAMILY)


class Parser:
    """
    Recursive-descent CQL parser.
    Initialize with a list of tokens, call .parse() to get the syntax tree.
    """

    def __init__(self, tokens: List[Token]):
        self._tokens = [t for t in tokens if t.channel is Channel.DEFAULT]
        self._pos = 0

    def parse(self) -> Root:
        """Parse a whole document: statements separated by semicolons."""
        root = Root()
        while not self._is_at_end():
            if self._match(TokenType.SEMICOLON):
                continue  # empty statement
            root.statements.append(self._parse_statement())
            if not self._is_at_end():
                self._consume(TokenType.SEMICOLON, "Expected ; after statement")
        return root

    # ─── Statement Parsing ──────────────────────────────────────────

    def _parse_statement(self) -> Statement:
        if self._check(TokenType.CREATE) and self._check_next(*_TABLE_KEYWORDS):
            return self._parse_create_table()
        if self._check(TokenType.ALTER) and self._check_next(*_TABLE_KEYWORDS):
            return self._parse_alter_table()
        return self._parse_other()

    def _parse_create_table(self) -> CreateTable:
        # CREATE TABLE [IF NOT EXISTS] [ks.]table (item, ...) [WITH ...]
        start = self._advance()
        self._advance()  # TABLE | COLUMNFAMILY
        if_not_exists = self._parse_if_not_exists()
        table = self._parse_table_ref()

        self._consume(TokenType.LPAREN, "Expected ( after table name")

        columns = []
        while True:
            if self._match(TokenType.PRIMARY):
                # Table-level PRIMARY KEY ((a, b), c): no columns declared here
                self._consume_word("KEY", "Expected KEY after PRIMARY")
                self._consume(TokenType.LPAREN, "Expected ( after PRIMARY KEY")
                self._skip_balanced()
            else:
                columns.append(self._parse_column_definition())

            if not self._match(TokenType.COMMA):
                break

        self._consume(TokenType.RPAREN, "Expected ) after column definitions")

        if self._match(TokenType.WITH):
            self._skip_to_statement_end()

        return CreateTable(start, table, columns, if_not_exists)

    def _parse_alter_table(self) -> AlterTable:
        # ALTER TABLE [IF EXISTS] [ks.]table <operation>
        start = self._advance()
        self._advance()  # TABLE | COLUMNFAMILY
        self._parse_if_exists()
        table = self._parse_table_ref()
        return AlterTable(start, table, self._parse_alter_operations())

    def _parse_alter_operations(self) -> List[AlterOperation]:
        op_start = self._peek()

        if self._match(TokenType.ADD):
            self._parse_if_not_exists()
            if self._match(TokenType.LPAREN):
                columns = self._parse_column_definitions()
                self._consume(TokenType.RPAREN, "Expected ) after column definitions")
            else:
                columns = self._parse_column_definitions()
            return [AlterAddColumn(op_start, columns)]

        if self._check(TokenType.DROP) and not self._check_compact_storage():
            self._advance()
            self._parse_if_exists()
            if self._match(TokenType.LPAREN):
                names = self._parse_column_names()
                self._consume(TokenType.RPAREN, "Expected ) after column list")
            else:
                names = self._parse_column_names()
            if self._match_word("USING"):
                self._consume_word("TIMESTAMP", "Expected TIMESTAMP after USING")
                self._consume(TokenType.NUMBER, "Expected timestamp value")
            return [AlterDropColumnList(op_start, names)]

        if self._match(TokenType.RENAME):
            self._parse_if_exists()
            renames = []
            while True:
                old = self._consume(TokenType.IDENTIFIER, "Expected column name")
                self._consume(TokenType.TO, "Expected TO after column name")
                new = self._consume(TokenType.IDENTIFIER, "Expected new column name")
                renames.append(AlterRename(old, old.text, new.text))
                if not self._match(TokenType.AND):
                    break
            return renames

        if self._check(TokenType.SEMICOLON) or self._is_at_end():
            raise ParseError("Expected ADD, DROP, RENAME, ALTER or WITH after table name", op_start)

        # WITH ..., ALTER col TYPE ..., DROP COMPACT STORAGE
        return [self._parse_other()]

    def _parse_other(self) -> Other:
        start = self._peek()
        skipped = self._skip_to_statement_end()
        return Other(start, " ".join(t.text for t in skipped))

    # ─── Declarations ───────────────────────────────────────────────

    def _parse_column_definitions(self) -> List[ColumnDefinition]:
        columns = []
        while True:
            columns.append(self._parse_column_definition())
            if not self._match(TokenType.COMMA):
                break
        return columns

    def _parse_column_definition(self) -> ColumnDefinition:
        # name type [STATIC] [PRIMARY KEY]
        name = self._consume(TokenType.IDENTIFIER, "Expected column name")
        data_type = self._parse_data_type()
        static = self._match_word("STATIC")

        primary_key = False
        if self._match(TokenType.PRIMARY):
            self._consume_word("KEY", "Expected KEY after PRIMARY")
            primary_key = True

        return ColumnDefinition(name, name.text, data_type, static, primary_key)

    def _parse_data_type(self) -> str:
        """
        type ::= name ['.' name] ['<' type_arg [',' type_arg ...] '>'] | 'custom.Class'
        Returns the concatenated token text, so trivia inside the type is gone.
        """
        if self._check(TokenType.STRING_LIT):
            return self._advance().text

        parts = [self._consume(TokenType.IDENTIFIER, "Expected data type").text]
        if self._match(TokenType.DOT):
            parts.append(".")
            parts.append(self._consume(TokenType.IDENTIFIER, "Expected type name after .").text)

        if self._match(TokenType.LT):
            parts.append("<")
            while True:
                if self._check(TokenType.NUMBER):
                    parts.append(self._advance().text)  # vector<float, 3>
                else:
                    parts.append(self._parse_data_type())
                if not self._match(TokenType.COMMA):
                    break
                parts.append(",")
            self._consume(TokenType.GT, "Expected > after type arguments")
            parts.append(">")

        return "".join(parts)

    def _parse_column_names(self) -> List[str]:
        names = []
        while True:
            names.append(self._consume(TokenType.IDENTIFIER, "Expected column name").text)
            if not self._match(TokenType.COMMA):
                break
        return names

    # ─── Helpers ────────────────────────────────────────────────────

    def _parse_table_ref(self) -> TableRef:
        first = self._consume(TokenType.IDENTIFIER, "Expected table name")
        if self._match(TokenType.DOT):
            second = self._consume(TokenType.IDENTIFIER, "Expected table name after .")
            return TableRef(first.text, second.text)
        return TableRef(None, first.text)

    def _parse_if_not_exists(self) -> bool:
        if self._match(TokenType.IF):
            self._consume(TokenType.NOT, "Expected NOT after IF")
            self._consume_word("EXISTS", "Expected EXISTS after IF NOT")
            return True
        return False

    def _parse_if_exists(self) -> bool:
        if self._match(TokenType.IF):
            self._consume_word("EXISTS", "Expected EXISTS after IF")
            return True
        return False

    def _skip_balanced(self) -> None:
        """Skip tokens up to and including the ) closing an already consumed (."""
        depth = 1
        while depth > 0:
            if self._is_at_end():
                raise ParseError("Expected )", self._peek())
            token = self._advance()
            if token.type == TokenType.LPAREN:
                depth += 1
            elif token.type == TokenType.RPAREN:
                depth -= 1

    def _skip_to_statement_end(self) -> List[Token]:
        """Consume tokens up to (not including) the next ; or EOF."""
        skipped = []
        while not self._is_at_end() and not self._check(TokenType.SEMICOLON):
            skipped.append(self._advance())
        return skipped

    # ─── Core Parser Logic ──────────────────────────────────────────

    def _peek(self) -> Token:
        if self._pos >= len(self._tokens):
            return self._tokens[-1]  # EOF
        return self._tokens[self._pos]

    def _peek_at(self, offset: int) -> Token:
        if self._pos + offset >= len(self._tokens):
            return self._tokens[-1]  # EOF
        return self._tokens[self._pos + offset]

    def _peek_next(self) -> Token:
        return self._peek_at(1)

    def _previous(self) -> Token:
        return self._tokens[self._pos - 1]

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _check(self, type: TokenType) -> bool:
        if self._is_at_end() and type != TokenType.EOF:
            return False
        return self._peek().type == type

    def _check_next(self, *types: TokenType) -> bool:
        return self._peek_next().type in types

    def _check_word_at(self, offset: int, word: str) -> bool:
        token = self._peek_at(offset)
        return token.type == TokenType.IDENTIFIER and token.text.upper() == word

    def _check_compact_storage(self) -> bool:
        """DROP COMPACT STORAGE, as opposed to dropping a column named compact."""
        return self._check_word_at(1, "COMPACT") and self._check_word_at(2, "STORAGE")

    def _check_word(self, word: str) -> bool:
        return self._check(TokenType.IDENTIFIER) and self._peek().text.upper() == word

    def _advance(self) -> Token:
        if not self._is_at_end():
            self._pos += 1
        return self._previous()

    def _match(self, *types: TokenType) -> bool:
        for type in types:
            if self._check(type):
                self._advance()
                return True
        return False

    def _match_word(self, word: str) -> bool:
        """Match a non-reserved keyword, which the tokenizer leaves as IDENTIFIER."""
        if self._check_word(word):
            self._advance()
            return True
        return False

    def _consume(self, type: TokenType, message: str) -> Token:
        if self._check(type):
            return self._advance()
        raise ParseError(message, self._peek())

    def _consume_word(self, word: str, message: str) -> Token:
        if self._check_word(word):
            return self._advance()
        raise ParseError(message, self._peek())
