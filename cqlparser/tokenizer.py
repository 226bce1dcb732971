"""
cqldoc CQL Tokenizer
====================
Converts raw CQL text into a lossless stream of typed tokens.

Features:
- Case-insensitive reserved keywords (CREATE = create)
- Non-reserved words (KEY, STATIC, EXISTS, ...) stay identifiers
- Quoted identifiers ("MyTable") kept exactly as written
- String literals ('it''s', $$body$$) and numbers
- Whitespace and comments kept on the HIDDEN channel (trivia)
- Line/column tracking for error reporting and comment alignment
- EOF sentinel token
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List


class TokenType(Enum):
    # Reserved keywords
    ADD = auto()
    ALTER = auto()
    AND = auto()
    COLUMNFAMILY = auto()
    CREATE = auto()
    DROP = auto()
    IF = auto()
    NOT = auto()
    PRIMARY = auto()
    RENAME = auto()
    TABLE = auto()
    TO = auto()
    WITH = auto()

    # Literals
    NUMBER = auto()      # 123, 3.14, 1e10
    STRING_LIT = auto()  # 'hello', $$body$$
    HEX_LIT = auto()     # 0xCAFE
    UUID = auto()        # 123e4567-e89b-12d3-a456-426614174000
    IDENTIFIER = auto()  # table_name, "Quoted Name"

    # Operators
    EQ = auto()          # =
    NEQ = auto()         # !=
    LT = auto()          # <
    GT = auto()          # >
    LTE = auto()         # <=
    GTE = auto()         # >=
    PLUS = auto()        # +
    MINUS = auto()       # -
    STAR = auto()        # *
    SLASH = auto()       # /
    PERCENT = auto()     # %
    QUESTION = auto()    # ?

    # Punctuation
    LPAREN = auto()      # (
    RPAREN = auto()      # )
    LBRACE = auto()      # {
    RBRACE = auto()      # }
    LBRACKET = auto()    # [
    RBRACKET = auto()    # ]
    COMMA = auto()       # ,
    DOT = auto()         # .
    COLON = auto()       # :
    SEMICOLON = auto()   # ;

    # Trivia (hidden channel)
    HORIZONTAL_SPACE = auto()  # spaces and tabs
    VERTICAL_SPACE = auto()    # one line break
    LINE_COMMENT = auto()      # -- x, # x, // x (includes the line break)
    BLOCK_COMMENT = auto()     # /* x */

    # Special
    EOF = auto()


class Channel(Enum):
    DEFAULT = 0
    HIDDEN = 1


_LINE_BREAK = re.compile(r'\r\n|\r|\n')

TRIVIA = frozenset({
    TokenType.HORIZONTAL_SPACE,
    TokenType.VERTICAL_SPACE,
    TokenType.LINE_COMMENT,
    TokenType.BLOCK_COMMENT,
})


@dataclass(frozen=True)
class Token:
    """Immutable token with position info."""
    type: TokenType
    text: str
    line: int
    col: int  # 0-based offset in line, a tab counts as one
    index: int  # position in the full token list (all channels)
    channel: Channel = Channel.DEFAULT

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, {self.line}:{self.col})"


class CqlSyntaxError(Exception):
    """Lexical or syntax error with position info."""
    def __init__(self, message: str, line: int, col: int):
        super().__init__(f"{message} at line {line}:{col + 1}")
        self.line = line
        self.col = col


class Tokenizer:
    """
    Lexer for CQL. call .tokenize(cql) to get a list of tokens.
    Nothing is dropped: concatenating the token texts gives back the input.
    """

    KEYWORDS = {
        "ADD": TokenType.ADD,
        "ALTER": TokenType.ALTER,
        "AND": TokenType.AND,
        "COLUMNFAMILY": TokenType.COLUMNFAMILY,
        "CREATE": TokenType.CREATE,
        "DROP": TokenType.DROP,
        "IF": TokenType.IF,
        "NOT": TokenType.NOT,
        "PRIMARY": TokenType.PRIMARY,
        "RENAME": TokenType.RENAME,
        "TABLE": TokenType.TABLE,
        "TO": TokenType.TO,
        "WITH": TokenType.WITH,
    }

    # Note: order matters!
    PATTERNS = [
        # Trivia
        (re.compile(r'[ \t]+'), TokenType.HORIZONTAL_SPACE),
        (re.compile(r'\r\n|\r|\n'), TokenType.VERTICAL_SPACE),
        (re.compile(r'(?:--|#|//)[^\r\n]*(?:\r\n|\r|\n)?'), TokenType.LINE_COMMENT),
        (re.compile(r'/\*.*?\*/', re.DOTALL), TokenType.BLOCK_COMMENT),
        (re.compile(r'/\*'), None),  # opener without a closer

        # Literals
        # String: 'hello' (supports escaped single quote via '')
        (re.compile(r"'(?:''|[^'])*'"), TokenType.STRING_LIT),
        (re.compile(r'\$\$.*?\$\$', re.DOTALL), TokenType.STRING_LIT),
        (re.compile(r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'),
         TokenType.UUID),
        (re.compile(r'0[xX][0-9a-fA-F]*'), TokenType.HEX_LIT),
        (re.compile(r'\d+(?:\.\d*)?(?:[eE][+-]?\d+)?'), TokenType.NUMBER),

        # Identifiers / Keywords
        # Quoted identifier: "My Table" (supports escaped double quote via "")
        (re.compile(r'"(?:""|[^"])+"'), TokenType.IDENTIFIER),
        # Unquoted word: my_table (could be keyword)
        (re.compile(r'[a-zA-Z_][a-zA-Z0-9_]*'), TokenType.IDENTIFIER),

        # Operators (multi-char first)
        (re.compile(r'>='), TokenType.GTE),
        (re.compile(r'<='), TokenType.LTE),
        (re.compile(r'!='), TokenType.NEQ),
        (re.compile(r'='), TokenType.EQ),
        (re.compile(r'<'), TokenType.LT),
        (re.compile(r'>'), TokenType.GT),
        (re.compile(r'\+'), TokenType.PLUS),
        (re.compile(r'-'), TokenType.MINUS),
        (re.compile(r'\*'), TokenType.STAR),
        (re.compile(r'/'), TokenType.SLASH),
        (re.compile(r'%'), TokenType.PERCENT),
        (re.compile(r'\?'), TokenType.QUESTION),

        # Punctuation
        (re.compile(r'\('), TokenType.LPAREN),
        (re.compile(r'\)'), TokenType.RPAREN),
        (re.compile(r'\{'), TokenType.LBRACE),
        (re.compile(r'\}'), TokenType.RBRACE),
        (re.compile(r'\['), TokenType.LBRACKET),
        (re.compile(r'\]'), TokenType.RBRACKET),
        (re.compile(r','), TokenType.COMMA),
        (re.compile(r'\.'), TokenType.DOT),
        (re.compile(r':'), TokenType.COLON),
        (re.compile(r';'), TokenType.SEMICOLON),
    ]

    # Openers that never reach their closer
    UNTERMINATED = [
        ("'", "Unterminated string literal"),
        ('$$', "Unterminated string literal"),
        ('"', "Unterminated quoted identifier"),
    ]

    def tokenize(self, cql: str) -> List[Token]:
        """Tokenize CQL string into a list of Tokens (all channels)."""
        tokens: List[Token] = []
        pos = 0
        line = 1
        col_start = 0  # position of start of current line in string

        while pos < len(cql):
            match = None

            for pattern, token_type in self.PATTERNS:
                regex_match = pattern.match(cql, pos)
                if regex_match:
                    text = regex_match.group(0)

                    if token_type is None:
                        raise CqlSyntaxError("Unterminated block comment", line, pos - col_start)

                    if token_type == TokenType.IDENTIFIER and not text.startswith('"'):
                        token_type = self.KEYWORDS.get(text.upper(), TokenType.IDENTIFIER)

                    channel = Channel.HIDDEN if token_type in TRIVIA else Channel.DEFAULT
                    tokens.append(Token(token_type, text, line, pos - col_start, len(tokens), channel))

                    pos += len(text)

                    # Update line/col tracking
                    breaks = _LINE_BREAK.findall(text)
                    if breaks:
                        line += len(breaks)
                        # New column start is after the last line break
                        col_start = pos - len(_LINE_BREAK.split(text)[-1])

                    match = regex_match
                    break

            if not match:
                col = pos - col_start
                for opener, message in self.UNTERMINATED:
                    if cql.startswith(opener, pos):
                        raise CqlSyntaxError(message, line, col)
                raise CqlSyntaxError(f"Unexpected character '{cql[pos]}'", line, col)

        # Always append EOF
        tokens.append(Token(TokenType.EOF, "", line, pos - col_start, len(tokens)))
        return tokens


class TokenStream:
    """
    Read-only view over a full token list, answering trivia queries
    for the nodes of the syntax tree.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def significant(self) -> List[Token]:
        """Default-channel tokens, EOF included."""
        return [t for t in self.tokens if t.channel is Channel.DEFAULT]

    def hidden_tokens_to_left(self, token: Token) -> List[Token]:
        """
        Hidden-channel tokens between the previous default-channel token
        and `token`, in source order. Empty if `token` directly follows one.
        """
        end = token.index
        begin = end
        while begin > 0 and self.tokens[begin - 1].channel is Channel.HIDDEN:
            begin -= 1
        return self.tokens[begin:end]
