"""
cqldoc CQL Parser
=================
Public API for the CQL lexer and parser.

Usage:
    from cqlparser import parse, ParseError

    root, stream = parse("CREATE TABLE ks.users (id uuid PRIMARY KEY)")
    print(root.statements)
"""

from typing import List, Tuple

from cqlparser.parser import Parser, ParseError
from cqlparser.tokenizer import Tokenizer, Token, TokenType, TokenStream, Channel, CqlSyntaxError
from cqlparser.ast_nodes import Root


def parse(cql: str) -> Tuple[Root, TokenStream]:
    """
    Parse a CQL document into a syntax tree plus the token stream the tree
    was built from (needed to look up comments).
    Raises CqlSyntaxError (ParseError for grammar errors) if the input is invalid.
    """
    tokens = Tokenizer().tokenize(cql)
    root = Parser(tokens).parse()
    return root, TokenStream(tokens)


def tokenize(cql: str) -> List[Token]:
    """Tokenize CQL string, trivia included (for debugging)."""
    return Tokenizer().tokenize(cql)
