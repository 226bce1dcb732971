"""
Comment extraction from trivia tokens.

Given the hidden-channel tokens that precede a declaration, pick the
comment that documents it and normalize it:

    -- line one              /* line one
    -- line two               * line two
    CREATE TABLE ...          */
                             CREATE TABLE ...

both yield "line one\\nline two".
"""

import re
from typing import List

from cqlparser.tokenizer import Token, TokenType

_LINE_COMMENT = re.compile(r"^(?:--|#|//)([^\r\n]*)")

_LINE_RUN = (TokenType.LINE_COMMENT, TokenType.HORIZONTAL_SPACE)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def get_comment(hidden_tokens: List[Token]) -> str:
    """Return the documentation comment attached by `hidden_tokens`, or ""."""
    tokens = list(hidden_tokens)
    if not tokens:
        return ""

    # Indentation between the comment and the declaration
    if tokens[-1].type == TokenType.HORIZONTAL_SPACE:
        tokens.pop()
        if not tokens:
            return ""

    # A block comment on the line above still attaches
    if (len(tokens) >= 2 and tokens[-1].type == TokenType.VERTICAL_SPACE
            and tokens[-2].type == TokenType.BLOCK_COMMENT):
        tokens.pop()

    last = tokens[-1]
    if last.type == TokenType.LINE_COMMENT:
        lines = _line_comment_run(tokens)
    elif last.type == TokenType.BLOCK_COMMENT:
        lines = _block_comment_lines(last)
    else:
        return ""

    return "\n".join(unindent_block(lines))


def _line_comment_run(tokens: List[Token]) -> List[str]:
    # Walk back over the contiguous run; any other trivia (a blank line) ends it
    idx = len(tokens) - 1
    while idx > 0 and tokens[idx - 1].type in _LINE_RUN:
        idx -= 1
    while tokens[idx].type == TokenType.HORIZONTAL_SPACE:
        idx += 1

    return [
        _LINE_COMMENT.match(token.text).group(1)
        for token in tokens[idx:]
        if token.type == TokenType.LINE_COMMENT
    ]


def _block_comment_lines(token: Token) -> List[str]:
    lines = _split_lines(token.text[2:-2])
    # Body starts right after "/*"
    body_column = token.col + 2
    return lines[:1] + [trim_star_line(line, body_column) for line in lines[1:]]


def _split_lines(text: str) -> List[str]:
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def trim_star_line(line: str, max_column: int) -> str:
    """
    Remove the leading [ \\t]*\\*? margin of a block comment continuation line
    when it lines up with `max_column`. Lines that do not match are kept.
    """
    if len(line) < max_column:
        return line

    column = 0
    for idx, char in enumerate(line):
        if column == max_column:
            return line[idx:]
        if char == " " or char == "\t":
            # A tab is one column, the same unit Token.col uses
            column += 1
        elif char == "*":
            if column != max_column - 1:
                return line
            column += 1
        else:
            return line
    return ""


def unindent_block(lines: List[str]) -> List[str]:
    """Strip the indentation (in spaces) common to all non-empty lines."""
    first = 0
    while first < len(lines) and not lines[first]:
        first += 1

    non_empty = [line for line in lines[first:] if line]
    if not non_empty:
        return lines

    indent = min(count_left(line, " ") for line in non_empty)
    return [line[indent:] for line in lines]


def count_left(s: str, char: str) -> int:
    """Count how many `char` are at the beginning of `s`."""
    return len(s) - len(s.lstrip(char))
