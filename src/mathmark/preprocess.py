"""Token stream normalization run between the lexer and the parser."""

from __future__ import annotations

from collections.abc import Sequence

from mathmark.tokens import Token, TokenType


def normalize(tokens: Sequence[Token]) -> list[Token]:
    """Open the document with a paragraph boundary.

    The parser only starts a paragraph after two NEWLINE tokens. Unless
    the document opens with a header, two NEWLINEs are prepended so that
    leading body text is grouped into a paragraph like any other.

    Args:
        tokens: Lexer output

    Returns:
        A new token list; the input is not modified
    """
    if tokens and tokens[0].type == TokenType.HEADER:
        return list(tokens)
    return [Token(TokenType.NEWLINE), Token(TokenType.NEWLINE), *tokens]
