"""Character lexer for mathmark markup.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, tokenize
├── core.py              # Lexer class (cursor, dispatch, token output)
├── classifiers.py       # Line-start rules (indent, list, rule, header)
└── scanners.py          # Inline markers and delimiter scans

Usage:
    >>> from mathmark.lexer import tokenize
    >>> tokenize("**bold**")
    [Token(BOLD, 1:1), Token(TEXT, 'bold', 1:3), Token(BOLD, 1:7)]

"""

from mathmark.lexer.core import Lexer
from mathmark.tokens import Token


def tokenize(source: str, source_file: str | None = None) -> list[Token]:
    """Tokenize markup source into a flat token list.

    Diagnostics are logged; use ``Lexer`` directly to inspect them.

    Args:
        source: Markup source text
        source_file: Optional source file path for diagnostics

    Returns:
        Tokens in source order
    """
    return Lexer(source, source_file).tokenize()


__all__ = ["Lexer", "tokenize"]
