"""Inline parsing for the mathmark parser.

Emphasis toggles, links and leaf tokens.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from mathmark.errors import DiagnosticCollector, ErrorKind
from mathmark.nodes import (
    NBSP,
    Bold,
    CodeBlock,
    DisplayMath,
    Highlighted,
    Hr,
    InlineCode,
    InlineMath,
    Italic,
    Link,
    Node,
    Striked,
    Text,
    Underline,
)
from mathmark.tokens import Token, TokenType

# Toggle token -> container node
TOGGLE_NODES: dict[TokenType, type[Bold | Italic | Striked | Underline | Highlighted]] = {
    TokenType.BOLD: Bold,
    TokenType.ITALIC: Italic,
    TokenType.STRIKED: Striked,
    TokenType.UNDERLINE: Underline,
    TokenType.HIGHLIGHTED: Highlighted,
}

LEAF_TYPES = frozenset(
    {
        TokenType.TEXT,
        TokenType.INLINE_MATH,
        TokenType.DISPLAY_MATH,
        TokenType.INLINE_CODE,
        TokenType.CODE_BLOCK,
        TokenType.NBSP,
        TokenType.HR,
    }
)


def leaf_node(token: Token) -> Node:
    """Build the leaf node for a payload token."""
    location = token.location
    match token.type:
        case TokenType.TEXT:
            return Text(token.value, location=location)
        case TokenType.INLINE_MATH:
            return InlineMath(token.value, location=location)
        case TokenType.DISPLAY_MATH:
            return DisplayMath(token.value, location=location)
        case TokenType.INLINE_CODE:
            return InlineCode(token.value, location=location)
        case TokenType.CODE_BLOCK:
            return CodeBlock(token.value, location=location)
        case TokenType.NBSP:
            return NBSP(location=location)
        case TokenType.HR:
            return Hr(token.hr_style, location=location)
    raise ValueError(f"{token.type.name} is not a leaf token")


def flatten(tokens: Iterable[Token]) -> Iterator[Node]:
    """Reduce a token span to its leaves without building containers.

    Markers are dropped; newlines become spaces.
    """
    for token in tokens:
        if token.type == TokenType.NEWLINE:
            yield Text(" ", location=token.location)
        elif token.type in LEAF_TYPES:
            yield leaf_node(token)


class InlineParsingMixin:
    """Mixin for emphasis spans and links.

    Required Host Attributes:
        - _diagnostics: DiagnosticCollector

    Required Host Methods:
        - _take_until(token_type) -> tuple[list[Token], Token | None]
        - _parse_nested(tokens, *, inline, in_list_item=False) -> tuple[Node, ...]
    """

    _diagnostics: DiagnosticCollector

    def _parse_toggle(self, marker: Token) -> Node:
        """Parse a span opened by a toggle marker.

        The next marker of the same type closes the span, so same-kind
        spans never nest: ``**a **b** c**`` is bold "a ", text "b", bold " c".
        A span left open runs to the end of the enclosing sequence.
        """
        span, closer = self._take_until(marker.type)
        node_class = TOGGLE_NODES[marker.type]
        if closer is None:
            self._diagnostics.report(
                ErrorKind.UNTERMINATED_SPAN,
                f"unterminated {node_class.__name__.lower()} span",
                marker.lineno,
                marker.col,
            )
        children = self._parse_nested(span, inline=True)
        return node_class(children, location=marker.location)

    def _parse_link(self, marker: Token) -> list[Node]:
        """Parse ``[text](url)``.

        An unclosed ``[`` is reported and kept as literal text followed
        by the parsed rest of the span.
        """
        span, closer = self._take_until(TokenType.LINK_END)
        children = self._parse_nested(span, inline=True)
        if closer is None:
            self._diagnostics.report(
                ErrorKind.UNTERMINATED_SPAN,
                "unterminated link: expected '](' before end of input",
                marker.lineno,
                marker.col,
            )
            return [Text("[", location=marker.location), *children]
        return [Link(closer.value, children, location=marker.location)]

    def _parse_nested(
        self, tokens: Sequence[Token], *, inline: bool, in_list_item: bool = False
    ) -> tuple[Node, ...]:
        raise NotImplementedError
