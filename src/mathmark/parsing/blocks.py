"""Block parsing for the mathmark parser.

Lists, headers, environments, paragraphs and newline handling. There are
no explicit block delimiters for most constructs, so block extents are
recovered from NEWLINE and indentation tokens.
"""

from __future__ import annotations

from collections.abc import Sequence

from mathmark.errors import DiagnosticCollector, ErrorKind
from mathmark.nodes import (
    BLOCK_NODE_TYPES,
    Env,
    EnvType,
    Header,
    List,
    ListItem,
    NewLine,
    Node,
    Paragraph,
    Text,
)
from mathmark.tokens import BLOCK_START_TYPES, Token, TokenType
from mathmark.utils.logger import get_logger

logger = get_logger(__name__)

# Continuation lines of a list item must be indented at least this many
# columns past the item's own indent (the width of the "- " marker).
LIST_CONTINUATION_INDENT = 2

# Tokens that carry no content on their own
BLANK_TYPES = frozenset({TokenType.NEWLINE, TokenType.INDENT})


def _newlines() -> tuple[Token, Token]:
    return Token(TokenType.NEWLINE), Token(TokenType.NEWLINE)


def _trim_newlines(span: list[Token]) -> list[Token]:
    """Drop NEWLINE and INDENT tokens from both ends of a span."""
    start = 0
    end = len(span)
    while start < end and span[start].type in BLANK_TYPES:
        start += 1
    while end > start and span[end - 1].type in BLANK_TYPES:
        end -= 1
    return span[start:end]


class BlockParsingMixin:
    """Mixin for block-level constructs.

    Required Host Attributes:
        - _inline: bool (parsing inline content rather than blocks)
        - _diagnostics: DiagnosticCollector

    Required Host Methods:
        - token navigation (see TokenNavigationMixin)
        - _parse_nested(tokens, *, inline, in_list_item=False) -> tuple[Node, ...]
    """

    _inline: bool
    _diagnostics: DiagnosticCollector

    # =========================================================================
    # Lists
    # =========================================================================

    def _continues_item(self, indent: int, *, nested_only: bool) -> bool:
        """Check whether the next line still belongs to an item at ``indent``.

        Indented lines at least LIST_CONTINUATION_INDENT columns deeper and
        blank lines always continue. Another list item continues when it is
        at least as deep (for the list as a whole) or strictly deeper (for a
        single item, whose same-depth siblings end it).
        """
        token = self._peek()
        if token is None:
            return False
        match token.type:
            case TokenType.INDENT:
                return token.level >= indent + LIST_CONTINUATION_INDENT
            case TokenType.LIST_ITEM:
                return token.level > indent if nested_only else token.level >= indent
            case TokenType.NEWLINE:
                return True
        return False

    def _parse_list(self, marker: Token) -> List:
        """Collect every line of a list and parse its items."""
        span = [marker, *self._collect_line()]
        while self._continues_item(marker.level, nested_only=False):
            span.extend(self._collect_line())

        items = self._parse_nested(span, inline=False, in_list_item=True)
        # Body text after the list must start a fresh paragraph
        self._unread(*_newlines())
        return List(items, location=marker.location)

    def _parse_list_item(self, marker: Token) -> ListItem:
        """Parse one item inside a list.

        A one-line item holds its inline content directly. An item with
        continuation lines or nested lists is parsed as blocks; if it
        starts with text, that first line becomes its own paragraph.
        """
        first_line = self._take_line()
        if not self._at_end():
            self._advance()  # the item's NEWLINE

        continuation: list[Token] = []
        while self._continues_item(marker.level, nested_only=True):
            continuation.extend(self._collect_line())

        if all(token.type in BLANK_TYPES for token in continuation):
            children = self._parse_nested(first_line, inline=True)
        else:
            span = [*first_line, Token(TokenType.NEWLINE), *continuation]
            if first_line and first_line[0].type == TokenType.TEXT:
                span = [*_newlines(), *span]
            children = self._parse_nested(span, inline=False)
        return ListItem(children, location=marker.location)

    # =========================================================================
    # Headers
    # =========================================================================

    def _parse_header(self, marker: Token) -> Header:
        children = self._parse_nested(self._take_line(), inline=True)
        return Header(marker.level, children, location=marker.location)

    # =========================================================================
    # Environments
    # =========================================================================

    def _parse_env(self, marker: Token) -> Env | None:
        """Parse ``%name argument`` ... ``%%``.

        Nested environments balance through a depth counter. Unknown
        environment names drop the whole block.
        """
        env_type = EnvType.from_name(marker.value)
        arg_tokens = self._take_line()
        if not self._at_end():
            self._advance()  # NEWLINE ending the argument line

        body, closed = self._take_env_body()
        if not closed:
            self._diagnostics.report(
                ErrorKind.UNMATCHED_ENVIRONMENT,
                f"environment {marker.value!r} is never closed",
                marker.lineno,
                marker.col,
            )

        if env_type is None:
            logger.debug(
                "Skipping unknown environment %r at %s", marker.value, marker.location
            )
            return None

        arg_tokens = _trim_newlines(arg_tokens)
        environment_arg = self._parse_nested(arg_tokens, inline=True) if arg_tokens else None
        children = self._parse_nested(body, inline=False)
        return Env(env_type, children, environment_arg, location=marker.location)

    def _take_env_body(self) -> tuple[list[Token], bool]:
        """Consume the body up to the matching ENV_END.

        Returns:
            (body tokens, whether the matching end was found)
        """
        body: list[Token] = []
        depth = 0
        while not self._at_end():
            token = self._advance()
            if token.type == TokenType.ENV_BEGIN:
                depth += 1
            elif token.type == TokenType.ENV_END:
                if depth == 0:
                    return body, True
                depth -= 1
            body.append(token)
        return body, False

    def _report_stray_env_end(self, marker: Token) -> None:
        self._diagnostics.report(
            ErrorKind.UNMATCHED_ENVIRONMENT,
            "environment end without a matching begin",
            marker.lineno,
            marker.col,
        )

    # =========================================================================
    # Paragraphs and newlines
    # =========================================================================

    def _parse_paragraph(self, nodes: list[Node]) -> None:
        """Group inline content up to the next blank line into a paragraph.

        Collection stops before a double NEWLINE (left for the next
        paragraph) and before any block-starting token, which is never
        absorbed into a paragraph.
        """
        span: list[Token] = []
        while not self._at_end():
            token_type = self._peek_type()
            if token_type in BLOCK_START_TYPES:
                break
            if token_type == TokenType.NEWLINE and self._peek_type(1) == TokenType.NEWLINE:
                break
            span.append(self._advance())

        span = _trim_newlines(span)
        if span:
            children = self._parse_nested(span, inline=True)
            nodes.append(Paragraph(children, location=span[0].location))

    def _parse_newline(self, token: Token, nodes: list[Node]) -> None:
        """Handle a NEWLINE token.

        Inline, a newline is a space between words. Between blocks, a
        blank line (double NEWLINE) opens a paragraph, a newline ending a
        block line lets the next line open a paragraph, and any other
        newline is an explicit line break.
        """
        if self._inline:
            if self._peek_type() != TokenType.NEWLINE and not self._rest_is_blank():
                nodes.append(Text(" ", location=token.location))
            return

        if self._peek_type() == TokenType.NEWLINE:
            self._advance()
            self._parse_paragraph(nodes)
            return

        if self._rest_is_blank() or self._peek_type() in BLOCK_START_TYPES:
            return

        if not nodes or isinstance(nodes[-1], BLOCK_NODE_TYPES):
            self._parse_paragraph(nodes)
            return

        nodes.append(NewLine(location=token.location))

    def _parse_nested(
        self, tokens: Sequence[Token], *, inline: bool, in_list_item: bool = False
    ) -> tuple[Node, ...]:
        raise NotImplementedError
