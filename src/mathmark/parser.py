"""Recursive descent parser producing typed AST.

Consumes the (normalized) token list from the lexer and builds typed AST
nodes. Produces immutable (frozen) dataclass nodes for thread-safety.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `TokenNavigationMixin`: Token stream traversal
- `InlineParsingMixin`: Emphasis toggles, links, leaf tokens
- `BlockParsingMixin`: Lists, headers, environments, paragraphs

Every nested construct is parsed by a child Parser over an owned token
span, one level deeper, sharing the parent's DiagnosticCollector.

Thread Safety:
- Parser produces immutable AST (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share AST across threads

"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from mathmark.config import ParseConfig, get_parse_config
from mathmark.errors import Diagnostic, DiagnosticCollector, ErrorKind, RecursionLimitError
from mathmark.nodes import Node, Text
from mathmark.parsing import (
    BlockParsingMixin,
    InlineParsingMixin,
    TokenNavigationMixin,
)
from mathmark.parsing.inline import LEAF_TYPES, flatten, leaf_node
from mathmark.tokens import TOGGLE_TYPES, Token, TokenType


class Parser(
    TokenNavigationMixin,
    InlineParsingMixin,
    BlockParsingMixin,
):
    """Recursive descent parser for mathmark token streams.

    Usage:
            >>> from mathmark.lexer import tokenize
            >>> Parser(tokenize("**bold**")).parse()
            [Bold(children=(Text(content='bold'),))]

    A parser runs in block mode (documents, list item bodies, environment
    bodies) or inline mode (header text, spans, paragraph content,
    environment arguments, link text). The modes differ only in how a
    single NEWLINE is treated.

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local).

    """

    __slots__ = (
        "_tokens",
        "_tokens_len",
        "_pos",
        "_pushback",
        "_in_list_item",
        "_inline",
        "_depth",
        "_diagnostics",
    )

    def __init__(
        self,
        tokens: Sequence[Token],
        in_list_item_context: bool = False,
        *,
        inline: bool = False,
        depth: int = 0,
        diagnostics: DiagnosticCollector | None = None,
    ) -> None:
        """Initialize parser over a token sequence.

        Args:
            tokens: Tokens to parse; copied, never modified
            in_list_item_context: LIST_ITEM tokens are single items rather
                than the start of a whole list
            inline: Parse in inline mode
            depth: Nesting depth of this parser (0 for a document)
            diagnostics: Collector shared with the caller; a new one is
                created from the active config when omitted
        """
        self._tokens = tuple(tokens)
        self._tokens_len = len(self._tokens)
        self._pos = 0
        self._pushback: list[Token] = []
        self._in_list_item = in_list_item_context
        self._inline = inline
        self._depth = depth
        if diagnostics is None:
            diagnostics = DiagnosticCollector(strict=self._config.strict)
        self._diagnostics = diagnostics

    @property
    def _config(self) -> ParseConfig:
        """Get current parse configuration (thread-local)."""
        return get_parse_config()

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Diagnostics recorded so far, shared with nested parsers."""
        return self._diagnostics.diagnostics

    def parse(self) -> list[Node]:
        """Parse the token sequence into a list of nodes.

        Raises:
            RecursionLimitError: The nesting outran the interpreter's
                recursion limit before reaching ``max_nesting_depth``
        """
        if self._depth > 0:
            return self._parse_all()
        try:
            return self._parse_all()
        except RecursionError as e:
            limit = self._config.max_nesting_depth
            raise RecursionLimitError(
                "nesting exhausted the interpreter recursion limit "
                f"({sys.getrecursionlimit()} frames) below max_nesting_depth={limit}",
                source_file=self._diagnostics.source_file,
            ) from e

    def _parse_all(self) -> list[Node]:
        nodes: list[Node] = []
        while not self._at_end():
            token = self._advance()
            match token.type:
                case TokenType.LIST_ITEM if self._in_list_item:
                    nodes.append(self._parse_list_item(token))
                case TokenType.LIST_ITEM:
                    nodes.append(self._parse_list(token))
                case TokenType.HEADER:
                    nodes.append(self._parse_header(token))
                case token_type if token_type in TOGGLE_TYPES:
                    nodes.append(self._parse_toggle(token))
                case TokenType.LINK_START:
                    nodes.extend(self._parse_link(token))
                case TokenType.LINK_END:
                    # "](url)" with no opening bracket is literal text
                    nodes.append(Text(f"]({token.value})", location=token.location))
                case TokenType.ENV_BEGIN:
                    env = self._parse_env(token)
                    if env is not None:
                        nodes.append(env)
                case TokenType.ENV_END:
                    self._report_stray_env_end(token)
                case TokenType.NEWLINE:
                    self._parse_newline(token, nodes)
                case TokenType.INDENT:
                    pass
                case token_type if token_type in LEAF_TYPES:
                    nodes.append(leaf_node(token))
        return nodes

    def _parse_nested(
        self, tokens: Sequence[Token], *, inline: bool, in_list_item: bool = False
    ) -> tuple[Node, ...]:
        """Parse an owned span one level deeper.

        A span that would exceed ``max_nesting_depth`` is reported and
        reduced to its leaf nodes instead.
        """
        depth = self._depth + 1
        if depth > self._config.max_nesting_depth:
            first = tokens[0] if tokens else None
            self._diagnostics.report(
                ErrorKind.RECURSION_LIMIT_EXCEEDED,
                f"nesting deeper than {self._config.max_nesting_depth} levels; "
                "content flattened",
                first.lineno if first is not None else None,
                first.col if first is not None else None,
            )
            return tuple(flatten(tokens))

        sub_parser = Parser(
            tokens,
            in_list_item,
            inline=inline,
            depth=depth,
            diagnostics=self._diagnostics,
        )
        return tuple(sub_parser.parse())


def parse_tokens(
    tokens: Sequence[Token], in_list_item_context: bool = False
) -> list[Node]:
    """Parse a token sequence in block mode.

    Args:
        tokens: Normalized lexer output
        in_list_item_context: Treat LIST_ITEM tokens as single items

    Returns:
        Top-level nodes, in source order
    """
    return Parser(tokens, in_list_item_context).parse()
