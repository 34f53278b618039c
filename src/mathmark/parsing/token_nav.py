"""Token navigation utilities for the mathmark parser.

Provides a mixin for cursor-based traversal of an immutable token
sequence, with a pushback stack for tokens the parser re-queues.
"""

from __future__ import annotations

from mathmark.tokens import Token, TokenType


class TokenNavigationMixin:
    """Mixin providing token stream navigation methods.

    The token sequence itself is never modified. Tokens the parser wants
    to see again (or synthesized tokens it injects) go on ``_pushback``,
    which is always drained before the sequence.

    Required Host Attributes:
        - _tokens: tuple[Token, ...]
        - _tokens_len: int (cached len(_tokens))
        - _pos: int
        - _pushback: list[Token] (top of stack is the next token)

    """

    _tokens: tuple[Token, ...]
    _tokens_len: int
    _pos: int
    _pushback: list[Token]

    def _at_end(self) -> bool:
        """Check if every token has been consumed."""
        return not self._pushback and self._pos >= self._tokens_len

    def _advance(self) -> Token:
        """Consume and return the next token.

        Callers must check ``_at_end()`` first.
        """
        if self._pushback:
            return self._pushback.pop()
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _peek(self, offset: int = 0) -> Token | None:
        """Peek at the token ``offset`` positions ahead without consuming."""
        pending = len(self._pushback)
        if offset < pending:
            return self._pushback[pending - 1 - offset]
        pos = self._pos + offset - pending
        if pos < self._tokens_len:
            return self._tokens[pos]
        return None

    def _peek_type(self, offset: int = 0) -> TokenType | None:
        token = self._peek(offset)
        return token.type if token is not None else None

    def _unread(self, *tokens: Token) -> None:
        """Re-queue tokens; the first argument becomes the next token."""
        self._pushback.extend(reversed(tokens))

    def _take_until(self, token_type: TokenType) -> tuple[list[Token], Token | None]:
        """Consume up to and including the next token of ``token_type``.

        Returns:
            (tokens before it, the terminating token or None at end)
        """
        taken: list[Token] = []
        while not self._at_end():
            token = self._advance()
            if token.type == token_type:
                return taken, token
            taken.append(token)
        return taken, None

    def _take_line(self) -> list[Token]:
        """Consume the rest of the line, leaving its NEWLINE unconsumed."""
        taken: list[Token] = []
        while not self._at_end() and self._peek_type() != TokenType.NEWLINE:
            taken.append(self._advance())
        return taken

    def _collect_line(self) -> list[Token]:
        """Consume the rest of the line including its NEWLINE."""
        taken = self._take_line()
        if not self._at_end():
            taken.append(self._advance())
        return taken

    def _rest_is_blank(self) -> bool:
        """Check if only NEWLINE and INDENT tokens remain."""
        offset = 0
        while (token_type := self._peek_type(offset)) is not None:
            if token_type not in (TokenType.NEWLINE, TokenType.INDENT):
                return False
            offset += 1
        return True
