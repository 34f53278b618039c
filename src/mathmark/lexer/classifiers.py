"""Line-start classification mixin.

Rules that only apply to the first character of a line: indentation,
list markers, horizontal rules and headers.
"""

from __future__ import annotations

from mathmark.tokens import HrStyle, TokenType

# Rule character -> style; three in a row at line start form a rule
HR_MARKERS: dict[str, HrStyle] = {
    "=": HrStyle.NORMAL,
    "-": HrStyle.DASHED,
    ".": HrStyle.DOTTED,
    "^": HrStyle.SAWTOOTH,
}


class LineStartClassifierMixin:
    """Mixin classifying the first character of a line.

    Required Host Methods:
        - _peek(offset) -> str
        - _advance() -> str
        - _emit(token_type, value, level) -> None

    """

    def _classify_line_start(self, char: str) -> bool:
        """Try the line-start rules for an already consumed character.

        Returns:
            True if a token was emitted, False to fall through to the
            inline rules.
        """
        if char == " ":
            self._lex_indent()
            return True
        if char == "-" and self._peek() == " ":
            self._advance()
            self._emit(TokenType.LIST_ITEM, level=0)
            return True
        if char in HR_MARKERS and self._peek() == char and self._peek(1) == char:
            self._lex_hr(char)
            return True
        if char == "#":
            self._lex_header()
            return True
        return False

    def _lex_indent(self) -> None:
        """Emit LIST_ITEM or INDENT for a run of leading spaces."""
        indent = 1
        while self._peek() == " ":
            self._advance()
            indent += 1

        if self._peek() == "-" and self._peek(1) == " ":
            self._advance()  # -
            self._advance()  # space
            self._emit(TokenType.LIST_ITEM, level=indent)
        else:
            self._emit(TokenType.INDENT, level=indent)

    def _lex_hr(self, char: str) -> None:
        """Emit HR, absorbing the whole run of the rule character."""
        while self._peek() == char:
            self._advance()
        self._emit(TokenType.HR, HR_MARKERS[char].value)

    def _lex_header(self) -> None:
        """Emit HEADER with level = run length + 1."""
        run = 1
        while self._peek() == "#":
            self._advance()
            run += 1
        if self._peek() == " ":
            self._advance()
        self._emit(TokenType.HEADER, level=run + 1)
