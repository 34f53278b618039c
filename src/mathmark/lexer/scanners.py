"""Inline marker scanners.

Handlers for characters that can start a token anywhere on a line:
emphasis toggles, code, math, environments and links. Each handler
receives the already consumed character and returns False when the
character turns out to be literal text.
"""

from __future__ import annotations

from collections.abc import Callable

from mathmark.tokens import TokenType


class DelimiterScannerMixin:
    """Mixin providing inline marker handlers and delimiter scans.

    Scans jump the cursor straight to the closing delimiter with
    str.find. An unterminated scan takes everything up to end of input
    as its payload and reports an UNTERMINATED_DELIMITER diagnostic.

    Required Host Attributes:
        - _source: str
        - _pos: int
        - _source_len: int
        - _links_enabled: bool

    Required Host Methods:
        - _peek(offset) -> str
        - _advance() -> str
        - _advance_to(end) -> None
        - _emit(token_type, value, level) -> None
        - _report_unterminated(what, delimiter) -> None

    """

    _source: str
    _pos: int
    _source_len: int
    _links_enabled: bool

    # =========================================================================
    # Delimiter scans
    # =========================================================================

    def _scan_until(self, delimiter: str) -> tuple[str, bool]:
        """Consume up to and including the next ``delimiter``.

        Returns:
            (content before the delimiter, whether the delimiter was found)
        """
        end = self._source.find(delimiter, self._pos)
        if end == -1:
            content = self._source[self._pos :]
            self._advance_to(self._source_len)
            return content, False

        content = self._source[self._pos : end]
        self._advance_to(end + len(delimiter))
        return content, True

    def _scan_name(self) -> tuple[str, bool]:
        """Consume an environment name up to (not including) space or newline.

        Returns:
            (name, whether a separator was found before end of input)
        """
        end = self._pos
        while end < self._source_len and self._source[end] not in " \n":
            end += 1
        name = self._source[self._pos : end]
        self._advance_to(end)
        return name, end < self._source_len

    # =========================================================================
    # Emphasis toggles
    # =========================================================================

    def _lex_star(self, char: str) -> bool:
        """``**`` / ``__`` is bold, a single ``*`` / ``_`` italic."""
        if self._peek() == char:
            self._advance()
            self._emit(TokenType.BOLD)
        else:
            self._emit(TokenType.ITALIC)
        return True

    def _lex_tilde(self, char: str) -> bool:
        if self._peek() == "~":
            self._advance()
            self._emit(TokenType.STRIKED)
        else:
            self._emit(TokenType.NBSP)
        return True

    def _lex_doubled(self, char: str) -> bool:
        """``..`` underlines and ``||`` highlights; a single one is text."""
        if self._peek() != char:
            return False
        self._advance()
        self._emit(TokenType.UNDERLINE if char == "." else TokenType.HIGHLIGHTED)
        return True

    # =========================================================================
    # Code and math
    # =========================================================================

    def _lex_dollar(self, char: str) -> bool:
        content, closed = self._scan_until("$")
        if not closed:
            self._report_unterminated("inline math", "$")
        self._emit(TokenType.INLINE_MATH, content)
        return True

    def _lex_backtick(self, char: str) -> bool:
        if self._peek() == "`" and self._peek(1) == "`":
            self._advance()
            self._advance()
            content, closed = self._scan_until("```")
            if not closed:
                self._report_unterminated("code block", "```")
            self._emit(TokenType.CODE_BLOCK, content)
            return True

        content, closed = self._scan_until("`")
        if not closed:
            self._report_unterminated("inline code", "`")
        self._emit(TokenType.INLINE_CODE, content)
        return True

    def _lex_backslash(self, char: str) -> bool:
        if self._peek() != "[":
            return False
        self._advance()
        content, closed = self._scan_until("\\]")
        if not closed:
            self._report_unterminated("display math", "\\]")
        self._emit(TokenType.DISPLAY_MATH, content)
        return True

    # =========================================================================
    # Environments
    # =========================================================================

    def _lex_percent(self, char: str) -> bool:
        """``%name`` begins an environment, a bare ``%%`` line ends one."""
        while self._peek() == "%":
            self._advance()

        line_end = self._source.find("\n", self._pos)
        if line_end == -1:
            line_end = self._source_len
        if not self._source[self._pos : line_end].strip(" "):
            # Trailing spaces are tolerated after the end marker
            self._advance_to(line_end)
            self._emit(TokenType.ENV_END)
            return True

        name, separated = self._scan_name()
        if not separated:
            self._report_unterminated("environment name", "newline")
        if self._peek() == " ":
            self._advance()
        self._emit(TokenType.ENV_BEGIN, name)
        return True

    # =========================================================================
    # Links
    # =========================================================================

    def _lex_open_bracket(self, char: str) -> bool:
        if not self._links_enabled:
            return False
        self._emit(TokenType.LINK_START)
        return True

    def _lex_close_bracket(self, char: str) -> bool:
        """``](url)`` closes a link; any other ``]`` is text."""
        if not self._links_enabled or self._peek() != "(":
            return False
        self._advance()
        url, closed = self._scan_until(")")
        if not closed:
            self._report_unterminated("link target", ")")
        self._emit(TokenType.LINK_END, url)
        return True

    _INLINE_HANDLERS: dict[str, Callable[[DelimiterScannerMixin, str], bool]] = {
        "*": _lex_star,
        "_": _lex_star,
        "~": _lex_tilde,
        ".": _lex_doubled,
        "|": _lex_doubled,
        "$": _lex_dollar,
        "`": _lex_backtick,
        "\\": _lex_backslash,
        "%": _lex_percent,
        "[": _lex_open_bracket,
        "]": _lex_close_bracket,
    }
