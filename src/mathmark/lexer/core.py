"""Single-pass character lexer.

Walks the source once with a forward cursor. Every position is consumed
exactly once: scans for closing delimiters jump the cursor with str.find
instead of re-reading characters, and nothing is ever rewound.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from mathmark.config import get_parse_config
from mathmark.errors import DiagnosticCollector, ErrorKind
from mathmark.lexer.classifiers import LineStartClassifierMixin
from mathmark.lexer.scanners import DelimiterScannerMixin
from mathmark.tokens import Token, TokenType


class Lexer(
    LineStartClassifierMixin,
    DelimiterScannerMixin,
):
    """Character lexer producing a flat token list.

    Each step consumes one character and dispatches on it:
    1. Newlines always emit NEWLINE and re-arm line-start rules
    2. At line start, indentation, list markers, rules and headers
    3. Otherwise, inline marker handlers (emphasis, code, math, envs)
    4. Anything unclaimed accumulates into the pending text buffer

    Usage:
            >>> for token in Lexer("# Hi **there**").tokenize():
            ...     print(token)
        Token(HEADER, level=2, 1:1)
        Token(TEXT, 'Hi ', 1:3)
        Token(BOLD, 1:6)
        Token(TEXT, 'there', 1:8)
        Token(BOLD, 1:13)

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = (
        "_source",
        "_source_len",
        "_pos",
        "_lineno",
        "_col",
        "_start_lineno",  # Position of the character being dispatched
        "_start_col",
        "_line_begins",
        "_text",  # Pending literal characters
        "_text_lineno",
        "_text_col",
        "_tokens",
        "_links_enabled",
        "_diagnostics",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        diagnostics: DiagnosticCollector | None = None,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: Markup source text
            source_file: Optional source file path for diagnostics
            diagnostics: Collector shared with the parser (a private one
                is created when omitted)
        """
        config = get_parse_config()
        self._source = source.replace("\r\n", "\n").replace("\r", "\n")
        self._source_len = len(self._source)
        self._pos = 0
        self._lineno = 1
        self._col = 1
        self._start_lineno = 1
        self._start_col = 1
        self._line_begins = True
        self._text: list[str] = []
        self._text_lineno = 1
        self._text_col = 1
        self._tokens: list[Token] = []
        self._links_enabled = config.links_enabled
        if diagnostics is None:
            diagnostics = DiagnosticCollector(strict=config.strict, source_file=source_file)
        self._diagnostics = diagnostics

    @property
    def diagnostics(self) -> DiagnosticCollector:
        """Diagnostics recorded while tokenizing."""
        return self._diagnostics

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source.

        Returns:
            Tokens in source order

        Complexity: O(n) where n = len(source)
        """
        source_len = self._source_len
        while self._pos < source_len:
            self._start_lineno = self._lineno
            self._start_col = self._col
            self._dispatch(self._advance())
        self._flush_text()
        return self._tokens

    def _dispatch(self, char: str) -> None:
        """Handle one consumed character."""
        if char == "\n":
            self._emit(TokenType.NEWLINE)
            self._line_begins = True
            return

        if self._line_begins and self._classify_line_start(char):
            self._line_begins = False
            return

        handler = self._INLINE_HANDLERS.get(char)
        if handler is None or not handler(self, char):
            self._append_text(char)
        self._line_begins = False

    # =========================================================================
    # Cursor helpers
    # =========================================================================

    def _peek(self, offset: int = 0) -> str:
        """Peek at the character ``offset`` past the cursor.

        Returns:
            The character, or empty string past end of input.
        """
        pos = self._pos + offset
        if pos >= self._source_len:
            return ""
        return self._source[pos]

    def _advance(self) -> str:
        """Consume one character, updating line/column tracking."""
        if self._pos >= self._source_len:
            return ""

        char = self._source[self._pos]
        self._pos += 1

        if char == "\n":
            self._lineno += 1
            self._col = 1
        else:
            self._col += 1

        return char

    def _advance_to(self, end: int) -> None:
        """Move the cursor to ``end`` in one step.

        Counts skipped newlines with str.count instead of walking
        character by character.
        """
        segment = self._source[self._pos : end]
        newline_count = segment.count("\n")
        if newline_count > 0:
            last_nl = segment.rfind("\n")
            self._lineno += newline_count
            self._col = len(segment) - last_nl
        else:
            self._col += len(segment)
        self._pos = end

    def _at_eof(self) -> bool:
        return self._pos >= self._source_len

    # =========================================================================
    # Output helpers
    # =========================================================================

    def _append_text(self, char: str) -> None:
        if not self._text:
            self._text_lineno = self._start_lineno
            self._text_col = self._start_col
        self._text.append(char)

    def _flush_text(self) -> None:
        """Emit the pending text buffer as one TEXT token."""
        if self._text:
            self._tokens.append(
                Token(
                    TokenType.TEXT,
                    "".join(self._text),
                    lineno=self._text_lineno,
                    col=self._text_col,
                )
            )
            self._text.clear()

    def _emit(self, token_type: TokenType, value: str = "", level: int = 0) -> None:
        """Flush pending text, then append a token at the dispatch position."""
        self._flush_text()
        self._tokens.append(
            Token(
                token_type,
                value,
                level,
                lineno=self._start_lineno,
                col=self._start_col,
            )
        )

    def _report_unterminated(self, what: str, delimiter: str) -> None:
        """Record a scan that ran off the end of input."""
        self._diagnostics.report(
            ErrorKind.UNTERMINATED_DELIMITER,
            f"unterminated {what}: expected {delimiter!r} before end of input",
            self._start_lineno,
            self._start_col,
        )
