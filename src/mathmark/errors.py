"""Exception classes and diagnostics for mathmark.

Malformed markup never aborts a parse. Each problem is recorded as a
Diagnostic and the construct is recovered (see the lexer and parser).
Callers that prefer failing fast enable ``ParseConfig(strict=True)``,
which raises the diagnostic's exception instead.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from mathmark.utils.logger import get_logger

logger = get_logger(__name__)


class MathmarkError(Exception):
    """Base exception for all mathmark errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(MathmarkError):
    """Error during markup lexing or parsing."""

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file
        super().__init__(f"{_format_location(lineno, col_offset, source_file)}{message}")


class UnterminatedDelimiterError(ParseError):
    """A scan for a closing delimiter ($, `, ```, \\], name) hit end of input."""


class UnterminatedSpanError(ParseError):
    """A toggle or link span has no closing marker."""


class UnmatchedEnvironmentError(ParseError):
    """An environment begin has no end, or an end has no begin."""


class RecursionLimitError(ParseError):
    """Nesting depth exceeded ``ParseConfig.max_nesting_depth``."""


class SourceEncodingError(ParseError):
    """Source bytes are not valid UTF-8."""


class RenderError(MathmarkError):
    """Error during HTML rendering.

    Raised when the renderer meets a node it does not know.
    """

    pass


class ErrorKind(Enum):
    """Kinds of recoverable problems recorded during a parse."""

    UNTERMINATED_DELIMITER = "unterminated-delimiter"
    UNTERMINATED_SPAN = "unterminated-span"
    UNMATCHED_ENVIRONMENT = "unmatched-environment"
    RECURSION_LIMIT_EXCEEDED = "recursion-limit-exceeded"


_ERROR_CLASSES: dict[ErrorKind, type[ParseError]] = {
    ErrorKind.UNTERMINATED_DELIMITER: UnterminatedDelimiterError,
    ErrorKind.UNTERMINATED_SPAN: UnterminatedSpanError,
    ErrorKind.UNMATCHED_ENVIRONMENT: UnmatchedEnvironmentError,
    ErrorKind.RECURSION_LIMIT_EXCEEDED: RecursionLimitError,
}


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal problem found while lexing or parsing.

    Attributes:
        kind: Category of the problem
        message: Human-readable description
        lineno: Line where the offending construct starts (1-indexed)
        col_offset: Column where it starts (1-indexed)
        source_file: Source file path (optional)

    """

    kind: ErrorKind
    message: str
    lineno: int | None = None
    col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        location = _format_location(self.lineno, self.col_offset, self.source_file)
        return f"{location}{self.message}"

    def to_error(self) -> ParseError:
        """Build the exception matching this diagnostic's kind."""
        error_class = _ERROR_CLASSES[self.kind]
        return error_class(
            self.message,
            lineno=self.lineno,
            col_offset=self.col_offset,
            source_file=self.source_file,
        )


def _format_location(
    lineno: int | None, col_offset: int | None, source_file: str | None
) -> str:
    location = ""
    if source_file:
        location = f"{source_file}:"
    if lineno is not None:
        location += f"{lineno}:"
        if col_offset is not None:
            location += f"{col_offset}:"
    if location:
        location = location.rstrip(":") + " "
    return location


class DiagnosticCollector:
    """Accumulates diagnostics for one parse.

    The lexer and every nested parser of a single parse share one
    collector. Each report is logged at WARNING; in strict mode the
    report is raised as the matching ParseError instead.

    Usage:
            >>> collector = DiagnosticCollector()
            >>> collector.report(ErrorKind.UNTERMINATED_SPAN, "unclosed bold", 1, 4)
            >>> len(collector)
            1

    """

    __slots__ = ("_diagnostics", "_strict", "_source_file")

    def __init__(self, *, strict: bool = False, source_file: str | None = None) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._strict = strict
        self._source_file = source_file

    def report(
        self,
        kind: ErrorKind,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
    ) -> None:
        """Record a diagnostic, or raise it in strict mode.

        Raises:
            ParseError: The diagnostic's exception, when strict.
        """
        diagnostic = Diagnostic(
            kind=kind,
            message=message,
            lineno=lineno,
            col_offset=col_offset,
            source_file=self._source_file,
        )
        if self._strict:
            raise diagnostic.to_error()
        logger.warning("%s", diagnostic)
        self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    @property
    def source_file(self) -> str | None:
        return self._source_file

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)
