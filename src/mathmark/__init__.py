"""
mathmark: a small markup language for mathematical notes.

Lexes markdown-like source with math, semantic environments (definitions,
theorems, ...) and emphasis toggles into tokens, parses them into a typed
AST, and renders the AST to HTML.

Quick Start:
    >>> from mathmark import parse, render
    >>> doc = parse("# Pythagoras\\n$a^2 + b^2 = c^2$")
    >>> render(doc)
    '<h2>Pythagoras</h2><p><span class="math-inline">a^2 + b^2 = c^2</span></p>'

    >>> # Or use the high-level Converter
    >>> from mathmark import Converter
    >>> convert = Converter()
    >>> html = convert("%thm Pythagoras\\n$a^2 + b^2 = c^2$\\n%%")

Pipeline:
    tokenize(source) -> normalize(tokens) -> parse_tokens(tokens) -> render

"""

from collections.abc import Sequence

from mathmark.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from mathmark.errors import (
    Diagnostic,
    DiagnosticCollector,
    ErrorKind,
    MathmarkError,
    ParseError,
    RecursionLimitError,
    RenderError,
    SourceEncodingError,
    UnmatchedEnvironmentError,
    UnterminatedDelimiterError,
    UnterminatedSpanError,
)
from mathmark.lexer import Lexer, tokenize
from mathmark.location import SourceLocation
from mathmark.nodes import (
    NBSP,
    Block,
    Bold,
    CodeBlock,
    DisplayMath,
    Document,
    Env,
    EnvType,
    Header,
    Highlighted,
    Hr,
    Inline,
    InlineCode,
    InlineMath,
    Italic,
    Link,
    List,
    ListItem,
    ListType,
    NewLine,
    Node,
    Paragraph,
    Striked,
    Text,
    Underline,
)
from mathmark.parser import Parser, parse_tokens
from mathmark.preprocess import normalize
from mathmark.renderers.html import HtmlRenderer
from mathmark.serialization import from_dict, from_json, to_dict, to_json, tokens_to_list
from mathmark.tokens import HrStyle, Token, TokenType

__version__ = "0.1.0"


def decode_source(source: str | bytes, source_file: str | None = None) -> str:
    """Return ``source`` as text, decoding bytes as UTF-8.

    Raises:
        SourceEncodingError: The bytes are not valid UTF-8
    """
    if isinstance(source, str):
        return source
    try:
        return source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceEncodingError(
            f"source is not valid UTF-8: {e.reason} at byte {e.start}",
            source_file=source_file,
        ) from e


def parse(
    source: str | bytes,
    *,
    source_file: str | None = None,
    config: ParseConfig | None = None,
) -> Document:
    """Parse mathmark source into a typed AST.

    Lexes, normalizes and parses in one call. The lexer and parser share
    one diagnostic collector, so the returned Document carries every
    problem found along the way.

    Args:
        source: Markup source text, or UTF-8 encoded bytes
        source_file: Optional source file path for diagnostics
        config: Configuration for this call (the active context config
            when None)

    Returns:
        Document AST root node

    Raises:
        SourceEncodingError: ``source`` bytes are not valid UTF-8
        ParseError: The first diagnostic, when ``config.strict`` is set

    Example:
        >>> doc = parse("**bold**")
        >>> doc.children
        (Paragraph(children=(Bold(children=(Text(content='bold'),)),)),)
    """
    text = decode_source(source, source_file)
    with parse_config_context(config):
        diagnostics = DiagnosticCollector(
            strict=get_parse_config().strict, source_file=source_file
        )
        tokens = Lexer(text, source_file, diagnostics).tokenize()
        parser = Parser(normalize(tokens), diagnostics=diagnostics)
        children = parser.parse()

    return Document(
        tuple(children),
        diagnostics.diagnostics,
        location=SourceLocation(lineno=1, col_offset=1, source_file=source_file),
    )


def render(doc: Document | Sequence[Node], *, escape: bool = True) -> str:
    """Render an AST Document to an HTML fragment.

    Args:
        doc: Document AST (or a node list from parse_tokens)
        escape: HTML-escape text, math and code payloads

    Returns:
        HTML string

    Example:
        >>> render(parse("## Hello"))
        '<h3>Hello</h3>'
    """
    return HtmlRenderer(escape=escape).render(doc)


class Converter:
    """High-level converter combining parser and renderer.

    Usage:
        >>> convert = Converter()
        >>> convert("..under..")
        '<p><u>under</u></p>'

        >>> # Access the AST
        >>> doc = convert.parse("# Heading")
        >>> doc.children[0].level
        2

        >>> # Stricter parsing
        >>> strict = Converter(ParseConfig(strict=True))
        >>> strict("$x")
        Traceback (most recent call last):
        ...
        mathmark.errors.UnterminatedDelimiterError: 1:1 unterminated inline math: expected '$' before end of input

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Converter instances concurrently from different threads.

    """

    __slots__ = ("_config", "_renderer")

    def __init__(self, config: ParseConfig | None = None, *, escape: bool = True) -> None:
        """Initialize converter.

        Args:
            config: Parse configuration (defaults to ParseConfig())
            escape: HTML-escape payloads when rendering
        """
        self._config = config or ParseConfig()
        self._renderer = HtmlRenderer(escape=escape)

    @property
    def config(self) -> ParseConfig:
        return self._config

    def __call__(self, source: str | bytes) -> str:
        """Parse and render in one call, returning an HTML fragment."""
        return self.render(self.parse(source))

    def parse(self, source: str | bytes, *, source_file: str | None = None) -> Document:
        """Parse source into AST with this converter's configuration."""
        return parse(source, source_file=source_file, config=self._config)

    def render(self, doc: Document) -> str:
        """Render a Document to an HTML fragment."""
        return self._renderer.render(doc)

    def render_page(self, doc: Document, title: str | None = None) -> str:
        """Render a Document to a full HTML page with the default stylesheet."""
        return self._renderer.render_page(doc, title)


__all__ = [  # noqa: RUF022 (grouped by category)
    "__version__",
    # Pipeline
    "tokenize",
    "normalize",
    "parse_tokens",
    "parse",
    "render",
    "decode_source",
    "Converter",
    # Building blocks
    "Lexer",
    "Parser",
    "HtmlRenderer",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Tokens
    "Token",
    "TokenType",
    "HrStyle",
    # Nodes
    "Node",
    "Block",
    "Inline",
    "Document",
    "Header",
    "Paragraph",
    "List",
    "ListItem",
    "ListType",
    "Env",
    "EnvType",
    "CodeBlock",
    "DisplayMath",
    "Hr",
    "Text",
    "Bold",
    "Italic",
    "Striked",
    "Underline",
    "Highlighted",
    "Link",
    "InlineCode",
    "InlineMath",
    "NewLine",
    "NBSP",
    "SourceLocation",
    # Errors
    "MathmarkError",
    "ParseError",
    "UnterminatedDelimiterError",
    "UnterminatedSpanError",
    "UnmatchedEnvironmentError",
    "RecursionLimitError",
    "SourceEncodingError",
    "RenderError",
    "ErrorKind",
    "Diagnostic",
    "DiagnosticCollector",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    "tokens_to_list",
]
