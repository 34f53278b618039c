"""Tests for inline marker lexing: emphasis, code, math, environments, links."""

import pytest

from mathmark.config import ParseConfig, parse_config_context
from mathmark.lexer import Lexer, tokenize
from mathmark.tokens import Token, TokenType

T = TokenType


def _text(value: str) -> Token:
    return Token(T.TEXT, value)


class TestEmphasisToggles:
    """Doubled and single emphasis characters."""

    def test_bold_round(self) -> None:
        assert tokenize("**bold**") == [Token(T.BOLD), _text("bold"), Token(T.BOLD)]

    @pytest.mark.parametrize(
        "source,marker",
        [
            ("__x__", T.BOLD),
            ("*x*", T.ITALIC),
            ("_x_", T.ITALIC),
            ("~~x~~", T.STRIKED),
            ("..x..", T.UNDERLINE),
            ("||x||", T.HIGHLIGHTED),
        ],
    )
    def test_toggle_pairs(self, source: str, marker: TokenType) -> None:
        assert tokenize(source) == [Token(marker), _text("x"), Token(marker)]

    def test_single_tilde_is_nbsp(self) -> None:
        assert tokenize("a~b") == [_text("a"), Token(T.NBSP), _text("b")]

    @pytest.mark.parametrize("source", ["a.b", "a|b", "end."])
    def test_single_dot_or_bar_is_text(self, source: str) -> None:
        """A lone . or | does not split the surrounding text."""
        assert tokenize(source) == [_text(source)]

    def test_triple_star_is_bold_then_italic(self) -> None:
        assert [t.type for t in tokenize("***")] == [T.BOLD, T.ITALIC]

    def test_text_is_flushed_before_marker(self) -> None:
        tokens = tokenize("a **b** c")
        assert tokens == [
            _text("a "),
            Token(T.BOLD),
            _text("b"),
            Token(T.BOLD),
            _text(" c"),
        ]


class TestCodeAndMath:
    """Delimited payload tokens."""

    def test_inline_math(self) -> None:
        assert tokenize("$x^2$") == [Token(T.INLINE_MATH, "x^2")]

    def test_inline_math_keeps_markers_verbatim(self) -> None:
        assert tokenize("$a*b*c$") == [Token(T.INLINE_MATH, "a*b*c")]

    def test_inline_code(self) -> None:
        assert tokenize("`code`") == [Token(T.INLINE_CODE, "code")]

    def test_code_block_spans_lines(self) -> None:
        assert tokenize("```py\nx = 1\n```") == [Token(T.CODE_BLOCK, "py\nx = 1\n")]

    def test_display_math(self) -> None:
        assert tokenize("\\[ E = mc^2 \\]") == [Token(T.DISPLAY_MATH, " E = mc^2 ")]

    def test_backslash_without_bracket_is_text(self) -> None:
        assert tokenize("a\\b") == [_text("a\\b")]

    def test_payload_between_text(self) -> None:
        tokens = tokenize("see `x` here")
        assert tokens == [_text("see "), Token(T.INLINE_CODE, "x"), _text(" here")]


class TestEnvironments:
    """Environment begin and end markers."""

    def test_begin_with_argument(self) -> None:
        tokens = tokenize("%def Foo\nBody\n%%")
        assert tokens == [
            Token(T.ENV_BEGIN, "def"),
            _text("Foo"),
            Token(T.NEWLINE),
            _text("Body"),
            Token(T.NEWLINE),
            Token(T.ENV_END),
        ]

    def test_begin_without_argument(self) -> None:
        assert tokenize("%thm\n")[:2] == [Token(T.ENV_BEGIN, "thm"), Token(T.NEWLINE)]

    def test_end_with_trailing_spaces(self) -> None:
        assert tokenize("%%   \nx") == [Token(T.ENV_END), Token(T.NEWLINE), _text("x")]

    def test_end_at_end_of_input(self) -> None:
        assert tokenize("%%") == [Token(T.ENV_END)]

    def test_begin_flushes_pending_text(self) -> None:
        """Text before an environment marker keeps its place in the stream."""
        tokens = tokenize("ab%thm x")
        assert tokens == [_text("ab"), Token(T.ENV_BEGIN, "thm"), _text("x")]


class TestLinks:
    """Links are only lexed when enabled."""

    def test_disabled_by_default(self) -> None:
        assert tokenize("[a](b)") == [_text("[a](b)")]

    def test_enabled(self) -> None:
        with parse_config_context(ParseConfig(links_enabled=True)):
            tokens = tokenize("[a](http://x)")
        assert tokens == [
            Token(T.LINK_START),
            _text("a"),
            Token(T.LINK_END, "http://x"),
        ]

    def test_close_bracket_without_paren_is_text(self) -> None:
        with parse_config_context(ParseConfig(links_enabled=True)):
            tokens = tokenize("a] b")
        assert tokens == [_text("a] b")]


class TestLineEndings:
    """Line ending normalization."""

    @pytest.mark.parametrize("source", ["a\r\nb", "a\rb", "a\nb"])
    def test_line_endings_normalized(self, source: str) -> None:
        assert tokenize(source) == [_text("a"), Token(T.NEWLINE), _text("b")]

    def test_lexer_class_matches_function(self) -> None:
        assert Lexer("**x** y").tokenize() == tokenize("**x** y")
