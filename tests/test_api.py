"""Tests for the top-level API: parse, render, Converter."""

import threading

import pytest

from mathmark import (
    Converter,
    Document,
    ParseConfig,
    decode_source,
    get_parse_config,
    normalize,
    parse,
    parse_tokens,
    render,
    tokenize,
)
from mathmark.nodes import Bold, Env, EnvType, Header, InlineMath, Paragraph, Text


class TestParse:
    """parse() runs the whole pipeline."""

    def test_returns_document(self) -> None:
        doc = parse("**bold**")
        assert isinstance(doc, Document)
        assert doc.children == (Paragraph((Bold((Text("bold"),)),)),)
        assert doc.diagnostics == ()

    def test_document_location(self) -> None:
        doc = parse("x", source_file="notes.mm")
        assert doc.location is not None
        assert (doc.location.lineno, doc.location.col_offset) == (1, 1)
        assert doc.location.source_file == "notes.mm"

    def test_matches_manual_pipeline(self) -> None:
        source = "# T\n\n- a\n- b\n\n%thm X\n$x$\n%%"
        manual = parse_tokens(normalize(tokenize(source)))
        assert parse(source).children == tuple(manual)

    def test_quick_start_example(self) -> None:
        doc = parse("# Pythagoras\n$a^2 + b^2 = c^2$")
        assert render(doc) == (
            '<h2>Pythagoras</h2><p><span class="math-inline">a^2 + b^2 = c^2</span></p>'
        )

    def test_parse_bytes(self) -> None:
        assert parse(b"## x").children == (Header(3, (Text("x"),)),)

    def test_decode_source_passes_text_through(self) -> None:
        assert decode_source("abc") == "abc"
        assert decode_source("λ".encode()) == "λ"


class TestConverter:
    """Converter bundles a config and a renderer."""

    def test_call_renders_fragment(self) -> None:
        assert Converter()("..under..") == "<p><u>under</u></p>"

    def test_parse_and_render(self) -> None:
        convert = Converter()
        doc = convert.parse("# Heading")
        assert doc.children[0].level == 2
        assert convert.render(doc) == "<h2>Heading</h2>"

    def test_default_config(self) -> None:
        assert Converter().config == ParseConfig()

    def test_links_enabled(self) -> None:
        convert = Converter(ParseConfig(links_enabled=True))
        assert convert("[a](http://x)") == '<p><a href="http://x">a</a></p>'

    def test_links_disabled_by_default(self) -> None:
        assert Converter()("[a](b)") == "<p>[a](b)</p>"

    def test_escape_disabled(self) -> None:
        assert Converter(escape=False)("a<b") == "<p>a<b</p>"

    def test_render_page(self) -> None:
        convert = Converter()
        page = convert.render_page(convert.parse("# T"))
        assert page.startswith("<head><title>T</title>")
        assert page.endswith("<body><h2>T</h2></body>")

    def test_environment(self) -> None:
        doc = Converter().parse("%thm Pythagoras\n$a^2 + b^2 = c^2$\n%%")
        assert doc.children == (
            Env(
                EnvType.THEOREM,
                (InlineMath("a^2 + b^2 = c^2"),),
                (Text("Pythagoras"),),
            ),
        )


class TestConfigIsolation:
    """A per-call config never leaks into the surrounding context."""

    def test_parse_does_not_leak_config(self) -> None:
        parse("x", config=ParseConfig(strict=True))
        assert get_parse_config() == ParseConfig()

    def test_config_restored_after_error(self) -> None:
        with pytest.raises(Exception):  # noqa: B017
            parse("$x", config=ParseConfig(strict=True))
        assert get_parse_config().strict is False

    def test_concurrent_converters(self) -> None:
        strict = Converter(ParseConfig(strict=True))
        lenient = Converter()
        errors: list[BaseException] = []
        results: list[str] = []

        def run_lenient() -> None:
            for _ in range(50):
                results.append(lenient("**open"))

        def run_strict() -> None:
            for _ in range(50):
                try:
                    strict("**open")
                except Exception as e:  # noqa: BLE001
                    errors.append(e)

        threads = [threading.Thread(target=run_lenient), threading.Thread(target=run_strict)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 50
        assert results == ["<p><strong>open</strong></p>"] * 50
