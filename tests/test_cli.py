"""Tests for the mathmark command line."""

import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from mathmark import __version__
from mathmark.cli import cli


@pytest.fixture()
def source_file(tmp_path: Path):
    """Writes markup to a temporary .mm file and returns its path."""

    def _write(content: str | bytes, name: str = "notes.mm") -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


def test_full_page(cli_runner: CliRunner, source_file) -> None:
    path = source_file("# Title\n\n**bold**\n")
    result = cli_runner.invoke(cli, [str(path)])

    assert result.exit_code == 0
    assert result.output.startswith("<head><title>Title</title><style>")
    assert "<body><h2>Title</h2><p><strong>bold</strong></p></body>" in result.output


def test_fragment(cli_runner: CliRunner, source_file) -> None:
    path = source_file("..u..")
    result = cli_runner.invoke(cli, [str(path), "--fragment"])

    assert result.exit_code == 0
    assert result.output == "<p><u>u</u></p>\n"


def test_title_option(cli_runner: CliRunner, source_file) -> None:
    path = source_file("# Ignored")
    result = cli_runner.invoke(cli, [str(path), "--title", "Mine"])

    assert result.exit_code == 0
    assert "<title>Mine</title>" in result.output


def test_output_file(cli_runner: CliRunner, source_file, tmp_path: Path) -> None:
    path = source_file("$x$")
    target = tmp_path / "out.html"
    result = cli_runner.invoke(cli, [str(path), "--fragment", "-o", str(target)])

    assert result.exit_code == 0
    assert result.output == ""
    assert target.read_text(encoding="utf-8") == '<p><span class="math-inline">x</span></p>'


def test_dump_tokens(cli_runner: CliRunner, source_file) -> None:
    path = source_file("a~b")
    result = cli_runner.invoke(cli, [str(path), "--dump-tokens"])

    assert result.exit_code == 0
    tokens = json.loads(result.output)
    assert [t["type"] for t in tokens] == ["TEXT", "NBSP", "TEXT"]


def test_dump_ast(cli_runner: CliRunner, source_file) -> None:
    path = source_file("# T")
    result = cli_runner.invoke(cli, [str(path), "--dump-ast"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["_type"] == "Document"
    assert data["children"][0]["_type"] == "Header"
    assert data["children"][0]["level"] == 2


def test_links_flag(cli_runner: CliRunner, source_file) -> None:
    path = source_file("[a](http://x)")

    plain = cli_runner.invoke(cli, [str(path), "--fragment"])
    linked = cli_runner.invoke(cli, [str(path), "--fragment", "--links"])

    assert plain.output == "<p>[a](http://x)</p>\n"
    assert linked.output == '<p><a href="http://x">a</a></p>\n'


def test_no_escape(cli_runner: CliRunner, source_file) -> None:
    path = source_file("a < b")

    escaped = cli_runner.invoke(cli, [str(path), "--fragment"])
    verbatim = cli_runner.invoke(cli, [str(path), "--fragment", "--no-escape"])

    assert escaped.output == "<p>a &lt; b</p>\n"
    assert verbatim.output == "<p>a < b</p>\n"


def test_diagnostics_reported_as_warnings(cli_runner: CliRunner, source_file) -> None:
    path = source_file("**open")
    result = cli_runner.invoke(cli, [str(path), "--fragment"])

    assert result.exit_code == 0
    assert f"warning: {path}:1:1 unterminated" in result.output
    assert "<p><strong>open</strong></p>" in result.output


def test_strict_fails(cli_runner: CliRunner, source_file) -> None:
    path = source_file("**open")
    result = cli_runner.invoke(cli, [str(path), "--strict"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "unterminated" in result.output


def test_invalid_utf8(cli_runner: CliRunner, source_file) -> None:
    path = source_file(b"\xff\xfe")
    result = cli_runner.invoke(cli, [str(path)])

    assert result.exit_code == 1
    assert "not valid UTF-8" in result.output


def test_max_depth_flattens(cli_runner: CliRunner, source_file) -> None:
    path = source_file("**_a_**")
    result = cli_runner.invoke(cli, [str(path), "--fragment", "--max-depth", "1"])

    assert result.exit_code == 0
    assert "<p><strong>a</strong></p>" in result.output
    assert "warning:" in result.output


def test_depth_beyond_interpreter_limit_fails_cleanly(
    cli_runner: CliRunner, source_file
) -> None:
    depth = sys.getrecursionlimit()
    path = source_file("%thm\n" * depth + "x\n" + "%%\n" * depth)
    result = cli_runner.invoke(cli, [str(path), "--max-depth", str(depth * 2)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "recursion limit" in result.output
    assert not isinstance(result.exception, RecursionError)


def test_max_depth_must_be_positive(cli_runner: CliRunner, source_file) -> None:
    path = source_file("x")
    result = cli_runner.invoke(cli, [str(path), "--max-depth", "0"])

    assert result.exit_code == 2


def test_missing_source(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, [str(tmp_path / "absent.mm")])

    assert result.exit_code == 2


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
