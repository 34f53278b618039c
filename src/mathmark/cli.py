"""
Converts a mathmark file to HTML.
Writes a full page (or a fragment) to a file or stdout, or dumps the
token list or AST as JSON for inspection.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from mathmark import __version__, decode_source, parse
from mathmark.config import ParseConfig, parse_config_context
from mathmark.errors import ParseError
from mathmark.lexer import Lexer
from mathmark.renderers.html import HtmlRenderer
from mathmark.serialization import to_json, tokens_to_list
from mathmark.utils.logger import configure_logging, get_logger

__all__ = ["cli"]

logger = get_logger(__name__)


@click.command()
@click.version_option(__version__, prog_name="mathmark")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write to this file instead of stdout",
)
@click.option("--fragment", is_flag=True, help="Emit the body HTML only, without <head>")
@click.option("--strict", is_flag=True, help="Fail on the first malformed construct")
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=ParseConfig().max_nesting_depth,
    show_default=True,
    help="Maximum nesting depth before content is flattened",
)
@click.option("--links", is_flag=True, help="Recognize [text](url) links")
@click.option("--no-escape", is_flag=True, help="Write text and math payloads verbatim")
@click.option("--dump-tokens", is_flag=True, help="Print the token list as JSON")
@click.option("--dump-ast", is_flag=True, help="Print the AST as JSON")
@click.option("--title", help="Page title (defaults to the first header)")
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug output)")
def cli(
    source: Path,
    output: Path | None = None,
    fragment: bool = False,
    strict: bool = False,
    max_depth: int = 100,
    links: bool = False,
    no_escape: bool = False,
    dump_tokens: bool = False,
    dump_ast: bool = False,
    title: str | None = None,
    verbose: int = 0,
):
    """
    Convert SOURCE to HTML.

    Args:
        source: Path to the mathmark file to convert.
        output: Destination file; stdout when omitted.
        fragment: Emit only the rendered body.
        strict: Raise on the first diagnostic instead of recovering.
        max_depth: Nesting depth bound for the parser.
        links: Enable link syntax.
        no_escape: Disable HTML escaping of payloads.
        dump_tokens: Print tokens as JSON instead of HTML.
        dump_ast: Print the AST as JSON instead of HTML.
        title: Title for the full page.
        verbose: Logging verbosity.

    Raises:
        click.ClickException: If the source is not valid UTF-8, or if strict
            parsing meets malformed markup.

    Examples:
        mathmark notes.mm -o notes.html --links
    """
    configure_logging(verbose)
    config = ParseConfig(max_nesting_depth=max_depth, strict=strict, links_enabled=links)
    raw = source.read_bytes()

    try:
        if dump_tokens:
            result = _dump_tokens(raw, str(source), config)
        else:
            doc = parse(raw, source_file=str(source), config=config)
            for diagnostic in doc.diagnostics:
                click.echo(f"warning: {diagnostic}", err=True)
            logger.info(
                "Parsed %s: %d top-level nodes, %d diagnostics",
                source,
                len(doc.children),
                len(doc.diagnostics),
            )
            if dump_ast:
                result = to_json(doc, indent=2) + "\n"
            else:
                renderer = HtmlRenderer(escape=not no_escape)
                result = renderer.render(doc) if fragment else renderer.render_page(doc, title)
    except ParseError as error:
        raise click.ClickException(str(error)) from error

    if output is None:
        click.echo(result, nl=not result.endswith("\n"))
    else:
        output.write_text(result, encoding="utf-8")
        logger.info("Wrote %s", output)


def _dump_tokens(raw: bytes, source_file: str, config: ParseConfig) -> str:
    """Lex only and format the tokens as JSON."""
    text = decode_source(raw, source_file)
    with parse_config_context(config):
        lexer = Lexer(text, source_file)
        tokens = lexer.tokenize()
    for diagnostic in lexer.diagnostics:
        click.echo(f"warning: {diagnostic}", err=True)
    return json.dumps(tokens_to_list(tokens), indent=2) + "\n"


if __name__ == "__main__":
    cli()
