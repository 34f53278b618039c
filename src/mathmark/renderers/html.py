"""HTML renderer using StringBuilder pattern.

Renders the typed AST to HTML in a single walk. Fragments are
concatenated without separators or newlines.

Thread Safety:
The renderer holds only immutable options. Each render() call uses its
own StringBuilder, so one HtmlRenderer can be shared across threads.
"""

from __future__ import annotations

import html
import sys
from collections.abc import Iterable, Sequence

from mathmark.errors import RenderError
from mathmark.nodes import (
    NBSP,
    Bold,
    CodeBlock,
    DisplayMath,
    Document,
    Env,
    Header,
    Highlighted,
    Hr,
    InlineCode,
    InlineMath,
    Italic,
    Link,
    List,
    ListItem,
    NewLine,
    Node,
    Paragraph,
    Striked,
    Text,
    Underline,
)
from mathmark.stringbuilder import StringBuilder

# Highest header element HTML provides
MAX_HEADER_LEVEL = 6

STYLESHEET = (
    "p {padding: 1rem; border: 1px dashed red;} "
    ".math-inline{font-family: monospace; font-weight: bold; color: grey;} "
    ".math-display{font-family: monospace; font-weight: bold; color: grey; "
    "display: block; padding: 1rem; text-align: center; font-size: 2rem;} "
    "hr {margin-top: 2px solid gray;} "
    "hr.style-dashed {border-style: dashed;} "
    "hr.style-dotted {border-style: dotted;} "
    "hr.style-sawtooth {border-image: url('data:image/svg+xml,%3Csvg xmlns%3D%22"
    "http%3A//www.w3.org/2000/svg%22 viewBox%3D%220 0 12 8%22 width%3D%2212%22 "
    "height%3D%228%22%3E%3Cpath fill%3D%22none%22 stroke%3D%22rgba(191%2C191%2C"
    "191%2C0.9)%22 stroke-width%3D%221.5%22 d%3D%22M0%2C0 6%2C8 12%2C0%22/%3E%3C"
    "/svg%3E') 0 0 100% repeat; border-width: 0 0 10px; border-style: solid; "
    "position: relative;} "
    ".environment {background-color: lightgray; padding: 1rem; "
    "border: 1px solid black;} "
    ".environment-name {border-bottom: 1px solid black; margin-bottom: 1rem;}"
)

# Container node -> element name
_SIMPLE_TAGS: dict[type[Node], str] = {
    Paragraph: "p",
    Bold: "strong",
    Italic: "em",
    Striked: "s",
    Underline: "u",
    Highlighted: "mark",
    List: "ul",
    ListItem: "li",
}


def html_escape(s: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` but not single quotes."""
    return html.escape(s, quote=False).replace('"', "&quot;")


def extract_text(nodes: Iterable[Node]) -> str:
    """Concatenate the literal text of inline nodes, ignoring markup."""
    parts: list[str] = []
    for node in nodes:
        match node:
            case Text(content=content) | InlineMath(content=content):
                parts.append(content)
            case InlineCode(code=code):
                parts.append(code)
            case NBSP() | NewLine():
                parts.append(" ")
            case Bold() | Italic() | Striked() | Underline() | Highlighted() | Link():
                parts.append(extract_text(node.children))
    return "".join(parts)


class HtmlRenderer:
    """Render AST to HTML.

    Usage:
        >>> from mathmark import parse
        >>> HtmlRenderer().render(parse("# Hello **World**"))
        '<h2>Hello <strong>World</strong></h2>'

    Payloads (text, math, code, link URLs, attribute values) are escaped
    unless the renderer is built with ``escape=False``, which writes them
    verbatim.

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.
    """

    __slots__ = ("_escape",)

    def __init__(self, *, escape: bool = True) -> None:
        """Initialize renderer.

        Args:
            escape: HTML-escape payloads
        """
        self._escape = escape

    def render(self, node: Document | Sequence[Node]) -> str:
        """Render a document (or a bare node list) to an HTML fragment.

        Raises:
            RenderError: A node of unknown type was found, or the tree is
                nested deeper than the interpreter's recursion limit allows
        """
        children = node.children if isinstance(node, Document) else node
        sb = StringBuilder()
        try:
            self._render_nodes(children, sb)
        except RecursionError as e:
            raise RenderError(
                f"tree too deep to render within {sys.getrecursionlimit()} frames"
            ) from e
        return sb.build()

    def render_page(self, node: Document | Sequence[Node], title: str | None = None) -> str:
        """Render a complete HTML page with the default stylesheet.

        Args:
            node: Document to render
            title: Page title; defaults to the text of the first header
        """
        children = node.children if isinstance(node, Document) else node
        if title is None:
            title = next(
                (extract_text(child.children) for child in children if isinstance(child, Header)),
                None,
            )
        head = StringBuilder()
        if title:
            head.append("<title>").append(html_escape(title)).append("</title>")
        head.append("<style>").append(STYLESHEET).append("</style>")
        return f"<head>{head.build()}</head><body>{self.render(children)}</body>"

    def _text(self, s: str) -> str:
        return html_escape(s) if self._escape else s

    def _render_nodes(self, nodes: Iterable[Node], sb: StringBuilder) -> None:
        for child in nodes:
            self._render_node(child, sb)

    def _render_node(self, node: Node, sb: StringBuilder) -> None:
        """Render one node of any kind."""
        match node:
            case Text(content=content):
                sb.append(self._text(content))
            case Header(level=level, children=children):
                level = min(level, MAX_HEADER_LEVEL)
                sb.append(f"<h{level}>")
                self._render_nodes(children, sb)
                sb.append(f"</h{level}>")
            case InlineMath(content=content):
                sb.append('<span class="math-inline">')
                sb.append(self._text(content)).append("</span>")
            case DisplayMath(content=content):
                sb.append('<span class="math-display">')
                sb.append(self._text(content)).append("</span>")
            case InlineCode(code=code):
                sb.append('<code class="inline">').append(self._text(code)).append("</code>")
            case CodeBlock(code=code, language=language):
                lang = f' lang="{self._text(language)}"' if language else ""
                sb.append(f'<pre><code class="block"{lang}>')
                sb.append(self._text(code)).append("</code></pre>")
            case Link(url=url, children=children):
                sb.append(f'<a href="{self._text(url)}">')
                self._render_nodes(children, sb)
                sb.append("</a>")
            case Env():
                self._render_env(node, sb)
            case Hr(style=style):
                sb.append(f'<hr class="style-{style.value}"/>')
            case NBSP():
                sb.append("&nbsp;")
            case NewLine():
                sb.append("<br/>")
            case Document(children=children):
                self._render_nodes(children, sb)
            case _ if type(node) in _SIMPLE_TAGS:
                tag = _SIMPLE_TAGS[type(node)]
                sb.append(f"<{tag}>")
                self._render_nodes(node.children, sb)
                sb.append(f"</{tag}>")
            case _:
                raise RenderError(f"Cannot render node of type {type(node).__name__}")

    def _render_env(self, env: Env, sb: StringBuilder) -> None:
        """Render an environment with its optional name line."""
        kind = env.environment_type.value
        sb.append(f'<div class="environment environment-{kind}">')
        if env.environment_arg is not None:
            sb.append('<div class="environment-name">')
            self._render_nodes(env.environment_arg, sb)
            sb.append("</div>")
        self._render_nodes(env.children, sb)
        sb.append("</div>")
