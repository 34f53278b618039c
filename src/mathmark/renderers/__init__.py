"""mathmark renderers.

Renderers convert typed AST nodes into output formats.

Available Renderers:
- HtmlRenderer: Renders AST to HTML using StringBuilder pattern

"""

from mathmark.renderers.html import HtmlRenderer, extract_text, html_escape

__all__ = ["HtmlRenderer", "extract_text", "html_escape"]
