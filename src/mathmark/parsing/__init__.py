"""Parsing subsystem for the mathmark parser.

Provides mixin classes for modular parsing functionality:
- `TokenNavigationMixin`: Token stream traversal and pushback
- `InlineParsingMixin`: Emphasis toggles and links
- `BlockParsingMixin`: Lists, headers, environments, paragraphs

Example:
    >>> from mathmark.parsing import (
    ...     TokenNavigationMixin,
    ...     InlineParsingMixin,
    ...     BlockParsingMixin,
    ... )
    >>> class Parser(TokenNavigationMixin, InlineParsingMixin, BlockParsingMixin):
    ...     pass

"""

from mathmark.parsing.blocks import BlockParsingMixin
from mathmark.parsing.inline import InlineParsingMixin
from mathmark.parsing.token_nav import TokenNavigationMixin

__all__ = [
    "TokenNavigationMixin",
    "InlineParsingMixin",
    "BlockParsingMixin",
]
