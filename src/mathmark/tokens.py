"""Token and TokenType definitions for the mathmark lexer.

The lexer produces a flat list of Token objects that the parser consumes.
Each Token has a type, an optional string or numeric payload, and the
position where it started.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType and HrStyle are enums (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mathmark.location import SourceLocation


class TokenType(Enum):
    """Token types produced by the lexer.

    Organized by category for clarity:
    - Toggle markers (the same type opens and closes a span)
    - Block markers (headers, list items, rules, environments)
    - Payload tokens (text, code, math)
    - Whitespace structure (newlines, indentation)

    """

    # Toggle markers
    BOLD = auto()  # ** or __
    ITALIC = auto()  # * or _
    STRIKED = auto()  # ~~
    UNDERLINE = auto()  # ..
    HIGHLIGHTED = auto()  # ||

    # Links
    LINK_START = auto()  # [
    LINK_END = auto()  # ](url)

    # Block markers
    HEADER = auto()  # #, ##, ...
    LIST_ITEM = auto()  # "- " at line start, possibly indented
    HR = auto()  # ===, ---, ..., ^^^
    ENV_BEGIN = auto()  # %name
    ENV_END = auto()  # %% on its own line

    # Payload tokens
    TEXT = auto()
    INLINE_CODE = auto()  # `code`
    CODE_BLOCK = auto()  # ```code```
    INLINE_MATH = auto()  # $math$
    DISPLAY_MATH = auto()  # \[math\]
    NBSP = auto()  # ~

    # Whitespace structure
    NEWLINE = auto()
    INDENT = auto()  # leading spaces not followed by a list marker


class HrStyle(Enum):
    """Horizontal rule styles, valued by their CSS class suffix."""

    NORMAL = "normal"  # ===
    DASHED = "dashed"  # ---
    DOTTED = "dotted"  # ...
    SAWTOOTH = "sawtooth"  # ^^^


# Span markers that open and close with the same token
TOGGLE_TYPES = frozenset(
    {
        TokenType.BOLD,
        TokenType.ITALIC,
        TokenType.STRIKED,
        TokenType.UNDERLINE,
        TokenType.HIGHLIGHTED,
    }
)

# Tokens that start a block and therefore end a paragraph
BLOCK_START_TYPES = frozenset(
    {
        TokenType.ENV_BEGIN,
        TokenType.ENV_END,
        TokenType.LIST_ITEM,
        TokenType.HEADER,
        TokenType.CODE_BLOCK,
        TokenType.DISPLAY_MATH,
        TokenType.HR,
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        type: The token type (from TokenType enum)
        value: String payload: text, code or math content, environment
            name, rule style, or link URL
        level: Numeric payload: header level, or indentation in spaces
            for LIST_ITEM and INDENT
        lineno: Start line number (1-indexed)
        col: Start column (1-indexed)

    Position fields are excluded from comparison, so two tokens are equal
    when their type and payloads are.

    """

    type: TokenType
    value: str = ""
    level: int = 0
    lineno: int = field(default=1, compare=False)
    col: int = field(default=1, compare=False)

    @property
    def location(self) -> SourceLocation:
        """Source location of the token start."""
        from mathmark.location import SourceLocation

        return SourceLocation(lineno=self.lineno, col_offset=self.col)

    @property
    def hr_style(self) -> HrStyle:
        """Rule style of an HR token."""
        return HrStyle(self.value)

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        payload = ""
        if self.value:
            val = self.value
            if len(val) > 20:
                val = val[:17] + "..."
            payload = f", {val!r}"
        if self.type in (TokenType.HEADER, TokenType.LIST_ITEM, TokenType.INDENT):
            payload += f", level={self.level}"
        return f"Token({self.type.name}{payload}, {self.lineno}:{self.col})"
