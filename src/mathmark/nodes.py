"""Typed AST nodes for mathmark.

All AST nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: Safe sharing across threads
- Pattern matching: Python 3.10+ match statements work naturally

Every node accepts an optional keyword-only ``location``. It is excluded
from equality and repr, so trees compare by structure and payload:

    >>> Bold((Text("x"),)) == Bold((Text("x"),), location=SourceLocation(3, 1))
    True

Node Hierarchy:
Node (base)
├── Block (block-level elements)
│   ├── Document
│   ├── Header
│   ├── Paragraph
│   ├── List
│   ├── ListItem
│   ├── Env
│   ├── CodeBlock
│   ├── DisplayMath
│   └── Hr
└── Inline (inline elements)
    ├── Text
    ├── Bold, Italic, Striked, Underline, Highlighted
    ├── Link
    ├── InlineCode
    ├── InlineMath
    ├── NewLine
    └── NBSP

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from mathmark.errors import Diagnostic
from mathmark.location import SourceLocation
from mathmark.tokens import HrStyle

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes."""

    location: SourceLocation | None = field(
        default=None, kw_only=True, compare=False, repr=False
    )


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text content."""

    content: str


@dataclass(frozen=True, slots=True)
class Bold(Node):
    """Bold text.

    Markup: **text** or __text__
    HTML: <strong>text</strong>

    """

    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Italic(Node):
    """Italic text.

    Markup: *text* or _text_
    HTML: <em>text</em>

    """

    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Striked(Node):
    """Struck-through text.

    Markup: ~~text~~
    HTML: <s>text</s>

    """

    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Underline(Node):
    """Underlined text.

    Markup: ..text..
    HTML: <u>text</u>

    """

    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Highlighted(Node):
    """Highlighted text.

    Markup: ||text||
    HTML: <mark>text</mark>

    """

    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink (lexed only with ``ParseConfig.links_enabled``).

    Markup: [text](url)
    HTML: <a href="url">text</a>

    """

    url: str
    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class InlineCode(Node):
    """Inline code.

    Markup: `code`
    HTML: <code class="inline">code</code>

    """

    code: str


@dataclass(frozen=True, slots=True)
class InlineMath(Node):
    """Inline math expression.

    Markup: $E = mc^2$
    HTML: <span class="math-inline">E = mc^2</span>

    """

    content: str


@dataclass(frozen=True, slots=True)
class NewLine(Node):
    """Explicit line break outside paragraph grouping."""


@dataclass(frozen=True, slots=True)
class NBSP(Node):
    """Non-breaking space (a single ``~``)."""


type Inline = (
    Text
    | Bold
    | Italic
    | Striked
    | Underline
    | Highlighted
    | Link
    | InlineCode
    | InlineMath
    | NewLine
    | NBSP
)


# =============================================================================
# Block Nodes
# =============================================================================


class ListType(Enum):
    """List flavors. Only bulleted lists exist in the markup today."""

    NORMAL = "normal"


class EnvType(Enum):
    """Semantic environment kinds, valued by their CSS class suffix."""

    DEFINITION = "definition"
    THEOREM = "theorem"
    COROLLARY = "corollary"
    LEMMA = "lemma"
    REMARK = "remark"
    EXAMPLE = "example"
    EXERCISE = "exercise"
    FOLD = "fold"
    CONCEAL = "conceal"

    @classmethod
    def from_name(cls, name: str) -> EnvType | None:
        """Map an environment name from the source to its kind.

        Accepts the full kind name or its short alias, case-insensitively.

        Returns:
            The matching EnvType, or None for unknown names
        """
        return _ENV_NAMES.get(name.lower())


_ENV_NAMES: dict[str, EnvType] = {
    "def": EnvType.DEFINITION,
    "defn": EnvType.DEFINITION,
    "thm": EnvType.THEOREM,
    "cor": EnvType.COROLLARY,
    "lem": EnvType.LEMMA,
    "rem": EnvType.REMARK,
    "ex": EnvType.EXAMPLE,
    "exer": EnvType.EXERCISE,
    **{kind.value: kind for kind in EnvType},
}


@dataclass(frozen=True, slots=True)
class Header(Node):
    """Header.

    Markup: # Title (level = number of ``#`` + 1)
    HTML: <h2>Title</h2>

    """

    level: int
    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph block: inline content between blank lines."""

    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class List(Node):
    """Bulleted list. Children are ListItem nodes."""

    children: tuple[Node, ...]
    list_type: ListType = ListType.NORMAL


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """List item: inline content for one-line items, blocks otherwise."""

    children: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Env(Node):
    """Semantic environment (definition, theorem, ...).

    Markup:
        %thm Pythagoras
        Body
        %%

    HTML: <div class="environment environment-theorem">...</div>

    """

    environment_type: EnvType
    children: tuple[Node, ...]
    environment_arg: tuple[Node, ...] | None = None


@dataclass(frozen=True, slots=True)
class CodeBlock(Node):
    """Fenced code block.

    Markup: ```code```
    HTML: <pre><code class="block">code</code></pre>

    """

    code: str
    language: str | None = None


@dataclass(frozen=True, slots=True)
class DisplayMath(Node):
    """Display math.

    Markup: \\[ E = mc^2 \\]
    HTML: <span class="math-display">E = mc^2</span>

    """

    content: str


@dataclass(frozen=True, slots=True)
class Hr(Node):
    """Horizontal rule.

    Markup: ===, ---, ..., ^^^ at line start
    HTML: <hr class="style-dashed"/>

    """

    style: HrStyle


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root document node.

    Contains all top-level nodes and the diagnostics recorded while
    lexing and parsing.

    """

    children: tuple[Node, ...]
    diagnostics: tuple[Diagnostic, ...] = field(default=(), compare=False)


type Block = (
    Document
    | Header
    | Paragraph
    | List
    | ListItem
    | Env
    | CodeBlock
    | DisplayMath
    | Hr
)

# Nodes after which a single newline ends the line instead of breaking it
BLOCK_NODE_TYPES: tuple[type[Node], ...] = (
    Header,
    Paragraph,
    List,
    Env,
    CodeBlock,
    DisplayMath,
    Hr,
)
