"""Document tree nodes for typstdown.

Nodes are mutable dataclasses with slots. The tree follows the unist model
used by markdown toolchains: every node has a ``kind`` tag, leaves carry a
``value`` and containers own an ordered ``children`` list. Math rendering
rewrites nodes in place, so unlike a parser AST these are not frozen.

Node Hierarchy:
Node (base)
├── Text, InlineCode, Html, Raw, Code (leaves with value)
├── Break, ThematicBreak, Image (other leaves)
└── Parent (containers)
    ├── Root, Paragraph, Heading, Blockquote, List, ListItem
    ├── Emphasis, Strong, Delete, Link
    ├── Foreign (unmodeled unist type, kept as-is)
    └── Element (HTML-like container)
        └── MathSegment (recognized math expression)

Ownership:
Each node belongs to exactly one parent's ``children`` list. The tree is a
strict forest: no sharing, no cycles.

Thread Safety:
Nodes are mutable. A tree must only be touched by one event loop at a time.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from typstdown.location import SourceLocation

# =============================================================================
# Base Node
# =============================================================================


@dataclass(slots=True)
class Node:
    """Base class for all tree nodes.

    ``location`` is keyword-only and ignored by equality so that trees built
    by hand compare equal to trees built from parser output.

    """

    kind: ClassVar[str] = "node"

    location: SourceLocation | None = field(default=None, kw_only=True, compare=False)


@dataclass(slots=True)
class Parent(Node):
    """Node that owns an ordered list of children."""

    children: list[Node] = field(default_factory=list)


# =============================================================================
# Leaf Nodes
# =============================================================================


@dataclass(slots=True)
class Text(Node):
    """Plain prose text.

    The only node kind whose value takes part in math delimiter scanning.

    """

    kind: ClassVar[str] = "text"

    value: str = ""


@dataclass(slots=True)
class InlineCode(Node):
    """Inline code span.

    Markdown: `code`

    """

    kind: ClassVar[str] = "inlineCode"

    value: str = ""


@dataclass(slots=True)
class Code(Node):
    """Fenced code block.

    Markdown:
        ```typst eval=true
        sum_(i=1)^n i
        ```

    ``meta`` is the rest of the info string after the language.

    """

    kind: ClassVar[str] = "code"

    value: str = ""
    lang: str | None = None
    meta: str | None = None


@dataclass(slots=True)
class Html(Node):
    """Raw HTML from the markdown source, passed through unchanged."""

    kind: ClassVar[str] = "html"

    value: str = ""


@dataclass(slots=True)
class Raw(Node):
    """Trusted markup produced by typstdown itself (e.g. SVG bodies)."""

    kind: ClassVar[str] = "raw"

    value: str = ""


@dataclass(slots=True)
class Break(Node):
    """Hard line break."""

    kind: ClassVar[str] = "break"


@dataclass(slots=True)
class ThematicBreak(Node):
    """Horizontal rule."""

    kind: ClassVar[str] = "thematicBreak"


@dataclass(slots=True)
class Image(Node):
    """Image.

    Markdown: ![alt](url "title")

    """

    kind: ClassVar[str] = "image"

    url: str = ""
    alt: str = ""
    title: str | None = None


# =============================================================================
# Block Containers
# =============================================================================


@dataclass(slots=True)
class Root(Parent):
    """Root document node."""

    kind: ClassVar[str] = "root"


@dataclass(slots=True)
class Paragraph(Parent):
    """Paragraph block; its children are the usual home of math."""

    kind: ClassVar[str] = "paragraph"


@dataclass(slots=True)
class Heading(Parent):
    """ATX or setext heading."""

    kind: ClassVar[str] = "heading"

    depth: int = 1


@dataclass(slots=True)
class Blockquote(Parent):
    """Block quote."""

    kind: ClassVar[str] = "blockquote"


@dataclass(slots=True)
class List(Parent):
    """Ordered or unordered list of ListItem children."""

    kind: ClassVar[str] = "list"

    ordered: bool = False
    start: int | None = None


@dataclass(slots=True)
class ListItem(Parent):
    """List item."""

    kind: ClassVar[str] = "listItem"


# =============================================================================
# Inline Containers
# =============================================================================


@dataclass(slots=True)
class Emphasis(Parent):
    """Emphasized (italic) text."""

    kind: ClassVar[str] = "emphasis"


@dataclass(slots=True)
class Strong(Parent):
    """Strong (bold) text."""

    kind: ClassVar[str] = "strong"


@dataclass(slots=True)
class Delete(Parent):
    """Strikethrough text."""

    kind: ClassVar[str] = "delete"


@dataclass(slots=True)
class Link(Parent):
    """Hyperlink."""

    kind: ClassVar[str] = "link"

    url: str = ""
    title: str | None = None


@dataclass(slots=True)
class Foreign(Parent):
    """Node of a unist type typstdown does not model (``table``, ``yaml``...).

    ``type_name`` and ``data`` keep the original type and keys so the node
    serializes back unchanged. Children are loaded like any others, so prose
    inside a table cell is still scanned for math.

    """

    kind: ClassVar[str] = "foreign"

    type_name: str = ""
    data: dict[str, object] = field(default_factory=dict)
    container: bool = False


# =============================================================================
# Elements
# =============================================================================


@dataclass(slots=True)
class Element(Parent):
    """HTML-like element.

    Upstream stages use ``code`` elements with a ``typst-math-inline`` or
    ``typst-math-display`` class to mark content as math. Rendered math is
    an element retagged to ``span``/``div`` around an ``svg`` element.

    """

    kind: ClassVar[str] = "element"

    tag_name: str = "span"
    properties: dict[str, object] = field(default_factory=dict)

    @property
    def classes(self) -> list[str]:
        """Class names of this element (empty if unset)."""
        value = self.properties.get("class", self.properties.get("className"))
        if isinstance(value, str):
            return value.split()
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return []


@dataclass(slots=True)
class MathSegment(Element):
    """Recognized math expression awaiting (or holding) its rendered form.

    Created by the splicer as a ``code`` element with class ``math-inline``
    or ``math-display``. ``content`` is trimmed with braces entity-escaped;
    ``raw`` keeps the original delimited source text. Substitution retags the
    segment in place and gives it its single rendered child.

    """

    kind: ClassVar[str] = "mathSegment"

    tag_name: str = "code"
    content: str = ""
    display: bool = False
    raw: str = ""

    def __post_init__(self) -> None:
        if not self.properties:
            self.properties = {"class": ["math-display" if self.display else "math-inline"]}


def text_content(node: Node) -> str:
    """Concatenated literal text of a node and its descendants."""
    match node:
        case Text(value=value) | InlineCode(value=value) | Code(value=value):
            return value
        case MathSegment(raw=raw) if not node.children:
            return raw
        case Parent(children=children):
            return "".join(text_content(child) for child in children)
        case _:
            return ""
