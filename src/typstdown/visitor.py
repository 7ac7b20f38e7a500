"""Tree visitor and walker for typstdown.

Provides a base visitor class with match-based dispatch and a pre-order
``walk`` generator that reports each node together with its owner.

Example, collecting all math segments:

    class MathCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.segments: list[MathSegment] = []

        def visit_math(self, node: MathSegment) -> None:
            self.segments.append(node)

    collector = MathCollector()
    collector.visit(tree)

Example, walking with parents:

    for node, parent, index in walk(tree):
        if isinstance(node, Code):
            ...

Thread Safety:
    Visitors may accumulate mutable state; create one per traversal.

"""

from collections.abc import Iterator
from typing import Generic, TypeVar

from typstdown.nodes import (
    Blockquote,
    Break,
    Code,
    Delete,
    Element,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    MathSegment,
    Node,
    Paragraph,
    Parent,
    Raw,
    Root,
    Strong,
    Text,
    ThematicBreak,
)


T = TypeVar("T")


class BaseVisitor(Generic[T]):
    """Base tree visitor with match-based dispatch.

    Subclass and override ``visit_*`` methods for node kinds you care about.
    Unhandled kinds fall through to ``visit_default``. Children are walked
    automatically after the ``visit_*`` call, over a snapshot of the list so
    a visit method may replace its node's children.

    """

    def visit(self, node: Node) -> T:
        """Dispatch to the appropriate ``visit_*`` method, then walk children."""
        result = self._dispatch(node)
        if isinstance(node, Parent):
            for child in list(node.children):
                self.visit(child)
        return result

    def visit_default(self, node: Node) -> T:
        """Called for node kinds without a specific ``visit_*`` method."""
        return None  # type: ignore[return-value]

    # -- Block visitors --------------------------------------------------------

    def visit_root(self, node: Root) -> T:
        return self.visit_default(node)

    def visit_paragraph(self, node: Paragraph) -> T:
        return self.visit_default(node)

    def visit_heading(self, node: Heading) -> T:
        return self.visit_default(node)

    def visit_blockquote(self, node: Blockquote) -> T:
        return self.visit_default(node)

    def visit_list(self, node: List) -> T:
        return self.visit_default(node)

    def visit_list_item(self, node: ListItem) -> T:
        return self.visit_default(node)

    def visit_code(self, node: Code) -> T:
        return self.visit_default(node)

    def visit_html(self, node: Html) -> T:
        return self.visit_default(node)

    def visit_thematic_break(self, node: ThematicBreak) -> T:
        return self.visit_default(node)

    # -- Inline visitors -------------------------------------------------------

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_emphasis(self, node: Emphasis) -> T:
        return self.visit_default(node)

    def visit_strong(self, node: Strong) -> T:
        return self.visit_default(node)

    def visit_delete(self, node: Delete) -> T:
        return self.visit_default(node)

    def visit_link(self, node: Link) -> T:
        return self.visit_default(node)

    def visit_image(self, node: Image) -> T:
        return self.visit_default(node)

    def visit_inline_code(self, node: InlineCode) -> T:
        return self.visit_default(node)

    def visit_break(self, node: Break) -> T:
        return self.visit_default(node)

    def visit_raw(self, node: Raw) -> T:
        return self.visit_default(node)

    def visit_element(self, node: Element) -> T:
        return self.visit_default(node)

    def visit_math(self, node: MathSegment) -> T:
        return self.visit_default(node)

    # -- Internal dispatch -----------------------------------------------------

    def _dispatch(self, node: Node) -> T:
        """Match-based dispatch to visit_* methods."""
        match node:
            case Root():
                return self.visit_root(node)
            case Paragraph():
                return self.visit_paragraph(node)
            case Heading():
                return self.visit_heading(node)
            case Blockquote():
                return self.visit_blockquote(node)
            case List():
                return self.visit_list(node)
            case ListItem():
                return self.visit_list_item(node)
            case Code():
                return self.visit_code(node)
            case Html():
                return self.visit_html(node)
            case ThematicBreak():
                return self.visit_thematic_break(node)
            case Text():
                return self.visit_text(node)
            case Emphasis():
                return self.visit_emphasis(node)
            case Strong():
                return self.visit_strong(node)
            case Delete():
                return self.visit_delete(node)
            case Link():
                return self.visit_link(node)
            case Image():
                return self.visit_image(node)
            case InlineCode():
                return self.visit_inline_code(node)
            case Break():
                return self.visit_break(node)
            case Raw():
                return self.visit_raw(node)
            case MathSegment():
                return self.visit_math(node)
            case Element():
                return self.visit_element(node)
            case _:
                return self.visit_default(node)


def walk(node: Node) -> Iterator[tuple[Node, Parent | None, int | None]]:
    """Yield ``(node, parent, index)`` for every node in pre-order.

    The root is reported with ``parent=None`` and ``index=None``. A node's
    children are read after the node has been yielded, so the consumer may
    replace ``parent.children[index]`` before the walk descends into it; the
    walk then descends into the replacement.

    """
    yield node, None, None
    yield from _walk_children(node)


def _walk_children(node: Node) -> Iterator[tuple[Node, Parent | None, int | None]]:
    if not isinstance(node, Parent):
        return
    index = 0
    while index < len(node.children):
        child = node.children[index]
        yield child, node, index
        # The consumer may have swapped the child in place
        yield from _walk_children(node.children[index])
        index += 1
