"""Math segment extraction.

Finds ``$...$`` and ``$$...$$`` math in the text of a document tree and
replaces it with ``MathSegment`` nodes, leaving surrounding formatting
nodes in place.

Pipeline per container:
    flatten (flatten.py) -> find_matches (matcher.py)
    -> classify (classifier.py) -> splice (splicer.py)

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from typstdown.config import RenderConfig, get_render_config
from typstdown.extract.classifier import classify, escape_braces, is_display, unescape_braces
from typstdown.extract.flatten import FlatView, Span, flatten
from typstdown.extract.matcher import Match, find_matches
from typstdown.extract.splicer import splice, splice_siblings
from typstdown.nodes import Element, MathSegment, Node, Parent
from typstdown.utils.logger import get_logger
from typstdown.visitor import BaseVisitor

logger = get_logger(__name__)

N = TypeVar("N", bound=Node)


class _MathExtractor(BaseVisitor[None]):
    """Splices the children of every prose container it visits."""

    def __init__(self, cross_node: bool) -> None:
        self.cross_node = cross_node
        self.segments = 0

    def visit_default(self, node: Node) -> None:
        # Elements hold markup, not prose
        if not isinstance(node, Parent) or isinstance(node, Element):
            return
        spliced = splice_siblings(node.children, cross_node=self.cross_node)
        if spliced is not node.children:
            self.segments += _count_segments(spliced) - _count_segments(node.children)
            node.children = list(spliced)


def _count_segments(children: Sequence[Node]) -> int:
    return sum(isinstance(child, MathSegment) for child in children)


def extract_math(tree: N, config: RenderConfig | None = None) -> N:
    """Replace delimited math throughout ``tree`` with MathSegment nodes.

    Mutates ``tree`` in place and returns it. Running it again on an
    already extracted tree finds nothing new.

    Args:
        tree: Root of the document tree
        config: Render config (uses the context config if None)

    Returns:
        The same tree

    """
    config = config or get_render_config()
    extractor = _MathExtractor(cross_node=config.cross_node_math)
    extractor.visit(tree)
    logger.debug("Extracted %d math segment(s)", extractor.segments)
    return tree


__all__ = [
    "FlatView",
    "Match",
    "Span",
    "classify",
    "escape_braces",
    "extract_math",
    "find_matches",
    "flatten",
    "is_display",
    "splice",
    "splice_siblings",
    "unescape_braces",
]
