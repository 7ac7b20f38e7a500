"""Flattened text view over a sibling sequence.

A sentence such as ``The $a^2$ **and** $b$`` reaches us as several sibling
nodes. Math delimiters have to be found across those siblings, so the
siblings are flattened into one string plus a span list that maps every
position back to the node it came from.

Text nodes contribute their literal value. Every other node contributes a
single position. The span list, not the character at that position, says
whether a position is text or an opaque node, so prose that happens to
contain the placeholder character is still treated as prose.

Thread Safety:
FlatView and Span are frozen; building one never mutates the siblings.

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from typstdown.nodes import Node, Text

# Fills the single position of an opaque node in FlatView.text
OPAQUE = "￼"


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open range ``[start, end)`` of the view owned by one sibling.

    Attributes:
        start: First position in the flattened view
        end: One past the last position
        index: Index of the sibling in the original sequence
        node: The sibling itself

    """

    start: int
    end: int
    index: int
    node: Node

    @property
    def is_text(self) -> bool:
        return isinstance(self.node, Text)


@dataclass(frozen=True, slots=True)
class FlatView:
    """Flattened text of a sibling sequence with its span map.

    Spans are contiguous, non-overlapping, ordered by ``start`` and cover
    ``[0, len(text))`` exactly.

    """

    text: str
    spans: tuple[Span, ...]

    def has_delimiter(self) -> bool:
        """True if any text sibling contains a ``$``."""
        return any(isinstance(span.node, Text) and "$" in span.node.value for span in self.spans)

    def text_runs(self) -> Iterator[tuple[int, int]]:
        """Yield ``(start, end)`` of each maximal run of adjacent text spans."""
        run_start: int | None = None
        for span in self.spans:
            if span.is_text:
                if run_start is None:
                    run_start = span.start
                continue
            if run_start is not None and run_start < span.start:
                yield run_start, span.start
            run_start = None
        if run_start is not None and run_start < len(self.text):
            yield run_start, len(self.text)

    def text_between(self, start: int, end: int) -> str:
        """Text of ``[start, end)`` with opaque positions left out."""
        parts: list[str] = []
        for span in self.spans:
            if span.end <= start or not span.is_text:
                continue
            if span.start >= end:
                break
            parts.append(self.text[max(span.start, start) : min(span.end, end)])
        return "".join(parts)


def flatten(children: Sequence[Node]) -> FlatView:
    """Build the flattened view of a sibling sequence.

    Args:
        children: Ordered siblings, typically a paragraph's children

    Returns:
        FlatView covering every sibling

    Example:
        >>> view = flatten([Text(value="a "), Strong(), Text(value=" b")])
        >>> view.text == "a " + OPAQUE + " b"
        True

    """
    parts: list[str] = []
    spans: list[Span] = []
    pos = 0
    for index, node in enumerate(children):
        chunk = node.value if isinstance(node, Text) else OPAQUE
        parts.append(chunk)
        spans.append(Span(pos, pos + len(chunk), index, node))
        pos += len(chunk)
    return FlatView(text="".join(parts), spans=tuple(spans))
