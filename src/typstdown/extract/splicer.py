"""Rebuild a sibling sequence around the math matches.

A single linear pass over the span map, driven by the ordered match list:

- gaps between matches are copied: whole siblings verbatim (same object),
  partially covered text siblings as new ``Text`` slices;
- each match becomes one new ``MathSegment`` replacing whatever occupied
  its range;
- the tail after the last match is copied the same way.

With no matches the original sequence object is returned untouched.
"""

from __future__ import annotations

from collections.abc import Sequence

from typstdown.extract.classifier import classify
from typstdown.extract.flatten import FlatView, Span, flatten
from typstdown.extract.matcher import Match, find_matches
from typstdown.location import SourceLocation
from typstdown.nodes import MathSegment, Node, Text


def splice(view: FlatView, matches: Sequence[Match]) -> list[Node]:
    """Build the new sibling list for ``view`` given its matches."""
    spans = view.spans
    out: list[Node] = []
    i = 0
    pos = 0
    for match in matches:
        i = _copy(spans, i, pos, match.start, out)
        content, display = classify(match.delimiter, match.inner)
        out.append(
            MathSegment(
                content=content,
                display=display,
                raw=match.raw,
                location=_location_at(spans, i),
            )
        )
        pos = match.end
    _copy(spans, i, pos, len(view.text), out)
    return out


def _copy(spans: tuple[Span, ...], i: int, pos: int, limit: int, out: list[Node]) -> int:
    """Copy view range ``[pos, limit)`` into ``out``.

    Returns the index of the first span not fully consumed.
    """
    while i < len(spans):
        span = spans[i]
        if span.start < pos and span.end <= pos:
            # Consumed by a previous match
            i += 1
            continue
        if span.start > limit or (span.start == limit and span.end > span.start):
            break
        lo, hi = max(span.start, pos), min(span.end, limit)
        if lo == span.start and hi == span.end:
            out.append(span.node)
        elif hi > lo:
            node = span.node
            if not isinstance(node, Text):
                # Only text spans are wider than one position
                msg = f"cannot slice non-text node {node.kind!r} at {span.start}"
                raise TypeError(msg)
            out.append(
                Text(
                    value=node.value[lo - span.start : hi - span.start],
                    location=node.location,
                )
            )
        if span.end > limit:
            break
        i += 1
    return i


def _location_at(spans: tuple[Span, ...], i: int) -> SourceLocation | None:
    return spans[i].node.location if i < len(spans) else None


def splice_siblings(children: Sequence[Node], *, cross_node: bool = False) -> Sequence[Node]:
    """Replace delimited math in a sibling sequence with MathSegment nodes.

    Args:
        children: Ordered siblings (typically a paragraph's children)
        cross_node: Allow math to span non-text siblings

    Returns:
        ``children`` itself when there is nothing to do, otherwise a new list

    Example:
        >>> [type(n).__name__ for n in splice_siblings([Text(value="a $x$ b")])]
        ['Text', 'MathSegment', 'Text']

    """
    view = flatten(children)
    if not view.has_delimiter():
        return children
    matches = find_matches(view, cross_node=cross_node)
    if not matches:
        return children
    return splice(view, matches)
