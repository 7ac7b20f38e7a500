"""Delimiter scan over a flattened view.

One regular scan finds ``$$...$$`` and ``$...$`` runs, non-greedy, resuming
after each match so matches never overlap. An opening ``$`` that never
closes produces no match and stays literal text.

By default each run of adjacent text siblings is scanned on its own, so a
match can never swallow an emphasis, link or code span sitting between two
dollar signs. With ``cross_node=True`` the whole view is scanned and an
opaque sibling inside a match is dropped from the tree; its content does
not become part of the math.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from typstdown.extract.classifier import DISPLAY_DELIMITER, INLINE_DELIMITER
from typstdown.extract.flatten import FlatView

MATH_PATTERN = re.compile(r"\$\$(?P<display>[\s\S]+?)\$\$|\$(?P<inline>[^$]+?)\$")


@dataclass(frozen=True, slots=True)
class Match:
    """One delimiter-bounded run in the flattened view.

    Attributes:
        start: View position of the opening delimiter
        end: View position one past the closing delimiter
        delimiter: ``"$"`` or ``"$$"``
        inner: Interior text, untrimmed, opaque positions left out

    """

    start: int
    end: int
    delimiter: str
    inner: str

    @property
    def raw(self) -> str:
        """The delimited source text as the author wrote it."""
        return f"{self.delimiter}{self.inner}{self.delimiter}"


def find_matches(view: FlatView, *, cross_node: bool = False) -> list[Match]:
    """Find all math runs in ``view``, ordered by start.

    Args:
        view: Flattened sibling sequence
        cross_node: Allow matches to span non-text siblings

    Returns:
        Non-overlapping matches with ``0 <= start < end <= len(view.text)``

    """
    ranges = [(0, len(view.text))] if cross_node else list(view.text_runs())
    matches: list[Match] = []
    for range_start, range_end in ranges:
        for found in MATH_PATTERN.finditer(view.text, range_start, range_end):
            if found.group("display") is not None:
                delimiter, group = DISPLAY_DELIMITER, "display"
            else:
                delimiter, group = INLINE_DELIMITER, "inline"
            matches.append(
                Match(
                    start=found.start(),
                    end=found.end(),
                    delimiter=delimiter,
                    inner=view.text_between(found.start(group), found.end(group)),
                )
            )
    return matches
