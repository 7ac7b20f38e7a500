"""StringBuilder for O(n) string accumulation.

The HTML renderer emits many small fragments (one per tag, plus every
inline SVG). They are collected in a list and joined once.

Thread Safety:
StringBuilder instances are local to each render() call.

"""

from __future__ import annotations


class StringBuilder:
    """Append-only fragment list.

    Usage:
        >>> sb = StringBuilder()
        >>> sb.append("<p>").append("Hi").append("</p>").build()
        '<p>Hi</p>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Add ``s`` (empty strings are dropped) and return self for chaining."""
        if s:
            self._parts.append(s)
        return self

    def build(self) -> str:
        return "".join(self._parts)
