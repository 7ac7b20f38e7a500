"""Inline/display classification for delimited math.

Rules:
- ``$$...$$`` is always display math.
- ``$...$`` is display math when the untrimmed interior starts *and* ends
  with whitespace (``$ x^2 $``); anything else is inline (``$x^2$``,
  ``$ x^2$``). The padded body between the two whitespace runs may not
  contain a line break, so an interior like ``" a<newline>b "`` is inline.

The stored content is always trimmed, and curly braces are stored as
``&#123;``/``&#125;`` because the serializer downstream treats raw braces
as structural. ``unescape_braces`` restores them before compiling.
"""

from __future__ import annotations

import re

DISPLAY_DELIMITER = "$$"
INLINE_DELIMITER = "$"

_PADDED = re.compile(r"\s+.*\s+")


def is_display(delimiter: str, inner: str) -> bool:
    """Decide display mode from the delimiter and the untrimmed interior."""
    if delimiter == DISPLAY_DELIMITER:
        return True
    return _PADDED.fullmatch(inner) is not None


def escape_braces(content: str) -> str:
    return content.replace("{", "&#123;").replace("}", "&#125;")


def unescape_braces(content: str) -> str:
    return content.replace("&#123;", "{").replace("&#125;", "}")


def classify(delimiter: str, inner: str) -> tuple[str, bool]:
    """Return ``(content, display)`` for one delimited run.

    Args:
        delimiter: ``"$"`` or ``"$$"``
        inner: Text between the delimiters, untrimmed

    Returns:
        Trimmed, brace-escaped content and the display flag

    Example:
        >>> classify("$", " sum_(i=1)^n i ")
        ('sum_(i=1)^n i', True)
        >>> classify("$", "{a, b}")
        ('&#123;a, b&#125;', False)

    """
    return escape_braces(inner.strip()), is_display(delimiter, inner)
