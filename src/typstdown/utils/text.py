"""Text processing utilities for typstdown.

Example:
    >>> from typstdown.utils.text import normalize_quotes
    >>> normalize_quotes("“x”")
    '"x"'
"""

from __future__ import annotations

import html as html_module
import re

_DOUBLE_QUOTES = re.compile("[“”]")
_SINGLE_QUOTES = re.compile("[‘’]")


def escape_html(text: str) -> str:
    """Escape text for use inside a double- or single-quoted attribute value.

    Example:
        >>> escape_html("a<'b'>")
        'a&lt;&#x27;b&#x27;&gt;'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=True)


def normalize_quotes(text: str) -> str:
    """Replace typographic quotes with their ASCII counterparts.

    Markdown toolchains with "smart punctuation" turn straight quotes into
    curly ones, which Typst does not accept as string delimiters.

    Args:
        text: Text to normalize

    Returns:
        Text with “” mapped to ``"`` and ‘’ mapped to ``'``
    """
    text = _DOUBLE_QUOTES.sub('"', text)
    return _SINGLE_QUOTES.sub("'", text)
