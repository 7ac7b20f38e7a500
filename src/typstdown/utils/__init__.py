"""Utility modules for typstdown.

Provides:
- text: escape_html, normalize_quotes for text processing
- hashing: hash_str for engine cache keys
- logger: get_logger for logging
"""

from typstdown.utils.hashing import hash_str
from typstdown.utils.logger import get_logger
from typstdown.utils.text import escape_html, normalize_quotes

__all__ = [
    "escape_html",
    "get_logger",
    "hash_str",
    "normalize_quotes",
]
