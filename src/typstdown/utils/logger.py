"""Minimal logging utilities for typstdown.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from typstdown.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Rendering math")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "typstdown." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'typstdown.mymodule'
    """
    if not (name == "typstdown" or name.startswith("typstdown.")):
        name = f"typstdown.{name}"
    return logging.getLogger(name)
