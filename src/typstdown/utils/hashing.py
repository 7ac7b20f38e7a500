"""Content hashing for the engine's compile cache.

Example:
    >>> from typstdown.utils.hashing import hash_str
    >>> hash_str("$x$", truncate=12)
    '22bf003d6cac'
"""

import hashlib


def hash_str(content: str, truncate: int | None = None) -> str:
    """SHA-256 hex digest of ``content``.

    Two Typst sources share a cache entry exactly when their digests match.
    ``truncate`` shortens the digest, for log output.
    """
    digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
    return digest if truncate is None else digest[:truncate]
