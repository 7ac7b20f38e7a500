"""Source location tracking for error messages and debugging.

Provides SourceLocation dataclass for tracking positions in the markdown
source that an upstream parser attached to a node. Used by typstdown to
point render failures back at the math expression that caused them.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    All positions are 1-indexed (lineno and col_offset start at 1).

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column offset (1-indexed)
        offset: Absolute start offset in source buffer
        end_offset: Absolute end offset in source buffer
        end_lineno: Ending line number (optional)
        end_col_offset: Ending column offset (optional)
        source_file: Source file path (optional, for multi-file builds)

    Examples:
        >>> loc = SourceLocation(1, 1, source_file="docs/guide.md")
        >>> str(loc)
        'docs/guide.md:1:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "file.md:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def from_position(cls, position: dict, source_file: str | None = None) -> SourceLocation:
        """Build a location from a unist ``position`` mapping.

        unist positions are ``{"start": {"line", "column", "offset"},
        "end": {...}}``; missing members fall back to zero.
        """
        start = position.get("start") or {}
        end = position.get("end") or {}
        return cls(
            lineno=start.get("line", 0),
            col_offset=start.get("column", 0),
            offset=start.get("offset", 0) or 0,
            end_offset=end.get("offset", 0) or 0,
            end_lineno=end.get("line"),
            end_col_offset=end.get("column"),
            source_file=source_file,
        )
