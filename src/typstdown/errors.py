"""Exception classes for typstdown.

Provides standardized exceptions for error handling throughout typstdown.

An unterminated ``$`` run is not an error: the matcher simply finds no match
and the text is left as literal prose.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from typstdown.location import SourceLocation


class TypstdownError(Exception):
    """Base exception for all typstdown errors.

    Subclass this for specific error categories.
    """

    pass


class MathRenderError(TypstdownError):
    """A single math segment could not be rendered.

    Caught at the job boundary by the dispatcher and turned into a visible
    error marker in place of the expression; never aborts sibling jobs.
    """

    def __init__(self, message: str, location: SourceLocation | None = None) -> None:
        """Initialize render error with optional location.

        Args:
            message: Error description
            location: Source location of the failing segment (optional)
        """
        self.message = message
        self.location = location
        prefix = f"{location} " if location is not None else ""
        super().__init__(f"{prefix}{message}")


class CompileFailure(MathRenderError):
    """The typesetting engine returned no result.

    Carries the engine's diagnostics unchanged so callers can inspect them.
    """

    def __init__(
        self,
        diagnostics: Sequence[str],
        location: SourceLocation | None = None,
    ) -> None:
        """Initialize compile failure.

        Args:
            diagnostics: Diagnostic lines reported by the engine
            location: Source location of the failing segment (optional)
        """
        self.diagnostics = tuple(diagnostics)
        detail = "; ".join(d.strip() for d in self.diagnostics if d.strip())
        super().__init__(
            f"Typst compilation failed: {detail or 'no output'}",
            location,
        )


class FragmentError(MathRenderError):
    """Engine output could not be turned into an image fragment."""

    pass


class MalformedSegment(TypstdownError):
    """Math segment with empty or whitespace-only content.

    Raised when building a render job; the dispatcher skips such segments
    instead of sending them to the engine.
    """

    pass
