"""Write compiled math back into the tree.

On success the job's node is retagged in place: ``div.typst-display`` for
display math, ``span.typst-inline`` for inline math, with the SVG as its
only child. The SVG's size is converted to ``em`` against the configured
base font size (11 units per em by default). A display node that is the
only content of a paragraph takes the paragraph's place, so no ``<div>``
ends up inside a ``<p>``.

On failure the node's children become a single visible error marker; its
siblings are never touched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from typstdown.fragment import parse_svg
from typstdown.nodes import Text

if TYPE_CHECKING:
    from typstdown.dispatch import RenderJob
    from typstdown.engine import CompileResult
    from typstdown.errors import MathRenderError

DISPLAY_CLASS = "typst-display"
INLINE_CLASS = "typst-inline"
DISPLAY_STYLE = "display: block; margin: 0 auto;"
INLINE_STYLE = "display: inline-block; vertical-align: middle;"


def to_em(value: float, em_size: float) -> str:
    """Format a length in device units as ``em``.

    Example:
        >>> to_em(22, 11)
        '2em'
    """
    return f"{value / em_size:.4g}em"


def apply_result(job: RenderJob, result: CompileResult, *, em_size: float = 11.0) -> None:
    """Replace the job's node with the rendered SVG.

    Raises:
        FragmentError: If the compiled output has no ``<svg>`` root
    """
    svg = parse_svg(result.svg)
    svg.properties["height"] = to_em(result.height, em_size)
    svg.properties["width"] = to_em(result.width, em_size)
    svg.properties["style"] = DISPLAY_STYLE if job.display else INLINE_STYLE

    target = job.target
    target.tag_name = "div" if job.display else "span"
    target.properties = {"class": [DISPLAY_CLASS if job.display else INLINE_CLASS]}
    target.children = [svg]

    if job.display:
        _unwrap(job)


def apply_failure(job: RenderJob, error: MathRenderError) -> None:
    """Show ``error`` in place of the job's node."""
    job.target.children = [Text(value=f"[Typst Error: {error.message}]", location=job.target.location)]


def _unwrap(job: RenderJob) -> None:
    wrapper, owner = job.wrapper, job.owner
    if wrapper is None or owner is None:
        return
    if len(wrapper.children) != 1 or wrapper.children[0] is not job.target:
        return
    for index, child in enumerate(owner.children):
        if child is wrapper:
            owner.children[index] = job.target
            return
