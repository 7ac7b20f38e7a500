"""
typstdown: Typst math for markdown document trees

Finds ``$...$`` and ``$$...$$`` math in the prose of a markdown tree, turns
it into math segments without disturbing surrounding formatting, and
replaces every segment with SVG rendered by Typst. A failing expression
shows an inline error marker; the rest of the page still renders.

Delimiters:
    $x^2$          inline
    $ x^2 $        display (whitespace on both sides)
    $$x^2$$        display

Quick Start:
    >>> from typstdown import TypstMath
    >>> from typstdown.serialization import from_json
    >>> tree = from_json(mdast_json)          # from any unist markdown parser
    >>> html = TypstMath()(tree)              # extract, render, serialize

    >>> # Or step by step
    >>> tm = TypstMath()
    >>> tm.extract(tree)
    >>> summary = await tm.render(tree)
    >>> summary.failed
    0

Installation:
    pip install typstdown              # zero Python deps; needs the typst CLI
"""

import asyncio

from typstdown.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from typstdown.dispatch import RenderJob, RenderSummary, collect_jobs, render_math
from typstdown.engine import CompileResult, Engine, TypstEngine, build_source, get_default_engine
from typstdown.errors import (
    CompileFailure,
    FragmentError,
    MalformedSegment,
    MathRenderError,
    TypstdownError,
)
from typstdown.extract import extract_math, splice_siblings
from typstdown.location import SourceLocation
from typstdown.nodes import (
    Blockquote,
    Break,
    Code,
    Delete,
    Element,
    Emphasis,
    Foreign,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    MathSegment,
    Node,
    Paragraph,
    Parent,
    Raw,
    Root,
    Strong,
    Text,
    ThematicBreak,
)
from typstdown.renderers.html import HtmlRenderer
from typstdown.serialization import from_dict, from_json, to_dict, to_json
from typstdown.visitor import BaseVisitor, walk

__version__ = "0.1.0"


class TypstMath:
    """High-level processor combining extraction, rendering and HTML output.

    Usage:
        >>> tm = TypstMath(config=RenderConfig(em_size=12))
        >>> html = tm(tree)

        >>> # Inject a backend (e.g. a long-lived engine, or a test double)
        >>> tm = TypstMath(engine=TypstEngine("/opt/typst/bin/typst"))

    The engine defaults to the process-wide TypstEngine, created on first
    use.

    """

    __slots__ = ("_config", "_engine")

    def __init__(
        self,
        *,
        config: RenderConfig | None = None,
        engine: Engine | None = None,
    ) -> None:
        """Initialize processor.

        Args:
            config: Render config (the context config at call time if None)
            engine: Compile backend (the shared TypstEngine if None)
        """
        self._config = config
        self._engine = engine

    @property
    def config(self) -> RenderConfig:
        return self._config or get_render_config()

    def __call__(self, tree: Node) -> str:
        """Extract, render and serialize ``tree`` to HTML in one call."""
        self.process(tree)
        return HtmlRenderer().render(tree)

    def extract(self, tree: Node) -> Node:
        """Replace delimited math in ``tree`` with math segments (in place)."""
        return extract_math(tree, self.config)

    async def render(self, tree: Node) -> RenderSummary:
        """Render every math node of an extracted tree (in place)."""
        return await render_math(tree, engine=self._engine, config=self.config)

    def process(self, tree: Node) -> RenderSummary:
        """Extract and render ``tree`` synchronously.

        Must not be called from a running event loop; use ``extract`` and
        ``await render`` there instead.
        """
        self.extract(tree)
        return asyncio.run(self.render(tree))


__all__ = [  # noqa: RUF022 - grouped by category
    # Version
    "__version__",
    # High-level
    "TypstMath",
    # Pipeline stages
    "extract_math",
    "splice_siblings",
    "collect_jobs",
    "render_math",
    "RenderJob",
    "RenderSummary",
    # Engine
    "CompileResult",
    "Engine",
    "TypstEngine",
    "build_source",
    "get_default_engine",
    # Nodes
    "Node",
    "Parent",
    "Root",
    "Paragraph",
    "Heading",
    "Blockquote",
    "List",
    "ListItem",
    "Code",
    "Html",
    "ThematicBreak",
    "Text",
    "Emphasis",
    "Strong",
    "Delete",
    "Foreign",
    "Link",
    "Image",
    "InlineCode",
    "Break",
    "Raw",
    "Element",
    "MathSegment",
    # Errors
    "TypstdownError",
    "MathRenderError",
    "CompileFailure",
    "FragmentError",
    "MalformedSegment",
    # Visitor
    "BaseVisitor",
    "walk",
    # Renderer
    "HtmlRenderer",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
    # Location
    "SourceLocation",
]
