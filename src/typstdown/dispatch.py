"""Render dispatch: fan out one compile job per math node.

A single pre-order walk collects:

- every ``MathSegment`` produced by extraction;
- every upstream ``code`` element classed ``typst-math-inline`` or
  ``typst-math-display``;
- every fenced code block in a math language (``typst`` by default) whose
  meta does not say ``eval=false``; it is swapped for a display segment.

All jobs start at once inside one ``asyncio.TaskGroup`` and the pass ends
only when every job has settled. Each job catches its own render error and
turns it into an error marker, so one bad expression never cancels the
others. Jobs finish in no particular order.

Example:
    >>> summary = asyncio.run(render_math(tree, engine=TypstEngine()))
    >>> summary.failed
    0

"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from typstdown.config import RenderConfig, get_render_config
from typstdown.engine import Engine, build_source, get_default_engine
from typstdown.errors import MalformedSegment, MathRenderError
from typstdown.extract.classifier import escape_braces, unescape_braces
from typstdown.location import SourceLocation
from typstdown.nodes import Code, Element, MathSegment, Node, Paragraph, Parent, text_content
from typstdown.substitute import apply_failure, apply_result
from typstdown.utils.logger import get_logger
from typstdown.utils.text import normalize_quotes
from typstdown.visitor import walk

logger = get_logger(__name__)

TAGGED_INLINE_CLASS = "typst-math-inline"
TAGGED_DISPLAY_CLASS = "typst-math-display"


@dataclass(slots=True)
class RenderJob:
    """One math node awaiting compilation.

    Attributes:
        target: Node retagged in place with the result
        content: Engine-ready content (braces restored)
        display: Display or inline mode
        wrapper: Paragraph whose only child is ``target``, if any
        owner: Parent of ``wrapper``

    """

    target: Element
    content: str
    display: bool
    wrapper: Parent | None = None
    owner: Parent | None = None

    @property
    def location(self) -> SourceLocation | None:
        return self.target.location

    @classmethod
    def for_node(
        cls,
        node: Element,
        display: bool,
        parent: Parent | None = None,
        owner: Parent | None = None,
        *,
        normalize: bool = True,
    ) -> RenderJob:
        """Build a job for a math node.

        Raises:
            MalformedSegment: If the node's content is empty after trimming
        """
        raw = node.content if isinstance(node, MathSegment) else text_content(node)
        content = unescape_braces(raw).strip()
        if not content:
            raise MalformedSegment(f"empty math segment at {node.location or 'unknown location'}")
        if normalize:
            content = normalize_quotes(content)

        job = cls(target=node, content=content, display=display)
        if isinstance(parent, Paragraph) and len(parent.children) == 1:
            job.wrapper, job.owner = parent, owner
        return job


@dataclass(frozen=True, slots=True)
class RenderSummary:
    """Outcome counts of one render pass."""

    rendered: int = 0
    failed: int = 0
    skipped: int = 0


def parse_meta(meta: str | None) -> dict[str, str]:
    """Parse ``key=value`` pairs from a fenced code info string.

    Example:
        >>> parse_meta("eval=false title=demo")
        {'eval': 'false', 'title': 'demo'}
    """
    pairs: dict[str, str] = {}
    for item in (meta or "").split():
        key, sep, value = item.partition("=")
        if sep:
            pairs[key] = value
    return pairs


def _evaluates(code: Code, config: RenderConfig) -> bool:
    if code.lang not in config.math_languages:
        return False
    return parse_meta(code.meta).get("eval", "true").lower() != "false"


def collect_jobs(tree: Node, config: RenderConfig | None = None) -> tuple[list[RenderJob], int]:
    """Collect render jobs in one pre-order walk.

    Fenced math code blocks are replaced in their parent by display
    segments as they are found.

    Returns:
        The jobs and the number of empty segments skipped

    """
    config = config or get_render_config()
    jobs: list[RenderJob] = []
    skipped = 0
    owners: dict[int, Parent | None] = {}

    for node, parent, index in walk(tree):
        if isinstance(node, Parent):
            owners[id(node)] = parent

        if isinstance(node, Code) and parent is not None and index is not None:
            if not _evaluates(node, config):
                continue
            node = MathSegment(
                content=escape_braces(node.value.strip()),
                display=True,
                raw=node.value,
                location=node.location,
            )
            parent.children[index] = node

        match node:
            case MathSegment(children=[]):
                display = node.display
            case Element(tag_name="code") if TAGGED_DISPLAY_CLASS in node.classes:
                display = True
            case Element(tag_name="code") if TAGGED_INLINE_CLASS in node.classes:
                display = False
            case _:
                continue

        owner = owners.get(id(parent)) if parent is not None else None
        try:
            jobs.append(
                RenderJob.for_node(
                    node, display, parent, owner, normalize=config.normalize_quotes
                )
            )
        except MalformedSegment as e:
            logger.debug("Skipping %s", e)
            skipped += 1

    return jobs, skipped


async def _run_job(job: RenderJob, engine: Engine, config: RenderConfig) -> bool:
    source = build_source(job.content, job.display, inset=config.display_inset)
    try:
        result = await engine.compile(source)
        apply_result(job, result, em_size=config.em_size)
    except MathRenderError as e:
        logger.error("Typst rendering error at %s: %s", job.location or "unknown location", e)
        apply_failure(job, e)
        return False
    except Exception as e:
        # One job never cancels its siblings
        logger.exception(
            "Unexpected error rendering math at %s", job.location or "unknown location"
        )
        apply_failure(job, MathRenderError(f"{type(e).__name__}: {e}", job.location))
        return False
    return True


async def render_math(
    tree: Node,
    *,
    engine: Engine | None = None,
    config: RenderConfig | None = None,
) -> RenderSummary:
    """Render every math node in ``tree`` in place.

    Args:
        tree: Document tree, usually after ``extract_math``
        engine: Compile backend (the shared TypstEngine if None)
        config: Render config (uses the context config if None)

    Returns:
        Counts of rendered, failed and skipped segments

    """
    config = config or get_render_config()
    engine = engine or get_default_engine()
    jobs, skipped = collect_jobs(tree, config)
    if not jobs:
        return RenderSummary(skipped=skipped)

    logger.debug("Dispatching %d math render job(s)", len(jobs))
    async with asyncio.TaskGroup() as group:
        tasks = [group.create_task(_run_job(job, engine, config)) for job in jobs]

    rendered = sum(task.result() for task in tasks)
    return RenderSummary(rendered=rendered, failed=len(jobs) - rendered, skipped=skipped)


__all__ = [
    "RenderJob",
    "RenderSummary",
    "collect_jobs",
    "parse_meta",
    "render_math",
]
