"""Compile-and-cache adapter for the Typst engine.

Wraps math content in a minimal standalone Typst document, compiles it to
SVG with the ``typst`` CLI and keeps a bounded cache of compiled sources.

Template:
    #set page(width: auto, height: auto, margin: 0pt)
    $x^2$                                  (inline)
    #box(inset: (y: 0.25em))[$ x^2 $]      (display)

Content that already contains ``$`` is treated as a complete Typst snippet
and only gets the page directive.

Thread Safety:
    One engine instance is shared by every job of a render pass. Compiles
    on an instance are serialized by an asyncio lock, so the cache is never
    touched by two compiles at once even though jobs are dispatched
    concurrently. Use an instance from one thread only.

Limitations:
    There is no timeout: a hung ``typst`` process stalls the render pass.

"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from typing import Protocol

from typstdown.errors import CompileFailure
from typstdown.fragment import parse_svg, svg_size
from typstdown.utils.hashing import hash_str
from typstdown.utils.logger import get_logger

logger = get_logger(__name__)

PAGE_SETUP = "#set page(width: auto, height: auto, margin: 0pt)"


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Rendered SVG and its intrinsic size in points."""

    svg: str
    height: float
    width: float


class Engine(Protocol):
    """Protocol for math compile backends."""

    async def compile(self, source: str) -> CompileResult:
        """Compile a standalone Typst document.

        Raises:
            CompileFailure: If the engine produced no result
        """
        ...


def build_source(content: str, display: bool, *, inset: str = "0.25em") -> str:
    """Wrap math content in a standalone, auto-sized Typst document.

    Args:
        content: Math content with braces already unescaped
        display: Box the equation as display math
        inset: Vertical inset of the display box

    Returns:
        Typst source ready to compile

    Example:
        >>> build_source("x^2", False)
        '#set page(width: auto, height: auto, margin: 0pt)\\n$x^2$'

    """
    if "$" in content:
        return f"{PAGE_SETUP}\n{content}"
    if display:
        return f"{PAGE_SETUP}\n#box(inset: (y: {inset}))[$ {content} $]"
    return f"{PAGE_SETUP}\n${content}$"


class TypstEngine:
    """Typst CLI backend with a bounded cache of compiled documents.

    After every successful compile the cache is trimmed to the most recent
    ``retention`` entries, trading recompilation for bounded memory over a
    long batch of documents.

    Usage:
        >>> engine = TypstEngine()
        >>> result = await engine.compile(build_source("x^2", False))
        >>> result.svg.startswith("<svg")
        True

    """

    __slots__ = ("_binary", "_retention", "_cache", "_lock", "_lock_loop")

    def __init__(self, binary: str = "typst", *, retention: int = 10) -> None:
        """Initialize engine.

        Args:
            binary: Name or path of the ``typst`` executable
            retention: Compiled documents kept after each compile
        """
        self._binary = binary
        self._retention = retention
        self._cache: OrderedDict[str, str] = OrderedDict()
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    async def compile(self, source: str) -> CompileResult:
        """Compile ``source`` to SVG, reusing a cached result if present.

        Raises:
            CompileFailure: If typst fails, prints nothing or cannot be run
        """
        async with self._loop_lock():
            key = hash_str(source)
            svg = self._cache.get(key)
            if svg is None:
                svg = await self._invoke(source)
                self._cache[key] = svg
            else:
                self._cache.move_to_end(key)
                logger.debug("Typst cache hit %s", key[:12])
            self.evict_cache(self._retention)
        height, width = svg_size(parse_svg(svg))
        return CompileResult(svg=svg, height=height, width=width)

    def evict_cache(self, keep: int) -> None:
        """Drop all but the ``keep`` most recently used compiled documents."""
        evicted = 0
        while len(self._cache) > max(keep, 0):
            self._cache.popitem(last=False)
            evicted += 1
        if evicted:
            logger.debug("Evicted %d cached Typst document(s)", evicted)

    def _loop_lock(self) -> asyncio.Lock:
        # asyncio.Lock binds to one loop; each asyncio.run() gets a fresh one
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _invoke(self, source: str) -> str:
        logger.debug("Compiling Typst document (%d chars)", len(source))
        try:
            process = await asyncio.create_subprocess_exec(
                self._binary,
                "compile",
                "-",
                "-",
                "--format",
                "svg",
                "--diagnostic-format",
                "short",
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CompileFailure([f"cannot run {self._binary!r}: {e}"]) from e

        stdout, stderr = await process.communicate(source.encode("utf-8"))
        if process.returncode != 0 or not stdout.strip():
            raise CompileFailure(stderr.decode("utf-8", errors="replace").splitlines())
        return stdout.decode("utf-8")


# Process-wide engine, created on first use and never torn down
_default_engine: TypstEngine | None = None


def get_default_engine() -> TypstEngine:
    """Return the shared TypstEngine, creating it on first use.

    The first call reads ``typst_binary`` and ``cache_retention`` from the
    active render config; later config changes do not affect it.
    """
    global _default_engine
    if _default_engine is None:
        from typstdown.config import get_render_config

        config = get_render_config()
        _default_engine = TypstEngine(config.typst_binary, retention=config.cache_retention)
    return _default_engine


__all__ = [
    "PAGE_SETUP",
    "CompileResult",
    "Engine",
    "TypstEngine",
    "build_source",
    "get_default_engine",
]
