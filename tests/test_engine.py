"""Tests for the Typst compile-and-cache adapter."""

import asyncio

import pytest

from typstdown.engine import (
    PAGE_SETUP,
    CompileResult,
    TypstEngine,
    build_source,
    get_default_engine,
)
from typstdown.errors import CompileFailure, MathRenderError

SVG = '<svg class="typst-doc" viewBox="0 0 11 22" data-width="11" data-height="22"></svg>'


class RecordingEngine(TypstEngine):
    """TypstEngine with the subprocess replaced by an in-process stub."""

    def __init__(self, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0

    async def _invoke(self, source: str) -> str:
        self.calls.append(source)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0.005)
            if "bad" in source:
                raise CompileFailure(["error: unknown variable: bad"])
            return SVG
        finally:
            self.active -= 1


class TestBuildSource:
    """Document template around math content."""

    def test_inline(self) -> None:
        assert build_source("x^2", False) == f"{PAGE_SETUP}\n$x^2$"

    def test_display(self) -> None:
        assert build_source("x^2", True) == f"{PAGE_SETUP}\n#box(inset: (y: 0.25em))[$ x^2 $]"

    def test_display_inset(self) -> None:
        assert "inset: (y: 1em)" in build_source("x", True, inset="1em")

    def test_content_with_dollar_is_passed_through(self) -> None:
        content = "$ a $ + #text[b]"
        assert build_source(content, True) == f"{PAGE_SETUP}\n{content}"
        assert build_source(content, False) == f"{PAGE_SETUP}\n{content}"

    def test_page_is_auto_sized(self) -> None:
        assert PAGE_SETUP == "#set page(width: auto, height: auto, margin: 0pt)"


class TestCompile:
    """Compiling through the cache."""

    def test_result_carries_svg_size(self) -> None:
        engine = RecordingEngine()
        result = asyncio.run(engine.compile("a"))
        assert result == CompileResult(svg=SVG, height=22.0, width=11.0)

    def test_repeat_source_is_cached(self) -> None:
        engine = RecordingEngine()

        async def run() -> None:
            await engine.compile("a")
            await engine.compile("a")

        asyncio.run(run())
        assert engine.calls == ["a"]
        assert engine.cache_size == 1

    def test_cache_is_trimmed_after_each_compile(self) -> None:
        engine = RecordingEngine(retention=2)

        async def run() -> None:
            for source in ("a", "b", "c", "d", "e"):
                await engine.compile(source)
                assert engine.cache_size <= 2

        asyncio.run(run())
        assert engine.cache_size == 2

    def test_evicted_source_is_recompiled(self) -> None:
        engine = RecordingEngine(retention=2)

        async def run() -> None:
            for source in ("a", "b", "c", "a"):
                await engine.compile(source)

        asyncio.run(run())
        assert engine.calls == ["a", "b", "c", "a"]

    def test_recent_use_keeps_entry(self) -> None:
        engine = RecordingEngine(retention=2)

        async def run() -> None:
            for source in ("a", "b", "a", "c", "a"):
                await engine.compile(source)

        asyncio.run(run())
        assert engine.calls == ["a", "b", "c"]

    def test_failure_is_not_cached(self) -> None:
        engine = RecordingEngine()
        with pytest.raises(CompileFailure) as exc_info:
            asyncio.run(engine.compile("bad"))
        assert exc_info.value.diagnostics == ("error: unknown variable: bad",)
        assert engine.cache_size == 0

    def test_evict_cache(self) -> None:
        engine = RecordingEngine()

        async def run() -> None:
            for source in ("a", "b", "c"):
                await engine.compile(source)

        asyncio.run(run())
        engine.evict_cache(1)
        assert engine.cache_size == 1
        engine.evict_cache(0)
        assert engine.cache_size == 0


class TestSerialization:
    """Compiles on one engine never overlap."""

    def test_concurrent_compiles_run_one_at_a_time(self) -> None:
        engine = RecordingEngine()

        async def run() -> list[CompileResult]:
            return await asyncio.gather(*(engine.compile(f"s{i}") for i in range(6)))

        results = asyncio.run(run())
        assert len(results) == 6
        assert len(engine.calls) == 6
        assert engine.max_active == 1

    def test_engine_survives_several_event_loops(self) -> None:
        engine = RecordingEngine()

        async def run(prefix: str) -> None:
            await asyncio.gather(engine.compile(f"{prefix}1"), engine.compile(f"{prefix}2"))

        asyncio.run(run("a"))
        asyncio.run(run("b"))
        assert len(engine.calls) == 4
        assert engine.max_active == 1


class TestSubprocess:
    """Failures of the typst executable itself."""

    def test_missing_binary_is_a_compile_failure(self) -> None:
        engine = TypstEngine("typstdown-no-such-typst-binary")
        with pytest.raises(CompileFailure) as exc_info:
            asyncio.run(engine.compile(build_source("x", False)))
        assert "cannot run" in exc_info.value.diagnostics[0]
        assert isinstance(exc_info.value, MathRenderError)


class TestDefaultEngine:
    """Process-wide shared engine."""

    def test_singleton(self) -> None:
        assert get_default_engine() is get_default_engine()
        assert isinstance(get_default_engine(), TypstEngine)
