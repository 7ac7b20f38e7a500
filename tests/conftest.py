"""Shared fixtures for typstdown tests."""

import asyncio

import pytest

from typstdown.config import reset_render_config
from typstdown.engine import CompileResult
from typstdown.errors import CompileFailure


class FakeEngine:
    """Engine double that records sources and how many compiles overlap.

    Sources containing any of ``fail_on`` fail with a CompileFailure.
    """

    def __init__(
        self,
        *,
        fail_on: tuple[str, ...] = (),
        delay: float = 0.0,
        height: float = 22.0,
        width: float = 33.0,
    ) -> None:
        self.fail_on = fail_on
        self.delay = delay
        self.height = height
        self.width = width
        self.sources: list[str] = []
        self.active = 0
        self.max_active = 0

    async def compile(self, source: str) -> CompileResult:
        self.sources.append(source)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            if any(token in source for token in self.fail_on):
                raise CompileFailure(["error: unknown variable: oops"])
            svg = (
                f'<svg class="typst-doc" viewBox="0 0 {self.width} {self.height}" '
                f'data-width="{self.width}" data-height="{self.height}">'
                '<path d="M 0 0 L 1 1"/></svg>'
            )
            return CompileResult(svg=svg, height=self.height, width=self.width)
        finally:
            self.active -= 1


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_engine() -> type[FakeEngine]:
    return FakeEngine


@pytest.fixture(autouse=True)
def _clean_render_config():
    """Each test starts from the default render config."""
    reset_render_config()
    yield
    reset_render_config()
