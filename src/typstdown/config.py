"""ContextVar-based render configuration for typstdown.

Provides context-local configuration using Python's ContextVars (PEP 567).
Config is set once per TypstMath instance and read by the extractor, the
dispatcher and the substitution writer in the same context.

Thread Safety:
    ContextVars are context-local by design. Each thread and each asyncio
    task started from a context sees its own value, so no locks are needed.

Usage:
    from typstdown.config import RenderConfig, render_config_context

    with render_config_context(RenderConfig(cross_node_math=True)):
        extract_math(tree)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        em_size: Device units per em used to normalize image dimensions
        cache_retention: Compiled sources the engine keeps after each compile
        cross_node_math: Let a ``$...$`` run span non-text siblings (the
            spanned nodes are dropped); off by default
        math_languages: Fenced code languages rendered as display math
        normalize_quotes: Map typographic quotes to ASCII before compiling
        typst_binary: Name or path of the ``typst`` executable
        display_inset: Vertical inset around display math

    """

    em_size: float = 11.0
    cache_retention: int = 10
    cross_node_math: bool = False
    math_languages: tuple[str, ...] = ("typst",)
    normalize_quotes: bool = True
    typst_binary: str = "typst"
    display_inset: str = "0.25em"

    @classmethod
    def from_dict(cls, config_dict: dict) -> "RenderConfig":
        """Create RenderConfig from dictionary.

        Useful when settings come from a site config file. Only keys that
        are RenderConfig fields are used; unknown keys are silently ignored.
        Lists are converted to tuples so the config stays hashable.

        Args:
            config_dict: Dictionary with config values.

        Returns:
            New RenderConfig instance with values from dict.

        Example:
            >>> config = RenderConfig.from_dict({"em_size": 12, "theme": "dark"})
            >>> config.em_size
            12

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {
            k: tuple(v) if isinstance(v, list) else v
            for k, v in config_dict.items()
            if k in valid_fields
        }
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get current render configuration."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for current context.

    Args:
        config: RenderConfig instance to use for this context.

    """
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Args:
        config: RenderConfig to use within the context.

    Example:
        >>> with render_config_context(RenderConfig(em_size=16)):
        ...     get_render_config().em_size
        16

    """
    previous = _render_config.get()
    _render_config.set(config)
    try:
        yield
    finally:
        _render_config.set(previous)


__all__ = [
    "RenderConfig",
    "get_render_config",
    "render_config_context",
    "reset_render_config",
    "set_render_config",
]
