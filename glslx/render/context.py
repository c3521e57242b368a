"""OpenGL context management."""

from dataclasses import dataclass
from typing import Any

import glfw
import moderngl


class GLContextError(Exception):
    """OpenGL context error."""


@dataclass
class GLConfig:
    """OpenGL context configuration."""

    major_version: int = 3
    minor_version: int = 3
    vsync: bool = True

    def __post_init__(self) -> None:
        """Validate OpenGL version."""
        if (
            self.major_version < 3
            or self.major_version > 4
            or (self.major_version == 3 and self.minor_version < 3)
            or (self.major_version == 4 and self.minor_version > 6)
        ):
            raise GLContextError(
                f"Unsupported OpenGL version: {self.major_version}.{self.minor_version}"
            )

    @property
    def require(self) -> int:
        """Version number in the form ModernGL expects, e.g. 330."""
        return self.major_version * 100 + self.minor_version * 10


def setup_context(ctx: moderngl.Context) -> None:
    """Setup common context settings."""
    ctx.enable(moderngl.DEPTH_TEST | moderngl.BLEND)
    ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA


def create_context(
    window: Any | None = None, config: GLConfig | None = None
) -> moderngl.Context:
    """Create a ModernGL context.

    Args:
        window: GLFW window whose context to use, None for an offscreen context
        config: OpenGL context configuration

    Returns:
        Configured ModernGL context

    Raises:
        GLContextError: If the context cannot be created
    """
    cfg = config or GLConfig()
    try:
        if window is None:
            ctx = moderngl.create_standalone_context(require=cfg.require)
        else:
            glfw.make_context_current(window)
            if cfg.vsync:
                glfw.swap_interval(1)
            ctx = moderngl.create_context(require=cfg.require)
    except Exception as e:
        raise GLContextError(f"Failed to create OpenGL context: {e}") from e

    setup_context(ctx)
    return ctx


def swap_buffers(window: Any) -> None:
    """Swap window buffers."""
    glfw.swap_buffers(window)


def poll_events() -> None:
    """Process pending window events."""
    glfw.poll_events()


__all__ = [
    "GLConfig",
    "GLContextError",
    "create_context",
    "poll_events",
    "setup_context",
    "swap_buffers",
]
