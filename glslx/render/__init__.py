"""Rendering glue consuming the shader transpiler."""

from .context import GLConfig, GLContextError, create_context
from .mesh import Mesh, Quad
from .opengl import GLRenderer, RenderCommand
from .renderer import Renderer

__all__ = [
    "GLConfig",
    "GLContextError",
    "GLRenderer",
    "Mesh",
    "Quad",
    "RenderCommand",
    "Renderer",
    "create_context",
]
