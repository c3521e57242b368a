"""
Cross-target shader transpilation.

This module provides the top-level interface for translating GLSL shaders to
HLSL, Vulkan SPIR-V and Metal, and for extracting shader metadata.
"""

from glslx.transpiler.core import ShaderTranspiler
from glslx.transpiler.errors import ErrorKind, TranspilerError
from glslx.transpiler.extractor import extract_attributes, extract_uniforms
from glslx.transpiler.models import (
    ShaderStage,
    ShaderTarget,
    TranspilationResult,
    UniformBinding,
    VertexAttribute,
)
from glslx.transpiler.rules import apply_rules
from glslx.transpiler.toolchain import ToolchainConfig


def transpile(
    source: str,
    target: ShaderTarget = ShaderTarget.GLSL,
    stage: ShaderStage = ShaderStage.FRAGMENT,
    toolchain: ToolchainConfig | None = None,
) -> TranspilationResult:
    """Transpile a single shader stage.

    Args:
        source: GLSL source text
        target: Target dialect (default: GLSL pass-through)
        stage: Shader stage (default: fragment)
        toolchain: External tool configuration, read from the environment if None

    Returns:
        Transpilation result

    Examples:
        # Rewrite a vertex shader to HLSL and validate it with dxc
        result = transpile(source, ShaderTarget.HLSL, ShaderStage.VERTEX)
        if result.success:
            print(result.output)

        # Compile to SPIR-V words
        result = transpile(source, ShaderTarget.VULKAN, ShaderStage.FRAGMENT)
        words = result.binary
    """
    return ShaderTranspiler(toolchain).transpile(source, target, stage)


def transpile_program(
    vertex_source: str,
    fragment_source: str,
    target: ShaderTarget = ShaderTarget.GLSL,
    toolchain: ToolchainConfig | None = None,
) -> TranspilationResult:
    """Transpile a vertex and fragment shader pair into one artifact.

    Args:
        vertex_source: Vertex shader source
        fragment_source: Fragment shader source
        target: Target dialect (default: GLSL pass-through)
        toolchain: External tool configuration, read from the environment if None

    Returns:
        Transpilation result with both stages separated by banner comments
    """
    return ShaderTranspiler(toolchain).transpile_program(
        vertex_source, fragment_source, target
    )


__all__ = [
    "ErrorKind",
    "ShaderStage",
    "ShaderTarget",
    "ShaderTranspiler",
    "ToolchainConfig",
    "TranspilationResult",
    "TranspilerError",
    "UniformBinding",
    "VertexAttribute",
    "apply_rules",
    "extract_attributes",
    "extract_uniforms",
    "transpile",
    "transpile_program",
]
