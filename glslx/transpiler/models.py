"""
Data models and structures for the shader transpiler.

This module contains the enums and dataclasses passed between the validator,
extractor, rule pipeline and backends.
"""

from dataclasses import dataclass, field
from enum import Enum, auto

from glslx.transpiler.errors import ErrorKind


class ShaderTarget(Enum):
    """Supported target shading dialects."""

    GLSL = auto()
    HLSL = auto()
    VULKAN = auto()
    METAL = auto()


class ShaderStage(Enum):
    """Supported shader stages."""

    VERTEX = auto()
    FRAGMENT = auto()


@dataclass
class UniformBinding:
    """Uniform declaration found in shader source.

    Attributes:
        name: Uniform name
        type: Source dialect type token (e.g. ``vec4``)
        binding: Zero-based index in declaration order
        set: Descriptor set, always 0 for extracted uniforms
    """

    name: str
    type: str
    binding: int
    set: int = 0


@dataclass
class VertexAttribute:
    """Vertex attribute declared with an explicit layout location.

    Attributes:
        name: Attribute name
        type: Source dialect type token
        location: Location parsed from the layout qualifier
    """

    name: str
    type: str
    location: int


@dataclass
class TranspilationResult:
    """Outcome of a transpile or compose call.

    Callers must check ``success`` before using ``output`` or ``binary``.

    Attributes:
        success: Whether the call produced usable output
        output: Translated source text
        binary: SPIR-V words, only populated for the Vulkan target
        error_message: Failure reason, or an advisory attached to a success
        error_kind: Category of the failure, also set for soft tool failures
    """

    success: bool
    output: str = ""
    binary: list[int] = field(default_factory=list)
    error_message: str = ""
    error_kind: ErrorKind | None = None

    @classmethod
    def failure(
        cls,
        message: str,
        output: str = "",
        kind: ErrorKind = ErrorKind.EXTERNAL_TOOL_FAILURE,
    ) -> "TranspilationResult":
        """Create a failed result carrying ``message``."""
        return cls(success=False, output=output, error_message=message, error_kind=kind)
