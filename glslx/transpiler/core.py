"""
Shader transpiler service.

Validates requests, dispatches them to the target backend and composes vertex
and fragment results into a single program.
"""

from loguru import logger

from glslx.transpiler.backends import create_backend
from glslx.transpiler.constants import FRAGMENT_BANNER, VERSION_STRINGS, VERTEX_BANNER
from glslx.transpiler.errors import TranspilerError
from glslx.transpiler.extractor import extract_attributes, extract_uniforms
from glslx.transpiler.models import (
    ShaderStage,
    ShaderTarget,
    TranspilationResult,
    UniformBinding,
    VertexAttribute,
)
from glslx.transpiler.toolchain import ToolchainConfig
from glslx.transpiler.validator import validate


class ShaderTranspiler:
    """Free-standing transpilation service.

    Holds no state between calls apart from an optional toolchain
    configuration; without one, the environment is read on every external
    tool step.
    """

    def __init__(self, toolchain: ToolchainConfig | None = None):
        self.toolchain = toolchain

    def transpile(
        self, source: str, target: ShaderTarget, stage: ShaderStage
    ) -> TranspilationResult:
        """Transpile one shader stage to a target dialect.

        Args:
            source: GLSL source text
            target: Target dialect
            stage: Shader stage

        Returns:
            Transpilation result, check ``success`` before using the output
        """
        logger.debug(f"Transpiling {stage.name} shader to {target.name}")

        try:
            validate(source)
            backend = create_backend(target, self.toolchain)
            result = backend.transpile(source, stage)
        except TranspilerError as e:
            logger.error(f"Shader transpilation failed: {e.message}")
            return TranspilationResult.failure(e.message, kind=e.kind)
        except Exception as e:
            logger.exception("Unexpected error during shader transpilation")
            return TranspilationResult.failure(f"Transpilation exception: {e}")

        if result.success:
            logger.info("Shader transpilation successful")
        else:
            logger.error(f"Shader transpilation failed: {result.error_message}")
        return result

    def transpile_program(
        self, vertex_source: str, fragment_source: str, target: ShaderTarget
    ) -> TranspilationResult:
        """Transpile a vertex and fragment shader pair into one artifact.

        The fragment shader is only processed when the vertex shader
        succeeded. Binaries are not combined, the result's ``binary`` is
        always empty.

        Args:
            vertex_source: Vertex shader source
            fragment_source: Fragment shader source
            target: Target dialect

        Returns:
            Result holding both stages separated by banner comments
        """
        vertex_result = self.transpile(vertex_source, target, ShaderStage.VERTEX)
        if not vertex_result.success:
            return vertex_result

        fragment_result = self.transpile(fragment_source, target, ShaderStage.FRAGMENT)
        if not fragment_result.success:
            return fragment_result

        combined = (
            f"{VERTEX_BANNER}\n{vertex_result.output}"
            f"\n\n{FRAGMENT_BANNER}\n{fragment_result.output}"
        )
        return TranspilationResult(success=True, output=combined)

    def extract_uniforms(self, source: str) -> list[UniformBinding]:
        """Extract uniform bindings from shader source."""
        return extract_uniforms(source)

    def extract_attributes(self, source: str) -> list[VertexAttribute]:
        """Extract vertex attributes from shader source."""
        return extract_attributes(source)

    @staticmethod
    def get_target_version_string(target: ShaderTarget) -> str:
        """Get the version directive or header comment for a target."""
        return VERSION_STRINGS.get(target, "")
