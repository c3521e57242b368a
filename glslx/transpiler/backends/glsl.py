from glslx.transpiler.backends.base import Backend, BackendConfig
from glslx.transpiler.constants import VERSION_STRINGS
from glslx.transpiler.models import ShaderStage, ShaderTarget, TranspilationResult
from glslx.transpiler.toolchain import ToolchainConfig


class GLSLBackend(Backend):
    """Pass-through backend for the source dialect."""

    def transpile(self, source: str, stage: ShaderStage) -> TranspilationResult:
        """Return the source unchanged."""
        return TranspilationResult(success=True, output=source)


def create_glsl_backend(toolchain: ToolchainConfig | None = None) -> GLSLBackend:
    """Create a GLSL pass-through backend."""
    config = BackendConfig(
        target=ShaderTarget.GLSL,
        version_directive=VERSION_STRINGS[ShaderTarget.GLSL],
        source_extension=".glsl",
    )
    return GLSLBackend(config, toolchain)
