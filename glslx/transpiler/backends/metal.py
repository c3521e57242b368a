"""Metal backend: SPIR-V from the Vulkan backend, cross-compiled by ``spirv-cross``."""

from glslx.transpiler.backends.base import Backend, BackendConfig
from glslx.transpiler.backends.vulkan import SPIRV_FILENAME, create_vulkan_backend
from glslx.transpiler.constants import VERSION_STRINGS
from glslx.transpiler.errors import ErrorKind
from glslx.transpiler.models import ShaderStage, ShaderTarget, TranspilationResult
from glslx.transpiler.toolchain import ToolchainConfig, run_tool, work_directory

CROSS_COMPILATION_SUCCESS_MESSAGE = "Metal transpilation success!"
CROSS_COMPILATION_FAILED_MESSAGE = "Metal transpilation failed!"


class MetalBackend(Backend):
    """Backend producing Metal shading language source."""

    def transpile(self, source: str, stage: ShaderStage) -> TranspilationResult:
        """Compile to SPIR-V, then cross-compile the module to MSL.

        A failed or soft-failed Vulkan result is returned as is.
        """
        toolchain = self.toolchain
        vulkan = create_vulkan_backend(toolchain)

        with work_directory(toolchain, "metal") as workdir:
            spirv_result = vulkan.compile(source, stage, workdir)
            if (
                not spirv_result.success
                or spirv_result.error_kind == ErrorKind.SOFT_TOOL_FAILURE
            ):
                return spirv_result
            if not spirv_result.binary:
                return TranspilationResult.failure(CROSS_COMPILATION_FAILED_MESSAGE)

            metal_path = workdir / "output.metal"
            command = [
                toolchain.tool_path("spirv-cross"),
                "--msl",
                str(workdir / SPIRV_FILENAME),
                "--output",
                str(metal_path),
            ]
            result = run_tool(command, toolchain)

            if not result.ok or not metal_path.exists():
                message = CROSS_COMPILATION_FAILED_MESSAGE
                if result.output:
                    message += "\n" + result.output.rstrip()
                return TranspilationResult.failure(message)

            metal_source = metal_path.read_text()

        return TranspilationResult(
            success=True,
            output=metal_source,
            error_message=CROSS_COMPILATION_SUCCESS_MESSAGE,
        )


def create_metal_backend(toolchain: ToolchainConfig | None = None) -> MetalBackend:
    """Create a Metal backend."""
    config = BackendConfig(
        target=ShaderTarget.METAL,
        version_directive=VERSION_STRINGS[ShaderTarget.METAL],
        source_extension=".metal",
    )
    return MetalBackend(config, toolchain)
