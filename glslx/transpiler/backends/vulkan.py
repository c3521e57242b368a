"""Vulkan backend: GLSL 450 compiled to SPIR-V with ``glslang``."""

from pathlib import Path

import numpy as np
from loguru import logger

from glslx.transpiler.backends.base import Backend, BackendConfig
from glslx.transpiler.constants import GLSLANG_STAGES, VERSION_STRINGS
from glslx.transpiler.errors import ErrorKind
from glslx.transpiler.models import ShaderStage, ShaderTarget, TranspilationResult
from glslx.transpiler.toolchain import ToolchainConfig, run_tool, work_directory

COMPILATION_SUCCESS_MESSAGE = "SPIR-V compilation success!"
COMPILATION_FAILED_MESSAGE = "SPIR-V compilation failed!"

SPIRV_FILENAME = "input.spv"


def read_spirv_words(path: Path) -> list[int]:
    """Read a SPIR-V module as little-endian 32-bit words.

    Trailing bytes that do not fill a whole word are ignored.
    """
    data = path.read_bytes()
    usable = len(data) - len(data) % 4
    return np.frombuffer(data[:usable], dtype="<u4").tolist()


class VulkanBackend(Backend):
    """Backend compiling Vulkan GLSL to SPIR-V.

    No text rewriting happens here: the source only gets a version header
    before it is handed to the compiler.
    """

    def compile(
        self, source: str, stage: ShaderStage, workdir: Path
    ) -> TranspilationResult:
        """Compile inside an existing work directory.

        The SPIR-V module is left at ``workdir / SPIRV_FILENAME`` so that other
        backends can consume it.

        Args:
            source: GLSL source
            stage: Shader stage
            workdir: Directory for the intermediate files

        Returns:
            Result with the SPIR-V words in ``binary``
        """
        output = f"{self.config.version_directive}\n\n"
        output += self.strip_version_directive(source)

        stage_name = GLSLANG_STAGES[stage]
        input_path = workdir / f"input.{stage_name}"
        binary_path = workdir / SPIRV_FILENAME
        input_path.write_text(output)

        toolchain = self.toolchain
        command = [
            toolchain.tool_path("glslang"),
            "-V",
            "-S",
            stage_name,
            str(input_path),
            "-o",
            str(binary_path),
        ]
        result = run_tool(command, toolchain)

        words: list[int] = []
        if result.ok and binary_path.exists():
            words = read_spirv_words(binary_path)

        # An empty module counts as a failed compile even on exit status 0
        if not words:
            message = COMPILATION_FAILED_MESSAGE
            if result.output:
                message += "\n" + result.output.rstrip()
            if toolchain.strict:
                return TranspilationResult.failure(message)
            # Soft failure: success with an empty payload
            logger.warning("SPIR-V compilation failed, returning an empty module")
            return TranspilationResult(
                success=True,
                error_message=message,
                error_kind=ErrorKind.SOFT_TOOL_FAILURE,
            )

        return TranspilationResult(
            success=True,
            output=output,
            binary=words,
            error_message=COMPILATION_SUCCESS_MESSAGE,
        )

    def transpile(self, source: str, stage: ShaderStage) -> TranspilationResult:
        """Compile the source to SPIR-V in a fresh work directory."""
        with work_directory(self.toolchain, "vulkan") as workdir:
            return self.compile(source, stage, workdir)


def create_vulkan_backend(toolchain: ToolchainConfig | None = None) -> VulkanBackend:
    """Create a Vulkan backend."""
    config = BackendConfig(
        target=ShaderTarget.VULKAN,
        version_directive=VERSION_STRINGS[ShaderTarget.VULKAN],
        source_extension=".glsl",
    )
    return VulkanBackend(config, toolchain)
