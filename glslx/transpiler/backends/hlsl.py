"""HLSL backend: rule pipeline rewrite followed by a ``dxc`` validation run."""

import re

from loguru import logger

from glslx.transpiler.backends.base import Backend, BackendConfig
from glslx.transpiler.constants import (
    HLSL_PROFILES,
    UNIMPLEMENTED_INVERSE_INTRINSIC,
    VERSION_STRINGS,
)
from glslx.transpiler.models import ShaderStage, ShaderTarget, TranspilationResult
from glslx.transpiler.rules import apply_rules
from glslx.transpiler.toolchain import ToolchainConfig, run_tool, work_directory

VALIDATION_FAILED_MESSAGE = "DXC validation failed! Check shader syntax."

_INVERSE_CALL_PATTERN = re.compile(r"\binverse\b")


class HLSLBackend(Backend):
    """Backend producing HLSL text validated by the DirectX shader compiler."""

    def generate(self, source: str, stage: ShaderStage) -> str:
        """Rewrite GLSL source into HLSL text without validating it.

        Args:
            source: GLSL source
            stage: Shader stage

        Returns:
            HLSL source with header
        """
        cleaned_source = self.strip_version_directive(source)
        body = apply_rules(cleaned_source, ShaderTarget.HLSL, stage)

        lines = [self.config.version_directive]
        if _INVERSE_CALL_PATTERN.search(body):
            logger.warning(
                "inverse() has no HLSL intrinsic, injecting a placeholder that "
                "returns its argument unchanged"
            )
            lines.append(UNIMPLEMENTED_INVERSE_INTRINSIC)
        lines.append(body)
        return "\n".join(lines)

    def transpile(self, source: str, stage: ShaderStage) -> TranspilationResult:
        """Generate HLSL and validate it with ``dxc``.

        The generated text is returned as output even when validation fails,
        so it can be inspected.
        """
        hlsl = self.generate(source, stage)
        toolchain = self.toolchain

        with work_directory(toolchain, "hlsl") as workdir:
            path = workdir / f"validate{self.config.source_extension}"
            path.write_text(hlsl)

            command = [
                toolchain.tool_path("dxc"),
                "-T",
                HLSL_PROFILES[stage],
                "-E",
                "main",
                str(path),
            ]
            result = run_tool(command, toolchain)

        if not result.ok:
            message = VALIDATION_FAILED_MESSAGE
            if result.output:
                message += "\n" + result.output.rstrip()
            return TranspilationResult.failure(message, output=hlsl)

        return TranspilationResult(success=True, output=hlsl)


def create_hlsl_backend(toolchain: ToolchainConfig | None = None) -> HLSLBackend:
    """Create an HLSL backend."""
    config = BackendConfig(
        target=ShaderTarget.HLSL,
        version_directive=VERSION_STRINGS[ShaderTarget.HLSL],
        source_extension=".hlsl",
    )
    return HLSLBackend(config, toolchain)
