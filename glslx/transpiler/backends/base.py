"""Base interface for the per-target backend finalizers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from glslx.transpiler.constants import VERSION_DIRECTIVE_PATTERN
from glslx.transpiler.models import ShaderStage, ShaderTarget, TranspilationResult
from glslx.transpiler.toolchain import ToolchainConfig


@dataclass
class BackendConfig:
    """Configuration for a backend."""

    target: ShaderTarget
    version_directive: str
    source_extension: str


class Backend(ABC):
    """Base abstract interface for all shader backends."""

    def __init__(
        self, config: BackendConfig, toolchain: ToolchainConfig | None = None
    ):
        self.config = config
        self._toolchain = toolchain

    @property
    def toolchain(self) -> ToolchainConfig:
        """Toolchain configuration, read from the environment unless given."""
        if self._toolchain is not None:
            return self._toolchain
        return ToolchainConfig.from_env()

    @abstractmethod
    def transpile(self, source: str, stage: ShaderStage) -> TranspilationResult:
        """Translate validated source for one shader stage."""
        pass

    def strip_version_directive(self, source: str) -> str:
        """Remove an existing ``#version`` line."""
        return VERSION_DIRECTIVE_PATTERN.sub("", source)
