from collections.abc import Callable

from glslx.transpiler.backends.base import Backend, BackendConfig
from glslx.transpiler.backends.glsl import GLSLBackend, create_glsl_backend
from glslx.transpiler.backends.hlsl import HLSLBackend, create_hlsl_backend
from glslx.transpiler.backends.metal import MetalBackend, create_metal_backend
from glslx.transpiler.backends.vulkan import VulkanBackend, create_vulkan_backend
from glslx.transpiler.models import ShaderTarget
from glslx.transpiler.toolchain import ToolchainConfig

BackendFactory = Callable[[ToolchainConfig | None], Backend]

# Registry of targets to their backend factories
_BACKEND_REGISTRY: dict[ShaderTarget, BackendFactory] = {
    ShaderTarget.GLSL: create_glsl_backend,
    ShaderTarget.HLSL: create_hlsl_backend,
    ShaderTarget.VULKAN: create_vulkan_backend,
    ShaderTarget.METAL: create_metal_backend,
}


def create_backend(
    target: ShaderTarget = ShaderTarget.GLSL,
    toolchain: ToolchainConfig | None = None,
) -> Backend:
    """Create a backend instance for a target.

    Args:
        target: The target dialect to create a backend for
        toolchain: Toolchain configuration, read from the environment if None

    Returns:
        An instance of the requested backend

    Raises:
        ValueError: If the target is not supported
    """
    if target not in _BACKEND_REGISTRY:
        raise ValueError(f"Unsupported shader target: {target}")

    return _BACKEND_REGISTRY[target](toolchain)


def register_backend(target: ShaderTarget, factory: BackendFactory) -> None:
    """Register a backend factory for a target.

    Args:
        target: The target to register
        factory: Callable creating the backend from a toolchain configuration
    """
    _BACKEND_REGISTRY[target] = factory


__all__ = [
    "Backend",
    "BackendConfig",
    "GLSLBackend",
    "HLSLBackend",
    "MetalBackend",
    "VulkanBackend",
    "create_backend",
    "register_backend",
]
