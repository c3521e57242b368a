"""
External shader toolchain access.

Locates ``dxc``, ``glslang`` and ``spirv-cross`` inside a Vulkan SDK, gives
every backend call its own work directory and runs the tools as blocking
subprocesses.
"""

import os
import shutil
import subprocess
import sys
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

SDK_ENV_VAR = "VULKAN_SDK"
CACHE_DIR_ENV_VAR = "GLSLX_CACHE_DIR"
STRICT_ENV_VAR = "GLSLX_STRICT"
TIMEOUT_ENV_VAR = "GLSLX_TOOL_TIMEOUT"
KEEP_INTERMEDIATES_ENV_VAR = "GLSLX_KEEP_INTERMEDIATES"

if sys.platform == "win32":
    DEFAULT_SDK_PATH = "C:/VulkanSDK/default"
else:
    DEFAULT_SDK_PATH = "/usr"

DEFAULT_CACHE_DIR = os.path.join(tempfile.gettempdir(), "glslx-cache")

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def _env_timeout() -> float | None:
    value = os.environ.get(TIMEOUT_ENV_VAR)
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {TIMEOUT_ENV_VAR} value: {value!r}")
        return None
    if timeout <= 0:
        logger.warning(f"Ignoring non-positive {TIMEOUT_ENV_VAR} value: {value!r}")
        return None
    return timeout


@dataclass
class ToolchainConfig:
    """Configuration for the external shader tools.

    Attributes:
        sdk_path: Vulkan SDK root holding the tool executables
        cache_dir: Directory under which per-call work directories are created
        strict: Report soft tool failures as failed results
        timeout: Seconds to wait for a tool, None waits forever
        keep_intermediates: Leave work directories on disk after the call
    """

    sdk_path: str = DEFAULT_SDK_PATH
    cache_dir: str = DEFAULT_CACHE_DIR
    strict: bool = False
    timeout: float | None = None
    keep_intermediates: bool = False

    def __post_init__(self) -> None:
        """Validate the timeout."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"Tool timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls) -> "ToolchainConfig":
        """Build a configuration from the process environment."""
        return cls(
            sdk_path=os.environ.get(SDK_ENV_VAR) or DEFAULT_SDK_PATH,
            cache_dir=os.environ.get(CACHE_DIR_ENV_VAR) or DEFAULT_CACHE_DIR,
            strict=_env_flag(STRICT_ENV_VAR),
            timeout=_env_timeout(),
            keep_intermediates=_env_flag(KEEP_INTERMEDIATES_ENV_VAR),
        )

    def tool_path(self, name: str) -> str:
        """Resolve the executable of a tool inside the SDK.

        Args:
            name: Tool name without extension, e.g. ``glslang``

        Returns:
            Path of the executable
        """
        executable = f"{name}.exe" if sys.platform == "win32" else name
        root = Path(self.sdk_path)
        for bin_dir in ("Bin", "bin"):
            candidate = root / bin_dir / executable
            if candidate.exists():
                return str(candidate)
        # Missing tools fail at invocation time like any other tool error
        return str(root / ("Bin" if sys.platform == "win32" else "bin") / executable)


@dataclass
class ToolResult:
    """Outcome of one external tool run."""

    command: list[str]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@contextmanager
def work_directory(config: ToolchainConfig, prefix: str) -> Iterator[Path]:
    """Create a unique directory for one call's intermediate files.

    Args:
        config: Toolchain configuration
        prefix: Directory name prefix, usually the target name

    Yields:
        Path of the new directory
    """
    os.makedirs(config.cache_dir, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=f"{prefix}-", dir=config.cache_dir))
    logger.debug(f"Created work directory {path}")
    try:
        yield path
    finally:
        if config.keep_intermediates:
            logger.debug(f"Keeping intermediate files in {path}")
        else:
            shutil.rmtree(path, ignore_errors=True)


def run_tool(command: list[str], config: ToolchainConfig) -> ToolResult:
    """Run an external tool and wait for it to exit.

    Missing executables, OS errors and timeouts are reported as a non-zero
    return code so that callers handle every failure the same way.

    Args:
        command: Executable followed by its arguments
        config: Toolchain configuration

    Returns:
        Return code and combined stdout/stderr of the tool
    """
    logger.debug(f"Running: {' '.join(command)}")
    try:
        completed = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=config.timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        message = f"{command[0]} timed out after {config.timeout}s"
        logger.error(message)
        return ToolResult(command=command, returncode=-1, output=message)
    except OSError as e:
        message = f"Could not run {command[0]}: {e}"
        logger.error(message)
        return ToolResult(command=command, returncode=-1, output=message)

    output = completed.stdout or ""
    if completed.returncode != 0:
        logger.error(f"{command[0]} exited with code {completed.returncode}")
    return ToolResult(command=command, returncode=completed.returncode, output=output)
