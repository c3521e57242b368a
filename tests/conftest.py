"""Fixtures and configuration for pytest."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest

from glslx.transpiler.toolchain import ToolchainConfig

SPIRV_WORDS = [0x07230203, 0x00010000, 0x00080001, 0x0000000D, 0x00000000]
METAL_SOURCE = """\
#include <metal_stdlib>
using namespace metal;

fragment float4 main0() { return float4(1.0); }
"""


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "gpu: mark test as requiring a GPU")


class FakeTools:
    """Stand-in for ``subprocess.run`` emulating dxc, glslang and spirv-cross.

    Every call is recorded together with the text of its input file, so tests
    can inspect what would have been handed to the real tool.
    """

    def __init__(self) -> None:
        self.returncodes = {"dxc": 0, "glslang": 0, "spirv-cross": 0}
        self.calls: list[list[str]] = []
        self.inputs: dict[str, str] = {}
        self.spirv_words = list(SPIRV_WORDS)
        self.metal_source = METAL_SOURCE

    def tool_calls(self, tool: str) -> list[list[str]]:
        return [c for c in self.calls if Path(c[0]).stem == tool]

    def __call__(self, command: list[str], **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(command)
        tool = Path(command[0]).stem
        code = self.returncodes[tool]

        if tool == "dxc":
            self.inputs[tool] = Path(command[-1]).read_text()
        elif tool == "glslang":
            self.inputs[tool] = Path(command[4]).read_text()
            if code == 0:
                words = np.asarray(self.spirv_words, dtype="<u4")
                Path(command[-1]).write_bytes(words.tobytes())
        elif tool == "spirv-cross" and code == 0:
            Path(command[-1]).write_text(self.metal_source)

        stdout = f"{tool}: error: syntax error" if code else ""
        return subprocess.CompletedProcess(command, code, stdout=stdout)


@pytest.fixture
def toolchain(tmp_path):
    """Toolchain configuration isolated in a temporary directory."""
    return ToolchainConfig(
        sdk_path=str(tmp_path / "sdk"), cache_dir=str(tmp_path / "cache")
    )


@pytest.fixture
def fake_tools(tmp_path, monkeypatch):
    """Patch external tool execution and isolate the environment."""
    monkeypatch.setenv("GLSLX_CACHE_DIR", str(tmp_path / "cache"))
    for name in ("GLSLX_STRICT", "GLSLX_TOOL_TIMEOUT", "GLSLX_KEEP_INTERMEDIATES"):
        monkeypatch.delenv(name, raising=False)

    tools = FakeTools()
    with patch("glslx.transpiler.toolchain.subprocess.run", side_effect=tools):
        yield tools
