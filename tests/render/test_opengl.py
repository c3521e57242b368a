"""Tests for the OpenGL renderer's shader handling."""

import numpy as np
import pytest

from glslx.render import GLConfig, GLContextError, GLRenderer, Mesh, Quad, Renderer
from glslx.render.opengl import CACHE_EXTENSIONS
from glslx.transpiler import ShaderStage, ShaderTarget, ShaderTranspiler

VERTEX_SHADER = """#version 330 core
layout(location = 0) in vec2 in_pos;
uniform mat4 u_model;
void main() {
    gl_Position = u_model * vec4(in_pos, 0.0, 1.0);
}
"""

FRAGMENT_SHADER = """#version 330 core
out vec4 fragColor;
void main() {
    fragColor = vec4(1.0, 0.5, 0.0, 1.0);
}
"""


@pytest.fixture
def shader_dir(tmp_path):
    path = tmp_path / "Shaders"
    path.mkdir()
    (path / "basic.vert").write_text(VERTEX_SHADER)
    (path / "basic.frag").write_text(FRAGMENT_SHADER)
    return path


@pytest.fixture
def renderer(shader_dir, tmp_path, toolchain):
    return GLRenderer(
        shader_dir=shader_dir,
        cache_dir=tmp_path / "ShaderCache",
        transpiler=ShaderTranspiler(toolchain),
    )


# GLConfig Tests
class TestGLConfig:
    """Test suite for GLConfig."""

    def test_default(self):
        config = GLConfig()
        assert config.require == 330
        assert config.vsync is True

    def test_custom(self):
        assert GLConfig(major_version=4, minor_version=6).require == 460

    @pytest.mark.parametrize("major, minor", [(2, 1), (3, 2), (4, 7), (5, 0)])
    def test_invalid_version(self, major, minor):
        with pytest.raises(GLContextError, match="Unsupported OpenGL version"):
            GLConfig(major_version=major, minor_version=minor)


def test_renderer_is_abstract():
    with pytest.raises(TypeError):
        Renderer()  # type: ignore[abstract]


@pytest.mark.parametrize("hook", ["begin_frame", "end_frame"])
def test_frame_hooks_documented(hook):
    assert getattr(Renderer, hook).__doc__


class TestShaderCache:
    """Test suite for transpiling shader files into the cache."""

    def test_glsl_shader_cached(self, renderer, tmp_path):
        result = renderer.transpile_shader(
            "basic.vert", ShaderTarget.GLSL, ShaderStage.VERTEX
        )
        assert result.success
        cached = tmp_path / "ShaderCache" / "basic.glsl"
        assert cached.read_text() == VERTEX_SHADER

    def test_missing_file_fails(self, renderer, tmp_path):
        result = renderer.transpile_shader(
            "missing.frag", ShaderTarget.GLSL, ShaderStage.FRAGMENT
        )
        assert not result.success
        assert result.error_message == "Input shader source is empty"
        assert not (tmp_path / "ShaderCache").exists()

    def test_hlsl_shader_cached(self, renderer, tmp_path, fake_tools):
        result = renderer.transpile_shader(
            "basic.vert", ShaderTarget.HLSL, ShaderStage.VERTEX
        )
        assert result.success
        cached = tmp_path / "ShaderCache" / "basic.hlsl"
        assert cached.read_text() == result.output

    def test_failed_shader_not_cached(self, renderer, tmp_path, fake_tools):
        fake_tools.returncodes["dxc"] = 1
        result = renderer.transpile_shader(
            "basic.vert", ShaderTarget.HLSL, ShaderStage.VERTEX
        )
        assert not result.success
        assert not (tmp_path / "ShaderCache" / "basic.hlsl").exists()

    def test_spirv_cached_as_binary(self, renderer, tmp_path, fake_tools):
        result = renderer.transpile_shader(
            "basic.frag", ShaderTarget.VULKAN, ShaderStage.FRAGMENT
        )
        cached = tmp_path / "ShaderCache" / "basic.spv"
        words = np.frombuffer(cached.read_bytes(), dtype="<u4").tolist()
        assert words == result.binary == fake_tools.spirv_words

    def test_program_cached(self, renderer, tmp_path):
        result = renderer.transpile_program(
            "basic.vert", "basic.frag", ShaderTarget.GLSL
        )
        assert result.success
        cached = tmp_path / "ShaderCache" / "basic_basic.glsl"
        assert cached.read_text() == result.output

    def test_save_internal_shader_cache(self, renderer, tmp_path):
        path = renderer.save_internal_shader_cache("blit.metal", "// metal")
        assert path == tmp_path / "ShaderCache" / "blit.metal"
        assert path.read_text() == "// metal"

    def test_cache_extensions_cover_targets(self):
        assert set(CACHE_EXTENSIONS) == set(ShaderTarget)


class TestRenderQueue:
    """Test suite for queueing without a context."""

    def test_submit_mesh_identity_transform(self, renderer):
        mesh = Quad().mesh
        renderer.submit_mesh(mesh)
        [command] = renderer.render_queue
        assert command.mesh is mesh
        np.testing.assert_array_equal(command.transform, np.identity(4))

    def test_render_without_program_keeps_queue(self, renderer):
        renderer.submit_mesh(Quad().mesh)
        renderer.render()
        assert len(renderer.render_queue) == 1

    def test_begin_frame_requires_context(self, renderer):
        with pytest.raises(RuntimeError, match="initialize"):
            renderer.begin_frame()

    def test_compile_requires_context(self, renderer):
        with pytest.raises(RuntimeError):
            renderer.compile_and_link_shaders("basic.vert", "basic.frag")


def test_mesh_coerces_dtypes():
    mesh = Mesh([0, 1, 2], "1f", ["in_value"], indices=[0, 1, 2])
    assert mesh.vertices.dtype == np.float32
    assert mesh.indices is not None
    assert mesh.indices.dtype == np.uint32


def test_quad_render_requires_init():
    with pytest.raises(RuntimeError, match="init"):
        Quad().render()


@pytest.mark.gpu
def test_draw_quad_offscreen(renderer):
    try:
        renderer.initialize()
    except GLContextError as e:
        pytest.skip(f"No OpenGL context available: {e}")

    # Standalone contexts have no default framebuffer
    renderer.ctx.simple_framebuffer((64, 64)).use()

    try:
        assert renderer.compile_and_link_shaders("basic.vert", "basic.frag")
        renderer.begin_frame()
        renderer.submit_mesh(Quad().mesh)
        renderer.render()
        renderer.end_frame()
        assert renderer.render_queue == []
    finally:
        renderer.shutdown()
    assert not renderer.is_initialized
