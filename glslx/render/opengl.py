"""OpenGL renderer built on ModernGL."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import moderngl
import numpy as np
from loguru import logger

from glslx.render.context import GLConfig, create_context, poll_events, swap_buffers
from glslx.render.mesh import Mesh
from glslx.render.renderer import Renderer
from glslx.transpiler import (
    ShaderStage,
    ShaderTarget,
    ShaderTranspiler,
    TranspilationResult,
)

DEFAULT_SHADER_DIR = "Shaders"
DEFAULT_SHADER_CACHE_DIR = "Saved/ShaderCache"

CACHE_EXTENSIONS: dict[ShaderTarget, str] = {
    ShaderTarget.GLSL: ".glsl",
    ShaderTarget.HLSL: ".hlsl",
    ShaderTarget.VULKAN: ".spv",
    ShaderTarget.METAL: ".metal",
}


class Camera(Protocol):
    """Anything providing a combined view-projection matrix."""

    view_projection: np.ndarray


@dataclass(eq=False)
class RenderCommand:
    """A mesh queued for drawing with the renderer's linked program."""

    mesh: Mesh
    transform: np.ndarray


class GLRenderer(Renderer):
    """Renderer drawing through an OpenGL 3.3+ context.

    Shader files are read from ``shader_dir``, passed through the transpiler
    and the results written to ``cache_dir``.
    """

    def __init__(
        self,
        shader_dir: str | Path = DEFAULT_SHADER_DIR,
        cache_dir: str | Path = DEFAULT_SHADER_CACHE_DIR,
        transpiler: ShaderTranspiler | None = None,
        config: GLConfig | None = None,
    ):
        self.shader_dir = Path(shader_dir)
        self.cache_dir = Path(cache_dir)
        self.transpiler = transpiler or ShaderTranspiler()
        self.config = config or GLConfig()

        self.is_initialized = False
        self.ctx: moderngl.Context | None = None
        self.program: moderngl.Program | None = None
        self.render_queue: list[RenderCommand] = []
        self.active_camera: Camera | None = None
        self._window: Any | None = None

    def initialize(self, window_handle: Any | None = None) -> None:
        if self.is_initialized:
            logger.warning("GLRenderer is already initialized")
            return

        self._window = window_handle
        self.ctx = create_context(window_handle, self.config)
        self.is_initialized = True
        logger.info(f"OpenGL renderer initialized: {self.ctx.info['GL_RENDERER']}")

    def shutdown(self) -> None:
        if not self.is_initialized:
            return

        for command in self.render_queue:
            command.mesh.release()
        self.render_queue.clear()
        if self.program is not None:
            self.program.release()
            self.program = None
        if self.ctx is not None:
            self.ctx.release()
            self.ctx = None
        self._window = None
        self.is_initialized = False
        logger.info("OpenGL renderer shut down")

    def begin_frame(self) -> None:
        self._require_context().clear(0.0, 0.0, 0.0, 1.0)
        self.render_queue.clear()

    def render(self) -> None:
        if self.program is None:
            if self.render_queue:
                logger.warning("No shader program linked, skipping render queue")
            return

        for command in self.render_queue:
            self.draw_mesh(command.mesh, self.program, command.transform)
        self.render_queue.clear()

    def end_frame(self) -> None:
        if self._window is not None:
            swap_buffers(self._window)
            poll_events()

    def draw_mesh(
        self, mesh: Mesh, shader: moderngl.Program, transform: np.ndarray
    ) -> None:
        ctx = self._require_context()
        self._set_matrix(shader, "u_model", transform)
        if self.active_camera is not None:
            view_projection = self.active_camera.view_projection
            self._set_matrix(shader, "u_view_projection", view_projection)
        mesh.vertex_array(ctx, shader).render(mode=moderngl.TRIANGLES)

    def set_active_camera(self, camera: Camera | None) -> None:
        self.active_camera = camera

    def submit_mesh(self, mesh: Mesh, transform: np.ndarray | None = None) -> None:
        """Queue a mesh for the next ``render`` call."""
        if transform is None:
            transform = np.identity(4, dtype="f4")
        command = RenderCommand(mesh, np.asarray(transform, dtype="f4"))
        self.render_queue.append(command)

    def compile_and_link_shaders(self, vertex_file: str, fragment_file: str) -> bool:
        """Build the renderer's program from two shader files.

        Both stages go through the GLSL pass-through so that the transpiler's
        validation applies before the driver sees the source.

        Returns:
            True if the program was linked
        """
        ctx = self._require_context()
        vertex = self.transpile_shader(
            vertex_file, ShaderTarget.GLSL, ShaderStage.VERTEX
        )
        fragment = self.transpile_shader(
            fragment_file, ShaderTarget.GLSL, ShaderStage.FRAGMENT
        )
        for result in (vertex, fragment):
            if not result.success:
                logger.error(f"Shader preparation failed: {result.error_message}")
                return False

        try:
            program = ctx.program(
                vertex_shader=vertex.output, fragment_shader=fragment.output
            )
        except moderngl.Error as e:
            logger.error(f"Failed to link shader program: {e}")
            return False

        if self.program is not None:
            self.program.release()
        self.program = program
        return True

    def transpile_shader(
        self, file_name: str, target: ShaderTarget, stage: ShaderStage
    ) -> TranspilationResult:
        """Transpile a shader file and cache the translated artifact.

        Args:
            file_name: Shader file relative to the shader directory
            target: Target dialect
            stage: Shader stage

        Returns:
            Transpilation result
        """
        source = self._read_shader_file(self.get_shader_path(file_name))
        result = self.transpiler.transpile(source, target, stage)
        if result.success:
            self._cache_result(Path(file_name).stem, target, result)
        return result

    def transpile_program(
        self, vertex_file: str, fragment_file: str, target: ShaderTarget
    ) -> TranspilationResult:
        """Transpile a vertex and fragment file pair into one artifact."""
        vertex_source = self._read_shader_file(self.get_shader_path(vertex_file))
        fragment_source = self._read_shader_file(self.get_shader_path(fragment_file))
        result = self.transpiler.transpile_program(
            vertex_source, fragment_source, target
        )
        if result.success:
            name = f"{Path(vertex_file).stem}_{Path(fragment_file).stem}"
            self._cache_result(name, target, result)
        return result

    def get_shader_path(self, file_name: str) -> Path:
        return self.shader_dir / file_name

    def save_internal_shader_cache(self, file_name: str, content: str | bytes) -> Path:
        """Write a translated shader into the cache directory.

        Returns:
            Path of the written file
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.cache_dir / file_name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
        logger.debug(f"Cached shader {path}")
        return path

    def _cache_result(
        self, name: str, target: ShaderTarget, result: TranspilationResult
    ) -> None:
        file_name = name + CACHE_EXTENSIONS[target]
        if result.binary:
            words = np.asarray(result.binary, dtype="<u4")
            self.save_internal_shader_cache(file_name, words.tobytes())
        elif result.output:
            self.save_internal_shader_cache(file_name, result.output)

    def _read_shader_file(self, path: Path) -> str:
        # Unreadable files become empty sources, rejected by the validator
        try:
            return path.read_text()
        except OSError as e:
            logger.error(f"Failed to read shader file {path}: {e}")
            return ""

    def _set_matrix(self, program: moderngl.Program, name: str, matrix: Any) -> None:
        if name in program:
            # OpenGL expects column-major matrices
            data = np.asarray(matrix, dtype="f4").T
            program[name].write(data.tobytes())

    def _require_context(self) -> moderngl.Context:
        if self.ctx is None:
            raise RuntimeError("GLRenderer.initialize() must be called first")
        return self.ctx
