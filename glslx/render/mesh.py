from dataclasses import dataclass, field

import moderngl
import numpy as np


@dataclass(eq=False)
class Mesh:
    """Interleaved vertex data with optional indices.

    Attributes:
        vertices: Flat float32 array of interleaved vertex attributes
        layout: ModernGL buffer format, e.g. ``"3f 2f"``
        attributes: Attribute names matching ``layout``
        indices: Optional uint32 index array
    """

    vertices: np.ndarray
    layout: str
    attributes: list[str]
    indices: np.ndarray | None = None
    _vaos: dict[int, moderngl.VertexArray] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype="f4")
        if self.indices is not None:
            self.indices = np.asarray(self.indices, dtype="u4")

    def vertex_array(
        self, ctx: moderngl.Context, program: moderngl.Program
    ) -> moderngl.VertexArray:
        """Create (once per program) the vertex array binding this mesh."""
        if program.glo not in self._vaos:
            vbo = ctx.buffer(self.vertices.tobytes())
            ibo = None
            if self.indices is not None:
                ibo = ctx.buffer(self.indices.tobytes())
            self._vaos[program.glo] = ctx.vertex_array(
                program,
                [(vbo, self.layout, *self.attributes)],
                index_buffer=ibo,
                skip_errors=True,
            )
        return self._vaos[program.glo]

    def release(self) -> None:
        for vao in self._vaos.values():
            vao.release()
        self._vaos.clear()


QUAD_VERTICES = np.array(
    [
        # x,    y,    u,   v
        -1.0, -1.0, 0.0, 0.0,  # Bottom left
        1.0, -1.0, 1.0, 0.0,  # Bottom right
        -1.0, 1.0, 0.0, 1.0,  # Top left
        1.0, 1.0, 1.0, 1.0,  # Top right
    ],
    dtype="f4",
)


class Quad:
    """Fullscreen quad drawn as a triangle strip."""

    def __init__(self) -> None:
        self.mesh = Mesh(QUAD_VERTICES, "2f 2f", ["in_pos", "in_uv"])
        self._vao: moderngl.VertexArray | None = None

    def init(self, ctx: moderngl.Context, program: moderngl.Program) -> None:
        """Upload the quad for use with ``program``."""
        self._vao = self.mesh.vertex_array(ctx, program)

    def render(self) -> None:
        if self._vao is None:
            raise RuntimeError("Quad.init() must be called before rendering")
        self._vao.render(mode=moderngl.TRIANGLE_STRIP)

    def release(self) -> None:
        self.mesh.release()
        self._vao = None
