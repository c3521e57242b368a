"""Abstract interface shared by the graphics API renderers."""

from abc import ABC, abstractmethod
from typing import Any

import moderngl
import numpy as np

from glslx.render.mesh import Mesh


class Renderer(ABC):
    """Frame lifecycle interface, one implementation per graphics API.

    Renderers obtain shader code from the transpiler service; they do not
    translate shaders themselves.
    """

    @abstractmethod
    def initialize(self, window_handle: Any | None = None) -> None:
        """Create the API context, offscreen when no window is given."""
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """Release every GPU resource owned by the renderer."""
        pass

    @abstractmethod
    def begin_frame(self) -> None:
        """Clear the target and start a new render queue."""
        pass

    @abstractmethod
    def render(self) -> None:
        """Draw everything submitted since the frame began."""
        pass

    @abstractmethod
    def end_frame(self) -> None:
        """Present the frame and process window events."""
        pass

    @abstractmethod
    def draw_mesh(
        self, mesh: Mesh, shader: moderngl.Program, transform: np.ndarray
    ) -> None:
        """Draw a mesh immediately with the given program and model matrix."""
        pass
