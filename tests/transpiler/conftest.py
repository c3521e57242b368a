"""
Shared shader sources for transpiler tests.
"""

import pytest


@pytest.fixture
def vertex_source():
    """Vertex shader with a uniform, an attribute and a varying."""
    return """#version 330 core
uniform mat4 mvp;
layout(location = 0) in vec3 position;
out vec3 color;
void main() {
    color = position;
    gl_Position = mvp * vec4(position, 1.0);
}
"""


@pytest.fixture
def fragment_source():
    """Fragment shader with one uniform and one varying."""
    return """#version 330 core
uniform vec4 tint;
in vec3 color;
void main() {
    gl_FragColor = vec4(color, 1.0) * tint;
}
"""
