"""Tests for uniform and attribute extraction."""

import re
from unittest.mock import patch

import pytest

from glslx.transpiler.errors import ErrorKind, IntegerParseError
from glslx.transpiler.extractor import (
    extract_attributes,
    extract_uniforms,
    is_builtin_type,
)
from glslx.transpiler.models import UniformBinding, VertexAttribute


def test_extract_uniforms_in_order():
    source = "uniform vec4 color;\nuniform mat4 mvp;\nvoid main(){}"
    assert extract_uniforms(source) == [
        UniformBinding(name="color", type="vec4", binding=0, set=0),
        UniformBinding(name="mvp", type="mat4", binding=1, set=0),
    ]


def test_extract_uniforms_empty():
    assert extract_uniforms("void main() {}") == []


def test_extract_uniforms_idempotent():
    """Bindings restart at zero on every call."""
    source = "uniform float time;\nuniform vec2 resolution;\n"
    first = extract_uniforms(source)
    second = extract_uniforms(source)
    assert first == second
    assert [u.binding for u in second] == [0, 1]


def test_extract_uniforms_flexible_whitespace():
    uniforms = extract_uniforms("uniform   sampler2D\ttex;")
    assert uniforms == [UniformBinding(name="tex", type="sampler2D", binding=0)]


def test_extract_uniforms_ignores_initialised_declarations():
    """Only the plain ``uniform T name;`` form is recognised."""
    assert extract_uniforms("uniform float scale = 1.0;") == []


def test_extract_attributes():
    source = (
        "layout(location = 0) in vec3 pos;\n"
        "layout (location=2) in vec2 uv;\n"
        "void main(){}"
    )
    assert extract_attributes(source) == [
        VertexAttribute(name="pos", type="vec3", location=0),
        VertexAttribute(name="uv", type="vec2", location=2),
    ]


def test_extract_attributes_keeps_text_order():
    source = "layout(location = 3) in vec4 b;\nlayout(location = 1) in vec4 a;\n"
    assert [a.location for a in extract_attributes(source)] == [3, 1]


def test_extract_attributes_skips_outputs():
    assert extract_attributes("layout(location = 0) out vec4 color;") == []


def test_extract_attributes_invalid_location():
    pattern = re.compile(r"layout\(location=(\w+)\) in (\w+) (\w+);")
    with patch("glslx.transpiler.extractor.ATTRIBUTE_PATTERN", pattern):
        with pytest.raises(IntegerParseError) as exc_info:
            extract_attributes("layout(location=first) in vec3 pos;")
    assert exc_info.value.kind == ErrorKind.INTEGER_PARSE_ERROR
    assert "first" in exc_info.value.message


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("float", True),
        ("vec3", True),
        ("mat4", True),
        ("sampler2D", True),
        ("Light", False),
        ("float3", False),
    ],
)
def test_is_builtin_type(type_name, expected):
    assert is_builtin_type(type_name) is expected
