"""
Metadata extraction from shader source.

Scans the text for uniform and vertex attribute declarations. The results are
used by the uniform block rewrite and exposed to pipeline layout builders.
"""

from loguru import logger

from glslx.transpiler.constants import ATTRIBUTE_PATTERN, BUILTIN_TYPES, UNIFORM_PATTERN
from glslx.transpiler.errors import IntegerParseError
from glslx.transpiler.models import UniformBinding, VertexAttribute


def is_builtin_type(type_name: str) -> bool:
    """Check whether a type token is a builtin source dialect type.

    Args:
        type_name: Type token such as ``vec3`` or ``MyStruct``

    Returns:
        True if the type needs no struct declaration
    """
    return type_name in BUILTIN_TYPES


def extract_uniforms(source: str) -> list[UniformBinding]:
    """Collect ``uniform <type> <name>;`` declarations in text order.

    Bindings are assigned from the running count of matches, so extracting
    the same text twice yields the same list.

    Args:
        source: Shader source text

    Returns:
        Uniform bindings in declaration order
    """
    uniforms = [
        UniformBinding(name=match.group(2), type=match.group(1), binding=index)
        for index, match in enumerate(UNIFORM_PATTERN.finditer(source))
    ]
    logger.debug(f"Extracted uniforms: {[u.name for u in uniforms]}")
    return uniforms


def extract_attributes(source: str) -> list[VertexAttribute]:
    """Collect ``layout(location = N) in <type> <name>;`` declarations.

    Args:
        source: Shader source text

    Returns:
        Vertex attributes in declaration order

    Raises:
        IntegerParseError: If a location literal is not a valid integer
    """
    attributes = []
    for match in ATTRIBUTE_PATTERN.finditer(source):
        literal = match.group(1)
        try:
            location = int(literal)
        except ValueError as e:
            raise IntegerParseError(
                f"Invalid attribute location literal: {literal!r}"
            ) from e
        attributes.append(
            VertexAttribute(name=match.group(3), type=match.group(2), location=location)
        )

    logger.debug(f"Extracted attributes: {[a.name for a in attributes]}")
    return attributes
