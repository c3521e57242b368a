"""
Text rewrite rules for the non-GLSL dialects.

Rewriting happens at the pattern level rather than on a syntax tree. Each pass
is a named pure function that never fails; ``apply_rules`` chains them in a
fixed order, later passes seeing the output of earlier ones. Constructs no
rule recognises pass through unchanged.
"""

import re
from collections.abc import Callable

from loguru import logger

from glslx.transpiler.constants import (
    ATTRIBUTE_PATTERN,
    BUILTIN_FUNCTIONS,
    BUILTIN_VARIABLES,
    TYPE_MAPPINGS,
    UNIFORM_PATTERN,
)
from glslx.transpiler.extractor import extract_uniforms, is_builtin_type
from glslx.transpiler.models import ShaderStage, ShaderTarget

RulePass = Callable[[str, ShaderTarget, ShaderStage], str]

_UNIFORM_LINE_PATTERN = re.compile(UNIFORM_PATTERN.pattern + r"[ \t]*\n?")
_VERTEX_OUTPUT_PATTERN = re.compile(r"\bout\s+(\w+)\s+(\w+);")
_FRAGMENT_INPUT_PATTERN = re.compile(r"\bin\s+(\w+)\s+(\w+);")
_MULTIPLY_PATTERN = re.compile(r"(\w+)\s*\*\s*([\w().]+)")


def _replace_word(source: str, word: str, replacement: str) -> str:
    return re.sub(rf"\b{re.escape(word)}\b", replacement, source)


def convert_uniform_declarations(source: str, target: ShaderTarget) -> str:
    """Gather loose uniforms into a single HLSL constant buffer.

    The declarations are removed from their original positions and the
    generated ``cbuffer`` is prefixed to the document.

    Args:
        source: Shader source text
        target: Target dialect, anything but HLSL is left untouched

    Returns:
        Rewritten source
    """
    if target != ShaderTarget.HLSL:
        return source

    uniforms = extract_uniforms(source)
    if not uniforms:
        return source

    lines = ["cbuffer Uniforms : register(b0)", "{"]
    for uniform in uniforms:
        if not is_builtin_type(uniform.type):
            logger.warning(
                f"Uniform '{uniform.name}' has non-builtin type '{uniform.type}', "
                "copied into the constant buffer as is"
            )
        hlsl_type = TYPE_MAPPINGS.get(uniform.type, uniform.type)
        lines.append(f"    {hlsl_type} {uniform.name};")
    lines.append("};")

    cleaned_source = _UNIFORM_LINE_PATTERN.sub("", source)
    return "\n".join(lines) + "\n" + cleaned_source


def convert_attribute_declarations(
    source: str, target: ShaderTarget, stage: ShaderStage
) -> str:
    """Rewrite ``layout(location=N) in T name;`` into the target input binding.

    Only vertex shaders have vertex attributes; fragment sources are returned
    unchanged.
    """
    if stage != ShaderStage.VERTEX:
        return source

    if target == ShaderTarget.HLSL:
        return ATTRIBUTE_PATTERN.sub(r"\2 \3 : TEXCOORD\1;", source)
    elif target == ShaderTarget.METAL:
        return ATTRIBUTE_PATTERN.sub(r"\2 \3 [[attribute(\1)]];", source)
    return source


def convert_varying_declarations(
    source: str, target: ShaderTarget, stage: ShaderStage
) -> str:
    """Rewrite stage outputs (vertex) or stage inputs (fragment) to interpolants.

    Every interpolant gets index 0. This is only correct for shaders passing a
    single varying between stages.
    """
    if target == ShaderTarget.HLSL:
        if stage == ShaderStage.VERTEX:
            return _VERTEX_OUTPUT_PATTERN.sub(r"\1 \2 : TEXCOORD0;", source)
        return _FRAGMENT_INPUT_PATTERN.sub(r"\1 \2 : TEXCOORD0;", source)
    elif target == ShaderTarget.METAL and stage == ShaderStage.VERTEX:
        return _VERTEX_OUTPUT_PATTERN.sub(r"\1 \2 [[user(locn0)]];", source)
    return source


def convert_builtin_functions(source: str, target: ShaderTarget) -> str:
    """Rename builtin functions and vector/matrix types for the target."""
    output = source

    if target == ShaderTarget.HLSL:
        for glsl_name, hlsl_name in BUILTIN_FUNCTIONS.items():
            output = _replace_word(output, glsl_name, hlsl_name)
        for glsl_type, hlsl_type in TYPE_MAPPINGS.items():
            output = _replace_word(output, glsl_type, hlsl_type)
    elif target == ShaderTarget.METAL:
        for glsl_type, metal_type in TYPE_MAPPINGS.items():
            output = _replace_word(output, glsl_type, metal_type)

    return output


def convert_matrix_operations(source: str, target: ShaderTarget) -> str:
    """Rewrite ``a * b`` into ``mul(a, b)`` for HLSL.

    The match is purely textual: scalar products are rewritten too, and in a
    chain only the first operand pair of each run is wrapped.
    """
    if target != ShaderTarget.HLSL:
        return source

    return _MULTIPLY_PATTERN.sub(r"mul(\1, \2)", source)


def replace_builtin_variables(
    source: str, target: ShaderTarget, stage: ShaderStage
) -> str:
    """Rename the stage's position or color output builtin."""
    renames = BUILTIN_VARIABLES.get(target)
    if renames is None:
        return source

    glsl_name, target_name = renames[stage]
    return _replace_word(source, glsl_name, target_name)


RULE_PIPELINE: list[tuple[str, RulePass]] = [
    (
        "uniform_declarations",
        lambda text, target, stage: convert_uniform_declarations(text, target),
    ),
    ("attribute_declarations", convert_attribute_declarations),
    ("varying_declarations", convert_varying_declarations),
    (
        "builtin_functions",
        lambda text, target, stage: convert_builtin_functions(text, target),
    ),
    (
        "matrix_operations",
        lambda text, target, stage: convert_matrix_operations(text, target),
    ),
    ("builtin_variables", replace_builtin_variables),
]


def apply_rules(source: str, target: ShaderTarget, stage: ShaderStage) -> str:
    """Run every rewrite pass in order.

    Args:
        source: Shader source text
        target: Target dialect
        stage: Shader stage

    Returns:
        Rewritten source
    """
    output = source
    for name, rule in RULE_PIPELINE:
        output = rule(output, target, stage)
        logger.debug(f"Applied rule '{name}' for {target.name}/{stage.name}")
    return output
