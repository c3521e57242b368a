"""
Constants and predefined values for the shader transpiler.

This module contains the declaration patterns, type tables and header strings
used by the extractor, the rewrite rules and the backends.
"""

import re

from glslx.transpiler.models import ShaderStage, ShaderTarget

# Declaration patterns shared by the extractor and the rewrite rules
UNIFORM_PATTERN = re.compile(r"uniform\s+(\w+)\s+(\w+);")
ATTRIBUTE_PATTERN = re.compile(
    r"layout\s*\(\s*location\s*=\s*([0-9]+)\s*\)\s*in\s+(\w+)\s+(\w+);"
)
VERSION_DIRECTIVE_PATTERN = re.compile(r"#version\s+\d+[^\n]*(?:\n|$)")

# Types the source dialect knows without a struct declaration
BUILTIN_TYPES: frozenset[str] = frozenset(
    {
        "float",
        "int",
        "uint",
        "vec2",
        "vec3",
        "vec4",
        "ivec2",
        "ivec3",
        "ivec4",
        "mat2",
        "mat3",
        "mat4",
        "sampler2D",
        "samplerCube",
    }
)

# Source type spellings and their HLSL/Metal equivalents
TYPE_MAPPINGS: dict[str, str] = {
    "mat3": "float3x3",
    "mat4": "float4x4",
    "vec2": "float2",
    "vec3": "float3",
    "vec4": "float4",
}

# Builtin functions with the same spelling in every supported dialect
BUILTIN_FUNCTIONS: dict[str, str] = {
    "normalize": "normalize",
    "dot": "dot",
    "max": "max",
    "transpose": "transpose",
    "inverse": "inverse",
}

# Per target, per stage renames of builtin output variables
BUILTIN_VARIABLES: dict[ShaderTarget, dict[ShaderStage, tuple[str, str]]] = {
    ShaderTarget.HLSL: {
        ShaderStage.VERTEX: ("gl_Position", "position"),
        ShaderStage.FRAGMENT: ("gl_FragColor", "output"),
    },
    ShaderTarget.METAL: {
        ShaderStage.VERTEX: ("gl_Position", "out.position"),
        ShaderStage.FRAGMENT: ("gl_FragColor", "out.color"),
    },
}

VERSION_STRINGS: dict[ShaderTarget, str] = {
    ShaderTarget.GLSL: "#version 330 core",
    ShaderTarget.HLSL: "// HLSL Shader (Target: Direct3D 11)",
    ShaderTarget.VULKAN: "#version 450 core",
    ShaderTarget.METAL: "// Metal Shader Language",
}

# dxc profiles and glslang stage names
HLSL_PROFILES: dict[ShaderStage, str] = {
    ShaderStage.VERTEX: "vs_6_0",
    ShaderStage.FRAGMENT: "ps_6_0",
}
GLSLANG_STAGES: dict[ShaderStage, str] = {
    ShaderStage.VERTEX: "vert",
    ShaderStage.FRAGMENT: "frag",
}

# Stand-in for an intrinsic HLSL lacks. It returns its argument unchanged,
# so any shader relying on it renders incorrectly.
UNIMPLEMENTED_INVERSE_INTRINSIC = """\
// UNIMPLEMENTED INTRINSIC: inverse() is a placeholder, results are wrong.
// Pass the inverse matrix as a separate uniform instead.
float4x4 inverse(float4x4 m) {
    return m;
}
"""

VERTEX_BANNER = "// === VERTEX SHADER ==="
FRAGMENT_BANNER = "// === FRAGMENT SHADER ==="
