from glslx.transpiler import (
    ShaderStage,
    ShaderTarget,
    ShaderTranspiler,
    TranspilationResult,
    UniformBinding,
    VertexAttribute,
    extract_attributes,
    extract_uniforms,
    transpile,
    transpile_program,
)

__version__ = "0.1.0"


__all__ = [
    "ShaderStage",
    "ShaderTarget",
    "ShaderTranspiler",
    "TranspilationResult",
    "UniformBinding",
    "VertexAttribute",
    "extract_attributes",
    "extract_uniforms",
    "transpile",
    "transpile_program",
]
