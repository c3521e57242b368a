"""Command line interface for glslx.

This module provides a command-line interface for transpiling GLSL shaders to
other dialects and inspecting their uniform and attribute declarations.
"""

import json
import os
import sys
import time
from collections.abc import Callable
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional, TypeVar, cast

import arrow
import numpy as np
import typer
import watchdog.events
import watchdog.observers
from loguru import logger
from watchdog.events import FileSystemEventHandler

from glslx.transpiler import (
    ShaderStage,
    ShaderTarget,
    ShaderTranspiler,
    TranspilationResult,
    apply_rules,
    extract_attributes,
    extract_uniforms,
)

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="glslx",
    help=(
        "Transpile GLSL shaders to HLSL, Vulkan SPIR-V and Metal. "
        "Commands: transpile, program, rewrite, uniforms, attributes, watch."
    ),
    add_completion=False,
)

STAGE_EXTENSIONS: dict[str, ShaderStage] = {
    ".vert": ShaderStage.VERTEX,
    ".vs": ShaderStage.VERTEX,
    ".frag": ShaderStage.FRAGMENT,
    ".fs": ShaderStage.FRAGMENT,
}


def _stderr_sink(message: str) -> None:
    # Resolve sys.stderr per message, it may be swapped after setup
    sys.stderr.write(message)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug output of every rewrite step"
    ),
) -> None:
    """Configure logging for all commands."""
    logger.remove()
    logger.add(_stderr_sink, level="DEBUG" if verbose else "INFO")


def _parse_target(target: str) -> ShaderTarget:
    """Map a target string to a shader target.

    Args:
        target: Target string ("glsl", "hlsl", "vulkan", "metal")

    Returns:
        Shader target
    """
    try:
        return ShaderTarget[target.upper()]
    except KeyError as e:
        choices = ", ".join(t.name.lower() for t in ShaderTarget)
        raise typer.BadParameter(
            f"Unknown target '{target}', expected one of: {choices}"
        ) from e


def _parse_stage(stage: str, shader_file: str) -> ShaderStage:
    """Resolve the shader stage from an option or the file extension.

    Args:
        stage: Stage string ("vertex", "fragment") or empty to infer
        shader_file: Shader file path

    Returns:
        Shader stage, fragment when it cannot be inferred
    """
    if stage:
        try:
            return ShaderStage[stage.upper()]
        except KeyError as e:
            raise typer.BadParameter(
                f"Unknown stage '{stage}', expected vertex or fragment"
            ) from e

    inferred = STAGE_EXTENSIONS.get(Path(shader_file).suffix.lower())
    if inferred is None:
        logger.warning(f"Cannot infer stage of {shader_file}, assuming fragment")
        return ShaderStage.FRAGMENT
    return inferred


def _read_source(shader_file: str) -> str:
    try:
        return Path(shader_file).read_text()
    except OSError as e:
        logger.error(f"Failed to read shader file: {e}")
        raise typer.Exit(1) from e


def _add_header_comments(
    code: str, source_files: list[str], target: ShaderTarget
) -> str:
    """Add header comments to the code.

    Args:
        code: Translated source code
        source_files: Shader files the code was generated from
        target: Target dialect

    Returns:
        Code with header comments
    """
    timestamp = arrow.utcnow().format("YYYY-MM-DD HH:mm:ss UTC")
    names = ", ".join(os.path.basename(f) for f in source_files)
    header = f"// Generated by glslx v{__import__('glslx').__version__}\n"
    header += f"// Generation time: {timestamp}\n"
    header += f"// Source file: {names}\n"
    header += f"// Target: {target.name}\n"
    header += "\n"
    return header + code


def _check_result(result: TranspilationResult) -> None:
    """Exit with an error unless the result carries usable output."""
    if not result.success:
        logger.error(f"Transpilation failed: {result.error_message}")
        raise typer.Exit(1)

    if not result.output and not result.binary:
        logger.error(f"Transpilation produced no output: {result.error_message}")
        raise typer.Exit(1)

    if result.error_message:
        logger.info(result.error_message)


def _write_output(code: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(code)
        return

    logger.info(f"Exporting shader code to {output}...")
    output.write_text(code)
    logger.info(f"Shader code exported to {output}")


def _write_binary(words: list[int], output: Path) -> None:
    output.write_bytes(np.asarray(words, dtype="<u4").tobytes())
    logger.info(f"SPIR-V module ({len(words)} words) written to {output}")


# Define reusable arguments
SHADER_FILE_ARG = typer.Argument(..., help="GLSL shader file")
OUTPUT_CODE_ARG = typer.Argument(None, help="Output code file path (stdout if omitted)")
TARGET_OPTION = typer.Option(
    "glsl", "--target", "-t", help="Target dialect (glsl, hlsl, vulkan, metal)"
)
STAGE_OPTION = typer.Option(
    "", "--stage", "-s", help="Shader stage (vertex, fragment), inferred if omitted"
)
FORMAT_OPTION = typer.Option(
    "plain", "--format", "-f", help="Code format (plain, commented)"
)


@typed_command(app.command("transpile"))
def transpile_shader(
    shader_file: str = SHADER_FILE_ARG,
    output: Optional[Path] = OUTPUT_CODE_ARG,
    target: str = TARGET_OPTION,
    stage: str = STAGE_OPTION,
    format: str = FORMAT_OPTION,
    binary_output: Optional[Path] = typer.Option(
        None, "--binary-output", "-b", help="Write the SPIR-V module (vulkan target)"
    ),
) -> None:
    """Transpile a single shader stage.

    Example: glslx transpile shaders/basic.vert basic.hlsl --target hlsl
    """
    shader_target = _parse_target(target)
    shader_stage = _parse_stage(stage, shader_file)
    logger.info(f"Transpiling {shader_stage.name} shader to {shader_target.name}")

    result = ShaderTranspiler().transpile(
        _read_source(shader_file), shader_target, shader_stage
    )
    _check_result(result)

    if binary_output is not None:
        if result.binary:
            _write_binary(result.binary, binary_output)
        else:
            logger.warning(
                "--binary-output only applies to the vulkan target. Ignoring."
            )

    code = result.output
    if format == "commented":
        code = _add_header_comments(code, [shader_file], shader_target)
    _write_output(code, output)


@typed_command(app.command("program"))
def transpile_program(
    vertex_file: str = typer.Argument(..., help="GLSL vertex shader file"),
    fragment_file: str = typer.Argument(..., help="GLSL fragment shader file"),
    output: Optional[Path] = OUTPUT_CODE_ARG,
    target: str = TARGET_OPTION,
    format: str = FORMAT_OPTION,
) -> None:
    """Transpile a vertex and fragment shader pair into one file.

    Example: glslx program basic.vert basic.frag basic.hlsl --target hlsl
    """
    shader_target = _parse_target(target)
    result = ShaderTranspiler().transpile_program(
        _read_source(vertex_file), _read_source(fragment_file), shader_target
    )
    _check_result(result)

    code = result.output
    if format == "commented":
        code = _add_header_comments(code, [vertex_file, fragment_file], shader_target)
    _write_output(code, output)


@typed_command(app.command("rewrite"))
def rewrite_shader(
    shader_file: str = SHADER_FILE_ARG,
    target: str = TARGET_OPTION,
    stage: str = STAGE_OPTION,
) -> None:
    """Show the text rewrite rules' output without running external tools.

    Example: glslx rewrite shaders/basic.vert --target metal
    """
    shader_target = _parse_target(target)
    shader_stage = _parse_stage(stage, shader_file)
    typer.echo(apply_rules(_read_source(shader_file), shader_target, shader_stage))


@typed_command(app.command("uniforms"))
def list_uniforms(
    shader_file: str = SHADER_FILE_ARG,
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text"),
) -> None:
    """List uniform declarations with their assigned bindings."""
    uniforms = extract_uniforms(_read_source(shader_file))
    if as_json:
        typer.echo(json.dumps([asdict(u) for u in uniforms], indent=2))
        return

    for uniform in uniforms:
        typer.echo(
            f"set={uniform.set} binding={uniform.binding} "
            f"{uniform.type} {uniform.name}"
        )


@typed_command(app.command("attributes"))
def list_attributes(
    shader_file: str = SHADER_FILE_ARG,
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text"),
) -> None:
    """List vertex attributes with their layout locations."""
    attributes = extract_attributes(_read_source(shader_file))
    if as_json:
        typer.echo(json.dumps([asdict(a) for a in attributes], indent=2))
        return

    for attribute in attributes:
        typer.echo(f"location={attribute.location} {attribute.type} {attribute.name}")


class ShaderChangeHandler(FileSystemEventHandler):  # type: ignore
    """Event handler re-transpiling a shader file when it changes."""

    def __init__(
        self,
        shader_file: str,
        target: ShaderTarget,
        stage: ShaderStage,
        output: Optional[Path],
    ):
        """Initialize shader change handler.

        Args:
            shader_file: Absolute path to the shader file
            target: Target dialect
            stage: Shader stage
            output: Output file, stdout if None
        """
        self.shader_file = shader_file
        self.target = target
        self.stage = stage
        self.output = output
        self.transpiler = ShaderTranspiler()

    def on_modified(self, event: watchdog.events.FileSystemEvent) -> None:
        """Handle file modified event.

        Args:
            event: File system event
        """
        if event.src_path == self.shader_file:
            logger.info(f"Detected changes in {self.shader_file}")
            self.run()

    def run(self) -> bool:
        """Transpile the current file contents.

        Returns:
            True if usable output was written
        """
        try:
            source = Path(self.shader_file).read_text()
        except OSError as e:
            logger.error(f"Failed to read shader file: {e}")
            return False

        result = self.transpiler.transpile(source, self.target, self.stage)
        if not result.success or not result.output:
            logger.error(f"Transpilation failed: {result.error_message}")
            return False

        _write_output(result.output, self.output)
        return True


@typed_command(app.command("watch"))
def watch_shader(
    shader_file: str = SHADER_FILE_ARG,
    output: Optional[Path] = OUTPUT_CODE_ARG,
    target: str = TARGET_OPTION,
    stage: str = STAGE_OPTION,
) -> None:
    """Watch a shader file and transpile it again on every change.

    Example: glslx watch shaders/basic.frag basic.metal --target metal
    """
    shader_target = _parse_target(target)
    shader_stage = _parse_stage(stage, shader_file)

    abs_shader_file = os.path.abspath(shader_file)
    handler = ShaderChangeHandler(abs_shader_file, shader_target, shader_stage, output)
    handler.run()

    # Watch the file's directory, not the file itself
    observer = watchdog.observers.Observer()
    observer.schedule(handler, path=os.path.dirname(abs_shader_file), recursive=False)
    observer.start()
    logger.info(f"Watching {shader_file} (press Ctrl+C to stop)...")

    try:
        while observer.is_alive():
            time.sleep(0.5)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, stopping...")
    finally:
        observer.stop()
        observer.join()


if __name__ == "__main__":
    app()
