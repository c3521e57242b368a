"""
Exceptions and error handling for the shader transpiler.

This module defines the error taxonomy shared by the validator, the extractor
and the external toolchain steps.
"""

from enum import Enum, auto


class ErrorKind(Enum):
    """Categories of transpilation failures."""

    EMPTY_INPUT = auto()
    MALFORMED_BRACES = auto()
    EXTERNAL_TOOL_FAILURE = auto()
    SOFT_TOOL_FAILURE = auto()
    INTEGER_PARSE_ERROR = auto()


class TranspilerError(Exception):
    """Exception raised for errors during shader transpilation.

    This is the base class for every error the transpiler raises. The
    top-level ``transpile`` call turns it into a failed result instead of
    letting it escape.

    Examples:
        >>> raise TranspilerError("Unknown shader target")
        Traceback (most recent call last):
        ...
        glslx.transpiler.errors.TranspilerError: Unknown shader target
    """

    kind: ErrorKind = ErrorKind.EXTERNAL_TOOL_FAILURE

    def __init__(self, message: str, kind: ErrorKind | None = None):
        """Initialize the exception with a message and optional error kind.

        Args:
            message: The error message
            kind: Error category, defaults to the class level kind
        """
        self.message = message
        if kind is not None:
            self.kind = kind
        super().__init__(message)


class EmptyInputError(TranspilerError):
    """Shader source has zero length."""

    kind = ErrorKind.EMPTY_INPUT


class MalformedBracesError(TranspilerError):
    """Shader source lacks an opening or a closing curly brace."""

    kind = ErrorKind.MALFORMED_BRACES


class IntegerParseError(TranspilerError):
    """A layout location literal could not be parsed as an integer."""

    kind = ErrorKind.INTEGER_PARSE_ERROR
