"""Pre-flight checks run before any rewriting."""

from glslx.transpiler.errors import EmptyInputError, MalformedBracesError

EMPTY_INPUT_MESSAGE = "Input shader source is empty"
MISSING_BRACES_MESSAGE = (
    "Missing curly braces in shader source. Please fix the problem."
)


def validate(source: str) -> None:
    """Reject structurally unusable shader source.

    This is a coarse sanity check: the source only needs to contain at least
    one ``{`` and one ``}``, they are not matched against each other.

    Args:
        source: Shader source text

    Raises:
        EmptyInputError: If the source is empty
        MalformedBracesError: If the source lacks ``{`` or ``}``
    """
    if not source:
        raise EmptyInputError(EMPTY_INPUT_MESSAGE)

    if "{" not in source or "}" not in source:
        raise MalformedBracesError(MISSING_BRACES_MESSAGE)
