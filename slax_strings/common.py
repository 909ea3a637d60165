"""Provide common functions and types for assembling the token strings."""
import io
import textwrap
from typing import Optional, List, NoReturn, Sequence


class Error:
    """
    Represent an unexpected input.

    The ``location`` points to the offending part of the input, *e.g.*,
    ``expressions[1][3]`` for the fourth token of the second expression.
    """

    def __init__(
        self,
        location: Optional[str],
        message: str,
        underlying: Optional[List["Error"]] = None,
    ) -> None:
        self.location = location
        self.message = message
        self.underlying = underlying

    def __repr__(self) -> str:
        return (
            f"Error("
            f"location={self.location!r}, "
            f"message={self.message!r}, "
            f"underlying={self.underlying!r})"
        )


def error_message(error: Error) -> str:
    """Generate the error message including the underlying errors, indented."""
    prefix = ""
    if error.location is not None:
        prefix = f"At {error.location}: "

    if error.underlying is None or len(error.underlying) == 0:
        return f"{prefix}{error.message}"

    writer = io.StringIO()
    writer.write(f"{prefix}{error.message}\n")
    for i, underlying_error in enumerate(error.underlying):
        if i > 0:
            writer.write("\n")
        writer.write(textwrap.indent(error_message(underlying_error), "  "))

    return writer.getvalue()


def error_messages(errors: Sequence[Error]) -> List[str]:
    """Render each of the ``errors`` with :py:func:`error_message`."""
    return [error_message(error) for error in errors]


def assert_never(value: NoReturn) -> NoReturn:
    """
    Signal to mypy to perform an exhaustive matching.

    Please see the following page for more details:
    https://hakibenita.com/python-mypy-exhaustive-checking
    """
    assert False, f"Unhandled value: {value} ({type(value).__name__})"
