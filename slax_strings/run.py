"""Load the pre-tokenized expressions and report the errors in a unified way."""
import json
import pathlib
import textwrap
from typing import Sequence, TextIO, Tuple, Optional, List, Any

from icontract import require, ensure

from slax_strings import linking, segments
from slax_strings.common import Error, error_messages
from slax_strings.kinds import STR_TO_TOKEN_KIND, TokenKind
from slax_strings.segments import Arena, Slot


# fmt: off
@require(
    lambda errors: all(
        len(error) > 0 and not error.startswith("\n")
        # This is necessary so that we do not have double bullet point.
        and not error.startswith("*") and not error.endswith("\n")
        for error in errors
    )
)
@require(lambda message: not message.endswith(":"))
@require(lambda message: not message.endswith("\n"))
@require(lambda message: not message.startswith("\n") and not message.startswith("*"))
# fmt: on
def write_error_report(message: str, errors: Sequence[str], stderr: TextIO) -> None:
    """
    Write the report (main ``message`` and details as ``errors``) to ``stderr``.

    This method helps us to have a unified way of showing errors.
    """
    stderr.write(f"{message}:\n")
    for error in errors:
        indented = textwrap.indent(error, "  ")
        indented = "* " + indented[2:]
        stderr.write(f"{indented}\n")


def _check_token(token: Any, location: str) -> Optional[Error]:
    """Check that the ``token`` is a ``[kind, text]`` pair we can build upon."""
    if (
        not isinstance(token, list)
        or len(token) != 2
        or not isinstance(token[0], str)
        or not isinstance(token[1], str)
    ):
        return Error(
            location, f"Expected a token as a [kind, text] pair, but got: {token!r}"
        )

    kind_str, text = token
    kind = STR_TO_TOKEN_KIND.get(kind_str, None)
    if kind is None:
        return Error(
            location,
            f"Unexpected token kind {kind_str!r}; "
            f"expected one of: {sorted(STR_TO_TOKEN_KIND)}",
        )

    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exception:
        return Error(
            location,
            "Expected a token text encodable in UTF-8, but the character "
            f"at index {exception.start} is not: {text!r}",
        )

    if kind is TokenKind.QUOTED and (
        len(text) < 2 or text[0] not in "'\"" or text[-1] != text[0]
    ):
        return Error(
            location,
            f"Expected a quoted token delimited by matching quotes, but got: {text!r}",
        )

    return None


@ensure(lambda result: (result[0] is not None) ^ (result[1] is not None))
def build_chain(
    expressions: Any,
) -> Tuple[Optional[Tuple[Arena, int]], Optional[List[Error]]]:
    """
    Build the chain of the ``expressions`` given as parsed JSON.

    The ``expressions`` are expected as a list of expressions, where each
    expression is a list of ``[kind, text]`` tokens. The expressions are linked
    as a concatenation.

    Return the arena and the head of the chain, or the errors.
    """
    if not isinstance(expressions, list) or len(expressions) == 0:
        return None, [
            Error(None, "Expected a non-empty list of expressions at the top level")
        ]

    errors = []  # type: List[Error]

    for i, expression in enumerate(expressions):
        if not isinstance(expression, list):
            errors.append(
                Error(f"expressions[{i}]", "Expected a list of tokens as an expression")
            )
            continue

        for j, token in enumerate(expression):
            error = _check_token(token, location=f"expressions[{i}][{j}]")
            if error is not None:
                errors.append(error)

    if len(errors) > 0:
        return None, errors

    arena = Arena()

    heads = []  # type: List[Optional[int]]
    for i, expression in enumerate(expressions):
        slots = [
            Slot(
                segments.create_from_range(
                    arena, text, 0, len(text), STR_TO_TOKEN_KIND[kind_str]
                )
            )
            for kind_str, text in expression
        ]

        head = linking.link(arena, slots)
        if head is None:
            errors.append(
                Error(
                    f"expressions[{i}]",
                    "Expected at least one token which is not a statement terminator",
                )
            )

        heads.append(head)

    if len(errors) > 0:
        for head in heads:
            segments.free(arena, head)

        return None, errors

    head = linking.link_siblings(arena, heads)
    assert head is not None

    return (arena, head), None


@require(lambda input_path: input_path.exists() and input_path.is_file())
@ensure(lambda result: (result[0] is not None) ^ (result[1] is not None))
def load_chain(
    input_path: pathlib.Path,
) -> Tuple[Optional[Tuple[Arena, int]], Optional[List[str]]]:
    """Load the expressions from the JSON file at ``input_path`` and chain them."""
    try:
        text = input_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exception:
        return None, [
            "Expected the input to be encoded in UTF-8, "
            f"but failed to decode the byte at offset {exception.start}: "
            f"{exception.reason}"
        ]

    try:
        expressions = json.loads(text)
    except json.JSONDecodeError as exception:
        return None, [
            f"Invalid JSON at line {exception.lineno} "
            f"and column {exception.colno}: {exception.msg}"
        ]

    chain, errors = build_chain(expressions)
    if errors is not None:
        return None, error_messages(errors)

    assert chain is not None
    return chain, None
