"""Represent the chains of segments as strings for testing or debugging."""

import collections.abc
import io
import textwrap
from typing import Sequence, Union, Optional, List

from icontract import require

from slax_strings.common import assert_never
from slax_strings.kinds import QuoteFlags
from slax_strings.segments import Arena, Segment

# We have to separate Stringifiable and Sequence[Stringifiable] since recursive types
# are not supported in mypy, see https://github.com/python/mypy/issues/731.
PrimitiveStringifiable = Union[bool, int, str, bytes, "Entity", None]

Stringifiable = Union[
    PrimitiveStringifiable,
    Sequence[PrimitiveStringifiable],
    Sequence[Sequence[PrimitiveStringifiable]],
]


class Property:
    """Represent a property of an entity to be stringified."""

    def __init__(self, name: str, value: Stringifiable) -> None:
        self.name = name
        self.value = value


class Entity:
    """Represent a stringifiable entity which is defined by its properties."""

    def __init__(self, name: str, properties: Sequence[Property]) -> None:
        """Initialize with the given values."""
        self.name = name
        self.properties = properties

    def __repr__(self) -> str:
        return dump(self)


def _indent_but_first_line(text: str, indention: str) -> str:
    lines = text.splitlines()
    return "\n".join(
        [lines[0]]
        + [indention + line if len(line) > 0 else line for line in lines[1:]]
    )


def dump(stringifiable: Stringifiable) -> str:
    """Produce a string representation of ``stringifiable`` for debugging or testing."""
    if isinstance(stringifiable, (bool, int, str, bytes)) or stringifiable is None:
        return repr(stringifiable)

    elif isinstance(stringifiable, Entity):
        if len(stringifiable.properties) == 0:
            return f"{stringifiable.name}()"

        writer = io.StringIO()
        writer.write(f"{stringifiable.name}(\n")

        for i, prop in enumerate(stringifiable.properties):
            value_str = _indent_but_first_line(dump(prop.value), "  ")
            writer.write(f"  {prop.name}={value_str}")

            if i == len(stringifiable.properties) - 1:
                writer.write(")")
            else:
                writer.write(",\n")

        return writer.getvalue()

    elif isinstance(stringifiable, collections.abc.Sequence):
        if len(stringifiable) == 0:
            return "[]"

        writer = io.StringIO()
        writer.write("[\n")
        for i, value in enumerate(stringifiable):
            writer.write(textwrap.indent(dump(value), "  "))

            if i == len(stringifiable) - 1:
                writer.write("]")
            else:
                writer.write(",\n")

        return writer.getvalue()

    else:
        assert_never(stringifiable)

    raise AssertionError("Should not have gotten here")


def stringify_segment(segment: Segment) -> Entity:
    """Convert the ``segment`` to a stringifiable entity."""
    return Entity(
        name=Segment.__name__,
        properties=[
            Property("text", segment.text),
            Property("kind", segment.kind.value),
            Property(
                "quote_flags",
                [
                    flag.name
                    for flag in QuoteFlags
                    if flag.value != 0 and flag in segment.quote_flags
                ],
            ),
        ],
    )


@require(lambda arena, head: head is None or arena.is_alive(head))
def stringify_chain(arena: Arena, head: Optional[int]) -> List[List[Entity]]:
    """
    Convert the chain at ``head`` to a list of expressions.

    Each expression is given as the list of its segments.
    """
    return [
        [stringify_segment(arena.segment(handle)) for handle in arena.iterate(expression)]
        for expression in arena.iterate_expressions(head)
    ]


@require(lambda arena, head: head is None or arena.is_alive(head))
def dump_chain(arena: Arena, head: Optional[int]) -> str:
    """Produce a string representation of the chain at ``head``."""
    return dump(stringify_chain(arena, head))
