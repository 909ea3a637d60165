"""Provide common functionality across different tests."""
import collections
from typing import List, Optional, Sequence, Tuple

from slax_strings import linking, segments
from slax_strings.kinds import TokenKind
from slax_strings.segments import Arena, Slot

# pylint: disable=missing-function-docstring

Token = Tuple[TokenKind, str]


def build_expression(arena: Arena, tokens: Sequence[Token]) -> int:
    """
    Build an expression from the ``tokens`` as the parser would.

    The quoted tokens are expected with their delimiting quotes.
    """
    slots = [
        Slot(segments.create_from_range(arena, text, 0, len(text), kind))
        for kind, text in tokens
    ]

    head = linking.link(arena, slots)
    assert head is not None, f"Expected at least one segment in {tokens!r}"
    return head


def build_concatenation(arena: Arena, expressions: Sequence[Sequence[Token]]) -> int:
    """Build the expressions and link them as a concatenation."""
    heads = [
        build_expression(arena, tokens) for tokens in expressions
    ]  # type: List[Optional[int]]

    head = linking.link_siblings(arena, heads)
    assert head is not None
    return head


def texts(arena: Arena, head: Optional[int]) -> List[bytes]:
    return [arena.segment(handle).text for handle in arena.iterate(head)]


class CountingArena(Arena):
    """Record how many times and in which order the handles are released."""

    def __init__(self) -> None:
        Arena.__init__(self)
        self.release_counter = collections.Counter()  # type: collections.Counter[int]
        self.release_order = []  # type: List[bytes]

    def release(self, handle: int) -> None:
        self.release_counter[handle] += 1
        self.release_order.append(self.segment(handle).text)
        Arena.release(self, handle)
