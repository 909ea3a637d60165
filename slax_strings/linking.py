"""Link the segments into expressions and the expressions into concatenations."""
from typing import Optional, Sequence

from icontract import require, ensure

from slax_strings.kinds import TokenKind
from slax_strings.segments import Arena, Slot, create_literal

#: Text of the SLAX concatenation operator inserted between the appended chunks
CONCATENATION_OPERATOR = "_"


@require(
    lambda arena, slots: all(
        slot.head is None or arena.is_alive(slot.head) for slot in slots
    )
)
@ensure(lambda slots: all(slot.head is None for slot in slots), "Slots cleared")
def link(arena: Arena, slots: Sequence[Slot]) -> Optional[int]:
    """
    Link the chains held by ``slots`` into a single expression.

    This is how the tokens collected for a grammar rule become one chain. Each
    chain is walked to its tail before we attach the chain of the following slot.
    Empty slots are skipped.

    Return the head of the linked expression, or None if all the slots were empty.
    """
    result = None  # type: Optional[int]
    tail = None  # type: Optional[int]

    for slot in slots:
        head = slot.take()
        if head is None:
            continue

        if tail is None:
            result = head
        else:
            arena.set_next(tail, head)

        tail = arena.tail_of(head)

    return result


@require(
    lambda arena, heads: all(head is None or arena.is_alive(head) for head in heads)
)
def link_siblings(arena: Arena, heads: Sequence[Optional[int]]) -> Optional[int]:
    """
    Link the expressions given by their ``heads`` into a concatenation.

    A head which already carries a concatenation is walked to its last
    expression first. Absent heads are skipped.
    """
    result = None  # type: Optional[int]
    last = None  # type: Optional[int]

    for head in heads:
        if head is None:
            continue

        if last is None:
            result = head
        else:
            arena.set_sibling(last, head)

        for last in arena.iterate_expressions(head):
            pass

    return result


class TailCursor:
    """
    Track the expression built chunk by chunk with :py:func:`append_tail`.

    The cursor always points to the last segment so that appending does not need
    to walk the chain.
    """

    def __init__(self) -> None:
        """Initialize as an empty expression."""
        self.head = None  # type: Optional[int]
        self.tail = None  # type: Optional[int]

    @property
    def is_first(self) -> bool:
        """Return True if nothing has been appended yet."""
        return self.head is None

    @require(lambda arena, handle: arena.is_alive(handle))
    def attach(self, arena: Arena, handle: int) -> None:
        """Link ``handle`` after the current tail and move the tail to it."""
        if self.tail is None:
            self.head = handle
        else:
            arena.set_next(self.tail, handle)

        self.tail = handle

    def __repr__(self) -> str:
        return f"TailCursor(head={self.head!r}, tail={self.tail!r})"


@require(lambda arena, cursor: cursor.tail is None or arena.is_alive(cursor.tail))
@require(
    lambda arena, cursor: cursor.tail is None or arena.next_of(cursor.tail) is None,
    "Cursor points to the tail",
)
@ensure(lambda cursor, result: cursor.tail == result)
@ensure(lambda arena, result: arena.next_of(result) is None)
def append_tail(arena: Arena, cursor: TailCursor, text: str, kind: TokenKind) -> int:
    """
    Append a chunk ``text`` of the given ``kind`` to the expression of ``cursor``.

    SLAX joins the chunks with its concatenation operator ``_``, so every chunk
    but the first is preceded by an operator segment.

    Return the handle of the appended chunk.
    """
    if not cursor.is_first:
        cursor.attach(
            arena, create_literal(arena, CONCATENATION_OPERATOR, TokenKind.UNDERSCORE)
        )

    handle = create_literal(arena, text, kind)
    cursor.attach(arena, handle)

    return handle
