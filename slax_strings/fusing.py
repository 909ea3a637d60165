"""Collapse a chain of segments into a single segment."""
from icontract import require, ensure

from slax_strings import rendering
from slax_strings.kinds import TokenKind, RenderFlags
from slax_strings.segments import Arena, Segment, Slot, compute_quote_flags


@require(lambda arena, slot: slot.head is None or arena.is_alive(slot.head))
@require(lambda kind: kind is not TokenKind.EOS)
@ensure(lambda arena, result: arena.is_alive(result))
@ensure(lambda arena, result: arena.next_of(result) is None)
def fuse(arena: Arena, slot: Slot, kind: TokenKind = TokenKind.BARE) -> int:
    """
    Fuse the chain held by ``slot`` into a single segment.

    If the chain is a lone segment which needs no quoting, we take it out of
    the slot and return it as-is. The slot is cleared so that the segment is not
    released together with the rest of the parser stack.

    Otherwise, the chain is rendered with the quotes into a new segment of
    the given ``kind``, or a quoted literal if the chain is a lone quoted literal.
    The slot keeps its chain in that case and stays responsible for releasing it.
    """
    head = slot.head

    if (
        head is not None
        and arena.next_of(head) is None
        and arena.segment(head).kind is not TokenKind.QUOTED
    ):
        taken = slot.take()
        assert taken is not None
        return taken

    if (
        head is not None
        and arena.next_of(head) is None
        and arena.segment(head).kind is TokenKind.QUOTED
    ):
        kind = TokenKind.QUOTED

    text = rendering.render(arena, head, RenderFlags.QUOTES)

    return arena.allocate(
        Segment(text=text, kind=kind, quote_flags=compute_quote_flags(text))
    )
