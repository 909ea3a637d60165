"""
Model the token segments and the arena which owns them.

Segments are linked in two dimensions. The ``next`` link chains the tokens of
a single XPath expression, left to right. The ``sibling`` link chains the heads
of expressions joined by the SLAX concatenation operator ``_``. For example,
in ``var $x = a1/a2/a3 _ b1/b2/b3;`` the segment ``a1`` has ``/`` as its next
and ``b1`` as its sibling.

Instead of linking the segments directly, we keep them in an :py:class:`Arena`
and refer to them by integer handles. A handle is owned by exactly one
:py:class:`Slot` or link at a time, and it is released exactly once with
:py:func:`free`.
"""
from typing import Optional, List, Iterator, Final

import icontract
from icontract import require, ensure, DBC

from slax_strings import escaping
from slax_strings.kinds import TokenKind, QuoteFlags


class Segment:
    """Represent an immutable piece of decoded token text."""

    text: Final[bytes]
    kind: Final[TokenKind]
    quote_flags: Final[QuoteFlags]

    def __init__(self, text: bytes, kind: TokenKind, quote_flags: QuoteFlags) -> None:
        """Initialize with the given values."""
        self.text = text
        self.kind = kind
        self.quote_flags = quote_flags

    def __repr__(self) -> str:
        return (
            f"Segment("
            f"text={self.text!r}, "
            f"kind={self.kind}, "
            f"quote_flags={self.quote_flags})"
        )


def compute_quote_flags(text: bytes) -> QuoteFlags:
    """
    Determine which quote characters the ``text`` contains.

    As soon as we hit a quote different from the one seen before, the text contains
    both kinds of quotes and we report all the flags.
    """
    flags = QuoteFlags.NONE

    last_quote = None  # type: Optional[int]
    for byte in text:
        if byte == ord("'"):
            flags |= QuoteFlags.SINGLE
        elif byte == ord('"'):
            flags |= QuoteFlags.DOUBLE
        else:
            continue

        if last_quote is not None and byte != last_quote:
            return QuoteFlags.SINGLE | QuoteFlags.DOUBLE | QuoteFlags.BOTH

        last_quote = byte

    return flags


class Arena(DBC):
    """
    Own the segments of a single compilation.

    The handles are indices into the arena. Released handles are recycled for
    the subsequent allocations.
    """

    def __init__(self) -> None:
        """Initialize as an empty arena."""
        self._segments = []  # type: List[Optional[Segment]]
        self._nexts = []  # type: List[Optional[int]]
        self._siblings = []  # type: List[Optional[int]]
        self._released = []  # type: List[int]

    def is_alive(self, handle: int) -> bool:
        """Check that the ``handle`` has been allocated and not yet released."""
        return 0 <= handle < len(self._segments) and self._segments[handle] is not None

    @ensure(lambda self, result: self.is_alive(result))
    @ensure(lambda self, result: self.next_of(result) is None)
    @ensure(lambda self, result: self.sibling_of(result) is None)
    def allocate(self, segment: Segment) -> int:
        """Put the ``segment`` in the arena and return its handle."""
        if len(self._released) > 0:
            handle = self._released.pop()
            self._segments[handle] = segment
            return handle

        self._segments.append(segment)
        self._nexts.append(None)
        self._siblings.append(None)
        return len(self._segments) - 1

    @require(lambda self, handle: self.is_alive(handle))
    def segment(self, handle: int) -> Segment:
        """Retrieve the segment behind the ``handle``."""
        segment = self._segments[handle]
        assert segment is not None
        return segment

    @require(lambda self, handle: self.is_alive(handle))
    def next_of(self, handle: int) -> Optional[int]:
        """Retrieve the next segment in the expression, if any."""
        return self._nexts[handle]

    @require(lambda self, handle: self.is_alive(handle))
    def sibling_of(self, handle: int) -> Optional[int]:
        """Retrieve the head of the next expression in the concatenation, if any."""
        return self._siblings[handle]

    @require(lambda self, handle: self.is_alive(handle))
    @require(
        lambda self, next_handle: next_handle is None or self.is_alive(next_handle)
    )
    @require(
        lambda self, handle, next_handle: next_handle is None
        or handle not in self.iterate(next_handle),
        "No cycles along the next links",
        enabled=icontract.SLOW,
    )
    def set_next(self, handle: int, next_handle: Optional[int]) -> None:
        """Link ``next_handle`` as the continuation of ``handle``."""
        self._nexts[handle] = next_handle

    @require(lambda self, handle: self.is_alive(handle))
    @require(
        lambda self, sibling_handle: sibling_handle is None
        or self.is_alive(sibling_handle)
    )
    @require(
        lambda self, handle, sibling_handle: sibling_handle is None
        or handle not in self.iterate_expressions(sibling_handle),
        "No cycles along the sibling links",
        enabled=icontract.SLOW,
    )
    def set_sibling(self, handle: int, sibling_handle: Optional[int]) -> None:
        """Link ``sibling_handle`` as the next expression after ``handle``."""
        self._siblings[handle] = sibling_handle

    @require(lambda self, handle: self.is_alive(handle))
    @ensure(lambda self, handle: self.next_of(handle) is None)
    def detach_next(self, handle: int) -> Optional[int]:
        """Cut the next link of ``handle`` and hand over the remainder."""
        next_handle = self._nexts[handle]
        self._nexts[handle] = None
        return next_handle

    @require(lambda self, handle: self.is_alive(handle))
    @ensure(lambda self, handle: self.sibling_of(handle) is None)
    def detach_sibling(self, handle: int) -> Optional[int]:
        """Cut the sibling link of ``handle`` and hand over the sibling chain."""
        sibling_handle = self._siblings[handle]
        self._siblings[handle] = None
        return sibling_handle

    @require(lambda self, handle: self.is_alive(handle))
    @require(
        lambda self, handle: self.next_of(handle) is None
        and self.sibling_of(handle) is None,
        "Links cleared before the release",
    )
    @ensure(lambda self, handle: not self.is_alive(handle))
    def release(self, handle: int) -> None:
        """Drop the segment behind ``handle`` and recycle the handle."""
        self._segments[handle] = None
        self._released.append(handle)

    def iterate(self, head: Optional[int]) -> Iterator[int]:
        """Iterate over the handles of an expression along the next links."""
        handle = head
        while handle is not None:
            yield handle
            handle = self._nexts[handle]

    def iterate_expressions(self, head: Optional[int]) -> Iterator[int]:
        """Iterate over the expression heads along the sibling links."""
        handle = head
        while handle is not None:
            yield handle
            handle = self._siblings[handle]

    @require(lambda self, head: self.is_alive(head))
    def tail_of(self, head: int) -> int:
        """Walk the expression starting at ``head`` to its last segment."""
        handle = head
        next_handle = self._nexts[handle]
        while next_handle is not None:
            handle = next_handle
            next_handle = self._nexts[handle]

        return handle

    def __len__(self) -> int:
        """Return the number of live segments."""
        return len(self._segments) - len(self._released)


class Slot:
    """
    Hold the head of a chain on behalf of the parser.

    The slot owns the chain until somebody takes it over with :py:meth:`take`.
    """

    def __init__(self, head: Optional[int] = None) -> None:
        """Initialize with the given values."""
        self.head = head

    @ensure(lambda self: self.head is None)
    def take(self) -> Optional[int]:
        """Hand over the chain and clear the slot."""
        head = self.head
        self.head = None
        return head

    def __repr__(self) -> str:
        return f"Slot(head={self.head!r})"


@require(lambda source, start, end: 0 <= start <= end <= len(source))
@require(
    lambda source, start, end, kind: kind is not TokenKind.QUOTED
    or (
        end - start >= 2
        and source[start] in "'\""
        and source[end - 1] == source[start]
    ),
    "Quoted tokens are delimited by matching quotes",
)
@ensure(lambda kind, result: (kind is TokenKind.EOS) == (result is None))
def create_from_range(
    arena: Arena, source: str, start: int, end: int, kind: TokenKind
) -> Optional[int]:
    """
    Create a segment from the token ``source[start:end]`` of the given ``kind``.

    Quoted literals are stripped of their delimiting quotes and their escape
    sequences are decoded. The statement terminators yield no segment.
    """
    if kind is TokenKind.EOS:
        return None

    if kind is TokenKind.QUOTED:
        text = escaping.decode_escapes(source[start + 1 : end - 1])
    else:
        text = source[start:end].encode("utf-8")

    return arena.allocate(
        Segment(text=text, kind=kind, quote_flags=compute_quote_flags(text))
    )


@require(lambda kind: kind is not TokenKind.EOS)
def create_literal(arena: Arena, text: str, kind: TokenKind) -> int:
    """Create a segment from an internal literal ``text`` without decoding escapes."""
    encoded = text.encode("utf-8")
    return arena.allocate(
        Segment(text=encoded, kind=kind, quote_flags=compute_quote_flags(encoded))
    )


@require(lambda arena, head: head is None or arena.is_alive(head))
def free(arena: Arena, head: Optional[int]) -> None:
    """
    Release the chain starting at ``head`` in both dimensions.

    The sibling chain of a segment is released before the segment itself, and
    both links are cleared before the release so that no segment is visited
    twice.
    """
    if head is None:
        return

    pending = [head]  # type: List[int]

    while len(pending) > 0:
        handle = pending.pop()

        sibling_handle = arena.detach_sibling(handle)
        if sibling_handle is not None:
            # Come back to ``handle`` once its whole sibling chain is gone.
            pending.append(handle)
            pending.append(sibling_handle)
            continue

        next_handle = arena.detach_next(handle)
        arena.release(handle)

        if next_handle is not None:
            pending.append(next_handle)
