"""
Render the chains of segments into the text of XPath expressions.

The rendering works in two passes. First, :py:func:`measure` computes the number
of bytes the text needs. Second, :py:func:`copy` writes the text into
a :py:class:`BoundedWriter` whose capacity has been reserved with the measured
length. The writer refuses to grow beyond its capacity, so a mismatch between
the two passes surfaces as a contract violation instead of corrupted text.
"""
from typing import Optional, FrozenSet

from icontract import require, ensure, DBC

from slax_strings.kinds import TokenKind, QuoteFlags, RenderFlags, GLUED_KINDS
from slax_strings.segments import Arena, Segment

_SPACE = ord(" ")
_UNDERSCORE = ord("_")
_COMMA = ord(",")
_DOT = ord(".")
_MINUS = ord("-")

# Characters which bind tightly to their neighbours, as in ``a/b[@c]``
_NO_SPACE = frozenset(b"@/()[]")  # type: FrozenSet[int]

_CLOSERS = frozenset(b")]")  # type: FrozenSet[int]

# A closer is only glued to these, as in ``f(g(x))`` and ``a[1]/b``
_GLUED_AFTER_CLOSER = frozenset(b")]/")  # type: FrozenSet[int]

_CONCAT_PREFIX = b"concat("
_CONCAT_SEPARATOR = b", "
_CONCAT_SUFFIX = b")"


class BoundedWriter(DBC):
    """
    Accumulate the rendered bytes within the capacity reserved up front.

    Every write is checked against the capacity.
    """

    @require(lambda capacity: capacity >= 0)
    def __init__(self, capacity: int) -> None:
        """Initialize with the reserved ``capacity``."""
        self.capacity = capacity
        self._buffer = bytearray()

    def __len__(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    @require(
        lambda self, data: len(self) + len(data) <= self.capacity,
        "No write beyond the reserved capacity",
    )
    def write(self, data: bytes) -> None:
        """Append ``data`` to the buffer."""
        self._buffer.extend(data)

    @require(lambda self: len(self) > 0)
    def drop_last(self) -> None:
        """Remove the last written byte."""
        del self._buffer[-1]

    def byte_at(self, index: int) -> Optional[int]:
        """Return the byte at ``index``, or None if nothing has been written there."""
        if 0 <= index < len(self._buffer):
            return self._buffer[index]

        return None

    def getvalue(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._buffer)


@require(lambda arena, head: head is None or arena.is_alive(head))
@ensure(lambda result: result >= 1)
def measure(arena: Arena, head: Optional[int], flags: RenderFlags) -> int:
    """
    Compute the number of bytes needed to render the expression at ``head``.

    Only the next links are followed; the sibling expressions are not part of
    the measure.

    The result is an upper bound on the bytes written by :py:func:`copy`
    with the same ``flags``, and includes one byte for the terminator.
    """
    length = 0

    for handle in arena.iterate(head):
        segment = arena.segment(handle)
        text = segment.text

        length += len(text)

        if segment.kind not in GLUED_KINDS:
            # One for the space or the terminator
            length += 1

        if segment.kind is TokenKind.QUOTED:
            if RenderFlags.QUOTES in flags:
                # The wrapping quotes and one escape per embedded double quote
                length += 2 + text.count(b'"')

            if RenderFlags.BRACES in flags:
                length += text.count(b"{") + text.count(b"}")

    return length + 1


def _is_digit(byte: Optional[int]) -> bool:
    return byte is not None and ord("0") <= byte <= ord("9")


def _should_trim(
    previous: Optional[int],
    before_previous: Optional[int],
    following: Optional[int],
    following_kind: TokenKind,
    negative_start: bool,
) -> bool:
    """
    Decide whether to drop the space between the rendered text and a segment.

    The ``previous`` is the byte just before the space, ``before_previous``
    the one before it. The ``following`` is the first byte of the segment to be
    written next, None if the segment is empty. The ``negative_start`` indicates
    that the expression so far is a lone ``-``.

    The rules are tried in order and the first match wins. A closer overrides
    the decision afterwards.
    """
    trim = False

    if previous == _UNDERSCORE or following == _UNDERSCORE:
        trim = False

    elif previous in _NO_SPACE or following in _NO_SPACE:
        # Path steps, predicates and calls: a/b[@c], f(x)
        trim = True

    elif following == _COMMA:
        # Arguments: f(1, 2)
        trim = True

    elif (
        _is_digit(previous)
        and following == _DOT
        and following_kind is not TokenKind.DOTDOTDOT
    ):
        # Integral part of a decimal: "3" then "."
        trim = True

    elif previous == _DOT and before_previous != _DOT and _is_digit(following):
        # Fractional part of a decimal: "3." then "14"
        trim = True

    elif negative_start:
        # Unary minus at the start: -2
        trim = True

    # NOTE: A closer stays separated from anything but a closer or a slash,
    # e.g., "f() + 1" and "a[1]/b".
    if previous in _CLOSERS and following not in _GLUED_AFTER_CLOSER:
        trim = False

    return trim


def _write_quoted(writer: BoundedWriter, segment: Segment) -> None:
    """Write the quoted literal wrapped in the quotes it does not contain."""
    text = segment.text

    if QuoteFlags.BOTH in segment.quote_flags:
        # NOTE: XPath 1.0 has no escaping within string literals. Each double
        # quote gets a backslash, for which the measure reserves one byte.
        writer.write(b'"')
        writer.write(text.replace(b'"', b'\\"'))
        writer.write(b'"')

    elif QuoteFlags.DOUBLE in segment.quote_flags:
        writer.write(b"'")
        writer.write(text)
        writer.write(b"'")

    else:
        writer.write(b'"')
        writer.write(text)
        writer.write(b'"')


def _write_braced(writer: BoundedWriter, segment: Segment) -> None:
    """
    Write the quoted literal with its braces doubled.

    XSLT escapes the braces in attribute value templates by doubling them. SLAX
    writes the templates with the normal expression syntax, so a brace in
    a literal has to stay a brace.
    """
    writer.write(segment.text.replace(b"{", b"{{").replace(b"}", b"}}"))


@require(lambda arena, head: head is None or arena.is_alive(head))
@ensure(lambda writer, result: 0 <= result <= len(writer))
def copy(
    writer: BoundedWriter, arena: Arena, head: Optional[int], flags: RenderFlags
) -> int:
    """
    Write the expression at ``head`` into the ``writer``.

    The segments are separated by single spaces, except where the spacing rules
    glue them together (see :py:func:`_should_trim`). Axis names and double
    colons are never followed by a space. No separator follows the last
    segment.

    The spacing rules only look at the bytes written by this call, so the
    expression renders the same regardless of what precedes it in the writer.

    Return the number of bytes written.
    """
    start = len(writer)

    def byte_before(offset: int) -> Optional[int]:
        index = len(writer) - offset
        return writer.byte_at(index) if index >= start else None

    separated = False

    for handle in arena.iterate(head):
        segment = arena.segment(handle)
        text = segment.text

        if len(writer) - start > 1 and byte_before(1) == _SPACE:
            if _should_trim(
                previous=byte_before(2),
                before_previous=byte_before(3),
                following=text[0] if len(text) > 0 else None,
                following_kind=segment.kind,
                negative_start=(
                    len(writer) - start == 2 and writer.byte_at(start) == _MINUS
                ),
            ):
                writer.drop_last()

        if segment.kind is TokenKind.QUOTED and RenderFlags.QUOTES in flags:
            _write_quoted(writer, segment)

        elif segment.kind is TokenKind.QUOTED and RenderFlags.BRACES in flags:
            _write_braced(writer, segment)

        else:
            writer.write(text)

        # Axis names and double colons glue to what follows: child::para
        if segment.kind in GLUED_KINDS:
            separated = False
        else:
            writer.write(b" ")
            separated = True

    if separated:
        writer.drop_last()

    return len(writer) - start


@require(lambda arena, head: head is None or arena.is_alive(head))
@ensure(
    lambda arena, head, flags, result: len(result) < measure(arena, head, flags),
    "Measure is an upper bound including the terminator",
)
def render(arena: Arena, head: Optional[int], flags: RenderFlags) -> bytes:
    """Render the expression at ``head`` as a single string."""
    writer = BoundedWriter(capacity=measure(arena, head, flags))
    copy(writer, arena, head, flags)
    return writer.getvalue()


@require(lambda arena, head: arena.is_alive(head))
def is_simple(arena: Arena, head: int, kind: TokenKind) -> bool:
    """Check that ``head`` is a lone segment of ``kind`` without any links."""
    return (
        arena.next_of(head) is None
        and arena.sibling_of(head) is None
        and arena.segment(head).kind is kind
    )


def _is_lone_literal(arena: Arena, head: int) -> bool:
    """Check that the expression is a single quoted literal, siblings aside."""
    return (
        arena.next_of(head) is None and arena.segment(head).kind is TokenKind.QUOTED
    )


@require(lambda arena, head: head is None or arena.is_alive(head))
def render_concat(arena: Arena, head: Optional[int], flags: RenderFlags) -> bytes:
    """
    Render the concatenation at ``head`` as an XPath ``concat()`` invocation.

    A single expression is rendered as-is, without the invocation. The
    expressions of a concatenation are always rendered with the quotes.

    For example, ``a1/a2 _ "-"`` is rendered as ``concat(a1/a2, "-")``.
    """
    if head is None or arena.sibling_of(head) is None:
        return render(arena, head, flags)

    expression_flags = flags | RenderFlags.QUOTES

    capacity = len(_CONCAT_PREFIX) + len(_CONCAT_SUFFIX)
    for i, expression in enumerate(arena.iterate_expressions(head)):
        if i > 0:
            capacity += len(_CONCAT_SEPARATOR)

        capacity += measure(arena, expression, expression_flags)

    writer = BoundedWriter(capacity=capacity)

    writer.write(_CONCAT_PREFIX)
    for i, expression in enumerate(arena.iterate_expressions(head)):
        if i > 0:
            writer.write(_CONCAT_SEPARATOR)

        copy(writer, arena, expression, expression_flags)

    writer.write(_CONCAT_SUFFIX)

    return writer.getvalue()


@require(lambda arena, head: head is None or arena.is_alive(head))
def render_avt(arena: Arena, head: Optional[int], flags: RenderFlags) -> bytes:
    """
    Render the concatenation at ``head`` as an attribute value template.

    The quoted literals are written as they are, with their braces doubled, while
    all the other expressions are wrapped in braces. For example,
    ``one _ "-" _ two`` is rendered as ``{one}-{two}``.

    A value which is a lone quoted literal is rendered without any braces.
    """
    flags |= RenderFlags.BRACES

    if head is None or is_simple(arena, head, TokenKind.QUOTED):
        return render(arena, head, flags)

    capacity = 0
    for expression in arena.iterate_expressions(head):
        if _is_lone_literal(arena, expression):
            capacity += measure(arena, expression, flags)
        else:
            capacity += 2 + measure(arena, expression, flags | RenderFlags.QUOTES)

    writer = BoundedWriter(capacity=capacity)

    for expression in arena.iterate_expressions(head):
        if _is_lone_literal(arena, expression):
            copy(writer, arena, expression, flags)
        else:
            writer.write(b"{")
            copy(writer, arena, expression, flags | RenderFlags.QUOTES)
            writer.write(b"}")

    return writer.getvalue()
