# pylint: disable=missing-docstring

import unittest

import icontract

import tests.common
from slax_strings import fusing
from slax_strings.kinds import TokenKind, QuoteFlags
from slax_strings.segments import Arena, Slot


class Test_fuse(unittest.TestCase):
    def test_lone_segment_is_taken_over(self) -> None:
        arena = Arena()
        head = tests.common.build_expression(arena, [(TokenKind.BARE, "foo")])
        slot = Slot(head)

        fused = fusing.fuse(arena, slot)

        self.assertEqual(head, fused)
        self.assertIsNone(slot.head)
        self.assertEqual(1, len(arena))

    def test_lone_quoted_literal_keeps_its_quotes(self) -> None:
        arena = Arena()
        head = tests.common.build_expression(arena, [(TokenKind.QUOTED, "'hi'")])
        slot = Slot(head)

        fused = fusing.fuse(arena, slot, TokenKind.ELEMENT_NAME)

        self.assertNotEqual(head, fused)
        self.assertEqual(head, slot.head)

        segment = arena.segment(fused)
        self.assertEqual(b'"hi"', segment.text)
        self.assertEqual(TokenKind.QUOTED, segment.kind)
        self.assertEqual(QuoteFlags.DOUBLE, segment.quote_flags)

    def test_expression_is_rendered_with_quotes(self) -> None:
        arena = Arena()
        head = tests.common.build_expression(
            arena,
            [
                (TokenKind.FUNCTION_NAME, "f"),
                (TokenKind.OPEN_PAREN, "("),
                (TokenKind.QUOTED, '"it\'s"'),
                (TokenKind.CLOSE_PAREN, ")"),
            ],
        )
        slot = Slot(head)

        fused = fusing.fuse(arena, slot)

        segment = arena.segment(fused)
        self.assertEqual(b'f("it\'s")', segment.text)
        self.assertEqual(TokenKind.BARE, segment.kind)
        self.assertEqual(
            QuoteFlags.SINGLE | QuoteFlags.DOUBLE | QuoteFlags.BOTH,
            segment.quote_flags,
        )
        self.assertIsNone(arena.next_of(fused))

        # The slot still owns the chain it was given.
        self.assertEqual(head, slot.head)
        self.assertEqual(5, len(arena))

    def test_custom_kind(self) -> None:
        arena = Arena()
        head = tests.common.build_expression(
            arena, [(TokenKind.BARE, "a"), (TokenKind.SLASH, "/"), (TokenKind.BARE, "b")]
        )

        fused = fusing.fuse(arena, Slot(head), TokenKind.ELEMENT_NAME)

        self.assertEqual(b"a/b", arena.segment(fused).text)
        self.assertEqual(TokenKind.ELEMENT_NAME, arena.segment(fused).kind)

    def test_empty_slot(self) -> None:
        arena = Arena()

        fused = fusing.fuse(arena, Slot())

        segment = arena.segment(fused)
        self.assertEqual(b"", segment.text)
        self.assertEqual(TokenKind.BARE, segment.kind)
        self.assertEqual(QuoteFlags.NONE, segment.quote_flags)

    def test_statement_terminator_violates_the_contract(self) -> None:
        arena = Arena()

        with self.assertRaises(icontract.ViolationError):
            fusing.fuse(arena, Slot(), TokenKind.EOS)


if __name__ == "__main__":
    unittest.main()
