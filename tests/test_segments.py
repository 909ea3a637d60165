# pylint: disable=missing-docstring

import unittest

import icontract

import tests.common
from slax_strings import segments
from slax_strings.kinds import TokenKind, QuoteFlags
from slax_strings.segments import Arena


class Test_compute_quote_flags(unittest.TestCase):
    def test_no_quotes(self) -> None:
        self.assertEqual(QuoteFlags.NONE, segments.compute_quote_flags(b"plain"))

    def test_single_quotes(self) -> None:
        self.assertEqual(QuoteFlags.SINGLE, segments.compute_quote_flags(b"it's"))
        self.assertEqual(QuoteFlags.SINGLE, segments.compute_quote_flags(b"''"))

    def test_double_quotes(self) -> None:
        self.assertEqual(QuoteFlags.DOUBLE, segments.compute_quote_flags(b'say "hi"'))

    def test_both_quotes(self) -> None:
        expected = QuoteFlags.SINGLE | QuoteFlags.DOUBLE | QuoteFlags.BOTH

        self.assertEqual(expected, segments.compute_quote_flags(b"it's \"x\""))
        self.assertEqual(expected, segments.compute_quote_flags(b"\"'"))


class Test_create_from_range(unittest.TestCase):
    def test_bare_token_is_copied_verbatim(self) -> None:
        arena = Arena()
        source = "foo/bar\\n"

        handle = segments.create_from_range(
            arena, source, 4, len(source), TokenKind.BARE
        )
        assert handle is not None

        segment = arena.segment(handle)
        self.assertEqual(b"bar\\n", segment.text)
        self.assertEqual(TokenKind.BARE, segment.kind)
        self.assertIsNone(arena.next_of(handle))
        self.assertIsNone(arena.sibling_of(handle))

    def test_quoted_token_is_stripped_and_decoded(self) -> None:
        arena = Arena()
        source = 'var $x = "a\\tb\\u+00e9";'

        start = source.index('"')
        end = source.rindex('"') + 1

        handle = segments.create_from_range(
            arena, source, start, end, TokenKind.QUOTED
        )
        assert handle is not None

        segment = arena.segment(handle)
        self.assertEqual(b"a\tb\xc3\xa9", segment.text)
        self.assertEqual(TokenKind.QUOTED, segment.kind)
        self.assertEqual(QuoteFlags.NONE, segment.quote_flags)

    def test_quote_flags_are_computed_on_the_decoded_text(self) -> None:
        arena = Arena()
        source = "'say \\x22hi\\x22'"

        handle = segments.create_from_range(
            arena, source, 0, len(source), TokenKind.QUOTED
        )
        assert handle is not None

        self.assertEqual(b'say "hi"', arena.segment(handle).text)
        self.assertEqual(QuoteFlags.DOUBLE, arena.segment(handle).quote_flags)

    def test_empty_quoted_token(self) -> None:
        arena = Arena()

        handle = segments.create_from_range(arena, '""', 0, 2, TokenKind.QUOTED)
        assert handle is not None

        self.assertEqual(b"", arena.segment(handle).text)

    def test_statement_terminator_yields_nothing(self) -> None:
        arena = Arena()

        self.assertIsNone(segments.create_from_range(arena, ";", 0, 1, TokenKind.EOS))
        self.assertEqual(0, len(arena))

    def test_unmatched_quotes_violate_the_contract(self) -> None:
        arena = Arena()

        with self.assertRaises(icontract.ViolationError):
            segments.create_from_range(arena, "\"abc'", 0, 5, TokenKind.QUOTED)


class Test_create_literal(unittest.TestCase):
    def test_escapes_are_not_decoded(self) -> None:
        arena = Arena()

        handle = segments.create_literal(arena, '"a\\n"', TokenKind.QUOTED)

        self.assertEqual(b'"a\\n"', arena.segment(handle).text)
        self.assertEqual(QuoteFlags.DOUBLE, arena.segment(handle).quote_flags)


class Test_arena(unittest.TestCase):
    def test_released_handle_is_recycled(self) -> None:
        arena = Arena()

        first = segments.create_literal(arena, "a", TokenKind.BARE)
        segments.free(arena, first)
        self.assertEqual(0, len(arena))

        second = segments.create_literal(arena, "b", TokenKind.BARE)
        self.assertEqual(first, second)
        self.assertEqual(b"b", arena.segment(second).text)

    def test_released_handle_can_not_be_read(self) -> None:
        arena = Arena()

        handle = segments.create_literal(arena, "a", TokenKind.BARE)
        segments.free(arena, handle)

        with self.assertRaises(icontract.ViolationError):
            arena.segment(handle)

    def test_double_release_violates_the_contract(self) -> None:
        arena = Arena()

        handle = segments.create_literal(arena, "a", TokenKind.BARE)
        arena.release(handle)

        with self.assertRaises(icontract.ViolationError):
            arena.release(handle)

    def test_release_of_a_linked_segment_violates_the_contract(self) -> None:
        arena = Arena()

        head = tests.common.build_expression(
            arena, [(TokenKind.BARE, "a"), (TokenKind.SLASH, "/")]
        )

        with self.assertRaises(icontract.ViolationError):
            arena.release(head)

    @unittest.skipUnless(icontract.SLOW, "Cycle checks are only enabled if slow")
    def test_cycle_violates_the_contract(self) -> None:
        arena = Arena()

        head = tests.common.build_expression(
            arena, [(TokenKind.BARE, "a"), (TokenKind.SLASH, "/")]
        )

        with self.assertRaises(icontract.ViolationError):
            arena.set_next(arena.tail_of(head), head)


class Test_free(unittest.TestCase):
    def test_nothing(self) -> None:
        arena = Arena()
        segments.free(arena, None)
        self.assertEqual(0, len(arena))

    def test_every_segment_is_released_exactly_once(self) -> None:
        arena = tests.common.CountingArena()

        head = tests.common.build_concatenation(
            arena,
            [
                [
                    (TokenKind.BARE, "a1"),
                    (TokenKind.SLASH, "/"),
                    (TokenKind.BARE, "a2"),
                ],
                [(TokenKind.QUOTED, '"-"')],
                [(TokenKind.BARE, "b1"), (TokenKind.SLASH, "/")],
            ],
        )
        self.assertEqual(6, len(arena))

        segments.free(arena, head)

        self.assertEqual(0, len(arena))
        self.assertEqual(6, len(arena.release_counter))
        self.assertTrue(
            all(count == 1 for count in arena.release_counter.values()),
            f"Expected every handle released once, got: {arena.release_counter}",
        )

    def test_sibling_chain_is_released_before_the_segment(self) -> None:
        arena = tests.common.CountingArena()

        head = tests.common.build_concatenation(
            arena,
            [
                [(TokenKind.BARE, "a"), (TokenKind.BARE, "b")],
                [(TokenKind.BARE, "c"), (TokenKind.BARE, "d")],
            ],
        )

        segments.free(arena, head)

        self.assertListEqual([b"c", b"d", b"a", b"b"], arena.release_order)

    def test_sibling_in_the_middle_of_a_chain(self) -> None:
        arena = tests.common.CountingArena()

        head = tests.common.build_expression(
            arena, [(TokenKind.BARE, "a"), (TokenKind.BARE, "b")]
        )
        middle = arena.next_of(head)
        assert middle is not None

        nested = tests.common.build_expression(arena, [(TokenKind.BARE, "x")])
        arena.set_sibling(middle, nested)

        segments.free(arena, head)

        self.assertListEqual([b"a", b"x", b"b"], arena.release_order)
        self.assertEqual(0, len(arena))


if __name__ == "__main__":
    unittest.main()
