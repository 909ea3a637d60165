# pylint: disable=missing-docstring

import unittest

import slax_strings.common
from slax_strings.common import Error


class Test_error_message(unittest.TestCase):
    def test_without_location(self) -> None:
        got = slax_strings.common.error_message(Error(None, "Something failed"))

        self.assertEqual("Something failed", got)

    def test_with_location(self) -> None:
        got = slax_strings.common.error_message(
            Error("expressions[0][1]", "Something failed")
        )

        self.assertEqual("At expressions[0][1]: Something failed", got)

    def test_underlying_errors_are_indented(self) -> None:
        error = Error(
            "expressions[0]",
            "Invalid expression",
            underlying=[
                Error("expressions[0][0]", "First"),
                Error(
                    "expressions[0][1]",
                    "Second",
                    underlying=[Error(None, "Deeper")],
                ),
            ],
        )

        self.assertEqual(
            "At expressions[0]: Invalid expression\n"
            "  At expressions[0][0]: First\n"
            "  At expressions[0][1]: Second\n"
            "    Deeper",
            slax_strings.common.error_message(error),
        )


class Test_error_messages(unittest.TestCase):
    def test_each_error_is_rendered(self) -> None:
        self.assertListEqual(
            ["First", "At x: Second"],
            slax_strings.common.error_messages(
                [Error(None, "First"), Error("x", "Second")]
            ),
        )


if __name__ == "__main__":
    unittest.main()
