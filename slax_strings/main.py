"""Assemble SLAX token segments into XPath, concat() and attribute-value templates."""

import argparse
import enum
import pathlib
import sys
from typing import TextIO

import slax_strings
from slax_strings import fusing, rendering, run, segments, stringify
from slax_strings.common import assert_never
from slax_strings.kinds import RenderFlags
from slax_strings.segments import Slot

assert slax_strings.__doc__ == __doc__


class Mode(enum.Enum):
    """List the available renderings of the chain."""

    XPATH = "xpath"
    CONCAT = "concat"
    AVT = "avt"
    FUSE = "fuse"
    DUMP = "dump"


class Parameters:
    """Represent the program parameters."""

    def __init__(self, input_path: pathlib.Path, mode: Mode, flags: RenderFlags) -> None:
        """Initialize with the given values."""
        self.input_path = input_path
        self.mode = mode
        self.flags = flags


def execute(params: Parameters, stdout: TextIO, stderr: TextIO) -> int:
    """Run the program."""
    # region Basic checks
    if not params.input_path.exists():
        stderr.write(f"The --input does not exist: {params.input_path}\n")
        return 1

    if not params.input_path.is_file():
        stderr.write(f"The --input does not point to a file: {params.input_path}\n")
        return 1

    # endregion

    # region Load

    chain, errors = run.load_chain(input_path=params.input_path)
    if errors is not None:
        run.write_error_report(
            message=f"Failed to load the expressions from {params.input_path}",
            errors=errors,
            stderr=stderr,
        )
        return 1

    assert chain is not None
    arena, head = chain

    # endregion

    # region Dispatch

    if params.mode is Mode.XPATH:
        text = rendering.render(arena, head, params.flags)
        segments.free(arena, head)

    elif params.mode is Mode.CONCAT:
        text = rendering.render_concat(arena, head, params.flags)
        segments.free(arena, head)

    elif params.mode is Mode.AVT:
        text = rendering.render_avt(arena, head, params.flags)
        segments.free(arena, head)

    elif params.mode is Mode.FUSE:
        slot = Slot(head)
        fused = fusing.fuse(arena, slot)
        text = arena.segment(fused).text

        # NOTE: The slot is cleared if the fusing took the segment over.
        segments.free(arena, slot.take())
        segments.free(arena, fused)

    elif params.mode is Mode.DUMP:
        stdout.write(stringify.dump_chain(arena, head))
        stdout.write("\n")
        segments.free(arena, head)
        return 0

    else:
        assert_never(params.mode)

    # endregion

    stdout.write(text.decode("utf-8", errors="replace"))
    stdout.write("\n")
    return 0


def main(prog: str) -> int:
    """
    Execute the main routine.

    :param prog: name of the program to be displayed in the help
    :return: exit code
    """
    parser = argparse.ArgumentParser(prog=prog, description=__doc__)
    parser.add_argument(
        "--input",
        help="path to the JSON file with the pre-tokenized expressions",
        required=True,
    )
    parser.add_argument(
        "--mode",
        help="how to render the expressions",
        default=Mode.CONCAT.value,
        choices=[literal.value for literal in Mode],
    )
    parser.add_argument(
        "--quotes",
        help="wrap the quoted literals in quotes",
        action="store_true",
    )
    parser.add_argument(
        "--braces",
        help="double the braces in the quoted literals",
        action="store_true",
    )
    parser.add_argument(
        "--version", help="show the current version and exit", action="store_true"
    )

    # NOTE: The module ``argparse`` is not flexible enough to understand special
    # options such as ``--version`` so we manually hard-wire.
    if "--version" in sys.argv and "--help" not in sys.argv:
        print(slax_strings.__version__)
        return 0

    args = parser.parse_args()

    str_to_mode = {literal.value: literal for literal in Mode}

    flags = RenderFlags.NONE
    if args.quotes:
        flags |= RenderFlags.QUOTES

    if args.braces:
        flags |= RenderFlags.BRACES

    params = Parameters(
        input_path=pathlib.Path(args.input),
        mode=str_to_mode[args.mode],
        flags=flags,
    )

    return execute(params=params, stdout=sys.stdout, stderr=sys.stderr)


def entry_point() -> int:
    """Provide an entry point for a console script."""
    return main(prog="slax-strings")


if __name__ == "__main__":
    sys.exit(main(prog="slax-strings"))
