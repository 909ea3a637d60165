#!/usr/bin/env python3

"""Run pre-commit checks on the repository."""
import argparse
import enum
import os
import pathlib
import shlex
import subprocess
import sys
from typing import Callable, List, Mapping, Optional, Sequence

#: Directories and files checked by the formatter, the type checker and the linter
TARGETS = ["slax_strings", "tests", "continuous_integration"]


class Step(enum.Enum):
    """Enumerate different pre-commit steps."""

    REFORMAT = "reformat"
    MYPY = "mypy"
    PYLINT = "pylint"
    TEST = "test"
    DOCTEST = "doctest"
    CHECK_INIT_AND_SETUP_COINCIDE = "check-init-and-setup-coincide"


def call_and_report(
    verb: str,
    cmd: Sequence[str],
    cwd: Optional[pathlib.Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Wrap a subprocess call with the reporting to STDERR if it failed.

    Return 1 if there is an error and 0 otherwise.
    """
    exit_code = subprocess.call(cmd, cwd=str(cwd) if cwd is not None else None, env=env)

    if exit_code != 0:
        cmd_str = " ".join(shlex.quote(part) for part in cmd)
        print(
            f"Failed to {verb} with exit code {exit_code}: {cmd_str}", file=sys.stderr
        )
        return 1

    return 0


def _reformat(repo_root: pathlib.Path, overwrite: bool) -> int:
    if overwrite:
        return call_and_report(
            verb="black", cmd=["black"] + TARGETS + ["setup.py"], cwd=repo_root
        )

    return call_and_report(
        verb="check with black",
        cmd=["black", "--check"] + TARGETS + ["setup.py"],
        cwd=repo_root,
    )


def _mypy(repo_root: pathlib.Path, overwrite: bool) -> int:
    # pylint: disable=unused-argument
    return call_and_report(
        verb="mypy", cmd=["mypy", "--strict"] + TARGETS, cwd=repo_root
    )


def _pylint(repo_root: pathlib.Path, overwrite: bool) -> int:
    # pylint: disable=unused-argument
    return call_and_report(verb="pylint", cmd=["pylint"] + TARGETS, cwd=repo_root)


def _test(repo_root: pathlib.Path, overwrite: bool) -> int:
    # pylint: disable=unused-argument

    # NOTE: The cycle checks of the arena are only enabled with slow contracts.
    env = os.environ.copy()
    env["ICONTRACT_SLOW"] = "true"

    exit_code = call_and_report(
        verb="execute unit tests",
        cmd=["coverage", "run", "--source", "slax_strings", "-m", "unittest", "discover"],
        cwd=repo_root,
        env=env,
    )
    if exit_code != 0:
        return exit_code

    return call_and_report(
        verb="report the coverage", cmd=["coverage", "report"], cwd=repo_root
    )


def _doctest(repo_root: pathlib.Path, overwrite: bool) -> int:
    # pylint: disable=unused-argument
    modules = sorted(
        str(pth.relative_to(repo_root))
        for pth in (repo_root / "slax_strings").glob("**/*.py")
        if pth.name != "__main__.py" and ">>>" in pth.read_text(encoding="utf-8")
    )  # type: List[str]

    if len(modules) == 0:
        print("There are no doctests in slax_strings.")
        return 0

    return call_and_report(
        verb="doctest", cmd=[sys.executable, "-m", "doctest"] + modules, cwd=repo_root
    )


def _check_init_and_setup_coincide(repo_root: pathlib.Path, overwrite: bool) -> int:
    # pylint: disable=unused-argument
    return call_and_report(
        verb="check that slax_strings/__init__.py and setup.py coincide",
        cmd=[sys.executable, "continuous_integration/check_init_and_setup_coincide.py"],
        cwd=repo_root,
    )


STEP_FUNCTIONS = {
    Step.REFORMAT: _reformat,
    Step.MYPY: _mypy,
    Step.PYLINT: _pylint,
    Step.TEST: _test,
    Step.DOCTEST: _doctest,
    Step.CHECK_INIT_AND_SETUP_COINCIDE: _check_init_and_setup_coincide,
}  # type: Mapping[Step, Callable[[pathlib.Path, bool], int]]

assert all(step in STEP_FUNCTIONS for step in Step)


def main() -> int:
    """Execute entry_point routine."""
    step_choices = [step.value for step in Step]

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--overwrite",
        help="Try to automatically fix the offending files (e.g., by re-formatting).",
        action="store_true",
    )
    parser.add_argument(
        "--select",
        help=(
            "If set, only the selected steps are executed. "
            "The steps are given as a space-separated list of: "
            + " ".join(step_choices)
        ),
        metavar="",
        nargs="+",
        choices=step_choices,
    )
    parser.add_argument(
        "--skip",
        help=(
            "If set, skips the specified steps. "
            "The steps are given as a space-separated list of: "
            + " ".join(step_choices)
        ),
        metavar="",
        nargs="+",
        choices=step_choices,
    )

    args = parser.parse_args()

    selects = (
        [Step(value) for value in args.select] if args.select is not None else list(Step)
    )
    skips = [Step(value) for value in args.skip] if args.skip is not None else []

    repo_root = pathlib.Path(os.path.realpath(__file__)).parent.parent

    for step in Step:
        if step not in selects or step in skips:
            print(f"Skipped {step.value}.")
            continue

        print(f"Running {step.value}...")
        if STEP_FUNCTIONS[step](repo_root, bool(args.overwrite)) != 0:
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
