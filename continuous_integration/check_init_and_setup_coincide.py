#!/usr/bin/env python3

"""Check that the distribution and slax_strings/__init__.py are in sync."""
import os
import pathlib
import subprocess
import sys
from typing import Optional, Dict

import slax_strings

# Map from the development status classifier to the status in __init__.py
STATUS_MAP = {
    "Development Status :: 1 - Planning": "Planning",
    "Development Status :: 2 - Pre-Alpha": "Pre-Alpha",
    "Development Status :: 3 - Alpha": "Alpha",
    "Development Status :: 4 - Beta": "Beta",
    "Development Status :: 5 - Production/Stable": "Production/Stable",
    "Development Status :: 6 - Mature": "Mature",
    "Development Status :: 7 - Inactive": "Inactive",
}


def _query_setup_py(setup_py_pth: pathlib.Path, field: str) -> str:
    """Retrieve the ``field`` of the distribution as reported by the setup.py."""
    return subprocess.check_output(
        [sys.executable, str(setup_py_pth), f"--{field}"], encoding="utf-8"
    ).strip()


def main() -> int:
    """Execute the main routine."""
    repo_root = pathlib.Path(os.path.realpath(__file__)).parent.parent

    setup_py_pth = repo_root / "setup.py"
    if not setup_py_pth.exists():
        raise RuntimeError(f"Could not find the setup.py: {setup_py_pth}")

    success = True

    expected_in_init = {
        "version": slax_strings.__version__,
        "author": slax_strings.__author__,
        "license": slax_strings.__license__,
        "description": slax_strings.__doc__,
    }  # type: Dict[str, Optional[str]]

    for field, in_init in expected_in_init.items():
        in_setup_py = _query_setup_py(setup_py_pth, field)

        if in_setup_py != in_init:
            print(
                f"The {field} in the setup.py is {in_setup_py!r}, "
                f"while the {field} in slax_strings/__init__.py is: {in_init!r}",
                file=sys.stderr,
            )
            success = False

    # NOTE: Classifiers need special attention as there are multiple.
    classifiers = _query_setup_py(setup_py_pth, "classifiers").splitlines()

    status_classifier = next(
        (classifier for classifier in classifiers if classifier in STATUS_MAP), None
    )  # type: Optional[str]

    if status_classifier is None:
        print(
            "Expected a status classifier in setup.py "
            "(e.g., 'Development Status :: 3 - Alpha'), but found none.",
            file=sys.stderr,
        )
        success = False
    elif STATUS_MAP[status_classifier] != slax_strings.__status__:
        print(
            f"Expected status {STATUS_MAP[status_classifier]} "
            f"according to setup.py in slax_strings/__init__.py, "
            f"but found: {slax_strings.__status__}",
            file=sys.stderr,
        )
        success = False

    if not success:
        return -1

    return 0


if __name__ == "__main__":
    sys.exit(main())
