"""Run slax-strings as Python module."""

import slax_strings.main

if __name__ == "__main__":
    # The ``prog`` needs to be set in the argparse.
    # Otherwise the program name in the help shown to the user will be ``__main__``.
    slax_strings.main.main(prog="slax_strings")
