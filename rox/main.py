"""Runs rox source from a file, from the command line (-c), or in interactive mode. Uses the error handling context
manager so that a failure is reported as a diagnostic instead of a Python traceback. Called from the rox executable
script.
"""

import argparse
import sys

from rox.lang.error import ErrorHandler
from rox.lang.parser import DEFAULT_MAX_DEPTH
from rox.lang.session import Session
from rox.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="rox", description="Interpreter for the rox scripting language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-c", "--command", help="program passed in as a string (overrides file)")
    parser.add_argument("--tokens", action="store_true", help="print the tokens of the program before running it")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree of the program before running it")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help=f"maximum nesting of expressions and blocks (default: {DEFAULT_MAX_DEPTH})")
    parser.add_argument("--no-color", action="store_true", help="do not color diagnostics")
    return parser


def main(argv=None):
    """Runs rox. Returns the exit status: 1 if any diagnostic was reported, 0 otherwise."""
    args = build_parser().parse_args(argv)
    options = {"max_depth": args.max_depth, "show_tokens": args.tokens, "show_ast": args.ast}

    # diagnostics never end the run early: every error in the program gets reported
    with ErrorHandler(fatal=False, color=not args.no_color) as error_handler:
        if args.command is not None:
            Session(error_handler, "<command>", source=args.command, **options).run()

        elif args.file is not None:
            Session(error_handler, args.file, **options).run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **options)).cmdloop()

    return 1 if error_handler.had_error else 0


if __name__ == "__main__":
    sys.exit(main())
