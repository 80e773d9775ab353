"""Runs Lox source files, or starts the interactive shell when no file is given. Called from the pylox console script.

Exit codes follow the usual Lox conventions: 64 for bad usage, 65 for static (scan/parse/resolve) errors, 66 for
unreadable files and 70 for runtime errors.
"""

import argparse
import sys

from pylox.lang.error import ErrorHandler
from pylox.lang.session import Session
from pylox.lang.shell import Shell


RECURSION_LIMIT = 4000  # each Lox call takes several Python frames


class ArgumentParser(argparse.ArgumentParser):
    """argparse exits with 2 on bad usage; Lox tools exit with 64."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(64, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = ArgumentParser(prog="pylox", description="Tree-walking interpreter for the Lox language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", action="store_true", help="print the scanned tokens before running")
    parser.add_argument("--ast", action="store_true", help="print the parsed program before running")
    return parser


def main(argv=None):
    """Runs pylox interpreter. Called from pylox executable script."""
    args = build_parser().parse_args(argv)
    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    with ErrorHandler(fatal=args.file is not None) as error_handler:
        sess = Session(error_handler, dump_tokens=args.tokens, dump_ast=args.ast)

        if args.file is not None:
            sess.run_file(args.file)
        else:
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
