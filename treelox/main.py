"""Runs the lox interpreter: one file (`run`), several files one after the other (`batch`), or command-line mode (no
command). Also uses the error handling context manager. Called from the treelox console script.

Exit codes: 0 success, 64 bad usage, 65 lexical/syntax error, 66 unreadable file, 70 runtime error.
"""

import argparse
import sys

from treelox.lang.error import ErrorHandler
from treelox.lang.session import Session
from treelox.lang.shell import Shell

EX_USAGE = 64


class ArgumentParser(argparse.ArgumentParser):
    """argparse.ArgumentParser that exits with EX_USAGE on bad invocations."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = ArgumentParser(prog="treelox", description="lox interpreter (no command: interactive mode)")
    parser.add_argument("--trace", action="store_true", help="print the syntax tree of each statement before it runs")

    commands = parser.add_subparsers(dest="command", metavar="command")
    run_parser = commands.add_parser("run", help="interpret a single file")
    run_parser.add_argument("path", help="file to interpret and run")

    batch_parser = commands.add_parser("batch", help="interpret files one after the other, each in a fresh scope")
    batch_parser.add_argument("paths", nargs="+", help="files to interpret and run")

    return parser


def run_batch(error_handler, paths):
    """Runs each file in paths with its own session. A file whose script fails doesn't stop the rest, but a file that
    can't be read aborts the batch (through error_handler, which should be fatal).
    """
    for path in paths:
        print(f"\nRunning '{path}'...", file=sys.stderr)
        source = Session.read(path)

        with ErrorHandler(fatal=False, trace=error_handler.trace) as file_handler, Session(file_handler, path) as sess:
            sess.execute(source)


def main(argv=None):
    """Runs lox interpreter. Called from treelox console script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        error_handler.trace = args.trace

        if args.command == "run":
            with Session(error_handler, args.path) as sess:
                sess.run_file()

        elif args.command == "batch":
            run_batch(error_handler, args.paths)

        else:
            with Session(error_handler, Session.SH_FILE, cmd_line=True) as sess:
                Shell(sess).cmdloop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
