"""Runs toylang source files or the command-line interpreter, inside the error handling context manager. Called from
the toylang console script.
"""

import argparse
import sys

from toylang.lang.error import ErrorHandler
from toylang.lang.session import Session
from toylang.lang.shell import Shell


def main(argv=None):
    """Runs the toylang interpreter. Called from the toylang console script."""
    assert sys.version_info >= (3, 8), "toylang cannot be run with python < 3.8"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="toylang")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--ast", help="print the syntax tree of each expression before its value",
                            action="store_true")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_ast=args.ast)
            try:
                sess.run()
            finally:
                while sess.results:
                    print(sess.pop())

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, show_ast=args.ast)).cmdloop()


if __name__ == "__main__":
    main()
