"""Command line driver: load files, evaluate expressions, run the REPL.

    sloth [files...] [-e EXPR] [-i] [--no-prelude] [--log-level LEVEL]

Files are loaded in order, then each -e expression is evaluated and its value
printed. The REPL (defined in the prelude as `(repl)`) runs when nothing else
was asked for, or with -i.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from sloth import __version__
from sloth.config import get_log_level, get_recursion_limit
from sloth.debug_utils.pprint import to_repr
from sloth.debug_utils.traceback import format_traceback
from sloth.interpreter import Interpreter
from sloth.types.errors import LispError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='sloth', description='Sloth Lisp interpreter')
    parser.add_argument('files', nargs='*', type=Path, help='Source files to load, in order')
    parser.add_argument('-e', '--eval', dest='exprs', action='append', default=[], metavar='EXPR',
                        help='Evaluate EXPR and print its value (repeatable)')
    parser.add_argument('-i', '--interactive', action='store_true',
                        help='Start the REPL after loading files and expressions')
    parser.add_argument('--no-prelude', action='store_true', help='Start with builtins only')
    parser.add_argument('--log-level', default=get_log_level(),
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (default: $SLOTH_LOG_LEVEL or WARNING)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def report(err: LispError) -> None:
    print(format_traceback(err), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format='%(levelname)s %(name)s: %(message)s')
    sys.setrecursionlimit(max(sys.getrecursionlimit(), get_recursion_limit()))

    try:
        interp = Interpreter(prelude=None if args.no_prelude else 'auto')
    except LispError as err:
        logger.error("prelude failed to load")
        report(err)
        return 1

    for path in args.files:
        try:
            interp.load(path)
        except LispError as err:
            report(err)
            return 1

    for expr in args.exprs:
        try:
            print(to_repr(interp.eval(expr)))
        except LispError as err:
            report(err)
            return 1

    if args.interactive or not (args.files or args.exprs):
        if args.no_prelude:
            print('sloth: the REPL is defined in the prelude; drop --no-prelude', file=sys.stderr)
            return 2
        try:
            interp.eval('(repl)')
        except LispError as err:
            report(err)
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
