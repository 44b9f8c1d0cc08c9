#! /usr/bin/env python3

# --------------------------------------------------------------------
# Requires Python3 >= 3.10

# --------------------------------------------------------------------
import argparse
import os
import sys

from slpylib.slpyerrors  import DefaultReporter, EvalError
from slpylib.slpyparser  import Parser
from slpylib.slpychecker import check as tycheck
from slpylib.slpyeval    import evaluate
from slpylib.slpyrepl    import Repl

# ====================================================================
# Parse command line arguments

def parse_args(argv = None):
    parser = argparse.ArgumentParser(prog = os.path.basename(sys.argv[0]))

    parser.add_argument(
        '--no-check', dest = 'check', action = 'store_false',
        help = 'skip the static type and return-flow check')

    parser.add_argument(
        'input', nargs = '?',
        help = 'input file (.slpy); starts an interactive session if omitted')

    aout = parser.parse_args(argv)

    if aout.input is not None:
        if os.path.splitext(aout.input)[1].lower() != '.slpy':
            parser.error('input filename must end with the .slpy extension')

    return aout

# ====================================================================
# Run one source file

def run(source: str, typecheck: bool = True, reporter = None, stdin = None, stdout = None) -> bool:
    reporter = reporter or DefaultReporter(source = source)

    prgm = Parser(reporter = reporter).parse(source)

    if prgm is None:
        return False

    if typecheck and not tycheck(prgm, reporter = reporter):
        return False

    try:
        evaluate(prgm, stdin = stdin, stdout = stdout)

    except EvalError as e:
        reporter.error(e)
        return False

    except RecursionError:
        reporter('maximum recursion depth exceeded')
        return False

    return True

# ====================================================================
# Main entry point

def _main(argv = None):
    args = parse_args(argv)

    if args.input is None:
        Repl(typecheck = args.check).run()
        return

    try:
        with open(args.input, 'r') as stream:
            prgm = stream.read()

    except IOError as e:
        print(f'cannot read input file {args.input}: {e}', file = sys.stderr)
        sys.exit(1)

    if not run(prgm, typecheck = args.check):
        sys.exit(1)

# --------------------------------------------------------------------
if __name__ == '__main__':
    _main()
