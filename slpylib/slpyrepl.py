# --------------------------------------------------------------------
import re
import sys

from typing import Optional as Opt

from .slpyast     import Expression, Program
from .slpychecker import DefTypes, SymbolTable, TypeChecker, check
from .slpyenv     import Environment
from .slpyerrors  import DefaultReporter, NullReporter, Reporter, SlpyError
from .slpyeval    import Evaluator
from .slpyparser  import Parser

# ====================================================================
class Repl:
    """Interactive session keeping its bindings across entries.

    An entry is read line by line until its braces balance. An entry
    that is a single expression is checked, evaluated and its value
    printed. Any other entry is parsed as a sequence of statements,
    checked against the definitions accumulated so far (unless
    `typecheck` is off) and run in the session environment.

        repl = Repl()
        repl.eval('x: int = 40;')
        repl.eval('x + 2')                 # prints 42
    """

    PROMPT       = '>>> '
    CONTINUATION = '... '

    STRINGS = re.compile(r'"([^"\\\n]|\\.)*"|\#.*')

    def __init__(
            self,
            stdin     = None,
            stdout    = None,
            reporter  : Opt[Reporter] = None,
            typecheck : bool = True,
    ):
        self.stdin      = stdin
        self.stdout     = stdout
        self.reporter   = reporter or DefaultReporter()
        self.parser     = Parser(reporter = self.reporter)
        self.exprparser = Parser(reporter = NullReporter(), start = 'expr')
        self.evaluator  = Evaluator(stdin = stdin, stdout = stdout)
        self.typecheck  = typecheck
        self.reset()

    @property
    def input(self):
        return sys.stdin if self.stdin is None else self.stdin

    @property
    def output(self):
        return sys.stdout if self.stdout is None else self.stdout

    def reset(self):
        self.env  = Environment()
        self.defs : DefTypes    = dict()
        self.syms : SymbolTable = dict()

    def complete(self, text: str) -> bool:
        stripped = self.STRINGS.sub('', text)
        return stripped.count('{') <= stripped.count('}')

    def for_expression(self, expr: Expression):
        if self.typecheck:
            TypeChecker().for_expression(expr, self.defs, self.syms)
        value = self.evaluator.for_expression(expr, self.env)
        print(value, file = self.output)

    def for_program(self, prgm: Program) -> bool:
        if self.typecheck:
            # A rejected entry must leave the session tables untouched.
            defs, syms = dict(self.defs), dict(self.syms)
            if not check(prgm, self.reporter, defs, syms):
                return False
            self.defs, self.syms = defs, syms

        self.evaluator.for_program(prgm, self.env)
        return True

    def eval(self, text: str) -> bool:
        self.reporter.load(text)

        try:
            expr = self.exprparser.parse(text)
            if expr is not None:
                self.for_expression(expr)
                return True

            prgm = self.parser.parse(text)
            if prgm is None:
                return False

            return self.for_program(prgm)

        except SlpyError as e:
            self.reporter.error(e)
        except RecursionError:
            self.reporter('maximum recursion depth exceeded')

        return False

    def run(self):
        buffer = []

        while True:
            self.output.write(self.CONTINUATION if buffer else self.PROMPT)
            self.output.flush()

            line = self.input.readline()
            if not line:
                self.output.write('\n')
                return

            buffer.append(line)
            text = ''.join(buffer)

            if not self.complete(text):
                continue

            buffer = []
            if text.strip():
                self.eval(text)
