# --------------------------------------------------------------------
import abc
import contextlib as cl
import math
import sys

from typing import Optional as Opt

from .slpyast import Range

# ====================================================================
class SlpyError(Exception):
    def __init__(self, message: str, position: Opt[Range] = None):
        super().__init__(message)
        self.message  = message
        self.position = position

# --------------------------------------------------------------------
class CheckError(SlpyError):
    pass

# --------------------------------------------------------------------
class EvalError(SlpyError):
    pass

# ====================================================================
class _ReporterContextManager:
    def __init__(self, reporter : 'Reporter'):
        self.cp       = reporter.nerrors
        self.reporter = reporter

    def __bool__(self):
        return self.cp == self.reporter.nerrors

# --------------------------------------------------------------------
class Reporter(abc.ABC):
    def __init__(self, source: str = ''):
        self.nerrors = 0
        self.load(source)

    def load(self, source: str):
        self.source = source.splitlines()

    def __call__(self, message: str, position: Opt[Range] = None):
        self.nerrors += 1
        self._report(message, position)

    def error(self, exn: SlpyError):
        self(exn.message, position = exn.position)

    @cl.contextmanager
    def checkpoint(self):
        yield _ReporterContextManager(self)

    @abc.abstractmethod
    def _report(self, message: str, position: Opt[Range]):
        pass

# --------------------------------------------------------------------
class DefaultReporter(Reporter):
    def __init__(self, source: str = '', stream = None):
        super().__init__(source)
        self.stream = stream

    def _report(self, message: str, position: Opt[Range]):
        def p(*x):
            print(*x, file = sys.stderr if self.stream is None else self.stream)

        if self.nerrors > 1:
            p()

        if position is None or not self.source:
            p(message)
            return

        width = max(2, math.ceil(math.log(len(self.source)+1, 10)))

        if position.start[0] == position.end[0]:
            p(f'line {position.start[0]}: {message}')

            l2 = position.start[0] - 1
            l1 = max(l2-2, 0)
            c  = (position.start[1], position.end[1])

        else:
            p(f'lines {position.start[0]}--{position.end[0]}: {message}')

            l1 = position.start[0] - 1
            l2 = position.end[0]-1
            c  = None

        p()

        for i in range(l1, min(l2+1, len(self.source))):
            p(f'| {i+1:0{width}}:', self.source[i])

        if c is not None:
            p(' ' * (c[0]+width+3), '^' * max(1, c[1]-c[0]))

# --------------------------------------------------------------------
class NullReporter(Reporter):
    def _report(self, message: str, position: Opt[Range]):
        pass
