"""Shared helpers: a reporter that records messages, and source-level runners."""

import io

import pytest

from slpylib.slpychecker import TypeChecker
from slpylib.slpyerrors  import Reporter
from slpylib.slpyeval    import evaluate
from slpylib.slpyparser  import Parser


class CollectingReporter(Reporter):
    def __init__(self, source: str = ''):
        super().__init__(source)
        self.messages = []
        self.positions = []

    def _report(self, message, position):
        self.messages.append(message)
        self.positions.append(position)


def parse(source: str):
    reporter = CollectingReporter(source)
    prgm = Parser(reporter=reporter).parse(source)
    assert prgm is not None, reporter.messages
    return prgm


def run(source: str, stdin: str = ''):
    """Parse and evaluate *source*; return (stdout text, final environment)."""
    out = io.StringIO()
    env = evaluate(parse(source), stdin=io.StringIO(stdin), stdout=out)
    return out.getvalue(), env


def typecheck(source: str):
    """Check *source*; return the verdict of its main block."""
    return TypeChecker().for_program(parse(source))


@pytest.fixture
def reporter():
    return CollectingReporter()
