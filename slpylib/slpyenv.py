# --------------------------------------------------------------------
from typing import Optional as Opt

from .slpyast    import Range
from .slpyerrors import EvalError
from .slpyvalues import Value

# ====================================================================
class Environment:
    """One call frame: a flat mapping from names to values.

    Blocks share the frame of the call they run in; only function
    calls get a fresh frame, seeded from the callee's snapshot.
    """

    def __init__(self, vars: Opt[dict[str, Value]] = None):
        self.vars = dict() if vars is None else dict(vars)

    def lookup(self, name: str, position: Opt[Range] = None) -> Value:
        try:
            return self.vars[name]
        except KeyError:
            raise EvalError(f'undefined variable: {name}', position) from None

    def bind(self, name: str, value: Value):
        self.vars[name] = value

    def snapshot(self) -> 'Environment':
        return Environment(self.vars)

    def __getitem__(self, name: str) -> Value:
        return self.lookup(name)

    def __setitem__(self, name: str, value: Value):
        self.bind(name, value)

    def __contains__(self, name: str):
        return name in self.vars

    def __len__(self):
        return len(self.vars)

    def __repr__(self):
        return f'Environment({sorted(self.vars)})'
