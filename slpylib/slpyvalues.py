# --------------------------------------------------------------------
import dataclasses as dc

from typing import Union

from .slpyast import Block, Name

# ====================================================================
# Runtime values

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class UnitValue:
    def __str__(self):
        return 'None'

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class IntValue:
    value: int

    def __str__(self):
        return str(self.value)

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class StrValue:
    value: str

    def __str__(self):
        return self.value

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class BoolValue:
    value: bool

    def __str__(self):
        return 'true' if self.value else 'false'

# --------------------------------------------------------------------
@dc.dataclass(eq = False)
class FuncValue:
    # `captures` is an Environment; typed loosely to keep this module
    # free of an import cycle with slpyenv.
    captures: object
    params: list[Name]
    body: Block
    name: str = '<anonymous>'

    def __str__(self):
        return 'function object'

    def __repr__(self):
        return f'FuncValue({self.name}/{len(self.params)})'

# --------------------------------------------------------------------
Value = Union[UnitValue, IntValue, StrValue, BoolValue, FuncValue]

UNIT  = UnitValue()
TRUE  = BoolValue(True)
FALSE = BoolValue(False)

def of_bool(b: bool) -> BoolValue:
    return TRUE if b else FALSE
