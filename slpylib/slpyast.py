# --------------------------------------------------------------------
import dataclasses as dc
import enum

from typing import Optional as Opt

# ====================================================================
# Parse tree / Abstract Syntax Tree

# --------------------------------------------------------------------
class Type(enum.Enum):
    UNIT = 0
    BOOL = 1
    INT  = 2
    STR  = 3

    def __str__(self):
        match self:
            case self.UNIT:
                return 'None'
            case self.INT:
                return 'int'
            case self.BOOL:
                return 'bool'
            case self.STR:
                return 'str'

# --------------------------------------------------------------------
class Assoc(enum.Enum):
    LEFT  = 0
    RIGHT = 1

# Associativity of every binary operator; the evaluator relies on it
# to fix the order in which operands are computed.
ASSOC = {
    'addition'               : Assoc.LEFT ,
    'subtraction'            : Assoc.LEFT ,
    'multiplication'         : Assoc.LEFT ,
    'division'               : Assoc.LEFT ,
    'modulus'                : Assoc.LEFT ,
    'boolean-and'            : Assoc.LEFT ,
    'boolean-or'             : Assoc.LEFT ,
    'exponentiation'         : Assoc.RIGHT,
    'cmp-lower-than'         : Assoc.RIGHT,
    'cmp-lower-or-equal-than': Assoc.RIGHT,
    'cmp-equal'              : Assoc.RIGHT,
}

# --------------------------------------------------------------------
@dc.dataclass
class Range:
    start: tuple[int, int]
    end: tuple[int, int]

    @staticmethod
    def of_position(line: int, column: int):
        return Range((line, column), (line, column+1))

# --------------------------------------------------------------------
@dc.dataclass
class AST:
    position: Opt[Range] = dc.field(kw_only = True, default = None)

# --------------------------------------------------------------------
@dc.dataclass
class Name(AST):
    value: str

# --------------------------------------------------------------------
class Expression(AST):
    pass

# --------------------------------------------------------------------
@dc.dataclass
class VarExpression(Expression):
    name: Name

# --------------------------------------------------------------------
@dc.dataclass
class BoolExpression(Expression):
    value: bool

# --------------------------------------------------------------------
@dc.dataclass
class IntExpression(Expression):
    value: int

# --------------------------------------------------------------------
@dc.dataclass
class StrExpression(Expression):
    value: str

# --------------------------------------------------------------------
@dc.dataclass
class UnitExpression(Expression):
    pass

# --------------------------------------------------------------------
@dc.dataclass
class ParenExpression(Expression):
    inner: Expression

# --------------------------------------------------------------------
@dc.dataclass
class InputExpression(Expression):
    prompt: Expression

# --------------------------------------------------------------------
@dc.dataclass
class IntCastExpression(Expression):
    argument: Expression

# --------------------------------------------------------------------
@dc.dataclass
class StrCastExpression(Expression):
    argument: Expression

# --------------------------------------------------------------------
@dc.dataclass
class OpAppExpression(Expression):
    operator: str
    arguments: list[Expression]

# --------------------------------------------------------------------
@dc.dataclass
class CallExpression(Expression):
    """A leaf applied to one or more argument lists: `f(1)(2)`."""
    callee: Expression
    arglists: list[list[Expression]]

# --------------------------------------------------------------------
class Statement(AST):
    pass

# --------------------------------------------------------------------
@dc.dataclass
class Block(AST):
    body: list[Statement]

# --------------------------------------------------------------------
@dc.dataclass
class VarDeclStatement(Statement):
    name: Name
    init: Expression
    type_: Type

# --------------------------------------------------------------------
@dc.dataclass
class AssignStatement(Statement):
    lhs: Name
    rhs: Expression

# --------------------------------------------------------------------
@dc.dataclass
class UpdateStatement(Statement):
    lhs: Name
    operator: str
    rhs: Expression

# --------------------------------------------------------------------
@dc.dataclass
class PassStatement(Statement):
    pass

# --------------------------------------------------------------------
@dc.dataclass
class PrintStatement(Statement):
    arguments: list[Expression]

# --------------------------------------------------------------------
@dc.dataclass
class ExprStatement(Statement):
    expression: CallExpression

# --------------------------------------------------------------------
@dc.dataclass
class IfStatement(Statement):
    condition: Expression
    then: Block
    else_: Block

# --------------------------------------------------------------------
@dc.dataclass
class WhileStatement(Statement):
    condition: Expression
    body: Block

# --------------------------------------------------------------------
@dc.dataclass
class ReturnStatement(Statement):
    expr: Opt[Expression]

# --------------------------------------------------------------------
@dc.dataclass
class Param(AST):
    name: Name
    type_: Opt[Type] = None

#--------------------------------------------------------------------
@dc.dataclass
class DefStatement(Statement):
    name: Name
    params: list[Param]
    rettype: Opt[Type]
    body: Block

# --------------------------------------------------------------------
@dc.dataclass
class Program(AST):
    main: Block
