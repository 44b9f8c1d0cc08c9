# --------------------------------------------------------------------
import re
import sys

from typing import Optional as Opt

from .slpyast    import *
from .slpyenv    import Environment
from .slpyerrors import EvalError
from .slpyvalues import *

# ====================================================================
# Operator semantics

def _int(value: Value, position: Opt[Range]) -> int:
    if not isinstance(value, IntValue):
        raise EvalError('type error: expected int', position)
    return value.value

def _bool(value: Value, position: Opt[Range]) -> bool:
    if not isinstance(value, BoolValue):
        raise EvalError('type error: expected bool', position)
    return value.value

# --------------------------------------------------------------------
def _truncdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

def _div(a: int, b: int, position: Opt[Range]) -> int:
    if b == 0:
        raise EvalError('cannot divide by zero', position)
    return _truncdiv(a, b)

def _mod(a: int, b: int, position: Opt[Range]) -> int:
    if b == 0:
        raise EvalError('cannot mod by zero', position)
    return a - b * _truncdiv(a, b)

def _pow(a: int, b: int, position: Opt[Range]) -> int:
    if b < 0:
        raise EvalError(
            'negative powers are not supported since there are no floats',
            position,
        )
    return a ** b

# --------------------------------------------------------------------
# Operands are unwrapped before dispatch; the third argument is the
# source position used for runtime errors.
INTOPS = {
    'addition'               : lambda a, b, _: IntValue(a + b),
    'subtraction'            : lambda a, b, _: IntValue(a - b),
    'multiplication'         : lambda a, b, _: IntValue(a * b),
    'division'               : lambda a, b, p: IntValue(_div(a, b, p)),
    'modulus'                : lambda a, b, p: IntValue(_mod(a, b, p)),
    'exponentiation'         : lambda a, b, p: IntValue(_pow(a, b, p)),
    'cmp-lower-than'         : lambda a, b, _: of_bool(a <  b),
    'cmp-lower-or-equal-than': lambda a, b, _: of_bool(a <= b),
    'cmp-equal'              : lambda a, b, _: of_bool(a == b),
}

BOOLOPS = {
    'boolean-and' : lambda a, b: of_bool(a and b),
    'boolean-or'  : lambda a, b: of_bool(a or  b),
}

def apply_binop(opname: str, lhs: Value, rhs: Value, position: Opt[Range] = None) -> Value:
    if opname in INTOPS:
        return INTOPS[opname](_int(lhs, position), _int(rhs, position), position)
    if opname in BOOLOPS:
        return BOOLOPS[opname](_bool(lhs, position), _bool(rhs, position))
    assert False, f'unknown operator: {opname}'

def apply_uniop(opname: str, value: Value, position: Opt[Range] = None) -> Value:
    match opname:
        case 'boolean-not':
            return of_bool(not _bool(value, position))
    assert False, f'unknown operator: {opname}'

# ====================================================================
class Evaluator:
    INTEGER = re.compile(r'[+-]?[0-9]+')

    def __init__(self, stdin = None, stdout = None):
        self.stdin  = stdin
        self.stdout = stdout

    @property
    def input(self):
        return sys.stdin if self.stdin is None else self.stdin

    @property
    def output(self):
        return sys.stdout if self.stdout is None else self.stdout

    # ----------------------------------------------------------------
    # Expressions

    def _is_binop(self, expr: Expression, assoc: Assoc) -> bool:
        return (
            isinstance(expr, OpAppExpression) and
            len(expr.arguments) == 2 and
            ASSOC[expr.operator] == assoc
        )

    def for_left_chain(self, expr: OpAppExpression, env: Environment) -> Value:
        # Walk down the left spine, then fold back up: leftmost operand
        # first, each right operand in source order.
        spine = []
        while self._is_binop(expr, Assoc.LEFT):
            spine.append(expr)
            expr = expr.arguments[0]

        value = self.for_expression(expr, env)
        for node in reversed(spine):
            rhs   = self.for_expression(node.arguments[1], env)
            value = apply_binop(node.operator, value, rhs, node.position)
        return value

    def for_right_chain(self, expr: OpAppExpression, env: Environment) -> Value:
        # Mirror image of for_left_chain: rightmost operand first.
        spine = []
        while self._is_binop(expr, Assoc.RIGHT):
            spine.append(expr)
            expr = expr.arguments[1]

        value = self.for_expression(expr, env)
        for node in reversed(spine):
            lhs   = self.for_expression(node.arguments[0], env)
            value = apply_binop(node.operator, lhs, value, node.position)
        return value

    def for_input(self, expr: InputExpression, env: Environment) -> Value:
        prompt = self.for_expression(expr.prompt, env)

        try:
            self.output.write(str(prompt))
            self.output.flush()
            line = self.input.readline()
        except (OSError, ValueError) as e:
            raise EvalError(f'could not read input: {e}', expr.position) from e

        if not line:
            raise EvalError('could not read input: end of file', expr.position)

        return StrValue(line.rstrip('\r\n'))

    def for_intcast(self, expr: IntCastExpression, env: Environment) -> Value:
        value = self.for_expression(expr.argument, env)

        match value:
            case IntValue():
                return value
            case BoolValue(b):
                return IntValue(1 if b else 0)
            case StrValue(s) if self.INTEGER.fullmatch(s):
                return IntValue(int(s))

        raise EvalError(f"couldn't convert {value} to int", expr.position)

    def call(self, func: Value, arguments: list[Value], position: Opt[Range] = None) -> Value:
        if not isinstance(func, FuncValue):
            raise EvalError('type error: expected function', position)

        if len(arguments) != len(func.params):
            raise EvalError(
                f'unexpected number of arguments: '
                f'expected {len(func.params)}, got {len(arguments)}',
                position,
            )

        frame = func.captures.snapshot()
        for param, argument in zip(func.params, arguments):
            frame.bind(param.value, argument)

        result = self.for_block(func.body, frame)
        return UNIT if result is None else result

    def for_call(self, expr: CallExpression, env: Environment) -> Value:
        value = self.for_expression(expr.callee, env)

        for arglist in expr.arglists:
            arguments = [self.for_expression(e, env) for e in arglist]
            value = self.call(value, arguments, expr.position)

        return value

    def for_expression(self, expr: Expression, env: Environment) -> Value:
        match expr:
            case VarExpression(name):
                return env.lookup(name.value, name.position)

            case BoolExpression(b):
                return of_bool(b)

            case IntExpression(n):
                return IntValue(n)

            case StrExpression(s):
                return StrValue(s)

            case UnitExpression():
                return UNIT

            case ParenExpression(inner):
                return self.for_expression(inner, env)

            case InputExpression():
                return self.for_input(expr, env)

            case IntCastExpression():
                return self.for_intcast(expr, env)

            case StrCastExpression(argument):
                return StrValue(str(self.for_expression(argument, env)))

            case OpAppExpression(opname, [argument]):
                return apply_uniop(
                    opname,
                    self.for_expression(argument, env),
                    expr.position,
                )

            case OpAppExpression(opname, [_, _]):
                if ASSOC[opname] == Assoc.LEFT:
                    return self.for_left_chain(expr, env)
                return self.for_right_chain(expr, env)

            case CallExpression():
                return self.for_call(expr, env)

            case _:
                assert(False)

    # ----------------------------------------------------------------
    # Statements: `None` means fall through, a value is a return

    def for_definition(self, stmt: DefStatement, env: Environment):
        func = FuncValue(
            captures = env.snapshot(),
            params   = [param.name for param in stmt.params],
            body     = stmt.body,
            name     = stmt.name.value,
        )
        func.captures.bind(stmt.name.value, func)
        env.bind(stmt.name.value, func)

    def for_statement(self, stmt: Statement, env: Environment) -> Opt[Value]:
        match stmt:
            case VarDeclStatement(name, init, _):
                env.bind(name.value, self.for_expression(init, env))

            case AssignStatement(lhs, rhs):
                env.bind(lhs.value, self.for_expression(rhs, env))

            case UpdateStatement(lhs, opname, rhs):
                value = self.for_expression(rhs, env)
                old   = env.lookup(lhs.value, lhs.position)
                env.bind(lhs.value, apply_binop(opname, old, value, stmt.position))

            case PassStatement():
                pass

            case PrintStatement(arguments):
                for argument in arguments:
                    value = self.for_expression(argument, env)
                    print(value, file = self.output)

            case ExprStatement(expression):
                self.for_expression(expression, env)

            case IfStatement(condition, iftrue, iffalse):
                if _bool(self.for_expression(condition, env), condition.position):
                    return self.for_block(iftrue, env)
                return self.for_block(iffalse, env)

            case WhileStatement(condition, body):
                while _bool(self.for_expression(condition, env), condition.position):
                    result = self.for_block(body, env)
                    if result is not None:
                        return result

            case ReturnStatement(None):
                return UNIT

            case ReturnStatement(e):
                return self.for_expression(e, env)

            case DefStatement():
                self.for_definition(stmt, env)

            case _:
                assert(False)

        return None

    def for_block(self, block: Block, env: Environment) -> Opt[Value]:
        for stmt in block.body:
            result = self.for_statement(stmt, env)
            if result is not None:
                return result
        return None

    def for_program(self, prgm: Program, env: Opt[Environment] = None) -> Environment:
        env = Environment() if env is None else env
        self.for_block(prgm.main, env)
        return env

# --------------------------------------------------------------------
def evaluate(
        prgm   : Program,
        env    : Opt[Environment] = None,
        stdin  = None,
        stdout = None,
) -> Environment:
    return Evaluator(stdin = stdin, stdout = stdout).for_program(prgm, env)
