# --------------------------------------------------------------------
import dataclasses as dc

from typing import Optional as Opt, Union

from .slpyast    import *
from .slpyerrors import CheckError, Reporter

# ====================================================================
# Static types and return-flow verdicts

# --------------------------------------------------------------------
@dc.dataclass
class ArrowType:
    return_type: Opt[Type]
    param_types: list[Type]

    @property
    def result(self) -> Type:
        return Type.UNIT if self.return_type is None else self.return_type

DefTypes    = dict[str, ArrowType]
SymbolTable = dict[str, Type]

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class Fallthrough:
    pass

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class MightReturn:
    ty: Type

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class Returns:
    ty: Type

Rtns = Union[Fallthrough, MightReturn, Returns]

# --------------------------------------------------------------------
def reconcile(a: Rtns, b: Rtns, position: Opt[Range] = None) -> Rtns:
    """Merge the verdicts of two statements (or two branches)."""
    match a, b:
        case Fallthrough(), Fallthrough():
            return a

        case Fallthrough(), (MightReturn(t) | Returns(t)):
            return MightReturn(t)

        case (MightReturn(t) | Returns(t)), Fallthrough():
            return MightReturn(t)

        case Returns(t), Returns(q):
            if t != q:
                raise CheckError(f'mismatched types: {t} and {q}', position)
            return a

        case (MightReturn(t) | Returns(t)), (MightReturn(q) | Returns(q)):
            if t != q:
                raise CheckError(f'mismatched types: {t} and {q}', position)
            return MightReturn(t)

    assert(False)

# ====================================================================
class TypeChecker:
    B : Type = Type.BOOL
    I : Type = Type.INT

    SIGS = {
        'boolean-not'            : ([B   ], B),
        'addition'               : ([I, I], I),
        'subtraction'            : ([I, I], I),
        'multiplication'         : ([I, I], I),
        'division'               : ([I, I], I),
        'modulus'                : ([I, I], I),
        'exponentiation'         : ([I, I], I),
        'boolean-and'            : ([B, B], B),
        'boolean-or'             : ([B, B], B),
        'cmp-equal'              : ([I, I], B),
        'cmp-lower-than'         : ([I, I], B),
        'cmp-lower-or-equal-than': ([I, I], B),
    }

    def expect(self, type_: Type, etype: Type, position: Opt[Range]):
        if type_ != etype:
            raise CheckError(
                f'invalid type: got {type_}, expected {etype}',
                position,
            )

    def for_name(self, name: Name, defs: DefTypes, syms: SymbolTable) -> Type:
        if name.value in syms:
            return syms[name.value]
        if name.value in defs:
            raise CheckError(
                f'function {name.value} cannot be used as a value',
                name.position,
            )
        raise CheckError(f'undefined variable: {name.value}', name.position)

    def for_call(self, expr: CallExpression, defs: DefTypes, syms: SymbolTable) -> Type:
        callee = expr.callee

        if not isinstance(callee, VarExpression):
            self.for_expression(callee, defs, syms)
            raise CheckError('expected function', callee.position)

        name = callee.name

        if name.value not in defs:
            if name.value in syms:
                raise CheckError(
                    f'expected function: {name.value} has type {syms[name.value]}',
                    name.position,
                )
            raise CheckError(f'undefined function: {name.value}', name.position)

        arrow = defs[name.value]
        arguments, *rest = expr.arglists

        if len(arguments) != len(arrow.param_types):
            raise CheckError(
                f'invalid number of arguments for {name.value}: '
                f'expected {len(arrow.param_types)}, got {len(arguments)}',
                expr.position,
            )

        for ptype, argument in zip(arrow.param_types, arguments):
            self.expect(
                self.for_expression(argument, defs, syms),
                ptype, argument.position,
            )

        if rest:
            raise CheckError(
                f'expected function: {name.value} returns {arrow.result}',
                expr.position,
            )

        return arrow.result

    def for_expression(self, expr: Expression, defs: DefTypes, syms: SymbolTable) -> Type:
        match expr:
            case VarExpression(name):
                return self.for_name(name, defs, syms)

            case BoolExpression(_):
                return Type.BOOL

            case IntExpression(_):
                return Type.INT

            case StrExpression(_):
                return Type.STR

            case UnitExpression():
                return Type.UNIT

            case ParenExpression(inner):
                return self.for_expression(inner, defs, syms)

            case InputExpression(prompt):
                self.expect(
                    self.for_expression(prompt, defs, syms),
                    Type.STR, prompt.position,
                )
                return Type.STR

            case IntCastExpression(argument):
                type_ = self.for_expression(argument, defs, syms)
                if type_ not in (Type.INT, Type.BOOL):
                    raise CheckError(
                        f'cannot convert {type_} to int',
                        argument.position,
                    )
                return Type.INT

            case StrCastExpression(argument):
                self.for_expression(argument, defs, syms)
                return Type.STR

            case OpAppExpression(opname, arguments):
                atypes, rtype = self.SIGS[opname]
                for atype, argument in zip(atypes, arguments):
                    self.expect(
                        self.for_expression(argument, defs, syms),
                        atype, argument.position,
                    )
                return rtype

            case CallExpression():
                return self.for_call(expr, defs, syms)

            case _:
                assert(False)

    def for_definition(self, stmt: DefStatement, defs: DefTypes, syms: SymbolTable):
        param_types = []
        for param in stmt.params:
            if param.type_ is None:
                raise CheckError(
                    f'missing type annotation for parameter {param.name.value}',
                    param.position,
                )
            param_types.append(param.type_)

        arrow = ArrowType(return_type = stmt.rettype, param_types = param_types)

        defs[stmt.name.value] = arrow
        syms.pop(stmt.name.value, None)

        # The body only sees what exists at definition time, plus
        # itself and its parameters.
        inner_defs = dict(defs)
        inner_syms = dict(syms)

        for param in stmt.params:
            inner_defs.pop(param.name.value, None)
            inner_syms[param.name.value] = param.type_

        match self.for_block(stmt.body, inner_defs, inner_syms):
            case Fallthrough():
                type_ = Type.UNIT
            case Returns(t):
                type_ = t
            case MightReturn(_):
                raise CheckError(
                    'function blocks must return a definite value',
                    stmt.position,
                )

        if type_ != arrow.result:
            raise CheckError(
                f'function {stmt.name.value} returns {type_}, '
                f'declared {arrow.result}',
                stmt.position,
            )

    def for_statement(self, stmt: Statement, defs: DefTypes, syms: SymbolTable) -> Rtns:
        match stmt:
            case VarDeclStatement(name, init, type_):
                self.expect(
                    self.for_expression(init, defs, syms),
                    type_, init.position,
                )
                defs.pop(name.value, None)
                syms[name.value] = type_

            case AssignStatement(lhs, rhs):
                type_ = self.for_name(lhs, defs, syms)
                self.expect(
                    self.for_expression(rhs, defs, syms),
                    type_, rhs.position,
                )

            case UpdateStatement(lhs, _, rhs):
                self.expect(self.for_name(lhs, defs, syms), Type.INT, lhs.position)
                self.expect(
                    self.for_expression(rhs, defs, syms),
                    Type.INT, rhs.position,
                )

            case PassStatement():
                pass

            case PrintStatement(arguments):
                for argument in arguments:
                    self.expect(
                        self.for_expression(argument, defs, syms),
                        Type.STR, argument.position,
                    )

            case ExprStatement(expression):
                self.for_expression(expression, defs, syms)

            case IfStatement(condition, iftrue, iffalse):
                self.expect(
                    self.for_expression(condition, defs, syms),
                    Type.BOOL, condition.position,
                )
                return reconcile(
                    self.for_block(iftrue , defs, syms),
                    self.for_block(iffalse, defs, syms),
                    stmt.position,
                )

            case WhileStatement(condition, body):
                self.expect(
                    self.for_expression(condition, defs, syms),
                    Type.BOOL, condition.position,
                )
                return reconcile(
                    self.for_block(body, defs, syms),
                    Fallthrough(),
                    stmt.position,
                )

            case ReturnStatement(None):
                return Returns(Type.UNIT)

            case ReturnStatement(e):
                return Returns(self.for_expression(e, defs, syms))

            case DefStatement():
                self.for_definition(stmt, defs, syms)

            case _:
                assert(False)

        return Fallthrough()

    def for_block(self, block: Block, defs: DefTypes, syms: SymbolTable) -> Rtns:
        verdict = Fallthrough()

        for stmt in block.body:
            if isinstance(verdict, Returns):
                raise CheckError(
                    'unexpected statement; already returned',
                    stmt.position,
                )

            current = self.for_statement(stmt, defs, syms)
            verdict = reconcile(verdict, current, stmt.position)

            # A return that completes the block is always reached.
            if isinstance(current, Returns):
                verdict = Returns(verdict.ty)

        return verdict

    def for_program(
            self,
            prgm : Program,
            defs : Opt[DefTypes]    = None,
            syms : Opt[SymbolTable] = None,
    ) -> Rtns:
        defs = dict() if defs is None else defs
        syms = dict() if syms is None else syms
        return self.for_block(prgm.main, defs, syms)

# --------------------------------------------------------------------
def check(
        prgm     : Program,
        reporter : Reporter,
        defs     : Opt[DefTypes]    = None,
        syms     : Opt[SymbolTable] = None,
) -> bool:
    with reporter.checkpoint() as checkpoint:
        try:
            TypeChecker().for_program(prgm, defs, syms)
        except CheckError as e:
            reporter.error(e)
        return bool(checkpoint)
