# --------------------------------------------------------------------
import ply.yacc

from .slpyast    import *
from .slpyerrors import Reporter
from .slpylexer  import Lexer

# ====================================================================
# SLPY parser definition

class Parser:
    UNIOP = {
        'not' : 'boolean-not',
    }

    BINOP = {
        '+'   : 'addition'               ,
        '-'   : 'subtraction'            ,
        '*'   : 'multiplication'         ,
        '/'   : 'division'               ,
        '%'   : 'modulus'                ,
        '^'   : 'exponentiation'         ,
        'and' : 'boolean-and'            ,
        'or'  : 'boolean-or'             ,
        '=='  : 'cmp-equal'              ,
        '<'   : 'cmp-lower-than'         ,
        '<='  : 'cmp-lower-or-equal-than',
    }

    UPDOP = {
        '+=' : 'addition'   ,
        '-=' : 'subtraction',
    }

    tokens = Lexer.tokens

    start = 'prgm'

    # From lowest to highest binding power
    precedence = (
        ('left' , 'AND'                   ),
        ('left' , 'OR'                    ),
        ('right', 'LT', 'LTEQ', 'EQEQ'    ),
        ('left' , 'PLUS', 'DASH'          ),
        ('left' , 'STAR', 'SLASH', 'PCENT'),
        ('right', 'HAT'                   ),
        ('right', 'NOT'                   ),
    )

    def __init__(self, reporter: Reporter, start: Opt[str] = None):
        self.lexer    = Lexer(reporter = reporter)
        self.parser   = ply.yacc.yacc(
            module       = self,
            start        = start,
            debug        = False,
            write_tables = False,
            # Rules outside of `start` are unreachable from it
            errorlog     = None if start is None else ply.yacc.NullLogger(),
        )
        self.reporter = reporter

    def parse(self, program: str):
        self.lexer.reset()

        with self.reporter.checkpoint() as checkpoint:
            ast = self.parser.parse(
                program,
                lexer    = self.lexer.lexer,
                tracking = True,
            )

            return ast if checkpoint else None

    def _position(self, p) -> Range:
        n = len(p) - 1
        return Range(
            start = (p.linespan(1)[0], self.lexer.column_of_pos(p.lexspan(1)[0])    ),
            end   = (p.linespan(n)[1], self.lexer.column_of_pos(p.lexspan(n)[1]) + 1),
        )

    def p_name(self, p):
        """name : IDENT"""
        p[0] = Name(
            value = p[1],
            position = self._position(p)
        )

    def p_type_bool(self, p):
        """type : BOOL"""
        p[0] = Type.BOOL

    def p_type_int(self, p):
        """type : INT"""
        p[0] = Type.INT

    def p_type_str(self, p):
        """type : STR"""
        p[0] = Type.STR

    def p_type_unit(self, p):
        """type : NONE"""
        p[0] = Type.UNIT

    def p_colon_opt(self, p):
        """colon_opt :
                     | COLON"""
        pass

    def p_leaf_var(self, p):
        """leaf : name"""
        p[0] = VarExpression(
            name     = p[1],
            position = self._position(p)
        )

    def p_leaf_bool(self, p):
        """leaf : TRUE
                | FALSE"""
        p[0] = BoolExpression(
            value    = (p[1] == 'true'),
            position = self._position(p),
        )

    def p_leaf_int(self, p):
        """leaf : NUMBER"""
        p[0] = IntExpression(
            value    = p[1],
            position = self._position(p),
        )

    def p_leaf_negative_int(self, p):
        """leaf : DASH NUMBER"""
        p[0] = IntExpression(
            value    = -p[2],
            position = self._position(p),
        )

    def p_leaf_str(self, p):
        """leaf : STRING"""
        p[0] = StrExpression(
            value    = p[1],
            position = self._position(p),
        )

    def p_leaf_unit(self, p):
        """leaf : NONE"""
        p[0] = UnitExpression(position = self._position(p))

    def p_leaf_input(self, p):
        """leaf : INPUT LPAREN expr RPAREN"""
        p[0] = InputExpression(
            prompt   = p[3],
            position = self._position(p),
        )

    def p_leaf_intcast(self, p):
        """leaf : INT LPAREN expr RPAREN"""
        p[0] = IntCastExpression(
            argument = p[3],
            position = self._position(p),
        )

    def p_leaf_strcast(self, p):
        """leaf : STR LPAREN expr RPAREN"""
        p[0] = StrCastExpression(
            argument = p[3],
            position = self._position(p),
        )

    def p_leaf_group(self, p):
        """leaf : LPAREN expr RPAREN"""
        p[0] = ParenExpression(
            inner    = p[2],
            position = self._position(p),
        )

    def p_arglist(self, p):
        """arglist : LPAREN exprs_comma RPAREN"""
        p[0] = p[2]

    def p_arglists(self, p):
        """arglists : arglist
                    | arglists arglist"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1]
            p[0].append(p[2])

    def p_call(self, p):
        """call : leaf arglists"""
        p[0] = CallExpression(
            callee   = p[1],
            arglists = p[2],
            position = self._position(p),
        )

    def p_appl(self, p):
        """appl : leaf
                | call"""
        p[0] = p[1]

    def p_expression_appl(self, p):
        """expr : appl"""
        p[0] = p[1]

    def p_expression_uniop(self, p):
        """expr : NOT expr"""
        p[0] = OpAppExpression(
            operator  = self.UNIOP[p[1]],
            arguments = [p[2]],
            position  = self._position(p),
        )

    def p_expression_binop(self, p):
        """expr : expr PLUS  expr
                | expr DASH  expr
                | expr STAR  expr
                | expr SLASH expr
                | expr PCENT expr
                | expr HAT   expr

                | expr AND   expr
                | expr OR    expr

                | expr EQEQ  expr
                | expr LT    expr
                | expr LTEQ  expr"""

        p[0] = OpAppExpression(
            operator  = self.BINOP[p[2]],
            arguments = [p[1], p[3]],
            position  = self._position(p),
        )

    def p_exprs_comma_1(self, p):
        """exprs_comma_1 : expr
                        | exprs_comma_1 COMMA expr"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1]
            p[0].append(p[3])

    def p_exprs_comma(self, p):
        """exprs_comma :
                       | exprs_comma_1"""
        p[0] = [] if len(p) == 1 else p[1]

    def p_stmt_vardecl(self, p):
        """stmt : name COLON type EQ expr SEMICOLON"""
        p[0] = VarDeclStatement(
            name     = p[1],
            init     = p[5],
            type_    = p[3],
            position = self._position(p),
        )

    def p_stmt_assign(self, p):
        """stmt : name EQ expr SEMICOLON"""
        p[0] = AssignStatement(
            lhs      = p[1],
            rhs      = p[3],
            position = self._position(p),
        )

    def p_stmt_update(self, p):
        """stmt : name PLUSEQ expr SEMICOLON
                | name DASHEQ expr SEMICOLON"""
        p[0] = UpdateStatement(
            lhs      = p[1],
            operator = self.UPDOP[p[2]],
            rhs      = p[3],
            position = self._position(p),
        )

    def p_stmt_pass(self, p):
        """stmt : PASS SEMICOLON"""
        p[0] = PassStatement(position = self._position(p))

    def p_stmt_print(self, p):
        """stmt : PRINT LPAREN exprs_comma RPAREN SEMICOLON"""
        p[0] = PrintStatement(
            arguments = p[3],
            position  = self._position(p),
        )

    def p_stmt_call(self, p):
        """stmt : call SEMICOLON"""
        p[0] = ExprStatement(
            expression = p[1],
            position   = self._position(p),
        )

    def p_stmt_if(self, p):
        """stmt : IF expr colon_opt block ELSE colon_opt block"""
        p[0] = IfStatement(
            condition = p[2],
            then      = p[4],
            else_     = p[7],
            position  = self._position(p),
        )

    def p_stmt_while(self, p):
        """stmt : WHILE expr colon_opt block"""
        p[0] = WhileStatement(
            condition = p[2],
            body      = p[4],
            position  = self._position(p),
        )

    def p_stmt_return_none(self, p):
        """stmt : RETURN SEMICOLON"""
        p[0] = ReturnStatement(expr = None, position = self._position(p))

    def p_stmt_return_some(self, p):
        """stmt : RETURN expr SEMICOLON"""
        p[0] = ReturnStatement(expr = p[2], position = self._position(p))

    def p_param(self, p):
        """param : name
                 | name COLON type"""
        p[0] = Param(
            name     = p[1],
            type_    = None if len(p) == 2 else p[3],
            position = self._position(p),
        )

    def p_params_1(self, p):
        """params_1 : param
                    | params_1 COMMA param"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1]
            p[0].append(p[3])

    def p_params(self, p):
        """params :
                  | params_1"""
        p[0] = [] if len(p) == 1 else p[1]

    def p_rty(self, p):
        """rty :
               | ARROW type"""
        p[0] = None if len(p) == 1 else p[2]

    def p_stmt_def(self, p):
        """stmt : DEF name LPAREN params RPAREN rty colon_opt block"""
        p[0] = DefStatement(
            name     = p[2],
            params   = p[4],
            rettype  = p[6],
            body     = p[8],
            position = self._position(p),
        )

    def p_stmts(self, p):
        """stmts :
                 | stmts stmt"""

        if len(p) == 1:
            p[0] = []
        else:
            p[0] = p[1]
            p[0].append(p[2])

    def p_stmts_error(self, p):
        """stmts : stmts error SEMICOLON"""
        p[0] = p[1]

    def p_block(self, p):
        """block : LBRACE stmts RBRACE"""
        p[0] = Block(
            body     = p[2],
            position = self._position(p),
        )

    def p_program(self, p):
        """prgm : stmts"""
        p[0] = Program(main = Block(body = p[1]))

    def p_error(self, p):
        if p:
            position = Range.of_position(
                p.lineno,
                self.lexer.column_of_pos(p.lexpos),
            )

            self.reporter(
                f'syntax error',
                position = position,
            )
        else:
            self.reporter('syntax error at end of file')
