# --------------------------------------------------------------------
import bisect
import ply.lex
import re

from .slpyast    import Range
from .slpyerrors import Reporter

# ====================================================================
# SLPY lexer definition

class Lexer:
    keywords = {
        'and'    : 'AND'   ,
        'bool'   : 'BOOL'  ,
        'def'    : 'DEF'   ,
        'else'   : 'ELSE'  ,
        'false'  : 'FALSE' ,
        'if'     : 'IF'    ,
        'input'  : 'INPUT' ,
        'int'    : 'INT'   ,
        'None'   : 'NONE'  ,
        'not'    : 'NOT'   ,
        'or'     : 'OR'    ,
        'pass'   : 'PASS'  ,
        'print'  : 'PRINT' ,
        'return' : 'RETURN',
        'str'    : 'STR'   ,
        'true'   : 'TRUE'  ,
        'while'  : 'WHILE' ,
    }

    tokens = (
        'IDENT' ,
        'NUMBER',
        'STRING',

        'LPAREN'   ,
        'RPAREN'   ,
        'LBRACE'   ,
        'RBRACE'   ,
        'COLON'    ,
        'SEMICOLON',
        'COMMA'    ,

        'ARROW'    ,
        'DASH'     ,
        'DASHEQ'   ,
        'EQ'       ,
        'EQEQ'     ,
        'HAT'      ,
        'LT'       ,
        'LTEQ'     ,
        'PCENT'    ,
        'PLUS'     ,
        'PLUSEQ'   ,
        'SLASH'    ,
        'STAR'     ,
    ) + tuple(keywords.values())

    ESCAPES = {
        'n'  : '\n',
        't'  : '\t',
        '\\' : '\\',
        '"'  : '"' ,
        "'"  : "'" ,
    }

    t_LPAREN    = re.escape('(')
    t_RPAREN    = re.escape(')')
    t_LBRACE    = re.escape('{')
    t_RBRACE    = re.escape('}')
    t_COLON     = re.escape(':')
    t_SEMICOLON = re.escape(';')
    t_COMMA     = re.escape(',')

    t_ARROW     = re.escape('->')
    t_DASH      = re.escape('-')
    t_DASHEQ    = re.escape('-=')
    t_EQ        = re.escape('=')
    t_EQEQ      = re.escape('==')
    t_HAT       = re.escape('^')
    t_LT        = re.escape('<')
    t_LTEQ      = re.escape('<=')
    t_PCENT     = re.escape('%')
    t_PLUS      = re.escape('+')
    t_PLUSEQ    = re.escape('+=')
    t_SLASH     = re.escape('/')
    t_STAR      = re.escape('*')

    t_ignore = ' \t\r'
    t_ignore_comment = r'\#.*'

    def __init__(self, reporter: Reporter):
        self.lexer    = ply.lex.lex(module = self)
        self.reporter = reporter
        self.bol      = [0]

    def reset(self):
        self.lexer.lineno = 1
        self.bol = [0]

    def column_of_pos(self, pos: int) -> int:
        assert(0 <= pos)
        return pos - self.bol[bisect.bisect_right(self.bol, pos)-1]

    def t_newline(self, t):
        r'\n+'
        t.lexer.lineno += len(t.value)
        self.bol.append(t.lexer.lexpos)

    def t_IDENT(self, t):
        r'[a-zA-Z_][a-zA-Z0-9_]*'
        if t.value in self.keywords:
            t.type  = self.keywords[t.value]
        return t

    def t_NUMBER(self, t):
        r'[0-9]+'
        t.value = int(t.value)
        return t

    def t_STRING(self, t):
        r'"([^"\\\n]|\\.)*"'
        t.value = re.sub(
            r'\\(.)',
            lambda m: self.ESCAPES.get(m.group(1), m.group(0)),
            t.value[1:-1],
        )
        return t

    def t_error(self, t):
        position = Range.of_position(t.lineno, self.column_of_pos(t.lexpos))
        self.reporter(
            f"illegal character: `{t.value[0]}' -- skipping",
            position = position,
        )
        t.lexer.skip(1)
