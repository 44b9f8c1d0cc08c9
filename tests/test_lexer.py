"""Tests for slpylib.slpylexer."""

from slpylib.slpylexer import Lexer


def tokens(reporter, source):
    lexer = Lexer(reporter=reporter)
    lexer.lexer.input(source)
    return [(t.type, t.value) for t in iter(lexer.lexer.token, None)]


def test_keywords_and_identifiers(reporter):
    assert tokens(reporter, 'def fact while None nothing') == [
        ('DEF', 'def'),
        ('IDENT', 'fact'),
        ('WHILE', 'while'),
        ('NONE', 'None'),
        ('IDENT', 'nothing'),
    ]


def test_longest_operator_wins(reporter):
    types = [t for t, _ in tokens(reporter, '+= -= -> <= == = < - +')]
    assert types == [
        'PLUSEQ', 'DASHEQ', 'ARROW', 'LTEQ', 'EQEQ', 'EQ', 'LT', 'DASH', 'PLUS',
    ]


def test_number_has_no_sign(reporter):
    assert tokens(reporter, 'n-1') == [
        ('IDENT', 'n'), ('DASH', '-'), ('NUMBER', 1),
    ]


def test_string_escapes(reporter):
    [(kind, value)] = tokens(reporter, r'"say \"yo!\n\tyo.\""')
    assert kind == 'STRING'
    assert value == 'say "yo!\n\tyo."'


def test_comments_are_skipped(reporter):
    assert tokens(reporter, 'x # the rest is ignored\ny') == [
        ('IDENT', 'x'), ('IDENT', 'y'),
    ]


def test_illegal_character_is_reported_and_skipped(reporter):
    assert tokens(reporter, 'a $ b') == [('IDENT', 'a'), ('IDENT', 'b')]
    assert reporter.nerrors == 1
    assert "illegal character: `$'" in reporter.messages[0]
    assert reporter.positions[0].start == (1, 2)


def test_numbers_are_ascii_digits_only(reporter):
    assert tokens(reporter, '1٣ 2') == [('NUMBER', 1), ('NUMBER', 2)]
    assert reporter.nerrors == 1
    assert "illegal character: `٣'" in reporter.messages[0]
