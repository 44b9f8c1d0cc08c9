"""Tests for slpylib.slpyeval."""

import io

import pytest

from conftest import parse, run

from slpylib.slpyast import Type
from slpylib.slpychecker import TypeChecker
from slpylib.slpyenv import Environment
from slpylib.slpyerrors import EvalError
from slpylib.slpyeval import Evaluator, apply_binop, evaluate
from slpylib.slpyvalues import (
    UNIT,
    BoolValue,
    FuncValue,
    IntValue,
    StrValue,
    UnitValue,
)


def value_of(source, stdin=''):
    _, env = run(f'{source}', stdin)
    return env['result']


def fails(source, fragment, stdin=''):
    with pytest.raises(EvalError) as exc:
        run(source, stdin)
    assert fragment in exc.value.message
    return exc.value


# ---------------------------------------------------------------------------
# Arithmetic and operator order
# ---------------------------------------------------------------------------

class TestOperators:
    def test_subtraction_is_left_associative(self):
        assert value_of('result = 10 - 3 - 2;') == IntValue(5)

    def test_exponent_is_right_associative(self):
        assert value_of('result = 2 ^ 3 ^ 2;') == IntValue(512)

    def test_precedence(self):
        assert value_of('result = 1 + 2 * 3 ^ 2;') == IntValue(19)
        assert value_of('result = (1 + 2) * 3;') == IntValue(9)

    def test_division_truncates_toward_zero(self):
        assert value_of('result = 7 / 2;') == IntValue(3)
        assert value_of('result = -7 / 2;') == IntValue(-3)
        assert value_of('result = 7 % -2;') == IntValue(1)
        assert value_of('result = -7 % 2;') == IntValue(-1)

    def test_wide_integers(self):
        assert value_of('result = 2 ^ 100;') == IntValue(2 ** 100)

    def test_comparisons_and_logic(self):
        assert value_of('result = 1 < 2 and 2 <= 2;') == BoolValue(True)
        assert value_of('result = 3 == 4 or not false;') == BoolValue(True)

    def test_division_by_zero_fails_at_runtime(self):
        fails('x = 5 / 0;', 'cannot divide by zero')

    def test_modulo_by_zero_fails_at_runtime(self):
        fails('x = 5 % 0;', 'cannot mod by zero')

    def test_negative_exponent(self):
        fails('x = 2 ^ -1;', 'negative powers are not supported')

    def test_operand_tags_are_checked(self):
        fails('x = 1 + "a";', 'type error: expected int')
        fails('x = 1 and true;', 'type error: expected bool')
        fails('if 1: { pass; } else: { pass; }', 'type error: expected bool')

    def test_right_associative_operands_evaluate_right_first(self):
        out, env = run('r = int(input("a")) ^ int(input("b"));', stdin='3\n2\n')
        assert out == 'ba'
        # the first line read goes to the right operand
        assert env['r'] == IntValue(2 ** 3)

    def test_comparison_evaluates_right_first(self):
        out, _ = run('r = int(input("left")) < int(input("right"));', stdin='1\n2\n')
        assert out == 'rightleft'

    def test_left_associative_operands_evaluate_left_first(self):
        out, env = run('r = int(input("a")) - int(input("b"));', stdin='10\n4\n')
        assert out == 'ab'
        assert env['r'] == IntValue(6)

    def test_and_or_are_eager(self):
        out, env = run('r = false and int(input("x")) == 0;', stdin='0\n')
        assert out == 'x'
        assert env['r'] == BoolValue(False)

    def test_long_left_chain(self):
        source = 'result = 0' + ' + 1' * 5000 + ';'
        assert value_of(source) == IntValue(5000)

    def test_apply_binop_dispatch(self):
        assert apply_binop('multiplication', IntValue(6), IntValue(7)) == IntValue(42)
        assert apply_binop('boolean-or', BoolValue(False), BoolValue(True)) == BoolValue(True)


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

class TestStatements:
    def test_print_each_argument_on_its_own_line(self):
        out, _ = run('print(str(1+2));')
        assert out == '3\n'
        out, _ = run('print("a", 1, true, None);')
        assert out == 'a\n1\ntrue\nNone\n'

    def test_print_converts_at_runtime(self):
        out, _ = run('print(int("7") + 1);')
        assert out == '8\n'

    def test_declaration_assignment_update(self):
        _, env = run('x: int = 1; x = x + 1; x += 10; x -= 2;')
        assert env['x'] == IntValue(10)

    def test_update_evaluates_rhs_first(self):
        fails('y += int("nope");', "couldn't convert nope to int")

    def test_update_requires_existing_int(self):
        fails('y += 1;', 'undefined variable: y')
        fails('s = "a"; s += 1;', 'type error: expected int')

    def test_pass(self):
        _, env = run('pass;')
        assert len(env) == 0

    def test_if_runs_exactly_one_branch(self):
        out, _ = run('if 1 < 2: { print("yes"); } else: { print("no"); }')
        assert out == 'yes\n'

    def test_while(self):
        _, env = run('i = 0; total = 0; while i < 5: { i += 1; total += i; }')
        assert env['total'] == IntValue(15)

    def test_blocks_share_the_frame(self):
        _, env = run('if true: { inner = 1; } else: { pass; }')
        assert env['inner'] == IntValue(1)

    def test_top_level_return_stops_the_program(self):
        out, _ = run('print("a"); return; print("b");')
        assert out == 'a\n'

    def test_return_inside_loop_stops_the_loop(self):
        source = '''
            def first_over(limit: int) -> int {
                i: int = 0;
                while true: {
                    i += 1;
                    if limit < i: { return i; } else: { pass; }
                }
            }
            result = first_over(3);
        '''
        assert value_of(source) == IntValue(4)


# ---------------------------------------------------------------------------
# Conversions and input
# ---------------------------------------------------------------------------

class TestLeaves:
    def test_int_conversion(self):
        assert value_of('result = int(true) + int(false);') == IntValue(1)
        assert value_of('result = int("-12");') == IntValue(-12)
        assert value_of('result = int(5);') == IntValue(5)

    def test_int_conversion_failures(self):
        fails('x = int("twelve");', "couldn't convert twelve to int")
        fails('x = int(" 1");', "couldn't convert")
        fails('x = int(None);', "couldn't convert None to int")

    def test_str_conversion(self):
        assert value_of('result = str(true);') == StrValue('true')
        assert value_of('result = str(None);') == StrValue('None')
        assert value_of('def f() { pass; } result = str(f);') == StrValue('function object')

    def test_input_prompts_and_strips_line_terminator(self):
        out, env = run('name = input("name? ");', stdin='Ada\r\nrest\n')
        assert out == 'name? '
        assert env['name'] == StrValue('Ada')

    def test_input_at_end_of_stream_fails(self):
        fails('x = input("> ");', 'could not read input')

    def test_undefined_variable(self):
        error = fails('x = y;', 'undefined variable: y')
        assert error.position.start == (1, 4)


# ---------------------------------------------------------------------------
# Functions and closures
# ---------------------------------------------------------------------------

class TestFunctions:
    def test_recursive_factorial(self):
        source = '''
            def fact(n): { if n <= 1: { return 1; } else: { return n * fact(n-1); } }
            result = fact(5);
        '''
        assert value_of(source) == IntValue(120)

    def test_mutual_recursion_needs_both_in_snapshot(self):
        # `is_odd` does not exist when `is_even` is defined, so the
        # snapshot of `is_even` cannot see it.
        source = '''
            def is_even(n) { if n == 0: { return true; } else: { return is_odd(n - 1); } }
            def is_odd(n) { if n == 0: { return false; } else: { return is_even(n - 1); } }
            result = is_odd(3);
        '''
        fails(source, 'undefined variable: is_odd')

    def test_fall_through_returns_unit(self):
        assert value_of('def f() { pass; } result = f();') == UNIT
        assert value_of('def f() { return; } result = f();') == UNIT

    def test_closure_freezes_free_variables(self):
        source = '''
            k = 1;
            def get() { return k; }
            k = 2;
            result = get();
        '''
        assert value_of(source) == IntValue(1)

    def test_call_does_not_touch_caller_frame(self):
        _, env = run('x = 1; def f() { x = 99; } f();')
        assert env['x'] == IntValue(1)

    def test_chained_application(self):
        source = '''
            def adder(a) {
                def add(b) { return a + b; }
                return add;
            }
            result = adder(1)(2);
        '''
        assert value_of(source) == IntValue(3)

    def test_arguments_evaluated_left_to_right(self):
        out, _ = run('def f(a, b) { pass; } f(input("1"), input("2"));', stdin='x\ny\n')
        assert out == '12'

    def test_calling_a_non_function(self):
        fails('x = 3; x(1);', 'expected function')

    def test_wrong_argument_count(self):
        fails('def f(a) { pass; } f(1, 2);', 'unexpected number of arguments')

    def test_call_statement_discards_return_value(self):
        out, _ = run('def f() -> int { return 1; } f(); print("after");')
        assert out == 'after\n'

    def test_definition_captures_itself(self):
        _, env = run('def f() { pass; }')
        func = env['f']
        assert isinstance(func, FuncValue)
        assert func.captures['f'] is func
        assert str(func) == 'function object'


# ---------------------------------------------------------------------------
# Checked programs: runtime values agree with checked types
# ---------------------------------------------------------------------------

class TestCheckedPrograms:
    TAGS = {
        Type.INT : IntValue,
        Type.STR : StrValue,
        Type.BOOL: BoolValue,
        Type.UNIT: UnitValue,
    }

    SOURCE = '''
        def num(n: int) -> int { return n * 2; }
        def word(s: str) -> str { return s; }
        def flag(n: int) -> bool { return n < 3; }
        def noop(s: str) -> None { print(s); }
        def early(b: bool) -> None { if b: { return; } else: { return; } }
        r_num: int = num(4);
        r_word: str = word("hi");
        r_flag: bool = flag(1);
        r_noop: None = noop("side");
        r_early: None = early(true);
    '''

    CALLS = {
        'num'  : 'r_num'  ,
        'word' : 'r_word' ,
        'flag' : 'r_flag' ,
        'noop' : 'r_noop' ,
        'early': 'r_early',
    }

    def test_runtime_values_match_checked_return_types(self):
        prgm = parse(self.SOURCE)
        defs, syms = {}, {}
        TypeChecker().for_program(prgm, defs, syms)

        out = io.StringIO()
        env = evaluate(prgm, stdout=out)
        assert out.getvalue() == 'side\n'

        for fn, var in self.CALLS.items():
            assert isinstance(env[var], self.TAGS[defs[fn].result]), fn
            assert isinstance(env[var], self.TAGS[syms[var]]), var

    def test_unit_functions_return_the_unit_value(self):
        env = evaluate(parse(self.SOURCE), stdout=io.StringIO())
        assert env['r_noop'] == UNIT
        assert env['r_early'] == UNIT


# ---------------------------------------------------------------------------
# evaluate() / Evaluator entry points
# ---------------------------------------------------------------------------

def test_evaluate_reuses_given_environment():
    env = Environment()
    env['x'] = IntValue(41)
    out = io.StringIO()
    evaluate(parse('x += 1; print(x);'), env=env, stdout=out)
    assert env['x'] == IntValue(42)
    assert out.getvalue() == '42\n'


def test_evaluator_for_block_reports_return_value():
    prgm = parse('x = 1; return x + 1; x = 5;')
    env = Environment()
    assert Evaluator().for_block(prgm.main, env) == IntValue(2)
    assert env['x'] == IntValue(1)
