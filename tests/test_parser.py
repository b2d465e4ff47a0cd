import pytest

from ast_node import NodeKind, new_binary, new_num
from config import CompilerOptions
from errors import ParseError
from lexer import Token, tokenize
from parser import Parser, parse


def p(source, **kwargs):
    return parse(tokenize(source), CompilerOptions(**kwargs))


def num(v):
    return new_num(v)


def add(l, r):
    return new_binary(NodeKind.ADD, l, r)


def sub(l, r):
    return new_binary(NodeKind.SUB, l, r)


def mul(l, r):
    return new_binary(NodeKind.MUL, l, r)


def div(l, r):
    return new_binary(NodeKind.DIV, l, r)


def test_single_number():
    assert p('42') == num(42)


def test_multiplication_binds_tighter():
    assert p('1+2*3') == add(num(1), mul(num(2), num(3)))


def test_parentheses_override_precedence():
    assert p('(1+2)*3') == mul(add(num(1), num(2)), num(3))


def test_subtraction_is_left_associative():
    assert p('10-4-3') == sub(sub(num(10), num(4)), num(3))


def test_division_is_left_associative():
    assert p('100/10/5') == div(div(num(100), num(10)), num(5))


def test_comparisons_below_arithmetic():
    assert p('1+2<3*4') == new_binary(NodeKind.LT, add(num(1), num(2)), mul(num(3), num(4)))


def test_equality_below_relational():
    tree = p('1<2==3<=4')
    assert tree == new_binary(
        NodeKind.EQ,
        new_binary(NodeKind.LT, num(1), num(2)),
        new_binary(NodeKind.LE, num(3), num(4)),
    )


def test_not_equal():
    assert p('1!=2') == new_binary(NodeKind.NE, num(1), num(2))


def test_greater_than_swaps_operands():
    assert p('2>1') == new_binary(NodeKind.LT, num(1), num(2))
    assert p('2>=1') == new_binary(NodeKind.LE, num(1), num(2))


def test_greater_than_chain_folds_left():
    # (3 > 2) > 1  ==  1 < (2 < 3)
    tree = p('3>2>1')
    assert tree == new_binary(NodeKind.LT, num(1), new_binary(NodeKind.LT, num(2), num(3)))


def test_no_greater_than_kind_exists():
    kinds = {k.value for k in NodeKind}
    assert kinds == {'Add', 'Sub', 'Mul', 'Div', 'Eq', 'Ne', 'Lt', 'Le', 'Num'}


def test_unary_plus_is_dropped():
    assert p('+5') == num(5)


def test_unary_minus_becomes_subtraction_from_zero():
    assert p('-5') == sub(num(0), num(5))
    assert p('-(1+2)') == sub(num(0), add(num(1), num(2)))


def test_unary_binds_tighter_than_multiplication():
    assert p('-2*3') == mul(sub(num(0), num(2)), num(3))
    assert p('7/-2') == div(num(7), sub(num(0), num(2)))


@pytest.mark.parametrize('source, offset, message', [
    ('1+', 2, 'expected a number'),
    ('', 0, 'expected a number'),
    ('*1', 0, 'expected a number'),
    ('--1', 1, 'expected a number'),
    ('(1+2', 4, "expected ')'"),
    ('(1+2 3', 5, "expected ')'"),
    ('()', 1, 'expected a number'),
    ('1 == ', 5, 'expected a number'),
])
def test_syntax_errors(source, offset, message):
    with pytest.raises(ParseError) as exc:
        p(source)
    assert exc.value.offset == offset
    assert exc.value.message == message


def test_trailing_input_ignored_by_default():
    assert p('1 2') == num(1)
    assert p('1)') == num(1)


def test_trailing_input_rejected_in_strict_mode():
    with pytest.raises(ParseError) as exc:
        p('1 2', strict=True)
    assert exc.value.offset == 2
    assert exc.value.message == 'unexpected trailing input'


def test_strict_mode_accepts_complete_expression():
    assert p('1+2', strict=True) == add(num(1), num(2))


def test_parenthesis_nesting_limit():
    ok = '(' * 64 + '1' + ')' * 64
    assert p(ok) == num(1)
    with pytest.raises(ParseError) as exc:
        p('(' * 65 + '1' + ')' * 65)
    assert exc.value.offset == 64
    assert exc.value.message == 'expression nested too deeply'


def test_tree_depth_limit():
    assert p('1+2+3', max_depth=3).depth == 3
    with pytest.raises(ParseError) as exc:
        p('1+2+3+4', max_depth=3)
    assert exc.value.offset == 5
    assert exc.value.message == 'expression too long'


def test_tree_depth_limit_inside_parentheses():
    with pytest.raises(ParseError) as exc:
        p('(1+2+3+4)', max_depth=3)
    assert exc.value.offset == 6
    assert exc.value.message == 'expression nested too deeply'


def test_flat_chain_past_default_depth_reports_length():
    with pytest.raises(ParseError) as exc:
        p('+'.join(['1'] * 401))
    assert exc.value.offset == 799
    assert exc.value.message == 'expression too long'


def test_long_flat_chain_within_default_depth():
    tree = p('+'.join(['1'] * 300))
    assert tree.depth == 300


def test_parser_requires_eof_sentinel():
    with pytest.raises(ValueError):
        Parser([Token('NUMBER', '1', 0, 1, 1)])


def test_cursor_helpers():
    parser = Parser(tokenize('( 7'))
    assert not parser.consume(')')
    assert parser.consume('(')
    assert parser.expect_number() == 7
    assert parser.at_eof()
    with pytest.raises(ParseError):
        parser.expect(')')
