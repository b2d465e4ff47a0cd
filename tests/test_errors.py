from errors import LexicalError, ParseError, format_error


def test_caret_points_at_offset():
    err = LexicalError(1, 'invalid token')
    assert format_error('1&2', err) == '1&2\n ^ invalid token'


def test_caret_past_end_of_input():
    err = ParseError(2, 'expected a number')
    assert format_error('1+', err) == '1+\n  ^ expected a number'


def test_str_names_kind_and_offset():
    assert str(ParseError(3, "expected ')'")) == "syntax error at offset 3: expected ')'"
