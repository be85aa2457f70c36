"""Tests for value evaluation and rendering."""

from decimal import Decimal

import pytest
from infraexplain.parser.lexer import tokenize
from infraexplain.parser.values import (
    MAX_NESTING, UNKNOWN, BoolValue, ListValue, NumberValue, StringValue, UnresolvedValue,
    evaluate_expression, render_value,
)


def evaluate(expression):
    return evaluate_expression(tokenize(expression))


class TestRendering:
    def test_string(self):
        assert render_value(StringValue("web-sg")) == "web-sg"

    def test_bools(self):
        assert render_value(BoolValue(True)) == "true"
        assert render_value(BoolValue(False)) == "false"

    @pytest.mark.parametrize("literal, expected", [
        ("80", "80"),
        ("1.50", "1.5"),
        ("1e3", "1000"),
        ("-0", "0"),
        ("0.000125", "0.000125"),
    ])
    def test_numbers(self, literal, expected):
        assert render_value(NumberValue(Decimal(literal))) == expected

    def test_huge_exponent_stays_compact(self):
        rendered = render_value(NumberValue(Decimal("1e999")))
        assert len(rendered) < 20

    @pytest.mark.parametrize("literal", [
        "12345678901234567890123456789012345",
        "0.1234567890123456789012345678901",
        "98765432109876543210987654321.123456789",
    ])
    def test_long_numbers_are_exact(self, literal):
        assert render_value(NumberValue(Decimal(literal))) == literal

    def test_long_fraction_trailing_zeros_stripped(self):
        value = NumberValue(Decimal("1.12345678901234567890123456789000"))
        assert render_value(value) == "1.12345678901234567890123456789"

    def test_list(self):
        value = ListValue((StringValue("a"), NumberValue(Decimal(1)), BoolValue(False)))
        assert render_value(value) == "[a, 1, false]"

    def test_nested_list(self):
        value = ListValue((ListValue((StringValue("x"),)), ListValue(())))
        assert render_value(value) == "[[x], []]"

    def test_unresolved(self):
        assert render_value(UnresolvedValue("reference")) == UNKNOWN == "<unknown>"


class TestEvaluation:
    def test_string_literal(self):
        assert evaluate('"0.0.0.0/0"') == StringValue("0.0.0.0/0")

    def test_number_literal(self):
        assert evaluate('443') == NumberValue(Decimal(443))

    def test_negative_number(self):
        assert render_value(evaluate('-1')) == "-1"

    def test_long_negative_number_is_exact(self):
        literal = "12345678901234567890123456789012345"
        assert render_value(evaluate("-" + literal)) == "-" + literal

    def test_bool_literal(self):
        assert evaluate('true') == BoolValue(True)

    def test_list_literal_multiline_with_trailing_comma(self):
        value = evaluate('[\n  "10.0.0.0/8",\n  "0.0.0.0/0",\n]')
        assert render_value(value) == "[10.0.0.0/8, 0.0.0.0/0]"

    def test_empty_list(self):
        assert render_value(evaluate('[]')) == "[]"

    @pytest.mark.parametrize("expression", [
        'var.region',
        'aws_subnet.main.id',
        'jsonencode({ a = 1 })',
        '"app-${var.env}"',
        '{ Name = "x" }',
        'null',
        '1 + 2',
        'var.a ? "x" : "y"',
        '',
    ])
    def test_non_literals_are_unresolved(self, expression):
        assert isinstance(evaluate(expression), UnresolvedValue)
        assert render_value(evaluate(expression)) == UNKNOWN

    def test_list_with_reference_is_unresolved(self):
        assert isinstance(evaluate('["a", var.b]'), UnresolvedValue)

    def test_unclosed_list_is_unresolved(self):
        assert isinstance(evaluate('["a", "b"'), UnresolvedValue)

    def test_nesting_up_to_limit_resolves(self):
        expression = "[" * MAX_NESTING + "]" * MAX_NESTING
        assert not isinstance(evaluate(expression), UnresolvedValue)

    def test_deep_nesting_is_unresolved(self):
        expression = "[" * 3000 + "1" + "]" * 3000
        assert evaluate(expression) == UnresolvedValue(f"lists nested deeper than {MAX_NESTING}")
