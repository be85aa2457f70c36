"""
Attribute values and their display rendering.

An attribute's expression is evaluated into one of a closed set of value
variants. Each variant knows how to render itself as the display string
stored in ResourceDeclaration.properties. Anything that is not a plain
literal (references, function calls, operators, templates) becomes an
UnresolvedValue instead of failing the parse.
"""

import logging
from dataclasses import dataclass
from decimal import MAX_EMAX, MIN_EMIN, Context, Decimal, InvalidOperation
from typing import List, Sequence, Tuple, Union

from .lexer import Token, TokenType

logger = logging.getLogger(__name__)

UNKNOWN = "<unknown>"

# Lists nested deeper than this are left unresolved
MAX_NESTING = 64


@dataclass(frozen=True)
class StringValue:
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class BoolValue:
    flag: bool

    def render(self) -> str:
        return "true" if self.flag else "false"


@dataclass(frozen=True)
class NumberValue:
    number: Decimal

    def render(self) -> str:
        number = _normalize_exact(self.number)
        # Plain notation would be unbounded in size past this exponent
        if abs(number.adjusted()) > 64:
            return str(number)
        if number.as_tuple().exponent >= 0:
            return str(int(number))
        return format(number, "f")


@dataclass(frozen=True)
class ListValue:
    items: Tuple["Value", ...]

    def render(self) -> str:
        return "[" + ", ".join(item.render() for item in self.items) + "]"


@dataclass(frozen=True)
class UnresolvedValue:
    reason: str = ""

    def render(self) -> str:
        return UNKNOWN


Value = Union[StringValue, BoolValue, NumberValue, ListValue, UnresolvedValue]


def _normalize_exact(number: Decimal) -> Decimal:
    """Strip trailing zeros without rounding to the default 28 digit context"""
    digits = len(number.as_tuple().digits)
    return number.normalize(Context(prec=max(digits, 1), Emax=MAX_EMAX, Emin=MIN_EMIN))


def render_value(value: Value) -> str:
    """Render any value variant as a display string"""
    return value.render()


class _Unresolvable(Exception):
    """Raised inside the evaluator when an expression is not a plain literal"""
    pass


class ExpressionEvaluator:
    """
    Evaluates the token sequence of one attribute's right-hand side.

    Only literal values are understood: strings without interpolation,
    numbers, booleans and lists of those. A list with any element that
    cannot be evaluated is unresolved as a whole.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = [t for t in tokens if t.type != TokenType.NEWLINE]
        self.index = 0

    def evaluate(self) -> Value:
        if not self.tokens:
            return UnresolvedValue("missing value")
        try:
            value = self._parse_value()
            if self.index != len(self.tokens):
                raise _Unresolvable(f"unexpected {self.tokens[self.index]}")
            return value
        except _Unresolvable as e:
            logger.debug(f"Unresolved expression at line {self.tokens[0].line}: {e}")
            return UnresolvedValue(str(e))

    def _next(self) -> Token:
        if self.index >= len(self.tokens):
            raise _Unresolvable("unexpected end of expression")
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _parse_value(self, depth: int = 0) -> Value:
        token = self._next()

        if token.type == TokenType.STRING:
            if token.has_template:
                raise _Unresolvable("string template")
            return StringValue(token.value)

        if token.type == TokenType.NUMBER:
            return NumberValue(self._to_decimal(token.value))

        if token.type == TokenType.OPERATOR and token.value == '-':
            operand = self._next()
            if operand.type != TokenType.NUMBER:
                raise _Unresolvable("negated non-number")
            return NumberValue(self._to_decimal(operand.value).copy_negate())

        if token.type == TokenType.IDENT and token.value in ('true', 'false'):
            return BoolValue(token.value == 'true')

        if token.type == TokenType.LBRACKET:
            if depth >= MAX_NESTING:
                raise _Unresolvable(f"lists nested deeper than {MAX_NESTING}")
            return self._parse_list(depth)

        raise _Unresolvable(f"non-literal {token}")

    def _parse_list(self, depth: int) -> ListValue:
        items: List[Value] = []
        while True:
            if self.index < len(self.tokens) and self.tokens[self.index].type == TokenType.RBRACKET:
                self.index += 1
                return ListValue(tuple(items))

            items.append(self._parse_value(depth + 1))

            separator = self._next()
            if separator.type == TokenType.RBRACKET:
                return ListValue(tuple(items))
            if separator.type != TokenType.COMMA:
                raise _Unresolvable(f"unexpected {separator} in list")

    @staticmethod
    def _to_decimal(text: str) -> Decimal:
        try:
            return Decimal(text)
        except InvalidOperation:
            raise _Unresolvable(f"invalid number {text!r}")


def evaluate_expression(tokens: Sequence[Token]) -> Value:
    """Evaluate an attribute expression's tokens to a value"""
    return ExpressionEvaluator(tokens).evaluate()
