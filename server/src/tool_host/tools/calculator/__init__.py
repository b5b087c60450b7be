"""Calculator tool - evaluates mathematical expressions."""

import math
import re
from dataclasses import dataclass
from enum import Enum

from pydantic import Field

from tool_host.core.base import MethodDefinition

CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "PI": math.pi,
    "e": math.e,
    "E": math.e,
}


def _round(x: float) -> float:
    # Halves round up, as calculators do
    return math.floor(x + 0.5)


def _sign(x: float) -> float:
    return (x > 0) - (x < 0)


FUNCTIONS = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "sinh": math.sinh,
    "cosh": math.cosh,
    "tanh": math.tanh,
    "sqrt": math.sqrt,
    "abs": abs,
    "log": math.log,
    "log10": math.log10,
    "log2": math.log2,
    "exp": math.exp,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": _round,
    "trunc": math.trunc,
    "sign": _sign,
    "pow": math.pow,
    "min": min,
    "max": max,
}

ALIASES = {"^": "**", "×": "*", "÷": "/"}

_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z_0-9]*")


class TokenType(str, Enum):
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    COMMA = "COMMA"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str | float = ""


def tokenize(expression: str) -> list[Token]:
    """Split an expression into tokens, inserting implicit multiplications."""
    tokens: list[Token] = []
    i = 0
    while i < len(expression):
        char = expression[i]

        if char.isspace():
            i += 1
            continue

        match = _NUMBER_RE.match(expression, i)
        if match:
            tokens.append(Token(TokenType.NUMBER, float(match.group())))
            i = match.end()
            continue

        match = _IDENTIFIER_RE.match(expression, i)
        if match:
            tokens.append(Token(TokenType.IDENTIFIER, match.group()))
            i = match.end()
            continue

        if expression.startswith(("**", "//"), i):
            tokens.append(Token(TokenType.OPERATOR, expression[i:i + 2]))
            i += 2
            continue

        if char in "+-*/%" or char in ALIASES:
            tokens.append(Token(TokenType.OPERATOR, ALIASES.get(char, char)))
        elif char == "(":
            tokens.append(Token(TokenType.LPAREN, char))
        elif char == ")":
            tokens.append(Token(TokenType.RPAREN, char))
        elif char == ",":
            tokens.append(Token(TokenType.COMMA, char))
        else:
            raise ValueError(f"Unexpected character: {char}")
        i += 1

    tokens.append(Token(TokenType.EOF))
    return _insert_implicit_multiplication(tokens)


def _insert_implicit_multiplication(tokens: list[Token]) -> list[Token]:
    """2pi -> 2*pi, 2(3) -> 2*(3), (1)2 -> (1)*2, (2)pi -> (2)*pi."""
    result: list[Token] = []
    for token in tokens:
        if result:
            prev = result[-1].type
            implicit = (
                prev is TokenType.NUMBER
                and token.type in (TokenType.IDENTIFIER, TokenType.LPAREN)
            ) or (
                prev is TokenType.RPAREN
                and token.type in (TokenType.NUMBER, TokenType.IDENTIFIER)
            )
            if implicit:
                result.append(Token(TokenType.OPERATOR, "*"))
        result.append(token)
    return result


class Parser:
    """Recursive descent evaluator.

    Grammar:
        expression := term (("+" | "-") term)*
        term       := power (("*" | "/" | "//" | "%") power)*
        power      := unary ("**" power)?          (right associative)
        unary      := ("-" | "+") unary | primary
        primary    := NUMBER | IDENTIFIER | IDENTIFIER "(" args ")"
                      | "(" expression ")"
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> float:
        result = self._expression()
        if self._current().type is not TokenType.EOF:
            raise ValueError("Unexpected token after expression")
        return result

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _consume(self, expected: TokenType | None = None) -> Token:
        token = self._current()
        if expected is not None and token.type is not expected:
            raise ValueError(f"Expected {expected.value}, got {token.type.value}")
        self.pos += 1
        return token

    def _at_operator(self, *ops: str) -> bool:
        token = self._current()
        return token.type is TokenType.OPERATOR and token.value in ops

    def _expression(self) -> float:
        left = self._term()
        while self._at_operator("+", "-"):
            op = self._consume().value
            right = self._term()
            left = left + right if op == "+" else left - right
        return left

    def _term(self) -> float:
        left = self._power()
        while self._at_operator("*", "/", "//", "%"):
            op = self._consume().value
            right = self._power()
            if op == "*":
                left = left * right
            elif right == 0:
                raise ValueError("Modulo by zero" if op == "%" else "Division by zero")
            elif op == "/":
                left = left / right
            elif op == "//":
                left = math.floor(left / right)
            else:
                left = math.fmod(left, right)
        return left

    def _power(self) -> float:
        base = self._unary()
        if self._at_operator("**"):
            self._consume()
            return math.pow(base, self._power())
        return base

    def _unary(self) -> float:
        if self._at_operator("-"):
            self._consume()
            return -self._unary()
        if self._at_operator("+"):
            self._consume()
            return self._unary()
        return self._primary()

    def _primary(self) -> float:
        token = self._current()

        if token.type is TokenType.NUMBER:
            self._consume()
            return token.value

        if token.type is TokenType.IDENTIFIER:
            name = self._consume().value
            if self._current().type is TokenType.LPAREN:
                return self._call(name)
            if name in CONSTANTS:
                return CONSTANTS[name]
            raise ValueError(f"Unknown identifier: {name}")

        if token.type is TokenType.LPAREN:
            self._consume()
            result = self._expression()
            self._consume(TokenType.RPAREN)
            return result

        raise ValueError(f"Unexpected token: {token.type.value}")

    def _call(self, name: str) -> float:
        self._consume(TokenType.LPAREN)
        args: list[float] = []
        if self._current().type is not TokenType.RPAREN:
            args.append(self._expression())
            while self._current().type is TokenType.COMMA:
                self._consume()
                args.append(self._expression())
        self._consume(TokenType.RPAREN)

        func = FUNCTIONS.get(name)
        if func is None:
            raise ValueError(f"Unknown function: {name}")
        return func(*args)


def evaluate_expression(expression: str) -> int | float:
    """Evaluate a mathematical expression.

    Results closer to zero than 1e-10 are reported as 0, and integral results
    are returned as ints.
    """
    result = float(Parser(tokenize(expression)).parse())
    if abs(result) < 1e-10:
        return 0
    if result.is_integer():
        return int(result)
    return result


class CalculatorTool:
    """Math calculator tool."""

    name: str = "calculator"
    version: str = "2.0.0"
    description: str = (
        "Math calculator tool that evaluates mathematical expressions. "
        "Supports +, -, *, /, //, %, ** operators and pi, e constants."
    )

    def __init__(self) -> None:
        self._methods = self._build_methods()

    def get_methods(self) -> list[MethodDefinition]:
        return list(self._methods)

    def _build_methods(self) -> list[MethodDefinition]:
        return [
            MethodDefinition(
                name="evaluate",
                description=(
                    "Evaluate a mathematical expression. Supports operators: "
                    "+, -, *, /, // (floor div), % (mod), ** or ^ (power). "
                    "Supports constants: pi, e. Supports math functions: sin, "
                    "cos, tan, sqrt, abs, log, log10, exp, floor, ceil, round."
                ),
                input_schema={
                    "expression": (str, Field(
                        description=(
                            'Mathematical expression to evaluate (e.g., "2 + 3 * 4", '
                            '"pi * 2", "sqrt(16)", "2^10")'
                        ),
                    )),
                },
                handler=self.evaluate,
            ),
        ]

    async def evaluate(self, params: dict) -> dict:
        expression = params["expression"]
        return {"expression": expression, "result": evaluate_expression(expression)}

    async def health_check(self) -> bool:
        return True


tool = CalculatorTool()
