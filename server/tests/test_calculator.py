"""Tests for the bundled calculator tool."""

import math

import pytest

from tool_host.core.base import ErrorKind
from tool_host.core.executor import ToolExecutor
from tool_host.core.registry import ToolRegistry
from tool_host.tools.calculator import (
    CalculatorTool,
    Token,
    TokenType,
    evaluate_expression,
    tokenize,
)


# ---------------------------------------------------------------------------
# TestTokenize
# ---------------------------------------------------------------------------

class TestTokenize:
    def test_basic_tokens(self):
        tokens = tokenize("1 + 2.5")

        assert tokens == [
            Token(TokenType.NUMBER, 1.0),
            Token(TokenType.OPERATOR, "+"),
            Token(TokenType.NUMBER, 2.5),
            Token(TokenType.EOF),
        ]

    def test_aliases_are_normalized(self):
        ops = [t.value for t in tokenize("2 ^ 3 × 4 ÷ 5") if t.type is TokenType.OPERATOR]

        assert ops == ["**", "*", "/"]

    def test_implicit_multiplication(self):
        values = [t.value for t in tokenize("2pi")]

        assert values == [2.0, "*", "pi", ""]

    def test_unexpected_character(self):
        with pytest.raises(ValueError, match=r"Unexpected character: \$"):
            tokenize("2 $ 3")


# ---------------------------------------------------------------------------
# TestEvaluate
# ---------------------------------------------------------------------------

class TestEvaluate:
    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("2 + 3 * 4", 14),
            ("(2 + 3) * 4", 20),
            ("10 / 4", 2.5),
            ("7 // 2", 3),
            ("7 % 3", 1),
            ("-7 % 3", -1),
            ("2^10", 1024),
            ("2 ** 3 ** 2", 512),
            ("3 × 4", 12),
            ("8 ÷ 2", 4),
            ("sqrt(16)", 4),
            ("abs(-5)", 5),
            ("round(2.5)", 3),
            ("max(1, 5, 3)", 5),
            ("min(4, 2)", 2),
            ("log(e)", 1),
            ("2(3 + 4)", 14),
            ("(1 + 1)2", 4),
            ("--3", 3),
            ("+4", 4),
            (".5 + .5", 1),
        ],
    )
    def test_expressions(self, expression, expected):
        assert evaluate_expression(expression) == expected

    def test_integral_result_is_int(self):
        assert isinstance(evaluate_expression("6 / 3"), int)

    def test_constants(self):
        assert evaluate_expression("2pi") == pytest.approx(2 * math.pi)
        assert evaluate_expression("E") == pytest.approx(math.e)

    def test_tiny_results_snap_to_zero(self):
        assert evaluate_expression("sin(pi)") == 0

    @pytest.mark.parametrize(
        "expression,message",
        [
            ("1 / 0", "Division by zero"),
            ("1 // 0", "Division by zero"),
            ("5 % 0", "Modulo by zero"),
            ("foo(1)", "Unknown function: foo"),
            ("x + 1", "Unknown identifier: x"),
            ("(1 + 2", "Expected RPAREN, got EOF"),
            ("1 2", "Unexpected token after expression"),
            ("", "Unexpected token: EOF"),
        ],
    )
    def test_errors(self, expression, message):
        with pytest.raises(ValueError) as exc_info:
            evaluate_expression(expression)

        assert str(exc_info.value) == message

    def test_math_domain_error(self):
        with pytest.raises(ValueError):
            evaluate_expression("sqrt(-1)")


# ---------------------------------------------------------------------------
# TestCalculatorTool
# ---------------------------------------------------------------------------

class TestCalculatorTool:
    @staticmethod
    async def _executor() -> ToolExecutor:
        registry = ToolRegistry()
        await registry.register(CalculatorTool())
        return ToolExecutor(registry)

    def test_descriptor(self):
        tool = CalculatorTool()

        assert tool.name == "calculator"
        assert [m.name for m in tool.get_methods()] == ["evaluate"]
        assert tool.get_methods()[0] is tool.get_methods()[0]

    @pytest.mark.asyncio
    async def test_evaluate_through_executor(self):
        executor = await self._executor()
        result = await executor.execute("calculator", "evaluate", {"expression": "2 + 3 * 4"})

        assert result.success is True
        assert result.data == {"expression": "2 + 3 * 4", "result": 14}

    @pytest.mark.asyncio
    async def test_domain_error_is_handler_failure(self):
        executor = await self._executor()
        result = await executor.execute("calculator", "evaluate", {"expression": "1/0"})

        assert result.success is False
        assert result.error == "Division by zero"
        assert result.error_kind is ErrorKind.HANDLER

    @pytest.mark.asyncio
    async def test_missing_expression(self):
        executor = await self._executor()
        result = await executor.execute("calculator", "evaluate", {})

        assert result.error_kind is ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_health_check(self):
        assert await CalculatorTool().health_check() is True
