"""Shared helpers for Tool Host tests."""

import asyncio
from typing import Any

from tool_host.core.base import MethodDefinition


class FakeTool:
    """Minimal object satisfying the Tool protocol.

    ``initialize`` and ``health_check`` are only present when given, so
    tests can exercise tools that lack the optional capabilities.
    """

    def __init__(
        self,
        name: str,
        methods: list[MethodDefinition] | None = None,
        *,
        version: str = "1.0.0",
        initialize=None,
        health_check=None,
    ) -> None:
        self.name = name
        self.version = version
        self.description = f"Fake {name}"
        self._methods = methods or []
        if initialize is not None:
            self.initialize = initialize
        if health_check is not None:
            self.health_check = health_check

    def get_methods(self) -> list[MethodDefinition]:
        return list(self._methods)


async def _add(params: dict[str, Any]) -> dict[str, Any]:
    return {"result": params["a"] + params["b"]}


def add_method() -> MethodDefinition:
    """``add(a: number, b: number) -> {result}``."""
    return MethodDefinition(
        name="add",
        description="Add two numbers",
        input_schema={"a": float, "b": float},
        handler=_add,
    )


def make_calc_tool(**kwargs) -> FakeTool:
    return FakeTool("calc", [add_method()], **kwargs)


def raising(exc: BaseException):
    """Coroutine function that raises ``exc`` when awaited."""

    async def _raise(*args, **kwargs):
        raise exc

    return _raise


def raising_listing(exc: Exception):
    """Synchronous ``get_methods`` replacement that raises ``exc``."""

    def _get_methods():
        raise exc

    return _get_methods


async def wait_for_condition(predicate, timeout: float = 1.0) -> None:
    """Poll ``predicate`` until it is true or ``timeout`` passes."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)
