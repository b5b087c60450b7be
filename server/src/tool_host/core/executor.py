"""Tool executor - the isolation boundary around tool handlers.

Every call is resolved, validated, run under a deadline and reported as an
ExecutionResult. Handler failures never propagate past ``execute``.

The deadline discards the handler's result, it does not stop the work: a
handler still running when its deadline passes keeps running in the
background and whatever it eventually returns or raises is dropped. Stopping
that work would need a cancellation token in the handler contract.
"""

import asyncio
import logging
import time
from typing import Any

from pydantic import ValidationError

from tool_host.core.base import ErrorKind, ExecutionResult, build_params_model
from tool_host.core.registry import ToolRegistry
from tool_host.exceptions import ExecutionTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

TIMEOUT_MARKER = "timeout"

# Substrings of errors raised when a tool's backing service is unreachable
CONNECTIVITY_MARKERS = (
    "ECONNREFUSED",
    "ENOTFOUND",
    "Connection refused",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
    "All connection attempts failed",
)


class ToolExecutor:
    """Executes tool methods so that one tool's failure cannot affect others."""

    def __init__(
        self,
        registry: ToolRegistry,
        default_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.registry = registry
        self.default_timeout = default_timeout

    async def execute(
        self,
        tool_name: str,
        method_name: str,
        params: Any,
        timeout: float | None = None,
    ) -> ExecutionResult:
        """Call ``tool_name.method_name`` with ``params``.

        Args:
            tool_name: Registered tool name
            method_name: Method declared by that tool
            params: Raw parameters, validated against the method's input schema
            timeout: Deadline in seconds, defaults to ``default_timeout``

        Returns:
            ExecutionResult carrying the handler's return value or the
            failure text
        """
        start = time.perf_counter()

        tool = self.registry.get_tool(tool_name)
        if tool is None:
            return ExecutionResult.fail(
                f"Tool not found: {tool_name}", ErrorKind.NOT_FOUND
            )

        deadline = self.default_timeout if timeout is None else timeout
        try:
            method = next(
                (m for m in tool.get_methods() if m.name == method_name), None
            )
            if method is None:
                return ExecutionResult.fail(
                    f"Method not found: {tool_name}.{method_name}",
                    ErrorKind.NOT_FOUND,
                )

            params_model = build_params_model(tool_name, method)
            try:
                validated = params_model.model_validate(params)
            except ValidationError as e:
                return ExecutionResult.fail(
                    f"Invalid parameters: {e}", ErrorKind.VALIDATION
                )

            data = await self._run_with_deadline(
                method.handler(validated.model_dump()), deadline
            )
        except Exception as e:
            message = str(e) or type(e).__name__
            kind = self._classify(message)
            logger.error(
                f"Execution failed: {tool_name}.{method_name} "
                f"[{kind.value}]: {message}"
            )
            if kind is ErrorKind.CRITICAL:
                self.registry.set_health_status(tool_name, False)
                logger.warning(f"Tool {tool_name} marked unhealthy")
            return ExecutionResult.fail(message, kind)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"Executed {tool_name}.{method_name} in {duration_ms:.1f}ms")
        return ExecutionResult.ok(data)

    async def _run_with_deadline(self, handler_call: Any, timeout: float) -> Any:
        """Await the handler, giving up (but not cancelling) after ``timeout``."""
        task = asyncio.ensure_future(handler_call)
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except asyncio.TimeoutError:
            if task.done():
                # Settled as the deadline fired, or raised TimeoutError itself
                return task.result()
            raise ExecutionTimeoutError(timeout) from None
        finally:
            # Deadline passed or the caller was cancelled
            if not task.done():
                task.add_done_callback(_discard_outcome)

    @staticmethod
    def _classify(message: str) -> ErrorKind:
        """Classify a failure by its text."""
        if TIMEOUT_MARKER in message.lower():
            return ErrorKind.TIMEOUT
        if any(marker in message for marker in CONNECTIVITY_MARKERS):
            return ErrorKind.CRITICAL
        return ErrorKind.HANDLER


def _discard_outcome(task: asyncio.Future) -> None:
    """Consume the outcome of a handler that outlived its deadline or caller."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Discarded late handler failure: {exc!r}")
