"""Per-tool MCP servers built on the MCP SDK.

Each healthy tool gets its own low-level MCP ``Server`` whose tools are that
tool's methods. Calls are routed through the ``ToolExecutor``; a
``StreamableHTTPSessionManager`` serves each server over HTTP, including
sessions (``mcp-session-id``) and SSE streams unless configured stateless.
"""

import json
import logging
from contextlib import AsyncExitStack
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.server.transport_security import TransportSecuritySettings
from starlette.types import Receive, Scope, Send

from tool_host.core.base import ExecutionResult, Tool, build_params_model
from tool_host.core.executor import ToolExecutor

logger = logging.getLogger(__name__)


class ToolCallError(Exception):
    """A failed execution; the SDK reports it to the client as an error result."""


def describe_methods(tool: Tool) -> list[types.Tool]:
    """List a tool's methods with the JSON schema of their parameters."""
    return [
        types.Tool(
            name=method.name,
            description=method.description,
            inputSchema=build_params_model(tool.name, method).model_json_schema(),
        )
        for method in tool.get_methods()
    ]


def render_result(result: ExecutionResult) -> list[types.TextContent]:
    """Translate an ExecutionResult into MCP text content.

    Raises:
        ToolCallError: For failed executions, carrying ``"Error: {error}"``
    """
    if not result.success:
        raise ToolCallError(f"Error: {result.error}")

    if isinstance(result.data, str):
        text = result.data
    else:
        text = json.dumps(result.data, indent=2, default=str)
    return [types.TextContent(type="text", text=text)]


def create_mcp_server(tool: Tool, executor: ToolExecutor) -> Server:
    """Build the MCP server exposing ``tool``'s methods."""
    server = Server(tool.name, version=tool.version, instructions=tool.description)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return describe_methods(tool)

    # Parameters are validated by the executor against the pydantic model
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        logger.info(f"Tool call: {tool.name}.{name}")
        result = await executor.execute(tool.name, name, arguments or {})
        return render_result(result)

    logger.info(f"Created MCP server for tool: {tool.name}")
    return server


class ToolEndpoint:
    """A tool's MCP server and the session manager serving it over HTTP."""

    def __init__(
        self,
        tool: Tool,
        executor: ToolExecutor,
        *,
        stateless: bool = False,
        json_response: bool = True,
    ) -> None:
        self.name = tool.name
        self.server = create_mcp_server(tool, executor)
        self.session_manager = StreamableHTTPSessionManager(
            app=self.server,
            json_response=json_response,
            stateless=stateless,
            # Allow requests through tunnels and proxies
            security_settings=TransportSecuritySettings(
                enable_dns_rebinding_protection=False
            ),
        )

    async def handle(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


async def open_endpoints(
    tools: list[Tool],
    executor: ToolExecutor,
    stack: AsyncExitStack,
    *,
    stateless: bool = False,
    json_response: bool = True,
) -> dict[str, ToolEndpoint]:
    """Create and start one endpoint per tool; ``stack`` shuts them down.

    Returns:
        Dict of tool name -> running endpoint
    """
    endpoints: dict[str, ToolEndpoint] = {}
    for tool in tools:
        endpoint = ToolEndpoint(
            tool, executor, stateless=stateless, json_response=json_response
        )
        await stack.enter_async_context(endpoint.session_manager.run())
        endpoints[tool.name] = endpoint
    return endpoints
