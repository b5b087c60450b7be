"""FastAPI routes: host info, health, tool listing and per-tool endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.types import Receive, Scope, Send

from tool_host import __version__
from tool_host.api.auth import require_bearer_token
from tool_host.api.mcp import ToolEndpoint
from tool_host.api.schemas import (
    HealthResponse,
    HealthStatus,
    ToolEndpointInfo,
    ToolListResponse,
)
from tool_host.core.registry import ToolRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


def get_registry(request: Request) -> ToolRegistry:
    return request.app.state.registry


Registry = Annotated[ToolRegistry, Depends(get_registry)]


@router.get("/")
async def root(registry: Registry) -> dict[str, Any]:
    """Describe the host and its endpoints."""
    return {
        "name": "Tool Host",
        "version": __version__,
        "description": "Unified MCP server with per-tool endpoints",
        "endpoints": {
            "tools": "/tools",
            "health": "/health",
            "mcp": [f"/mcp/{s.name}" for s in registry.get_all_tool_status()],
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health(registry: Registry) -> JSONResponse:
    """Report tool health; 503 when any tool is unhealthy."""
    statuses = registry.get_all_tool_status()
    all_healthy = all(s.healthy for s in statuses)
    body = HealthResponse(
        status=HealthStatus.HEALTHY if all_healthy else HealthStatus.DEGRADED,
        tools=statuses,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(mode="json"),
    )


@router.get(
    "/tools",
    response_model=ToolListResponse,
    dependencies=[Depends(require_bearer_token)],
)
async def list_tools(request: Request, registry: Registry) -> ToolListResponse:
    """List every registered tool with its endpoint URL."""
    base_url = str(request.base_url).rstrip("/")
    return ToolListResponse(
        tools=[
            ToolEndpointInfo(**s.model_dump(), endpoint=f"{base_url}/mcp/{s.name}")
            for s in registry.get_all_tool_status()
        ]
    )


class MCPResponse(Response):
    """Hands the raw ASGI exchange to a tool's MCP session manager."""

    def __init__(self, endpoint: ToolEndpoint) -> None:
        super().__init__()
        self.endpoint = endpoint

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.endpoint.handle(scope, receive, send)


@router.api_route(
    "/mcp/{tool_name}",
    methods=["GET", "POST", "DELETE"],
    dependencies=[Depends(require_bearer_token)],
)
async def mcp_endpoint(tool_name: str, request: Request, registry: Registry) -> Response:
    """Serve a tool's MCP endpoint (streamable HTTP).

    POST carries JSON-RPC messages, GET opens the session's SSE stream and
    DELETE ends the session. Only tools that were healthy once startup
    finished have an endpoint.
    """
    endpoint = request.app.state.endpoints.get(tool_name)
    if endpoint is None or registry.get_tool(tool_name) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Not Found", "message": f"No endpoint for tool: {tool_name}"},
        )

    logger.debug(f"[{tool_name}] {request.method} /mcp/{tool_name}")
    return MCPResponse(endpoint)
