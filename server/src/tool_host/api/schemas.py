"""Request and response models for the HTTP surface."""

from enum import Enum

from pydantic import BaseModel

from tool_host.core.base import ToolStatus


class HealthStatus(str, Enum):
    """Overall health status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"  # Some tools unhealthy but the host is serving


class HealthResponse(BaseModel):
    status: HealthStatus
    tools: list[ToolStatus]


class ToolEndpointInfo(ToolStatus):
    """Tool status plus the URL of its MCP endpoint."""

    endpoint: str


class ToolListResponse(BaseModel):
    tools: list[ToolEndpointInfo]

