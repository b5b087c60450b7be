"""HTTP surface for Tool Host."""

from tool_host.api.auth import require_bearer_token
from tool_host.api.routes import router

__all__ = ["require_bearer_token", "router"]
