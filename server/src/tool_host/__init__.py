"""Tool Host - isolated execution runtime for pluggable tools."""

__version__ = "1.0.0"

from tool_host.exceptions import (
    ExecutionTimeoutError,
    ToolHostError,
    ToolInterfaceError,
    ToolLoadError,
    ToolNotFoundError,
)

__all__ = [
    "__version__",
    "ExecutionTimeoutError",
    "ToolHostError",
    "ToolInterfaceError",
    "ToolLoadError",
    "ToolNotFoundError",
]
