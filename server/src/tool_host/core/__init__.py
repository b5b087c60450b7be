"""Tool lifecycle and isolated-execution core."""

from tool_host.core.base import (
    ErrorKind,
    ExecutionResult,
    InputSchema,
    MethodDefinition,
    Tool,
    ToolStatus,
    build_params_model,
)
from tool_host.core.executor import ToolExecutor
from tool_host.core.loader import (
    DirectoryToolSource,
    LoadReport,
    StaticToolSource,
    ToolCandidate,
    ToolLoader,
    ToolSource,
)
from tool_host.core.registry import ToolRegistry

__all__ = [
    "DirectoryToolSource",
    "ErrorKind",
    "ExecutionResult",
    "InputSchema",
    "LoadReport",
    "MethodDefinition",
    "StaticToolSource",
    "Tool",
    "ToolCandidate",
    "ToolExecutor",
    "ToolLoader",
    "ToolRegistry",
    "ToolSource",
    "ToolStatus",
    "build_params_model",
]
