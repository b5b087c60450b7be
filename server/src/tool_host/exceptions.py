"""Custom exceptions for Tool Host."""


class ToolHostError(Exception):
    """Base class for Tool Host errors."""


class ToolLoadError(ToolHostError):
    """Raised when a tool candidate cannot be imported or activated."""

    def __init__(self, tool_name: str, reason: str) -> None:
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"Failed to load tool {tool_name}: {reason}")


class ToolInterfaceError(ToolLoadError):
    """Raised when a loaded unit does not satisfy the Tool contract."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(tool_name, "does not implement the Tool interface")


class ToolNotFoundError(ToolHostError):
    """Raised when a tool source has no candidate for a name."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Tool not found: {tool_name}")


class ExecutionTimeoutError(ToolHostError):
    """Raised when a handler does not settle before its deadline."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Execution timeout after {timeout:g}s")
