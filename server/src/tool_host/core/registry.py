"""Tool registry: which tools exist and whether they are usable."""

import logging

from tool_host.core.base import Tool, ToolStatus

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Maps tool names to descriptors and health flags.

    All mutating operations finish without yielding to the event loop between
    the membership check and the write, so concurrent ``register`` calls
    interleave whole rather than partially.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._health: dict[str, bool] = {}

    async def register(self, tool: Tool) -> None:
        """Initialize and register a tool, replacing any tool of that name.

        Args:
            tool: The tool descriptor to install

        Raises:
            Exception: Whatever the tool's ``initialize`` or ``get_methods``
                raised. Nothing is written then: a fresh name stays absent and
                a failed replacement leaves the previous tool and its health
                untouched.
        """
        if tool.name in self._tools:
            logger.warning(f"Tool {tool.name} already registered, replacing...")

        initialize = getattr(tool, "initialize", None)
        try:
            if initialize is not None:
                await initialize()
            methods = _method_names(tool)
        except Exception:
            logger.exception(f"Failed to register tool: {tool.name}")
            raise

        self._tools[tool.name] = tool
        self._health[tool.name] = True
        logger.info(
            f"Tool registered: {tool.name} v{tool.version} (methods: {methods})"
        )

    def unregister(self, name: str) -> bool:
        """Remove a tool and its health flag.

        Returns:
            True if a tool was registered under that name
        """
        existed = self._tools.pop(name, None) is not None
        self._health.pop(name, None)
        if existed:
            logger.info(f"Tool unregistered: {name}")
        return existed

    def get_tool(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def get_all_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def get_healthy_tools(self) -> list[Tool]:
        """Get every tool whose health flag is exactly True."""
        return [
            tool for name, tool in self._tools.items()
            if self._health.get(name) is True
        ]

    def get_tool_status(self, name: str) -> ToolStatus | None:
        tool = self._tools.get(name)
        if tool is None:
            return None
        return self._status(tool)

    def get_all_tool_status(self) -> list[ToolStatus]:
        return [self._status(tool) for tool in self._tools.values()]

    def set_health_status(self, name: str, healthy: bool) -> None:
        """Overwrite the health flag of a registered tool; no-op otherwise."""
        if name in self._tools:
            self._health[name] = healthy

    async def perform_health_check(self) -> dict[str, bool]:
        """Run every tool's ``health_check`` and record the outcome.

        Tools without the capability are left untouched. A check that raises
        marks the tool unhealthy. A tool unregistered or replaced while its
        check was running is not written.

        Returns:
            Dict of tool name -> recorded health for the tools that were checked
        """
        results: dict[str, bool] = {}
        for name, tool in list(self._tools.items()):
            health_check = getattr(tool, "health_check", None)
            if health_check is None:
                continue

            try:
                healthy = bool(await health_check())
            except Exception:
                logger.exception(f"Health check failed for tool: {name}")
                healthy = False

            if self._tools.get(name) is not tool:
                continue
            self._health[name] = healthy
            results[name] = healthy

        unhealthy = [name for name, ok in results.items() if not ok]
        if unhealthy:
            logger.warning(f"Unhealthy tools: {unhealthy}")
        else:
            logger.debug("All tools healthy")
        return results

    def _status(self, tool: Tool) -> ToolStatus:
        try:
            methods = _method_names(tool)
        except Exception:
            logger.exception(f"Failed to list methods of tool: {tool.name}")
            methods = []
        return ToolStatus(
            name=tool.name,
            version=tool.version,
            healthy=self._health.get(tool.name, False),
            methods=methods,
        )

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


def _method_names(tool: Tool) -> list[str]:
    return [method.name for method in tool.get_methods()]
