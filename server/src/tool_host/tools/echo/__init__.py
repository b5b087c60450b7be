"""Echo tool - for testing and debugging."""

import platform
import time
from datetime import datetime, UTC

from pydantic import Field

from tool_host.core.base import MethodDefinition

_STARTED_AT = time.monotonic()


class EchoTool:
    """Echoes input back to the caller."""

    name: str = "echo"
    version: str = "1.0.0"
    description: str = "Echo tool for testing and debugging"

    def __init__(self) -> None:
        self._methods = self._build_methods()

    def get_methods(self) -> list[MethodDefinition]:
        return list(self._methods)

    def _build_methods(self) -> list[MethodDefinition]:
        return [
            MethodDefinition(
                name="echo",
                description="Echo the input message",
                input_schema={
                    "message": (str, Field(description="Message to echo")),
                },
                handler=self.echo,
            ),
            MethodDefinition(
                name="reverse",
                description="Reverse the input string",
                input_schema={
                    "text": (str, Field(description="Text to reverse")),
                },
                handler=self.reverse,
            ),
            MethodDefinition(
                name="info",
                description="Get server information",
                handler=self.info,
            ),
        ]

    async def echo(self, params: dict) -> dict:
        return {"echo": params["message"]}

    async def reverse(self, params: dict) -> dict:
        return {"reversed": params["text"][::-1]}

    async def info(self, params: dict) -> dict:
        return {
            "server_time": datetime.now(UTC).isoformat(),
            "python_version": platform.python_version(),
            "platform": platform.system().lower(),
            "uptime": time.monotonic() - _STARTED_AT,
        }

    async def health_check(self) -> bool:
        return True


tool = EchoTool()
