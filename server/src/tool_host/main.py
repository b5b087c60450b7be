"""FastAPI application entry point for Tool Host."""

import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager

import uvicorn
from fastapi import FastAPI

from tool_host import __version__
from tool_host.api.mcp import open_endpoints
from tool_host.api.routes import router
from tool_host.config import Settings, get_settings
from tool_host.core.executor import ToolExecutor
from tool_host.core.loader import DirectoryToolSource, ToolLoader, ToolSource
from tool_host.core.registry import ToolRegistry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def health_check_loop(registry: ToolRegistry, interval: int) -> None:
    """Background loop running registry health sweeps every ``interval`` seconds."""
    logger.info(f"Health checks started: every {interval}s")
    while True:
        try:
            await asyncio.sleep(interval)
            await registry.perform_health_check()
        except asyncio.CancelledError:
            logger.info("Health checks shutting down")
            break
        except Exception as e:
            logger.error(f"Health check loop error: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load tools before serving; run health sweeps while serving."""
    settings: Settings = app.state.settings
    registry: ToolRegistry = app.state.registry

    logger.info(f"Starting Tool Host v{__version__}")
    if not settings.authorization_key:
        logger.warning("AUTHORIZATION_KEY not configured, skipping auth")

    await app.state.loader.load_all()

    async with AsyncExitStack() as stack:
        # Endpoints are fixed at startup from the tools healthy at this point
        app.state.endpoints = await open_endpoints(
            registry.get_healthy_tools(),
            app.state.executor,
            stack,
            stateless=settings.mcp_stateless,
            json_response=settings.mcp_json_response,
        )
        for name in sorted(app.state.endpoints):
            logger.info(f"Registered endpoint: /mcp/{name}")

        health_task: asyncio.Task | None = None
        if settings.health_check_interval > 0:
            health_task = asyncio.create_task(
                health_check_loop(registry, settings.health_check_interval)
            )

        try:
            yield
        finally:
            if health_task:
                health_task.cancel()
                try:
                    await health_task
                except asyncio.CancelledError:
                    pass

    logger.info("Shutting down Tool Host")


def create_app(
    settings: Settings | None = None,
    source: ToolSource | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Defaults to the environment-derived settings
        source: Where tools are loaded from; defaults to ``settings.tools_dir``
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Tool Host",
        description="Unified MCP server with per-tool endpoints",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    registry = ToolRegistry()
    app.state.settings = settings
    app.state.registry = registry
    app.state.executor = ToolExecutor(registry, default_timeout=settings.execution_timeout)
    app.state.loader = ToolLoader(
        registry, source or DirectoryToolSource(settings.tools_dir)
    )
    app.state.endpoints = {}

    app.include_router(router)

    return app


def main() -> None:
    """Run the Tool Host service."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    logger.info(f"Tool Host listening on http://{settings.host}:{settings.port}")
    logger.info(f"Tool endpoints: http://{settings.host}:{settings.port}/mcp/{{tool_name}}")

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
