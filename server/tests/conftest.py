"""Global test configuration for Tool Host."""

import os

import pytest

SETTINGS_ENV_VARS = (
    "HOST",
    "PORT",
    "DEBUG",
    "LOG_LEVEL",
    "AUTHORIZATION_KEY",
    "TOOLS_DIR",
    "EXECUTION_TIMEOUT",
    "HEALTH_CHECK_INTERVAL",
    "MCP_STATELESS",
    "MCP_JSON_RESPONSE",
)


@pytest.fixture(autouse=True, scope="session")
def _clear_settings_env_vars():
    """Remove Tool Host environment variables for the test session.

    Tests build their own Settings, so values exported in the developer's
    shell must not leak in. Originals are restored afterwards.
    """
    originals = {key: os.environ.pop(key) for key in SETTINGS_ENV_VARS if key in os.environ}

    # Clear the lru_cache on get_settings so it picks up the cleaned env
    from tool_host.config import get_settings
    get_settings.cache_clear()

    yield

    os.environ.update(originals)
    get_settings.cache_clear()
