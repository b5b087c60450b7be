"""Configuration and environment loading for Tool Host."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_TOOLS_DIR = Path(__file__).resolve().parent / "tools"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    # Bearer token for tool endpoints; unset disables auth
    authorization_key: str | None = None

    # Tool loading and execution
    tools_dir: Path = BUNDLED_TOOLS_DIR
    execution_timeout: float = 30.0  # Seconds per call unless overridden
    health_check_interval: int = 0  # Seconds between sweeps, 0 disables

    # MCP transport: sessions are kept unless stateless; responses are plain
    # JSON unless json_response is off, in which case they stream as SSE
    mcp_stateless: bool = False
    mcp_json_response: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
