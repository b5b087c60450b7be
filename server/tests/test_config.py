"""Tests for settings loading."""

from pathlib import Path

from tool_host.config import BUNDLED_TOOLS_DIR, Settings, get_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.port == 3000
        assert settings.authorization_key is None
        assert settings.tools_dir == BUNDLED_TOOLS_DIR
        assert settings.execution_timeout == 30.0
        assert settings.health_check_interval == 0
        assert settings.mcp_stateless is False
        assert settings.mcp_json_response is True

    def test_bundled_tools_dir_exists(self):
        assert (BUNDLED_TOOLS_DIR / "calculator" / "__init__.py").is_file()

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("AUTHORIZATION_KEY", "secret")
        monkeypatch.setenv("TOOLS_DIR", str(tmp_path))
        monkeypatch.setenv("EXECUTION_TIMEOUT", "2.5")
        monkeypatch.setenv("MCP_STATELESS", "true")

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.authorization_key == "secret"
        assert settings.tools_dir == Path(tmp_path)
        assert settings.execution_timeout == 2.5
        assert settings.mcp_stateless is True

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
