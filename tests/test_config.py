from pathlib import Path

import pytest

from mcp_stdio import config


def test_load_settings_defaults():
    settings = config.load_settings()
    assert settings.server_name is None
    assert settings.log_level == "INFO"
    assert settings.db_path is None
    assert settings.databases == {}


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("MCP_SERVER_NAME", "my-app")
    monkeypatch.setenv("MCP_LOG_LEVEL", "debug")
    monkeypatch.setenv("MCP_DB_PATH", "/tmp/app.sqlite")
    monkeypatch.setenv("MCP_DATABASES", "reporting=/tmp/r.sqlite, analytics = /tmp/a.sqlite,")

    settings = config.load_settings()
    assert settings.server_name == "my-app"
    assert settings.log_level == "DEBUG"
    assert settings.db_path == Path("/tmp/app.sqlite")
    assert settings.databases == {
        "reporting": Path("/tmp/r.sqlite"),
        "analytics": Path("/tmp/a.sqlite"),
    }


@pytest.mark.parametrize("raw", ["reporting", "=/tmp/x.sqlite", "reporting="])
def test_parse_databases_rejects_malformed(raw):
    with pytest.raises(ValueError, match="expected name=path"):
        config.parse_databases(raw)
