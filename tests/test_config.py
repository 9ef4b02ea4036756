"""Tests for settings loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gdrive_mcp.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GDRIVE_MCP_LOG_LEVEL",
        "GDRIVE_MCP_SEARCH_MAX_RESULTS",
        "GDRIVE_MCP_GOOGLE_CLIENT_ID",
        "GOOGLE_CLIENT_ID",
        "GOOGLE_REFRESH_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.log_json is False
    assert settings.http_timeout == 60.0
    assert settings.keyring_service == "gdrive-mcp"
    assert settings.search_max_results == 10
    assert settings.google_client_id == ""


def test_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GDRIVE_MCP_LOG_LEVEL", "debug")
    monkeypatch.setenv("GDRIVE_MCP_SEARCH_MAX_RESULTS", "25")

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.search_max_results == 25


def test_plain_google_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "plain-id")
    monkeypatch.setenv("GOOGLE_REFRESH_TOKEN", "plain-token")

    settings = Settings(_env_file=None)

    assert settings.google_client_id == "plain-id"
    assert settings.google_refresh_token == "plain-token"


def test_prefixed_name_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "plain-id")
    monkeypatch.setenv("GDRIVE_MCP_GOOGLE_CLIENT_ID", "prefixed-id")

    assert Settings(_env_file=None).google_client_id == "prefixed-id"


def test_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GDRIVE_MCP_LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError, match="log_level must be one of"):
        Settings(_env_file=None)


@pytest.mark.parametrize("value", ["0", "101"])
def test_search_max_results_bounds(
    monkeypatch: pytest.MonkeyPatch, value: str
) -> None:
    monkeypatch.setenv("GDRIVE_MCP_SEARCH_MAX_RESULTS", value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
