"""Application configuration using pydantic-settings.

Every setting can be overridden with a ``GDRIVE_MCP_`` prefixed environment
variable or a ``.env`` file. The Google OAuth client and refresh token also
accept the plain ``GOOGLE_CLIENT_ID``, ``GOOGLE_CLIENT_SECRET`` and
``GOOGLE_REFRESH_TOKEN`` names; they are only consulted when the OS keyring
holds nothing.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the MCP server and the setup-auth command."""

    model_config = SettingsConfigDict(
        env_prefix="GDRIVE_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Logging goes to stderr; stdout carries the MCP protocol
    log_level: str = "INFO"
    log_json: bool = False

    http_timeout: float = 60.0
    keyring_service: str = "gdrive-mcp"
    search_max_results: int = 10

    google_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("GDRIVE_MCP_GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_ID"),
    )
    google_client_secret: str = Field(
        default="",
        validation_alias=AliasChoices(
            "GDRIVE_MCP_GOOGLE_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET"
        ),
    )
    google_refresh_token: str = Field(
        default="",
        validation_alias=AliasChoices(
            "GDRIVE_MCP_GOOGLE_REFRESH_TOKEN", "GOOGLE_REFRESH_TOKEN"
        ),
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        allowed = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {allowed}")
        return v_upper

    @field_validator("search_max_results")
    @classmethod
    def validate_search_max_results(cls, v: int) -> int:
        """Drive accepts page sizes between 1 and 100 for these queries."""
        if not 1 <= v <= 100:
            raise ValueError("search_max_results must be between 1 and 100")
        return v

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return Settings()
