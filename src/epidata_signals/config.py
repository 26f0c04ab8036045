"""
Configuration management using pydantic-settings.

All settings are loaded from environment variables (or a local ``.env``).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="epidata-signals", description="Application name")
    app_env: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug output")
    log_level: str = Field(default="INFO", description="Root log level")

    # Remote API
    epidata_endpoint_url: str = Field(
        default="https://api.delphi.cmu.edu/epidata",
        description="Base URL of the Epidata API (no trailing slash)",
    )
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    max_get_url_length: int = Field(
        default=4096,
        description="URLs at or above this length are sent as a form-encoded POST",
    )

    # Analysis
    correlation_lag_window: int = Field(
        default=28, ge=0, description="Default +/- lag window (days) for correlation"
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
