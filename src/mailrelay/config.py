"""
Application configuration with environment-driven settings.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "mailrelay"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # HTTP server
    host: str = Field(default="0.0.0.0", description="Listening address")
    port: int = Field(default=4000, ge=1, le=65535, description="Listening port")

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    # Completion provider
    llm_provider: Literal["openrouter", "mock"] = "openrouter"
    openrouter_api_key: str = Field(default="", description="OpenRouter API key")
    openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1")
    llm_model: str = Field(default="openai/gpt-3.5-turbo")
    llm_timeout_seconds: float = Field(default=30.0, gt=0, le=600)

    # Mail transport
    mail_transport: Literal["smtp", "mock"] = "smtp"
    gmail_user: str = Field(default="", description="Sender identity (also the SMTP login)")
    gmail_app_pass: str = Field(default="", description="SMTP app password")
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = Field(default=30.0, gt=0, le=600)

    # Dispatch
    default_subject: str = Field(default="AI-Generated Email")
    max_recipients: int = Field(default=50, ge=1, le=1000)

    @field_validator("openrouter_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    """Return the process settings.

    Under pytest the environment is monkeypatched between tests, so a fresh
    instance is built on every call there.
    """
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()
