"""Application configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings validated at startup."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_path: Path = Field(default=Path("farmsms.db"), alias="DATABASE_PATH")
    signal_cli_path: str = Field(default="signal-cli", alias="SIGNAL_CLI_PATH")
    # E.164 number of the account that receives SMS bookings.
    signal_account: str = Field(..., alias="SIGNAL_ACCOUNT")
    signal_poll_interval_seconds: float = Field(default=2.0, gt=0, alias="SIGNAL_POLL_INTERVAL_SECONDS")
    request_timeout_seconds: float = Field(default=30.0, gt=0, alias="REQUEST_TIMEOUT_SECONDS")
    platform_name: str = Field(default="FarmConnect", alias="PLATFORM_NAME")
    requester_email_domain: str = Field(default="farmconnect.local", alias="REQUESTER_EMAIL_DOMAIN")


def load_settings() -> Settings:
    """Load and validate settings."""

    return Settings()
