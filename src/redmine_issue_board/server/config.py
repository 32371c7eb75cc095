"""Configuration for the HTTP server."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Where the board listens.

    The server itself is unauthenticated; bind it to a trusted interface.
    """

    host: str = Field(default="0.0.0.0", validation_alias="REDMINE_BOARD_HOST")
    port: int = Field(default=8000, validation_alias="REDMINE_BOARD_PORT", ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")
