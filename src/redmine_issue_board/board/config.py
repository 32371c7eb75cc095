"""Configuration for the issue board.

Two layers:
- process settings loaded from environment variables and a local `.env` file
- the list of Redmine sources, loaded from a YAML file (`config.yaml` by default)

The sources file is the only place API keys live. Nothing here checks whether a
URL is reachable or a key is valid; that surfaces at fetch time.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from redmine_issue_board.board.errors import ConfigError

logger = logging.getLogger(__name__)


class BoardSettings(BaseSettings):
    """Settings for loading and fetching sources.

    Environment variables:
    - REDMINE_BOARD_CONFIG                  (optional)
    - LOG_LEVEL                             (optional)
    - REDMINE_BOARD_FETCH_TIMEOUT_SECONDS   (optional)
    """

    config_path: Path = Field(
        default=Path("config.yaml"),
        validation_alias="REDMINE_BOARD_CONFIG",
        description="YAML file listing the Redmine instances to aggregate",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    fetch_timeout_seconds: float = Field(
        default=5.0,
        validation_alias="REDMINE_BOARD_FETCH_TIMEOUT_SECONDS",
        description="Per-request timeout (seconds) for calls to a Redmine instance",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )


class SourceConfig(BaseModel):
    """One Redmine instance to pull issues from."""

    # `url` must end so that "issues.json" can be appended, e.g. "https://redmine.example.com/".
    url: StrictStr
    api_key: StrictStr
    query_id: StrictInt
    limit: StrictInt

    model_config = ConfigDict(frozen=True, extra="ignore")


class SourcesFile(BaseModel):
    redmine_urls: list[SourceConfig]

    model_config = ConfigDict(extra="ignore")


def load_sources(path: Path | str) -> list[SourceConfig]:
    """Load the configured sources from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable, not YAML, or does not
            match the expected schema.
    """

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Config file could not be read: {path}: {e}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping with 'redmine_urls': {path}")

    try:
        parsed = SourcesFile.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    logger.info(
        "Loaded Redmine sources", extra={"path": str(path), "sources": len(parsed.redmine_urls)}
    )
    return list(parsed.redmine_urls)
