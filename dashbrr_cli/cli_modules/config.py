"""Runtime settings for the dashbrr CLI.

Values come from DASHBRR__* environment variables or a local
.env file. CLI options override them via Settings.model_copy.
"""
from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GITHUB_RELEASE_URL = (
    "https://api.github.com/repos/autobrr/dashbrr/releases/latest"
)

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """CLI settings resolved once per process."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DASHBRR__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    db_path: Path = Path("./data/dashbrr.db")
    config_path: Path = Path("config.toml")
    http_timeout: float = Field(default=30.0, gt=0)
    github_release_url: str = DEFAULT_GITHUB_RELEASE_URL
    log_level: str = "WARNING"
    default_email_domain: str = "dashbrr.local"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            msg = f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return level
