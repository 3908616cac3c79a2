"""Tests for Settings."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from dashbrr_cli.cli_modules.config import DEFAULT_GITHUB_RELEASE_URL, Settings


@pytest.fixture(autouse=True)
def _isolated_env(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Run from an empty directory with no DASHBRR__ variables set."""
    monkeypatch.chdir(tmp_path)
    for key in [
        "DASHBRR__DB_PATH",
        "DASHBRR__CONFIG_PATH",
        "DASHBRR__HTTP_TIMEOUT",
        "DASHBRR__LOG_LEVEL",
        "DASHBRR__GITHUB_RELEASE_URL",
        "DASHBRR__DEFAULT_EMAIL_DOMAIN",
    ]:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    """Settings with nothing configured uses the documented defaults."""
    settings = Settings()
    assert settings.db_path == Path("./data/dashbrr.db")
    assert settings.config_path == Path("config.toml")
    assert settings.http_timeout == 30.0
    assert settings.github_release_url == DEFAULT_GITHUB_RELEASE_URL
    assert settings.log_level == "WARNING"
    assert settings.default_email_domain == "dashbrr.local"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """DASHBRR__ prefixed variables override defaults."""
    monkeypatch.setenv("DASHBRR__DB_PATH", "/srv/dashbrr.db")
    monkeypatch.setenv("DASHBRR__HTTP_TIMEOUT", "5")
    monkeypatch.setenv("DASHBRR__LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.db_path == Path("/srv/dashbrr.db")
    assert settings.http_timeout == 5.0
    assert settings.log_level == "DEBUG"


def test_dotenv_file_is_read(tmp_path: Path) -> None:
    """A .env file in the working directory is honoured."""
    (tmp_path / ".env").write_text("DASHBRR__DEFAULT_EMAIL_DOMAIN=example.org\n")
    assert Settings().default_email_domain == "example.org"


def test_invalid_log_level_rejected() -> None:
    """Unknown log levels fail validation."""
    with pytest.raises(ValidationError):
        Settings(log_level="LOUD")


def test_non_positive_timeout_rejected() -> None:
    """http_timeout must be greater than zero."""
    with pytest.raises(ValidationError):
        Settings(http_timeout=0)


def test_settings_are_frozen() -> None:
    """Settings cannot be mutated after construction."""
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.log_level = "DEBUG"  # type: ignore[misc]
