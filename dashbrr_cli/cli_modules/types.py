"""Shared type definitions for the dashbrr CLI."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from dashbrr_cli.cli_modules.config import Settings

HealthStatusValue = Literal["online", "offline", "warning", "error", ""]

HEALTHY_STATUSES: frozenset[str] = frozenset({"online", "warning"})


@dataclass(frozen=True)
class ServiceRecord:
    """A persisted service configuration row."""

    instance_id: str
    display_name: str
    url: str
    api_key: str = ""
    access_url: str | None = None


@dataclass(frozen=True)
class UserRecord:
    """A persisted user row. id is None until stored."""

    username: str
    email: str
    password_hash: str
    id: int | None = None


@dataclass(frozen=True)
class CommandContext:
    """Immutable context handed to every command execution.

    Carries the resolved settings so commands never read the
    environment themselves.
    """

    settings: Settings


class HealthResult(BaseModel):
    """Outcome of a single service health probe."""

    model_config = ConfigDict(frozen=True)

    status: HealthStatusValue = ""
    version: str = ""
    message: str = ""

    @property
    def healthy(self) -> bool:
        """True for statuses the health report counts as up."""
        return self.status in HEALTHY_STATUSES


class VersionInfo(BaseModel):
    """Build information of the running CLI."""

    model_config = ConfigDict(frozen=True)

    version: str
    commit: str = ""
    date: str = ""


class GitHubRelease(BaseModel):
    """Subset of the GitHub latest-release payload."""

    model_config = ConfigDict(frozen=True)

    tag_name: str
    name: str = ""
    published_at: datetime | None = None
    html_url: str = ""


class VersionReport(BaseModel):
    """Version command output. latest is set only after a GitHub check."""

    model_config = ConfigDict(frozen=True)

    current: VersionInfo
    latest: GitHubRelease | None = None


class DatabaseHealth(BaseModel):
    """Database section of the system health report."""

    connected: bool = False
    type: str = "sqlite"
    error: str | None = None


class ConfigHealth(BaseModel):
    """Config-file section of the system health report."""

    valid: bool = False
    path: str = ""
    error: str | None = None


class SystemHealth(BaseModel):
    """System section of the health report."""

    database: DatabaseHealth = Field(default_factory=DatabaseHealth)
    config: ConfigHealth = Field(default_factory=ConfigHealth)


class HealthReport(BaseModel):
    """Full health report as printed by the health command."""

    system: SystemHealth = Field(default_factory=SystemHealth)
    services: dict[str, bool] = Field(default_factory=dict)
