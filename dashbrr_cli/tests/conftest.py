"""Shared test fixtures for the dashbrr CLI test suite."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest
from returns.io import IOResult, IOSuccess

from dashbrr_cli.cli_modules.config import Settings
from dashbrr_cli.cli_modules.types import CommandContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from dashbrr_cli.cli_modules.errors import CommandError


@dataclass
class RecordingCommand:
    """Command double that records every args list it receives."""

    name: str
    description: str = "recording command"
    usage: str = "Usage: dashbrr run recording"
    calls: list[list[str]] = field(default_factory=list)

    def execute(
        self,
        ctx: CommandContext,  # noqa: ARG002
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        self.calls.append(list(args))
        return IOSuccess(None)


@pytest.fixture
def recording_command() -> type[RecordingCommand]:
    """Return the RecordingCommand class for building doubles."""
    return RecordingCommand


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Return Settings pointing at a throwaway database and config."""
    return Settings(
        db_path=tmp_path / "data" / "dashbrr.db",
        config_path=tmp_path / "config.toml",
        http_timeout=1.0,
    )


@pytest.fixture
def command_context(settings: Settings) -> CommandContext:
    """Return a CommandContext wrapping the test settings."""
    return CommandContext(settings=settings)

