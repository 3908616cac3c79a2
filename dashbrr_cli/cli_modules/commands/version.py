"""version [--check-github] [--json]."""
from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from typing import TYPE_CHECKING

from returns.io import IOFailure
from returns.unsafe import unsafe_perform_io

from dashbrr_cli.cli_modules import io_ops
from dashbrr_cli.cli_modules.commands.types import CommandSpec
from dashbrr_cli.cli_modules.types import (
    GitHubRelease,
    VersionInfo,
    VersionReport,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from returns.io import IOResult

    from dashbrr_cli.cli_modules.errors import CommandError
    from dashbrr_cli.cli_modules.types import CommandContext

DIST_NAME = "dashbrr-cli"

# Overridden at build time
BUILD_COMMIT = ""
BUILD_DATE = ""


def current_version() -> VersionInfo:
    """Version of the installed distribution, "dev" when not installed."""
    try:
        version = package_version(DIST_NAME)
    except PackageNotFoundError:
        version = "dev"
    return VersionInfo(version=version, commit=BUILD_COMMIT, date=BUILD_DATE)


def format_version_text(
    current: VersionInfo,
    latest: GitHubRelease | None,
) -> str:
    """Plain-text rendering of the version report."""
    lines = [
        f"dashbrr version {current.version}",
        f"Commit: {current.commit}",
        f"Built: {current.date}",
    ]
    if latest is not None:
        published = latest.published_at.isoformat() if latest.published_at else ""
        lines.extend(
            [
                "",
                "Latest release:",
                f"Version: {latest.tag_name}",
                f"Name: {latest.name}",
                f"Published: {published}",
                f"URL: {latest.html_url}",
            ],
        )
        if latest.tag_name != current.version:
            lines.extend(
                ["", f"Update available: {current.version} -> {latest.tag_name}"],
            )
    return "\n".join(lines)


@dataclass(frozen=True)
class VersionCommand(CommandSpec):
    """Display version information, optionally against GitHub."""

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Print version info as text or JSON."""
        check_github = "--check-github" in args
        json_output = "--json" in args
        current = current_version()

        latest: GitHubRelease | None = None
        if check_github:
            release_result = io_ops.fetch_latest_release(
                ctx.settings.github_release_url,
                ctx.settings.http_timeout,
                f"dashbrr/{current.version}",
            )
            if isinstance(release_result, IOFailure):
                error = unsafe_perform_io(release_result.failure())
                return IOFailure(
                    error.wrap(self.name, "failed to check latest version"),
                )
            latest = unsafe_perform_io(release_result.unwrap())

        if json_output:
            report = VersionReport(current=current, latest=latest)
            return io_ops.write_stdout(
                report.model_dump_json(indent=2, exclude_none=True),
            )

        return io_ops.write_stdout(format_version_text(current, latest))


def new_version_command() -> VersionCommand:
    """Build the version command."""
    return VersionCommand(
        name="version",
        description="Display version information",
        usage_args="[--check-github] [--json]",
    )
