"""Command type definitions for the dashbrr command pattern."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from returns.io import IOFailure, IOResult

from dashbrr_cli.cli_modules.errors import CommandError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dashbrr_cli.cli_modules.types import CommandContext

CLI_PREFIX = "dashbrr run"


@runtime_checkable
class Command(Protocol):
    """Anything the registry can resolve and run."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def usage(self) -> str: ...

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]: ...


@dataclass(frozen=True)
class CommandSpec:
    """Name, description and usage shared by every concrete command.

    name is one or more space separated segments, e.g.
    "service autobrr add". usage_args is the argument template
    that follows the name in the rendered usage line and may
    carry examples on later lines.
    """

    name: str
    description: str
    usage_args: str

    @property
    def usage(self) -> str:
        """Rendered usage text."""
        return f"Usage: {CLI_PREFIX} {self.name} {self.usage_args}".rstrip()

    def fail(
        self,
        error_type: str,
        message: str,
        context: dict[str, object] | None = None,
    ) -> IOResult[None, CommandError]:
        """Return IOFailure attributed to this command."""
        return IOFailure(
            CommandError(
                command=self.name,
                error_type=error_type,
                message=message,
                context=context or {},
            ),
        )

    def fail_with_usage(
        self,
        error_type: str,
        message: str,
        context: dict[str, object] | None = None,
    ) -> IOResult[None, CommandError]:
        """Return IOFailure whose message ends with this command's usage."""
        return self.fail(error_type, f"{message}\n\n{self.usage}", context)
