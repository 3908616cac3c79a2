"""help [command...]: print registry listings and usage."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dashbrr_cli.cli_modules import io_ops
from dashbrr_cli.cli_modules.commands.types import CommandSpec

if TYPE_CHECKING:
    from collections.abc import Sequence

    from returns.io import IOResult

    from dashbrr_cli.cli_modules.commands.registry import Registry
    from dashbrr_cli.cli_modules.errors import CommandError
    from dashbrr_cli.cli_modules.types import CommandContext


@dataclass(frozen=True)
class HelpCommand(CommandSpec):
    """Show help about available commands.

    Multiple args are joined back into one name so that
    "help service radarr add" reaches the nested command.
    """

    registry: Registry

    def execute(
        self,
        ctx: CommandContext,  # noqa: ARG002
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Write the requested help text to stdout."""
        if not args:
            return io_ops.write_stdout(self.registry.list_commands())
        return io_ops.write_stdout(self.registry.help(" ".join(args)))


def new_help_command(registry: Registry) -> HelpCommand:
    """Build the help command bound to registry."""
    return HelpCommand(
        name="help",
        description="Show help about available commands",
        usage_args="[command]",
        registry=registry,
    )
