"""Command dispatch -- central entry point for all commands.

The dispatch name is always the first token. Everything after
it is handed to that command untouched, including tokens that
are themselves path segments ("autobrr", "add"). Deeper
resolution belongs to the command that owns the namespace.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from returns.io import IOFailure, IOResult

from dashbrr_cli.cli_modules.commands.types import CLI_PREFIX
from dashbrr_cli.cli_modules.errors import NO_COMMAND_SPECIFIED, CommandError
from dashbrr_cli.cli_modules.log import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dashbrr_cli.cli_modules.commands.registry import Registry
    from dashbrr_cli.cli_modules.types import CommandContext

logger = get_logger("dispatch")


def split_command_line(
    argv: Sequence[str],
) -> tuple[str, list[str]] | None:
    """Split argv into (dispatch name, remaining args).

    Returns None for an empty argv.
    """
    if not argv:
        return None
    return argv[0], list(argv[1:])


def run_command(
    registry: Registry,
    ctx: CommandContext,
    argv: Sequence[str],
) -> IOResult[None, CommandError]:
    """Dispatch one command line end to end."""
    split = split_command_line(argv)
    if split is None:
        return IOFailure(
            CommandError(
                command="commands.dispatch",
                error_type=NO_COMMAND_SPECIFIED,
                message=(
                    "no command specified\n\n"
                    f"Run '{CLI_PREFIX} help' for usage"
                ),
            ),
        )

    name, args = split
    logger.debug("dispatching %r with %d argument(s)", name, len(args))
    return registry.execute(ctx, name, args)
