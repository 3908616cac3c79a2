"""Command registry: name resolution, listings and help text.

Names are flat strings keyed by their full space-joined path
("version", "service", "service radarr add"). Only the caller
assembles multi-segment names; resolution never walks segments.
The "service" command does its own second lookup through get().
"""
from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from returns.io import IOFailure, IOResult

from dashbrr_cli.cli_modules.commands.service_types import SERVICE_TYPES
from dashbrr_cli.cli_modules.commands.types import CLI_PREFIX
from dashbrr_cli.cli_modules.errors import UNKNOWN_COMMAND, CommandError
from dashbrr_cli.cli_modules.log import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dashbrr_cli.cli_modules.commands.types import Command
    from dashbrr_cli.cli_modules.types import CommandContext

logger = get_logger("registry")

SERVICE_NAMESPACE = "service"
_NAME_WIDTH = 12


class Registry:
    """Mapping from command name to Command.

    Filled once during bootstrap, read-only afterwards. A name
    registered twice keeps the last command.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    @property
    def commands(self) -> MappingProxyType[str, Command]:
        """Read-only view of every registered command."""
        return MappingProxyType(self._commands)

    def register(self, cmd: Command) -> None:
        """Bind cmd.name to cmd, replacing any earlier binding."""
        if cmd.name in self._commands:
            logger.debug("replacing command %r", cmd.name)
        self._commands[cmd.name] = cmd

    def get(self, name: str) -> Command | None:
        """Exact lookup by full name. Returns None if not found."""
        return self._commands.get(name)

    def execute(
        self,
        ctx: CommandContext,
        name: str,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Resolve name and run the command with args."""
        parts = name.split()
        if len(parts) > 1:
            cmd = self.get(" ".join(parts))
            if cmd is not None:
                logger.debug("resolved %r as nested command", name)
                return cmd.execute(ctx, args)

        cmd = self.get(name)
        if cmd is None:
            logger.debug("no command named %r", name)
            return IOFailure(
                CommandError(
                    command="registry.execute",
                    error_type=UNKNOWN_COMMAND,
                    message=(
                        f"unknown command: {name}\n\n"
                        f"Run '{CLI_PREFIX} help' for usage"
                    ),
                    context={"name": name},
                ),
            )
        logger.debug("resolved %r", name)
        return cmd.execute(ctx, args)

    def list_commands(self) -> str:
        """Render the sorted table of top-level commands."""
        names = sorted(
            name for name in self._commands if not _has_whitespace(name)
        )
        lines = [
            f"Usage: {CLI_PREFIX} <command> [arguments]",
            "",
            "Available commands:",
            "",
        ]
        lines.extend(
            _row(name, self._commands[name].description) for name in names
        )
        lines.append("")
        lines.append(
            f"Use '{CLI_PREFIX} help <command>' for more information"
            " about a command.",
        )
        return "\n".join(lines)

    def help(self, name: str) -> str:
        """Return contextual help for name ("" for the top level)."""
        if not name.strip():
            return self.list_commands()

        if name == SERVICE_NAMESPACE:
            return list_service_types()

        parts = name.split()
        if parts[0] == SERVICE_NAMESPACE and len(parts) == 2:
            return self._list_service_type_actions(parts[1])
        if parts[0] == SERVICE_NAMESPACE and len(parts) > 2:
            cmd = self.get(" ".join(parts))
            if cmd is not None:
                return _describe(cmd)

        cmd = self.get(name)
        if cmd is None:
            return f"Unknown command: {name}\n\n{self.list_commands()}"
        return _describe(cmd)

    def service_type_actions(self, service_type: str) -> list[tuple[str, str]]:
        """Return sorted (action, description) pairs under a service type."""
        prefix = f"{SERVICE_NAMESPACE} {service_type} "
        actions = [
            (name[len(prefix):], cmd.description)
            for name, cmd in self._commands.items()
            if name.startswith(prefix)
        ]
        return sorted(actions)

    def _list_service_type_actions(self, service_type: str) -> str:
        actions = self.service_type_actions(service_type)
        if not actions:
            return (
                f"Unknown service type: {service_type}\n\n"
                f"Run '{CLI_PREFIX} help service' for a list of"
                " service types."
            )

        lines = [
            f"Usage: {CLI_PREFIX} service {service_type} <action> [arguments]",
            "",
            "Available actions:",
            "",
        ]
        lines.extend(_row(action, desc) for action, desc in actions)
        lines.append("")
        lines.append(
            f"Use '{CLI_PREFIX} help service {service_type} <action>'"
            " for more information about an action.",
        )
        return "\n".join(lines)


def list_service_types() -> str:
    """Render the static table of known service types."""
    lines = [
        f"Usage: {CLI_PREFIX} service <service-type> <action> [arguments]",
        "",
        "Available service types:",
        "",
    ]
    lines.extend(
        f"  {spec.name:<12} - {spec.description}"
        for spec in SERVICE_TYPES.values()
    )
    lines.append("")
    lines.append(
        f"Use '{CLI_PREFIX} help service <service-type>' for more"
        " information about a service type.",
    )
    return "\n".join(lines)


def _has_whitespace(name: str) -> bool:
    return any(ch.isspace() for ch in name)


def _row(name: str, description: str) -> str:
    return f"  {name:<{_NAME_WIDTH}} {description}"


def _describe(cmd: Command) -> str:
    return f"{cmd.description}\n\n{cmd.usage}\n"
