"""Registry construction.

Commands that do secondary lookups (help, service) receive the
registry when they are built, before anything is registered.
After build_registry returns nothing registers again.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from dashbrr_cli.cli_modules.commands.health import new_health_command
from dashbrr_cli.cli_modules.commands.help import new_help_command
from dashbrr_cli.cli_modules.commands.registry import Registry
from dashbrr_cli.cli_modules.commands.service import new_service_command
from dashbrr_cli.cli_modules.commands.service_actions import (
    all_service_action_commands,
)
from dashbrr_cli.cli_modules.commands.user import new_user_command
from dashbrr_cli.cli_modules.commands.version import new_version_command
from dashbrr_cli.cli_modules.log import get_logger

if TYPE_CHECKING:
    from dashbrr_cli.cli_modules.commands.types import Command

logger = get_logger("bootstrap")


def top_level_commands(registry: Registry) -> list[Command]:
    """The single-segment commands, bound to registry where needed."""
    return [
        new_version_command(),
        new_health_command(),
        new_help_command(registry),
        new_user_command(),
        new_service_command(registry),
    ]


def build_registry() -> Registry:
    """Create the registry and register every command."""
    registry = Registry()
    commands = [*top_level_commands(registry), *all_service_action_commands()]
    for cmd in commands:
        registry.register(cmd)
    logger.debug("registered %d commands", len(registry.commands))
    return registry
