"""Commands package -- registry, dispatch and the command set.

Public API: the Command protocol, Registry, build_registry and
run_command.
"""
from __future__ import annotations

from dashbrr_cli.cli_modules.commands.bootstrap import build_registry
from dashbrr_cli.cli_modules.commands.dispatch import run_command
from dashbrr_cli.cli_modules.commands.registry import Registry
from dashbrr_cli.cli_modules.commands.service_types import (
    SERVICE_TYPES,
    ServiceTypeSpec,
)
from dashbrr_cli.cli_modules.commands.types import Command, CommandSpec

__all__ = [
    "SERVICE_TYPES",
    "Command",
    "CommandSpec",
    "Registry",
    "ServiceTypeSpec",
    "build_registry",
    "run_command",
]
