"""The "service" namespace command.

Takes the service type and action off the front of its args,
looks up "service <type> <action>" in the registry it was built
with, and runs that command with whatever is left.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dashbrr_cli.cli_modules.commands.registry import (
    SERVICE_NAMESPACE,
    Registry,
)
from dashbrr_cli.cli_modules.commands.types import CLI_PREFIX, CommandSpec
from dashbrr_cli.cli_modules.errors import (
    MISSING_ARGUMENTS,
    NO_ACTION_SPECIFIED,
    UNKNOWN_ACTION,
    UNKNOWN_SERVICE_TYPE,
)
from dashbrr_cli.cli_modules.log import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from returns.io import IOResult

    from dashbrr_cli.cli_modules.errors import CommandError
    from dashbrr_cli.cli_modules.types import CommandContext

logger = get_logger("service")


@dataclass(frozen=True)
class ServiceCommand(CommandSpec):
    """Composite command owning the "service <type> <action>" namespace."""

    registry: Registry

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Resolve "service <type> <action>" and run it with args[2:]."""
        if not args:
            return self.fail_with_usage(
                MISSING_ARGUMENTS,
                "no service type specified",
            )

        service_type = args[0]
        type_help = self.registry.help(f"{SERVICE_NAMESPACE} {service_type}")
        if len(args) == 1:
            return self.fail(
                NO_ACTION_SPECIFIED,
                f"no action specified for {service_type} service\n\n{type_help}",
                {"service_type": service_type},
            )

        action = args[1]
        full_name = f"{SERVICE_NAMESPACE} {service_type} {action}"
        cmd = self.registry.get(full_name)
        if cmd is None:
            if not self.registry.service_type_actions(service_type):
                return self.fail(
                    UNKNOWN_SERVICE_TYPE,
                    f"unknown service type '{service_type}'\n\n{type_help}",
                    {"service_type": service_type},
                )
            return self.fail(
                UNKNOWN_ACTION,
                (
                    f"unknown action '{action}' for service"
                    f" {service_type}\n\n{type_help}"
                ),
                {"service_type": service_type, "action": action},
            )

        logger.debug("service namespace resolved %r", full_name)
        return cmd.execute(ctx, args[2:])


def new_service_command(registry: Registry) -> ServiceCommand:
    """Build the service command bound to registry."""
    return ServiceCommand(
        name=SERVICE_NAMESPACE,
        description="Manage service configurations",
        usage_args=(
            "<service-type> <action> [arguments]\n\n"
            f"  Use '{CLI_PREFIX} help service' for the list of"
            " service types\n"
            f"  Use '{CLI_PREFIX} help service <service-type>' for"
            " its actions"
        ),
        registry=registry,
    )
