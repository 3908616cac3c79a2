"""add / remove / list actions for every service type.

Each known service type gets the same three commands, named
"service <type> add|remove|list". Per-type differences (argument
shape, probe endpoint, accepted status) live in the service type
table.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from returns.io import IOFailure, IOResult, IOSuccess
from returns.result import Failure, Result, Success
from returns.unsafe import unsafe_perform_io

from dashbrr_cli.cli_modules import io_ops
from dashbrr_cli.cli_modules.commands.service_types import (
    SERVICE_TYPES,
    TAILSCALE_API_URL,
    ServiceTypeSpec,
)
from dashbrr_cli.cli_modules.commands.types import CLI_PREFIX, CommandSpec
from dashbrr_cli.cli_modules.errors import (
    DUPLICATE_SERVICE,
    HEALTH_CHECK_FAILED,
    INVALID_URL,
    MISSING_ARGUMENTS,
    NOT_FOUND,
    CommandError,
)
from dashbrr_cli.cli_modules.instance_ids import next_instance_id
from dashbrr_cli.cli_modules.types import HealthResult, ServiceRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dashbrr_cli.cli_modules.commands.types import Command
    from dashbrr_cli.cli_modules.types import CommandContext


@dataclass(frozen=True)
class AddRequest:
    """Parsed arguments of an add action."""

    url: str
    api_key: str
    display_name: str


def validate_service_url(url: str) -> Result[str, CommandError]:
    """Accept absolute http(s) URLs with a host (pure function)."""
    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018
    except ValueError as exc:
        return Failure(
            CommandError(
                command="validate_service_url",
                error_type=INVALID_URL,
                message=f"invalid URL: {exc}",
                context={"url": url},
            ),
        )
    if parts.scheme not in {"http", "https"}:
        return Failure(
            CommandError(
                command="validate_service_url",
                error_type=INVALID_URL,
                message="invalid URL scheme: must be http or https",
                context={"url": url, "scheme": parts.scheme},
            ),
        )
    if not parts.netloc:
        return Failure(
            CommandError(
                command="validate_service_url",
                error_type=INVALID_URL,
                message=f"invalid URL: missing host in {url!r}",
                context={"url": url},
            ),
        )
    return Success(url)


def probe(
    spec: ServiceTypeSpec,
    url: str,
    api_key: str,
    timeout: float,
) -> HealthResult:
    """Run a health probe, folding probe failures into an error status."""
    result = io_ops.check_service_health(spec, url, api_key, timeout)
    if isinstance(result, IOFailure):
        error = unsafe_perform_io(result.failure())
        return HealthResult(status="error", message=error.message)
    return unsafe_perform_io(result.unwrap())


@dataclass(frozen=True)
class AddServiceCommand(CommandSpec):
    """service <type> add: probe, allocate an instance id, store."""

    service_type: ServiceTypeSpec

    def parse_args(self, args: Sequence[str]) -> Result[AddRequest, CommandError]:
        """Map positional args onto an AddRequest for this type's shape."""
        spec = self.service_type
        if spec.add_shape == "tailscale":
            if len(args) != 1:
                return Failure(self._arg_error(args))
            return Success(
                AddRequest(
                    url=TAILSCALE_API_URL,
                    api_key=args[0],
                    display_name=spec.display_name,
                ),
            )
        if spec.add_shape == "general":
            if not 1 <= len(args) <= 3:  # noqa: PLR2004
                return Failure(self._arg_error(args))
            return Success(
                AddRequest(
                    url=args[0],
                    display_name=args[1] if len(args) > 1 else spec.display_name,
                    api_key=args[2] if len(args) > 2 else "",  # noqa: PLR2004
                ),
            )
        if len(args) != 2:  # noqa: PLR2004
            return Failure(self._arg_error(args))
        return Success(
            AddRequest(
                url=args[0],
                api_key=args[1],
                display_name=spec.display_name,
            ),
        )

    def _arg_error(self, args: Sequence[str]) -> CommandError:
        return CommandError(
            command=self.name,
            error_type=MISSING_ARGUMENTS,
            message=f"incorrect number of arguments\n\n{self.usage}",
            context={"given": len(args)},
        )

    def _duplicate_message(self, url: str) -> str:
        if self.service_type.add_shape == "tailscale":
            return (
                "tailscale service is already configured. Use"
                f" '{CLI_PREFIX} service tailscale list' to view and"
                " verify the configuration"
            )
        return f"service with URL {url} already exists"

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Validate, probe, allocate an id and store the service."""
        spec = self.service_type
        settings = ctx.settings

        parse_result = self.parse_args(args)
        if isinstance(parse_result, Failure):
            return IOFailure(parse_result.failure())
        request = parse_result.unwrap()

        url_result = validate_service_url(request.url)
        if isinstance(url_result, Failure):
            return IOFailure(url_result.failure())

        existing_result = io_ops.find_service_by_url(settings.db_path, request.url)
        if isinstance(existing_result, IOFailure):
            error = unsafe_perform_io(existing_result.failure())
            return IOFailure(
                error.wrap(self.name, "failed to check for existing service"),
            )
        if unsafe_perform_io(existing_result.unwrap()) is not None:
            return self.fail(
                DUPLICATE_SERVICE,
                self._duplicate_message(request.url),
                {"url": request.url},
            )

        health = probe(spec, request.url, request.api_key, settings.http_timeout)
        if not spec.accepts_add_status(health.status):
            return self.fail(
                HEALTH_CHECK_FAILED,
                (
                    f"failed to connect to {spec.display_name} service:"
                    f" {health.message or health.status or 'no status'}"
                ),
                {"url": request.url, "status": health.status},
            )

        # Read-then-write with no lock held: see instance_ids.
        records_result = io_ops.get_all_services(settings.db_path)
        if isinstance(records_result, IOFailure):
            error = unsafe_perform_io(records_result.failure())
            return IOFailure(
                error.wrap(self.name, "failed to generate instance ID"),
            )
        instance_id = next_instance_id(
            unsafe_perform_io(records_result.unwrap()),
            spec.prefix,
        )

        record = ServiceRecord(
            instance_id=instance_id,
            display_name=request.display_name,
            url=request.url,
            api_key=request.api_key,
        )
        create_result = io_ops.create_service(settings.db_path, record)
        if isinstance(create_result, IOFailure):
            error = unsafe_perform_io(create_result.failure())
            return IOFailure(
                error.wrap(self.name, "failed to save service configuration"),
            )

        return io_ops.write_stdout(
            "\n".join(
                [
                    f"{spec.display_name} service added successfully:",
                    f"  URL: {request.url}",
                    f"  Version: {health.version}",
                    f"  Status: {health.status}",
                    f"  Instance ID: {instance_id}",
                ],
            ),
        )


@dataclass(frozen=True)
class RemoveServiceCommand(CommandSpec):
    """service <type> remove <url>."""

    service_type: ServiceTypeSpec

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Delete the record registered under the given URL."""
        if len(args) != 1:
            return self.fail_with_usage(
                MISSING_ARGUMENTS,
                "insufficient arguments",
                {"given": len(args)},
            )
        url = args[0]
        db_path = ctx.settings.db_path

        found_result = io_ops.find_service_by_url(db_path, url)
        if isinstance(found_result, IOFailure):
            error = unsafe_perform_io(found_result.failure())
            return IOFailure(error.wrap(self.name, "failed to find service"))
        record = unsafe_perform_io(found_result.unwrap())
        if record is None:
            return self.fail(
                NOT_FOUND,
                f"no service found with URL: {url}",
                {"url": url},
            )

        delete_result = io_ops.delete_service(db_path, record.instance_id)
        if isinstance(delete_result, IOFailure):
            error = unsafe_perform_io(delete_result.failure())
            return IOFailure(error.wrap(self.name, "failed to remove service"))

        return io_ops.write_stdout(
            "\n".join(
                [
                    f"{self.service_type.display_name} service removed"
                    " successfully:",
                    f"  URL: {url}",
                    f"  Instance ID: {record.instance_id}",
                ],
            ),
        )


@dataclass(frozen=True)
class ListServiceCommand(CommandSpec):
    """service <type> list."""

    service_type: ServiceTypeSpec

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],  # noqa: ARG002
    ) -> IOResult[None, CommandError]:
        """Print every record of this type, with live status when online."""
        spec = self.service_type
        settings = ctx.settings

        records_result = io_ops.get_all_services(settings.db_path)
        if isinstance(records_result, IOFailure):
            error = unsafe_perform_io(records_result.failure())
            return IOFailure(
                error.wrap(self.name, "failed to retrieve services"),
            )
        records = [
            r
            for r in unsafe_perform_io(records_result.unwrap())
            if r.instance_id.startswith(spec.prefix)
        ]
        if not records:
            return io_ops.write_stdout(
                f"No {spec.display_name} services configured.",
            )

        lines = [f"Configured {spec.display_name} Services:"]
        for record in records:
            lines.append(f"  - URL: {record.url}")
            lines.append(f"    Instance ID: {record.instance_id}")
            health = probe(spec, record.url, record.api_key, settings.http_timeout)
            if health.status == "online":
                lines.append(f"    Version: {health.version}")
                lines.append(f"    Status: {health.status}")
        return io_ops.write_stdout("\n".join(lines))


def _add_usage(spec: ServiceTypeSpec) -> str:
    example = f"  {CLI_PREFIX} service {spec.name} add"
    if spec.add_shape == "tailscale":
        return f"<api-key>\n\nExample:\n{example} your-api-key"
    if spec.add_shape == "general":
        return (
            "<url> [name] [api-key]\n\n"
            "Example:\n"
            f"{example} http://my.service/healthz/liveness MyService\n"
            f"{example} http://my.service/healthz/liveness MyService"
            " optional-api-key"
        )
    return f"<url> <api-key>\n\nExample:\n{example} http://localhost:7474 your-api-key"


def new_service_action_commands(spec: ServiceTypeSpec) -> list[Command]:
    """Build the add, remove and list commands for one service type."""
    base = f"service {spec.name}"
    return [
        AddServiceCommand(
            name=f"{base} add",
            description=f"Add a {spec.display_name} service configuration",
            usage_args=_add_usage(spec),
            service_type=spec,
        ),
        RemoveServiceCommand(
            name=f"{base} remove",
            description=f"Remove a {spec.display_name} service configuration",
            usage_args=(
                "<url>\n\nExample:\n"
                f"  {CLI_PREFIX} {base} remove http://localhost:7474"
            ),
            service_type=spec,
        ),
        ListServiceCommand(
            name=f"{base} list",
            description=f"List configured {spec.display_name} services",
            usage_args="",
            service_type=spec,
        ),
    ]


def all_service_action_commands() -> list[Command]:
    """Action commands for every known service type, in table order."""
    commands: list[Command] = []
    for spec in SERVICE_TYPES.values():
        commands.extend(new_service_action_commands(spec))
    return commands
