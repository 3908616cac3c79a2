"""health [--services] [--system] [--json].

System checks cover database connectivity and the TOML config
file. Service checks probe every stored record of a known type
one after another; a service counts as healthy when its probe
reports online or warning.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from returns.io import IOFailure
from returns.unsafe import unsafe_perform_io

from dashbrr_cli.cli_modules import io_ops
from dashbrr_cli.cli_modules.commands.service_actions import probe
from dashbrr_cli.cli_modules.commands.service_types import (
    service_type_for_instance,
)
from dashbrr_cli.cli_modules.commands.types import CommandSpec
from dashbrr_cli.cli_modules.log import get_logger
from dashbrr_cli.cli_modules.types import (
    ConfigHealth,
    DatabaseHealth,
    HealthReport,
    SystemHealth,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from returns.io import IOResult

    from dashbrr_cli.cli_modules.config import Settings
    from dashbrr_cli.cli_modules.errors import CommandError
    from dashbrr_cli.cli_modules.types import CommandContext, ServiceRecord

logger = get_logger("health")


def check_system(settings: Settings) -> SystemHealth:
    """Database and config-file checks. Never fails; errors are reported."""
    database = DatabaseHealth(connected=True)
    db_result = io_ops.check_database(settings.db_path)
    if isinstance(db_result, IOFailure):
        error = unsafe_perform_io(db_result.failure())
        database = DatabaseHealth(connected=False, error=error.message)

    config_path = str(settings.config_path)
    config = ConfigHealth(valid=True, path=config_path)
    config_result = io_ops.load_config_file(settings.config_path)
    if isinstance(config_result, IOFailure):
        error = unsafe_perform_io(config_result.failure())
        config = ConfigHealth(valid=False, path=config_path, error=error.message)

    return SystemHealth(database=database, config=config)


def check_services(settings: Settings) -> IOResult[dict[str, bool], CommandError]:
    """Probe each stored service of a known type, sequentially."""
    records_result = io_ops.get_all_services(settings.db_path)

    def _probe_all(records: list[ServiceRecord]) -> dict[str, bool]:
        statuses: dict[str, bool] = {}
        for record in records:
            spec = service_type_for_instance(record.instance_id)
            if spec is None:
                logger.debug("skipping %s: unknown type", record.instance_id)
                continue
            health = probe(spec, record.url, record.api_key, settings.http_timeout)
            statuses[record.instance_id] = health.healthy
        return statuses

    return records_result.map(_probe_all)


def format_health_text(
    report: HealthReport,
    *,
    include_system: bool,
    include_services: bool,
) -> str:
    """Plain-text rendering of a health report."""
    lines: list[str] = []
    if include_system:
        db = report.system.database
        cfg = report.system.config
        lines.extend(
            [
                "System Health:",
                "  Database:",
                f"    Connected: {str(db.connected).lower()}",
                f"    Type: {db.type}",
            ],
        )
        if db.error:
            lines.append(f"    Error: {db.error}")
        lines.extend(
            [
                "",
                "  Config:",
                f"    Valid: {str(cfg.valid).lower()}",
                f"    Path: {cfg.path}",
            ],
        )
        if cfg.error:
            lines.append(f"    Error: {cfg.error}")
        lines.append("")
    if include_services:
        lines.append("Service Health:")
        lines.extend(
            f"  {instance_id}: {str(healthy).lower()}"
            for instance_id, healthy in sorted(report.services.items())
        )
    return "\n".join(lines)


@dataclass(frozen=True)
class HealthCommand(CommandSpec):
    """Check system and service health."""

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Run the requested checks and print the report."""
        include_services = "--services" in args
        include_system = "--system" in args
        json_output = "--json" in args
        if not include_services and not include_system:
            include_services = include_system = True

        report = HealthReport()
        if include_system:
            report = report.model_copy(update={"system": check_system(ctx.settings)})

        if include_services:
            services_result = check_services(ctx.settings)
            if isinstance(services_result, IOFailure):
                error = unsafe_perform_io(services_result.failure())
                io_ops.write_stderr(f"Failed to retrieve services: {error.message}")
            else:
                report = report.model_copy(
                    update={"services": unsafe_perform_io(services_result.unwrap())},
                )

        if json_output:
            skipped = {
                section
                for section, included in (
                    ("system", include_system),
                    ("services", include_services),
                )
                if not included
            }
            return io_ops.write_stdout(
                report.model_dump_json(
                    indent=2,
                    exclude_none=True,
                    exclude=skipped or None,
                ),
            )
        return io_ops.write_stdout(
            format_health_text(
                report,
                include_system=include_system,
                include_services=include_services,
            ),
        )


def new_health_command() -> HealthCommand:
    """Build the health command."""
    return HealthCommand(
        name="health",
        description="Check system and service health",
        usage_args="[--services] [--system] [--json]",
    )
