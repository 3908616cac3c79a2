"""CLI entry point: dashbrr-run <command> [arguments].

Loads settings, configures logging, builds the command registry
and dispatches one command line. Any failure is written to
stderr and exits 1.
"""
from __future__ import annotations

import sys
from pathlib import Path

import click
from pydantic import ValidationError
from returns.io import IOFailure
from returns.unsafe import unsafe_perform_io

from dashbrr_cli.cli_modules import io_ops
from dashbrr_cli.cli_modules.commands import build_registry, run_command
from dashbrr_cli.cli_modules.config import Settings
from dashbrr_cli.cli_modules.log import get_logger, setup_logging
from dashbrr_cli.cli_modules.types import CommandContext


def load_settings(
    db_path: Path | None,
    debug: bool,
) -> Settings:
    """Resolve settings from the environment, then apply CLI overrides."""
    settings = Settings()
    overrides: dict[str, object] = {}
    if db_path is not None:
        overrides["db_path"] = db_path
    if debug:
        overrides["log_level"] = "DEBUG"
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": ["-h"],
    },
)
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SQLite database path (default: $DASHBRR__DB_PATH or ./data/dashbrr.db)",
)
@click.option("--debug", is_flag=True, help="Log diagnostics to stderr")
@click.argument("argv", nargs=-1, type=click.UNPROCESSED)
def main(
    db_path: Path | None,
    debug: bool,
    argv: tuple[str, ...],
) -> None:
    """Register and inspect externally managed services."""
    try:
        settings = load_settings(db_path, debug)
    except ValidationError as exc:
        io_ops.write_stderr(f"invalid settings: {exc}")
        sys.exit(1)

    setup_logging(settings.log_level)
    logger = get_logger()

    registry = build_registry()
    ctx = CommandContext(settings=settings)
    result = run_command(registry, ctx, argv)
    if isinstance(result, IOFailure):
        error = unsafe_perform_io(result.failure())
        logger.debug("%s", error)
        io_ops.write_stderr(error.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
