"""CLI entrypoint for scavjob-manager."""

import logging
import os
from pathlib import Path

import rich_click as click

from scavjob_manager import __version__
from scavjob_manager.reconciler.controllers import (
    ReconcilePlanCommand,
    ReconcilerCliController,
    ReconcileRunCommand,
    ReconcileScanCommand,
)
from scavjob_manager.reconciler.errors import ReconcilerError

click.rich_click.USE_MARKDOWN = True
RECONCILER_CONTROLLER = ReconcilerCliController()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="Path to the YAML configuration file.",
)


@click.group()
@click.version_option(version=__version__, prog_name="scavjob-manager")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=lambda: os.getenv("SCAVJOB_MANAGER_LOG_LEVEL", "INFO"),
    show_default="INFO",
    help="Logging verbosity. Also read from SCAVJOB_MANAGER_LOG_LEVEL.",
)
def scavjob_manager(log_level: str) -> None:
    """Keep ScavengerJob resources in sync with a directory of job dirs."""

    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)


@scavjob_manager.command("run")
@config_option
@click.option(
    "--once/--no-once",
    default=False,
    show_default=True,
    help="Run the startup reconciliation only and exit.",
)
def run(config_path: Path, once: bool) -> None:
    """Reconcile once against the cluster, then poll the data dir forever."""

    _emit_lines(_handle_fatal(RECONCILER_CONTROLLER.run, ReconcileRunCommand(config_path, once)))


@scavjob_manager.command("scan")
@config_option
def scan(config_path: Path) -> None:
    """List job dirs and their finished state without touching the cluster."""

    _emit_lines(_handle_fatal(RECONCILER_CONTROLLER.scan, ReconcileScanCommand(config_path)))


@scavjob_manager.command("plan")
@config_option
def plan(config_path: Path) -> None:
    """Show creates and deletes startup reconciliation would issue."""

    _emit_lines(_handle_fatal(RECONCILER_CONTROLLER.plan, ReconcilePlanCommand(config_path)))


def _handle_fatal(action, command) -> list[str]:
    try:
        return action(command)
    except ReconcilerError as error:
        logger.critical("%s: %s", type(error).__name__, error)
        raise click.ClickException(str(error)) from error


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    scavjob_manager()
