# ABOUTME: CLI package for Bouquineur, built on Click.
# ABOUTME: Defines the root command group, sets up logging, and registers subcommands.

import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from bouquineur.cli.commands import (
    add_cmd,
    lookup_cmd,
    ls_cmd,
    mark_cmd,
    ongoing_cmd,
    providers_cmd,
    series_cmd,
    show_cmd,
    unread_cmd,
)
from bouquineur.cli.options import AppContext
from bouquineur.config import CONFIG_ENV_VAR, ConfigError


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich, once per process."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="bouquineur")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    envvar=CONFIG_ENV_VAR,
    default=None,
    help=f"Configuration file (default: ${CONFIG_ENV_VAR} or ~/.bouquineur/config.toml).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Bouquineur - a personal book catalog fed by metadata providers."""
    app = ctx.ensure_object(AppContext)
    app.config_path = config_path

    if verbose:
        level = "DEBUG"
    else:
        try:
            level = app.config.log_level
        except ConfigError:
            # Reported again by the command that needs the configuration
            level = "WARNING"
    configure_logging(level)


cli.add_command(add_cmd.add)
cli.add_command(lookup_cmd.lookup)
cli.add_command(ls_cmd.ls)
cli.add_command(mark_cmd.mark)
cli.add_command(ongoing_cmd.ongoing)
cli.add_command(providers_cmd.providers)
cli.add_command(series_cmd.series)
cli.add_command(show_cmd.show)
cli.add_command(unread_cmd.unread)
