# ABOUTME: The `bouquineur providers` command listing enabled metadata providers.
# ABOUTME: Shows each provider's label, config token, and which one is the default.

import click
from rich.console import Console
from rich.table import Table

from bouquineur.cli.errors import report_error
from bouquineur.cli.options import AppContext, pass_app
from bouquineur.config import ConfigError
from bouquineur.metadata.fetcher import MetadataFetcher


@click.command("providers")
@pass_app
def providers(app: AppContext) -> None:
    """List the enabled metadata providers."""
    console = Console()
    try:
        fetcher = MetadataFetcher(app.config.metadata)
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    if not fetcher.enabled:
        console.print("[yellow]No metadata provider is enabled.[/yellow]")
        return

    table = Table()
    table.add_column("Provider", style="bold")
    table.add_column("Token", style="dim")
    table.add_column("Default")
    for provider in fetcher.providers:
        is_default = provider is fetcher.default_provider
        table.add_row(provider.label, provider.serialized(), "yes" if is_default else "")
    console.print(table)
