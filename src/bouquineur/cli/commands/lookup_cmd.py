# ABOUTME: The `bouquineur lookup` command for fetching metadata without saving it.
# ABOUTME: Queries one metadata provider by ISBN and prints the normalized record.

import asyncio

import click
from rich.console import Console

from bouquineur.cli.display import metadata_table
from bouquineur.cli.errors import report_error
from bouquineur.cli.options import AppContext, pass_app, provider_option
from bouquineur.config import ConfigError
from bouquineur.core.lookup import normalize_isbn
from bouquineur.metadata.fetcher import MetadataError, MetadataFetcher
from bouquineur.metadata.provider import MetadataProvider


@click.command("lookup")
@click.argument("isbn")
@provider_option
@pass_app
def lookup(app: AppContext, isbn: str, provider: MetadataProvider | None) -> None:
    """Fetch and display metadata for an ISBN."""
    console = Console()
    clean_isbn = normalize_isbn(isbn)

    try:
        fetcher = MetadataFetcher(app.config.metadata)
        metadata = asyncio.run(fetcher.fetch(clean_isbn, provider))
    except (ConfigError, MetadataError) as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    if metadata is None:
        console.print(f"[yellow]The requested ISBN {clean_isbn} was not found.[/yellow]")
        raise SystemExit(1)

    console.print(metadata_table(metadata))
