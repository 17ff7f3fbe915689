# ABOUTME: The `bouquineur add` command for adding a book to a user's library by ISBN.
# ABOUTME: Looks up metadata, applies read/owned/series choices, and stores the book.

import asyncio
from pathlib import Path

import click
from rich.console import Console

from bouquineur.cli.display import metadata_table
from bouquineur.cli.errors import report_error
from bouquineur.cli.options import AppContext, db_option, pass_app, provider_option, user_option
from bouquineur.config import ConfigError
from bouquineur.core.lookup import LookupStatus, add_from_lookup, lookup_isbn
from bouquineur.db.catalog import DuplicateBookError, LibraryCatalog, VolumeTakenError
from bouquineur.db.connection import open_catalog
from bouquineur.metadata.fetcher import MetadataError, MetadataFetcher
from bouquineur.metadata.provider import MetadataProvider
from bouquineur.metadata.types import SeriesRef


@click.command("add")
@click.argument("isbn")
@user_option
@provider_option
@db_option
@click.option("--read/--unread", default=False, help="Mark the book as read (default: unread).")
@click.option(
    "--owned/--not-owned", default=True, help="Mark the book as owned (default: owned)."
)
@click.option("--series", "series_name", default=None, help="Series the book belongs to.")
@click.option(
    "--volume", type=click.IntRange(min=1), default=None, help="Volume number in the series."
)
@pass_app
def add(
    app: AppContext,
    isbn: str,
    user_name: str,
    provider: MetadataProvider | None,
    db_path: Path | None,
    read: bool,
    owned: bool,
    series_name: str | None,
    volume: int | None,
) -> None:
    """Look up an ISBN and add the book to your library."""
    console = Console()

    if (series_name is None) != (volume is None):
        raise click.UsageError("--series and --volume must be given together.")

    try:
        config = app.config
        fetcher = MetadataFetcher(config.metadata)
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    conn = open_catalog(db_path or config.database)
    try:
        catalog = LibraryCatalog(conn)
        owner = catalog.get_or_create_user(user_name)

        try:
            result = asyncio.run(lookup_isbn(catalog, fetcher, owner, isbn, provider))
        except (ConfigError, MetadataError) as exc:
            report_error(console, exc)
            raise SystemExit(1) from exc

        if result.status is LookupStatus.ALREADY_EXISTS:
            console.print(
                f"[yellow]The requested ISBN {result.isbn} is already in the library.[/yellow]"
            )
            raise SystemExit(1)
        if result.status is LookupStatus.NOT_FOUND or result.metadata is None:
            console.print(f"[yellow]The requested ISBN {result.isbn} was not found.[/yellow]")
            raise SystemExit(1)

        metadata = result.metadata
        metadata.read = read
        metadata.owned = owned
        if series_name is not None and volume is not None:
            metadata.series = SeriesRef(series_name, volume)

        try:
            book_id = add_from_lookup(catalog, owner, metadata)
        except (DuplicateBookError, VolumeTakenError, ValueError) as exc:
            report_error(console, exc)
            raise SystemExit(1) from exc
    finally:
        conn.close()

    console.print(f"[green]Added book {book_id}.[/green]")
    console.print(metadata_table(metadata))
