# ABOUTME: The `bouquineur ls` command for listing a user's library.
# ABOUTME: Lists every book, or only those by one author or in one series.

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console

from bouquineur.cli.display import records_table
from bouquineur.cli.errors import report_error
from bouquineur.cli.options import AppContext, db_option, pass_app, user_option
from bouquineur.config import ConfigError
from bouquineur.db.catalog import LibraryCatalog
from bouquineur.db.connection import open_catalog


@click.command("ls")
@user_option
@db_option
@click.option("--author", "author_filter", default=None, help="Only books by this author.")
@click.option("--series", "series_filter", default=None, help="Only books in this series.")
@pass_app
def ls(
    app: AppContext,
    user_name: str,
    db_path: Path | None,
    author_filter: str | None,
    series_filter: str | None,
) -> None:
    """List the books in your library."""
    console = Console()
    if author_filter and series_filter:
        raise click.UsageError("--author and --series cannot be combined.")

    try:
        database = db_path or app.config.database
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    with closing(open_catalog(database)) as conn:
        catalog = LibraryCatalog(conn)
        owner = catalog.get_or_create_user(user_name)
        if author_filter:
            records = catalog.list_by_author(owner, author_filter)
        elif series_filter:
            records = catalog.list_by_series(owner, series_filter)
        else:
            records = catalog.list_books(owner)

    if not records:
        console.print("[yellow]No books in the library.[/yellow]")
        return

    console.print(records_table(records))
    console.print(f"\n[dim]{len(records)} book(s)[/dim]")
