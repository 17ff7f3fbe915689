# ABOUTME: The `bouquineur unread` command listing books not yet read.
# ABOUTME: Opens the catalog for the chosen user and prints a table of their unread books.

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


@click.command("unread")
@user_option
@db_option
@pass_app
def unread(app: AppContext, user_name: str, db_path: Path | None) -> None:
    """List the books in your library you have not read yet."""
    console = Console()
    try:
        database = db_path or app.config.database
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    with closing(open_catalog(database)) as conn:
        catalog = LibraryCatalog(conn)
        records = catalog.list_unread(catalog.get_or_create_user(user_name))

    if not records:
        console.print("[yellow]No unread books.[/yellow]")
        return
    console.print(records_table(records))
