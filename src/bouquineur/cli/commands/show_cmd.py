# ABOUTME: The `bouquineur show` command displaying one cataloged book.
# ABOUTME: Prints the stored metadata along with read, owned, and date-added status.

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console

from bouquineur.cli.display import metadata_table
from bouquineur.cli.errors import report_error
from bouquineur.cli.options import AppContext, db_option, pass_app, user_option
from bouquineur.config import ConfigError
from bouquineur.db.catalog import LibraryCatalog
from bouquineur.db.connection import open_catalog


@click.command("show")
@click.argument("book_id", type=int)
@user_option
@db_option
@pass_app
def show(app: AppContext, book_id: int, user_name: str, db_path: Path | None) -> None:
    """Show the details of a book in your library."""
    console = Console()
    try:
        database = db_path or app.config.database
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    with closing(open_catalog(database)) as conn:
        catalog = LibraryCatalog(conn)
        owner = catalog.get_or_create_user(user_name)
        record = catalog.get_by_id(book_id)

    # Other users' books are reported as missing
    if record is None or record.owner != owner:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    meta = record.metadata
    console.print(metadata_table(meta))
    console.print(
        f"\n[dim]{'read' if meta.read else 'unread'}, "
        f"{'owned' if meta.owned else 'not owned'}, added {record.date_added}[/dim]"
    )
