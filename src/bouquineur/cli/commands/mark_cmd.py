# ABOUTME: The `bouquineur mark` command for updating a book's read and owned flags.
# ABOUTME: Only the caller's own books can be changed; anything else is reported as not found.

from contextlib import closing
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from bouquineur.cli.errors import report_error
from bouquineur.cli.options import AppContext, db_option, pass_app, user_option
from bouquineur.config import ConfigError
from bouquineur.db.catalog import LibraryCatalog
from bouquineur.db.connection import open_catalog


@click.command("mark")
@click.argument("book_id", type=int)
@user_option
@db_option
@click.option("--read/--unread", default=None, help="Mark the book as read or unread.")
@click.option("--owned/--not-owned", default=None, help="Mark the book as owned or not.")
@pass_app
def mark(
    app: AppContext,
    book_id: int,
    user_name: str,
    db_path: Path | None,
    read: bool | None,
    owned: bool | None,
) -> None:
    """Mark a book in your library as read/unread or owned/not owned."""
    console = Console()
    if read is None and owned is None:
        raise click.UsageError("Give --read/--unread and/or --owned/--not-owned.")

    try:
        database = db_path or app.config.database
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    with closing(open_catalog(database)) as conn:
        catalog = LibraryCatalog(conn)
        owner = catalog.get_or_create_user(user_name)
        record = catalog.get_by_id(book_id)
        if record is None or record.owner != owner:
            console.print(f"[red]Book {book_id} not found.[/red]")
            raise SystemExit(1)

        if read is not None:
            catalog.set_read(book_id, read)
        if owned is not None:
            catalog.set_owned(book_id, owned)

    changes = []
    if read is not None:
        changes.append("read" if read else "unread")
    if owned is not None:
        changes.append("owned" if owned else "not owned")
    title = escape(record.metadata.title or "")
    console.print(f"Marked [bold]{title}[/bold] as {' and '.join(changes)}.")
