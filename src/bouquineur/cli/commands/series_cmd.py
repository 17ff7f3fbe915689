# ABOUTME: The `bouquineur series` command for series bookkeeping.
# ABOUTME: Records how many volumes a series has and whether it is still ongoing.

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


@click.command("series")
@click.argument("name")
@user_option
@db_option
@click.option(
    "--total", type=click.IntRange(min=1), default=None, help="Number of volumes in the series."
)
@click.option(
    "--ongoing/--finished", default=None, help="Whether new volumes are still being published."
)
@pass_app
def series(
    app: AppContext,
    name: str,
    user_name: str,
    db_path: Path | None,
    total: int | None,
    ongoing: bool | None,
) -> None:
    """Show or update a series in your library."""
    console = Console()
    try:
        database = db_path or app.config.database
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    with closing(open_catalog(database)) as conn:
        catalog = LibraryCatalog(conn)
        owner = catalog.get_or_create_user(user_name)
        # Only an update creates the series
        if total is not None or ongoing is not None:
            series_id = catalog.get_or_create_series(owner, name)
            catalog.update_series(series_id, total_count=total, ongoing=ongoing)
        info = catalog.get_series(owner, name)

    if info is None:
        console.print(f"[yellow]Series {escape(name)} not found.[/yellow]")
        raise SystemExit(1)
    total_str = str(info.total_count) if info.total_count is not None else "?"
    status = "ongoing" if info.ongoing else "finished"
    name = escape(info.name)
    console.print(f"[bold]{name}[/bold]: {info.owned_count}/{total_str} owned, {status}")
