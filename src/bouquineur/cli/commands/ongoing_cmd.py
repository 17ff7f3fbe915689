# ABOUTME: The `bouquineur ongoing` command reporting missing volumes in series.
# ABOUTME: Lists gaps in series with a known size and complete series still ongoing.

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


@click.command("ongoing")
@user_option
@db_option
@pass_app
def ongoing(app: AppContext, user_name: str, db_path: Path | None) -> None:
    """Show missing volumes of your series."""
    console = Console()
    try:
        database = db_path or app.config.database
    except ConfigError as exc:
        report_error(console, exc)
        raise SystemExit(1) from exc

    with closing(open_catalog(database)) as conn:
        catalog = LibraryCatalog(conn)
        report = catalog.ongoing_report(catalog.get_or_create_user(user_name))

    if not report.missing and not report.all_owned:
        console.print("[yellow]No series with a known number of volumes.[/yellow]")
        return

    if report.missing:
        console.print("[bold]Missing Volumes[/bold]")
        for info, volumes in report.missing:
            console.print(f"  [bold]{escape(info.name)}[/bold]")
            for number in volumes:
                console.print(f"    Volume {number}")

    if report.all_owned:
        console.print("[bold]All Owned[/bold]")
        for info in report.all_owned:
            console.print(f"  {escape(info.name)} ({info.owned_count} volumes)")
