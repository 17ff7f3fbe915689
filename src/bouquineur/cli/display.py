# ABOUTME: Rich renderables shared by the CLI commands.
# ABOUTME: Formats BookMetadata and catalog records for the terminal.

from rich.table import Table

from bouquineur.db.mapping import BookRecord
from bouquineur.metadata.types import BookMetadata


def metadata_table(meta: BookMetadata) -> Table:
    """Build a two-column field/value table for one book."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("Title", meta.title or "?")
    table.add_row("Author", meta.author or "unknown")
    if meta.isbn:
        table.add_row("ISBN", meta.isbn)
    if meta.publisher:
        table.add_row("Publisher", meta.publisher)
    if meta.published:
        table.add_row("Published", meta.published.isoformat())
    table.add_row("Language", meta.language or "?")
    if meta.page_count:
        table.add_row("Pages", str(meta.page_count))
    if meta.series:
        table.add_row("Series", f"{meta.series.name} #{meta.series.number}")
    if meta.tags:
        table.add_row("Tags", ", ".join(meta.tags))
    for label, value in (
        ("Google", meta.google_id),
        ("Amazon", meta.amazon_id),
        ("LibraryThing", meta.librarything_id),
        ("Goodreads", meta.goodreads_id),
    ):
        if value:
            table.add_row(label, value)
    table.add_row("Cover", "yes" if meta.has_cover else "no")
    if meta.summary:
        table.add_row("Summary", meta.summary)
    return table


def records_table(records: list[BookRecord]) -> Table:
    """Build a one-row-per-book listing."""
    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Series")
    table.add_column("ISBN", style="dim")

    for record in records:
        meta = record.metadata
        series = f"{meta.series.name} #{meta.series.number}" if meta.series else ""
        table.add_row(str(record.id), meta.title or "", meta.author, series, meta.isbn or "")
    return table
