# ABOUTME: Converts between BookMetadata and catalog rows.
# ABOUTME: Dates are stored as ISO strings; authors, tags, and series live in join tables.

from dataclasses import dataclass
from datetime import date
from typing import Any

from bouquineur.metadata.types import BookMetadata


@dataclass
class BookRecord:
    """A cataloged book: BookMetadata plus database-specific fields."""

    id: int
    owner: int
    metadata: BookMetadata
    date_added: str


@dataclass
class SeriesInfo:
    """A user's series with how many of its volumes they own."""

    id: int
    name: str
    owned_count: int
    total_count: int | None
    ongoing: bool

    @property
    def complete(self) -> bool:
        return self.total_count is not None and self.owned_count == self.total_count


def metadata_to_row(owner: int, metadata: BookMetadata) -> dict[str, Any]:
    """Convert BookMetadata to a dict suitable for INSERT into books.

    Raises:
        ValueError: If the metadata has no ISBN or no title.
    """
    if not metadata.isbn:
        raise ValueError("A book needs an ISBN to be cataloged")
    if not metadata.title:
        raise ValueError("A book needs a title to be cataloged")

    return {
        "owner": owner,
        "isbn": metadata.isbn,
        "title": metadata.title,
        "summary": metadata.summary or "",
        "published": metadata.published.isoformat() if metadata.published else None,
        "publisher": metadata.publisher,
        "language": metadata.language,
        "google_id": metadata.google_id,
        "goodreads_id": metadata.goodreads_id,
        "amazon_id": metadata.amazon_id,
        "librarything_id": metadata.librarything_id,
        "page_count": metadata.page_count,
        "owned": int(metadata.owned),
        "read": int(metadata.read),
    }


def row_to_metadata(row: Any) -> BookMetadata:
    """Convert a books row back to BookMetadata (without join-table fields)."""
    published = row["published"]
    return BookMetadata(
        isbn=row["isbn"],
        title=row["title"],
        summary=row["summary"] or None,
        published=date.fromisoformat(published) if published else None,
        publisher=row["publisher"],
        language=row["language"],
        google_id=row["google_id"],
        goodreads_id=row["goodreads_id"],
        amazon_id=row["amazon_id"],
        librarything_id=row["librarything_id"],
        page_count=row["page_count"],
        owned=bool(row["owned"]),
        read=bool(row["read"]),
    )


def row_to_record(row: Any) -> BookRecord:
    """Convert a full books row to a BookRecord."""
    return BookRecord(
        id=row["id"],
        owner=row["owner"],
        metadata=row_to_metadata(row),
        date_added=row["date_added"],
    )


def row_to_series(row: Any) -> SeriesInfo:
    return SeriesInfo(
        id=row["id"],
        name=row["name"],
        owned_count=row["owned_count"],
        total_count=row["total_count"],
        ongoing=bool(row["ongoing"]),
    )
