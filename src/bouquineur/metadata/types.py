# ABOUTME: Core metadata data structures for looked-up book records.
# ABOUTME: BookMetadata is the provider-agnostic result of every metadata fetch.

import base64
from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class SeriesRef:
    """A book's place in a series: the series name and its volume number."""

    name: str
    number: int


@dataclass
class BookMetadata:
    """Structured metadata for a book, as returned by a metadata provider.

    Every field is optional: a provider fills in what it can determine and
    leaves the rest unset. Instances are transient; the catalog maps the
    fields it keeps into its own rows.
    """

    isbn: str | None = None
    title: str | None = None
    authors: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    summary: str | None = None
    published: date | None = None
    publisher: str | None = None
    language: str | None = None
    google_id: str | None = None
    amazon_id: str | None = None
    librarything_id: str | None = None
    goodreads_id: str | None = None
    page_count: int | None = None
    read: bool = False
    owned: bool = False
    cover_art_b64: str | None = None
    series: SeriesRef | None = None

    @property
    def author(self) -> str:
        """Convenience property: joined author string for display."""
        return ", ".join(self.authors) if self.authors else ""

    @property
    def has_cover(self) -> bool:
        """Whether cover art is present."""
        return bool(self.cover_art_b64)

    @property
    def cover_image(self) -> bytes | None:
        """The decoded cover art bytes, if any."""
        if not self.cover_art_b64:
            return None
        return base64.b64decode(self.cover_art_b64)


def encode_cover(data: bytes) -> str | None:
    """Base64-encode cover art bytes, or None when there are none."""
    if not data:
        return None
    return base64.b64encode(data).decode("ascii")
