# ABOUTME: Catalog operations for the Bouquineur library database.
# ABOUTME: Adds looked-up books per user, tracks read/owned status, and reports series gaps.

import sqlite3
from dataclasses import dataclass, field

from bouquineur.db.mapping import (
    BookRecord,
    SeriesInfo,
    metadata_to_row,
    row_to_record,
    row_to_series,
)
from bouquineur.metadata.types import BookMetadata, SeriesRef


class DuplicateBookError(Exception):
    """Raised when a user already has a book with the same ISBN."""


class VolumeTakenError(Exception):
    """Raised when a series volume number is already assigned to another book."""


@dataclass
class OngoingReport:
    """Series bookkeeping for one user.

    ``missing`` pairs each series with a known size that the user does not
    fully own with the volume numbers absent from the catalog.
    ``all_owned`` lists complete series that are still flagged as ongoing.
    """

    missing: list[tuple[SeriesInfo, list[int]]] = field(default_factory=list)
    all_owned: list[SeriesInfo] = field(default_factory=list)


_SERIES_INFO_SQL = (
    "SELECT s.id, s.name, s.total_count, s.ongoing, "
    "COUNT(b.id) AS owned_count "
    "FROM series s "
    "LEFT JOIN book_series bs ON bs.series_id = s.id "
    "LEFT JOIN books b ON b.id = bs.book_id AND b.owned = 1 "
    "WHERE s.owner = ? "
)

_MISSING_VOLUMES_SQL = """
WITH RECURSIVE volumes(series_id, number) AS (
    SELECT id, 1 FROM series
    WHERE owner = ? AND total_count IS NOT NULL AND total_count >= 1
    UNION ALL
    SELECT v.series_id, v.number + 1
    FROM volumes v JOIN series s ON s.id = v.series_id
    WHERE v.number < s.total_count
)
SELECT series_id, number FROM volumes
EXCEPT
SELECT series_id, number FROM book_series
ORDER BY series_id, number
"""


class LibraryCatalog:
    """Wraps a sqlite3 connection and provides typed operations on the catalog."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- Users ---

    def get_or_create_user(self, name: str) -> int:
        """Return the id of the user with this name, creating the user if needed."""
        self._conn.execute("INSERT OR IGNORE INTO users (name) VALUES (?)", (name,))
        self._conn.commit()
        cursor = self._conn.execute("SELECT id FROM users WHERE name = ?", (name,))
        return cursor.fetchone()[0]

    # --- Books ---

    def add_book(self, owner: int, metadata: BookMetadata) -> int:
        """Add a book to a user's library.

        Authors keep their order, tags are attached, and a series association
        in ``metadata.series`` creates the series if needed.

        Returns:
            The row ID of the inserted book.

        Raises:
            DuplicateBookError: If the user already has a book with this ISBN.
            VolumeTakenError: If the series volume is already in the catalog.
            ValueError: If the metadata lacks an ISBN or a title.
        """
        row = metadata_to_row(owner, metadata)
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)

        try:
            with self._conn:
                cursor = self._conn.execute(
                    f"INSERT INTO books ({columns}) VALUES ({placeholders})",
                    list(row.values()),
                )
                book_id = cursor.lastrowid
                self._link_authors(book_id, metadata.authors)
                self._link_tags(book_id, metadata.tags)
                if metadata.series is not None:
                    series_id = self._ensure_series(owner, metadata.series.name)
                    self._insert_book_series(book_id, series_id, metadata.series.number)
        except sqlite3.IntegrityError as exc:
            if "books.owner, books.isbn" in str(exc):
                raise DuplicateBookError(
                    f"Book with isbn {metadata.isbn} is already in the library"
                ) from exc
            raise

        return book_id  # type: ignore[return-value]

    def _link_authors(self, book_id: int, authors: list[str]) -> None:
        for position, name in enumerate(dict.fromkeys(authors)):
            self._conn.execute("INSERT OR IGNORE INTO authors (name) VALUES (?)", (name,))
            self._conn.execute(
                "INSERT INTO book_authors (book_id, author_id, position) "
                "SELECT ?, id, ? FROM authors WHERE name = ?",
                (book_id, position, name),
            )

    def _link_tags(self, book_id: int, tags: list[str]) -> None:
        for name in dict.fromkeys(tags):
            self._conn.execute("INSERT OR IGNORE INTO tags (name) VALUES (?)", (name,))
            self._conn.execute(
                "INSERT OR IGNORE INTO book_tags (book_id, tag_id) "
                "SELECT ?, id FROM tags WHERE name = ?",
                (book_id, name),
            )

    def _hydrate(self, record: BookRecord) -> BookRecord:
        """Fill in authors, tags, and series from the join tables."""
        meta = record.metadata
        cursor = self._conn.execute(
            "SELECT a.name FROM authors a "
            "JOIN book_authors ba ON a.id = ba.author_id "
            "WHERE ba.book_id = ? ORDER BY ba.position",
            (record.id,),
        )
        meta.authors = [row[0] for row in cursor.fetchall()]
        meta.tags = self.get_tags_for_book(record.id)

        cursor = self._conn.execute(
            "SELECT s.name, bs.number FROM series s "
            "JOIN book_series bs ON s.id = bs.series_id WHERE bs.book_id = ?",
            (record.id,),
        )
        series_row = cursor.fetchone()
        meta.series = SeriesRef(series_row[0], series_row[1]) if series_row else None
        return record

    def get_by_id(self, book_id: int) -> BookRecord | None:
        """Retrieve a book by its row ID."""
        cursor = self._conn.execute("SELECT * FROM books WHERE id = ?", (book_id,))
        row = cursor.fetchone()
        return self._hydrate(row_to_record(row)) if row else None

    def get_by_isbn(self, owner: int, isbn: str) -> BookRecord | None:
        """Retrieve a user's book by ISBN."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE owner = ? AND isbn = ?", (owner, isbn)
        )
        row = cursor.fetchone()
        return self._hydrate(row_to_record(row)) if row else None

    def list_books(self, owner: int) -> list[BookRecord]:
        """Return all of a user's books, ordered by title."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE owner = ? ORDER BY title", (owner,)
        )
        return [self._hydrate(row_to_record(row)) for row in cursor.fetchall()]

    def list_by_author(self, owner: int, author: str) -> list[BookRecord]:
        """Return a user's books credited to an author, ordered by title."""
        cursor = self._conn.execute(
            "SELECT b.* FROM books b "
            "JOIN book_authors ba ON ba.book_id = b.id "
            "JOIN authors a ON a.id = ba.author_id "
            "WHERE b.owner = ? AND a.name = ? ORDER BY b.title",
            (owner, author),
        )
        return [self._hydrate(row_to_record(row)) for row in cursor.fetchall()]

    def list_by_series(self, owner: int, name: str) -> list[BookRecord]:
        """Return a user's books in a series, ordered by volume number."""
        cursor = self._conn.execute(
            "SELECT b.* FROM books b "
            "JOIN book_series bs ON bs.book_id = b.id "
            "JOIN series s ON s.id = bs.series_id "
            "WHERE b.owner = ? AND s.name = ? ORDER BY bs.number",
            (owner, name),
        )
        return [self._hydrate(row_to_record(row)) for row in cursor.fetchall()]

    def list_unread(self, owner: int) -> list[BookRecord]:
        """Return a user's books not marked as read, ordered by title."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE owner = ? AND read = 0 ORDER BY title", (owner,)
        )
        return [self._hydrate(row_to_record(row)) for row in cursor.fetchall()]

    def _set_flag(self, book_id: int, column: str, value: bool) -> None:
        cursor = self._conn.execute(
            f"UPDATE books SET {column} = ? WHERE id = ?", (int(value), book_id)
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"Book with id {book_id} not found")

    def set_read(self, book_id: int, read: bool = True) -> None:
        """Mark a book as read or unread.

        Raises:
            ValueError: If the book_id does not exist.
        """
        self._set_flag(book_id, "read", read)

    def set_owned(self, book_id: int, owned: bool = True) -> None:
        """Mark a book as owned or not owned.

        Raises:
            ValueError: If the book_id does not exist.
        """
        self._set_flag(book_id, "owned", owned)

    def get_tags_for_book(self, book_id: int) -> list[str]:
        """Get all tags for a book, alphabetically sorted."""
        cursor = self._conn.execute(
            "SELECT t.name FROM tags t "
            "JOIN book_tags bt ON t.id = bt.tag_id "
            "WHERE bt.book_id = ? "
            "ORDER BY t.name",
            (book_id,),
        )
        return [row[0] for row in cursor.fetchall()]

    # --- Series ---

    def _ensure_series(self, owner: int, name: str) -> int:
        self._conn.execute(
            "INSERT OR IGNORE INTO series (owner, name) VALUES (?, ?)", (owner, name)
        )
        cursor = self._conn.execute(
            "SELECT id FROM series WHERE owner = ? AND name = ?", (owner, name)
        )
        return cursor.fetchone()[0]

    def _insert_book_series(self, book_id: int, series_id: int, number: int) -> None:
        try:
            self._conn.execute(
                "INSERT INTO book_series (book_id, series_id, number) VALUES (?, ?, ?) "
                "ON CONFLICT (book_id) DO UPDATE "
                "SET series_id = excluded.series_id, number = excluded.number",
                (book_id, series_id, number),
            )
        except sqlite3.IntegrityError as exc:
            raise VolumeTakenError(f"Volume {number} of this series is already cataloged") from exc

    def get_or_create_series(self, owner: int, name: str) -> int:
        """Return the id of a user's series, creating it if needed."""
        with self._conn:
            return self._ensure_series(owner, name)

    def set_book_series(self, book_id: int, series_id: int, number: int) -> None:
        """Place a book in a series at the given volume number.

        Raises:
            VolumeTakenError: If another book already has that volume number.
        """
        with self._conn:
            self._insert_book_series(book_id, series_id, number)

    def update_series(
        self,
        series_id: int,
        *,
        total_count: int | None = None,
        ongoing: bool | None = None,
    ) -> None:
        """Update a series' known size and/or ongoing flag.

        Arguments left as None are not changed.

        Raises:
            ValueError: If the series_id does not exist or total_count < 1.
        """
        if total_count is not None and total_count < 1:
            raise ValueError("total_count must be at least 1")

        fields: dict[str, int] = {}
        if total_count is not None:
            fields["total_count"] = total_count
        if ongoing is not None:
            fields["ongoing"] = int(ongoing)
        if not fields:
            return

        set_clause = ", ".join(f"{k} = ?" for k in fields)
        cursor = self._conn.execute(
            f"UPDATE series SET {set_clause} WHERE id = ?",
            [*fields.values(), series_id],
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"Series with id {series_id} not found")

    def get_series(self, owner: int, name: str) -> SeriesInfo | None:
        """Retrieve a user's series by name."""
        cursor = self._conn.execute(
            _SERIES_INFO_SQL + "AND s.name = ? GROUP BY s.id", (owner, name)
        )
        row = cursor.fetchone()
        return row_to_series(row) if row else None

    def series_info(self, owner: int) -> list[SeriesInfo]:
        """List a user's series with owned counts, ordered by name."""
        cursor = self._conn.execute(
            _SERIES_INFO_SQL + "GROUP BY s.id ORDER BY s.name", (owner,)
        )
        return [row_to_series(row) for row in cursor.fetchall()]

    def missing_volumes(self, owner: int) -> dict[int, list[int]]:
        """Volume numbers absent from the catalog, per series with a known size.

        Every number from 1 to the series' total_count that no cataloged book
        occupies is reported, in ascending order.
        """
        missing: dict[int, list[int]] = {}
        for series_id, number in self._conn.execute(_MISSING_VOLUMES_SQL, (owner,)):
            missing.setdefault(series_id, []).append(number)
        return missing

    def ongoing_report(self, owner: int) -> OngoingReport:
        """Split a user's series into those with gaps and complete ongoing ones."""
        report = OngoingReport()
        missing_volumes = self.missing_volumes(owner)
        for info in self.series_info(owner):
            if info.complete:
                if info.ongoing:
                    report.all_owned.append(info)
            elif info.total_count is not None:
                report.missing.append((info, missing_volumes.get(info.id, [])))
        return report
