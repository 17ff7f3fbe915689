# ABOUTME: Unit tests for converting between BookMetadata and catalog rows.
# ABOUTME: Covers required fields, date storage, and series completeness.

from datetime import date

import pytest

from bouquineur.db.mapping import SeriesInfo, metadata_to_row, row_to_metadata
from bouquineur.metadata.types import BookMetadata


class TestMetadataToRow:
    """Tests for metadata_to_row."""

    def test_full_row(self) -> None:
        meta = BookMetadata(
            isbn="9780156001311",
            title="The Name of the Rose",
            published=date(1994, 9, 28),
            goodreads_id="119073",
            page_count=536,
            read=True,
        )
        row = metadata_to_row(7, meta)
        assert row["owner"] == 7
        assert row["published"] == "1994-09-28"
        assert row["summary"] == ""
        assert row["goodreads_id"] == "119073"
        assert row["page_count"] == 536
        assert row["read"] == 1
        assert row["owned"] == 0

    def test_requires_isbn(self) -> None:
        with pytest.raises(ValueError, match="ISBN"):
            metadata_to_row(1, BookMetadata(title="Untitled"))

    def test_requires_title(self) -> None:
        with pytest.raises(ValueError, match="title"):
            metadata_to_row(1, BookMetadata(isbn="9780156001311"))

    def test_round_trip_through_row(self) -> None:
        """Stored fields come back unchanged; an empty summary reads as None."""
        meta = BookMetadata(isbn="1", title="T", published=date(2001, 2, 3), owned=True)
        row = metadata_to_row(1, meta)
        back = row_to_metadata(row)
        assert back.published == date(2001, 2, 3)
        assert back.summary is None
        assert back.owned is True
        assert back.read is False


class TestSeriesInfo:
    def test_complete(self) -> None:
        assert SeriesInfo(1, "Dune", 6, 6, True).complete

    def test_incomplete(self) -> None:
        assert not SeriesInfo(1, "Dune", 2, 6, True).complete

    def test_unknown_size_is_never_complete(self) -> None:
        assert not SeriesInfo(1, "Dune", 3, None, True).complete
