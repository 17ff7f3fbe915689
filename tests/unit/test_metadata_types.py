# ABOUTME: Unit tests for the BookMetadata record and cover encoding helpers.
# ABOUTME: Covers optional fields, the author shortcut, and base64 cover round-trips.

import base64
from datetime import date

from bouquineur.metadata.types import BookMetadata, SeriesRef, encode_cover


class TestBookMetadataDefaults:
    """Every field of BookMetadata is optional."""

    def test_empty_record(self) -> None:
        """A record built without arguments has everything unset."""
        meta = BookMetadata()
        assert meta.isbn is None
        assert meta.title is None
        assert meta.authors == []
        assert meta.tags == []
        assert meta.published is None
        assert meta.page_count is None
        assert meta.read is False
        assert meta.owned is False
        assert meta.series is None
        assert meta.cover_art_b64 is None

    def test_lists_are_not_shared(self) -> None:
        """Default lists are independent between instances."""
        first = BookMetadata()
        second = BookMetadata()
        first.authors.append("Someone")
        assert second.authors == []

    def test_series_association(self) -> None:
        """A series association carries a name and a volume number."""
        meta = BookMetadata(title="Dune Messiah", series=SeriesRef("Dune", 2))
        assert meta.series == SeriesRef("Dune", 2)
        assert meta.published is None

    def test_published_is_a_date(self) -> None:
        meta = BookMetadata(published=date(1965, 8, 1))
        assert meta.published.year == 1965


class TestConvenienceProperties:
    def test_author_joins_names(self) -> None:
        meta = BookMetadata(authors=["Terry Pratchett", "Neil Gaiman"])
        assert meta.author == "Terry Pratchett, Neil Gaiman"

    def test_author_empty(self) -> None:
        assert BookMetadata().author == ""

    def test_cover_round_trip(self) -> None:
        """cover_image decodes what encode_cover produced."""
        data = b"\x89PNG\r\n\x1a\nfake"
        meta = BookMetadata(cover_art_b64=encode_cover(data))
        assert meta.has_cover
        assert meta.cover_image == data

    def test_no_cover(self) -> None:
        meta = BookMetadata()
        assert not meta.has_cover
        assert meta.cover_image is None


class TestEncodeCover:
    def test_empty_bytes_mean_no_cover(self) -> None:
        assert encode_cover(b"") is None

    def test_standard_base64(self) -> None:
        assert encode_cover(b"\xff\xfe") == base64.b64encode(b"\xff\xfe").decode("ascii")
