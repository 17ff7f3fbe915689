# ABOUTME: Unit tests for the MetadataProvider enumeration.
# ABOUTME: Covers serialized tokens, display labels, and parsing of unknown values.

import pytest

from bouquineur.metadata.provider import MetadataProvider


class TestMetadataProvider:
    def test_all_lists_every_provider(self) -> None:
        assert MetadataProvider.all() == [
            MetadataProvider.CALIBRE,
            MetadataProvider.OPEN_LIBRARY,
        ]

    def test_labels(self) -> None:
        assert MetadataProvider.CALIBRE.label == "Calibre"
        assert MetadataProvider.OPEN_LIBRARY.label == "OpenLibrary"

    def test_serialized_tokens(self) -> None:
        assert MetadataProvider.CALIBRE.serialized() == "calibre"
        assert MetadataProvider.OPEN_LIBRARY.serialized() == "open_library"
        assert str(MetadataProvider.OPEN_LIBRARY) == "open_library"

    def test_from_serialized_round_trip(self) -> None:
        for provider in MetadataProvider.all():
            assert MetadataProvider.from_serialized(provider.serialized()) is provider

    def test_from_serialized_unknown(self) -> None:
        """Unknown tokens are rejected with the list of valid ones."""
        with pytest.raises(ValueError, match="calibre, open_library"):
            MetadataProvider.from_serialized("goodreads")
