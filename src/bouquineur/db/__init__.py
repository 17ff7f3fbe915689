# ABOUTME: Public API for the Bouquineur catalog database layer.
# ABOUTME: Exports connection management, catalog operations, and record types.

from bouquineur.db.catalog import (
    DuplicateBookError,
    LibraryCatalog,
    OngoingReport,
    VolumeTakenError,
)
from bouquineur.db.connection import open_catalog
from bouquineur.db.mapping import BookRecord, SeriesInfo

__all__ = [
    "BookRecord",
    "DuplicateBookError",
    "LibraryCatalog",
    "OngoingReport",
    "SeriesInfo",
    "VolumeTakenError",
    "open_catalog",
]
