# ABOUTME: Metadata package: provider clients, response normalizers, and the lookup facade.
# ABOUTME: Exports the provider-agnostic BookMetadata record and the provider enumeration.

from bouquineur.metadata.provider import MetadataProvider
from bouquineur.metadata.types import BookMetadata, SeriesRef

__all__ = [
    "BookMetadata",
    "MetadataProvider",
    "SeriesRef",
]
