# ABOUTME: The add-a-book-by-ISBN workflow tying metadata lookups to the catalog.
# ABOUTME: Distinguishes found, not found, and already-in-library outcomes.

import enum
import logging
import re
from dataclasses import dataclass

from bouquineur.db.catalog import LibraryCatalog
from bouquineur.metadata.fetcher import MetadataFetcher
from bouquineur.metadata.provider import MetadataProvider
from bouquineur.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

_ISBN_SEPARATORS_RE = re.compile(r"[\s-]")


class LookupStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"


@dataclass
class LookupResult:
    """Outcome of looking up an ISBN for a user.

    ``metadata`` is set only when ``status`` is FOUND.
    """

    status: LookupStatus
    isbn: str
    metadata: BookMetadata | None = None


def normalize_isbn(isbn: str) -> str:
    """Strip hyphens and whitespace from an ISBN."""
    return _ISBN_SEPARATORS_RE.sub("", isbn)


async def lookup_isbn(
    catalog: LibraryCatalog,
    fetcher: MetadataFetcher,
    owner: int,
    isbn: str,
    provider: MetadataProvider | None = None,
) -> LookupResult:
    """Look up an ISBN for a user, skipping the provider if they already have it.

    Raises:
        MetadataError: If the provider failed.
        ConfigError: If the requested provider is not enabled.
    """
    clean_isbn = normalize_isbn(isbn)

    if catalog.get_by_isbn(owner, clean_isbn) is not None:
        logger.info("ISBN %s is already in the library", clean_isbn)
        return LookupResult(LookupStatus.ALREADY_EXISTS, clean_isbn)

    metadata = await fetcher.fetch(clean_isbn, provider)
    if metadata is None:
        return LookupResult(LookupStatus.NOT_FOUND, clean_isbn)

    # Some providers do not echo the ISBN back
    if not metadata.isbn:
        metadata.isbn = clean_isbn
    return LookupResult(LookupStatus.FOUND, clean_isbn, metadata)


def add_from_lookup(catalog: LibraryCatalog, owner: int, metadata: BookMetadata) -> int:
    """Persist looked-up metadata in the user's library and return the new book id.

    Raises:
        DuplicateBookError: If the user already has this ISBN.
        VolumeTakenError: If the series volume is already cataloged.
        ValueError: If the metadata lacks an ISBN or a title.
    """
    book_id = catalog.add_book(owner, metadata)
    logger.info("Added %r (%s) as book %d", metadata.title, metadata.isbn, book_id)
    return book_id
