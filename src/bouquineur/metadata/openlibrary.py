# ABOUTME: Open Library metadata provider implementation.
# ABOUTME: Follows edition -> work -> authors -> cover links to assemble one BookMetadata.

import logging

import httpx

from bouquineur.config import OpenLibraryConfig
from bouquineur.metadata.http import MetadataHttpClient, OpenLibraryMetadataError
from bouquineur.metadata.openlibrary_parser import (
    Edition,
    Work,
    build_metadata,
    parse_author,
    parse_edition,
    parse_work,
)
from bouquineur.metadata.types import BookMetadata, encode_cover

logger = logging.getLogger(__name__)

OPEN_LIBRARY = "https://openlibrary.org"
COVERS = "https://covers.openlibrary.org"


class MissingWorkError(OpenLibraryMetadataError):
    """Raised when an edition does not reference any work."""

    def __init__(self, isbn: str) -> None:
        super().__init__(f"Work is missing from edition for isbn {isbn}")
        self.isbn = isbn


class NotFoundError(OpenLibraryMetadataError):
    """Raised when a resource referenced by another one answers 404."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Expected resource was not found: {url}")
        self.url = url


def edition_url(isbn: str) -> str:
    return f"{OPEN_LIBRARY}/isbn/{isbn}.json"


def resource_url(key: str) -> str:
    """URL of a keyed resource such as ``/works/OL45804W`` or ``/authors/OL34184A``."""
    if not key.startswith("/"):
        key = f"/{key}"
    return f"{OPEN_LIBRARY}{key}.json"


def cover_url(cover_id: int, size: str = "M") -> str:
    """URL of a cover image by cover id; size is "S", "M" or "L"."""
    return f"{COVERS}/b/id/{cover_id}-{size}.jpg"


class OpenLibraryProvider:
    """Metadata provider backed by the Open Library API.

    Each fetch opens its own HTTP client; nothing is cached between calls.
    The transport can be injected for testing.
    """

    def __init__(
        self,
        config: OpenLibraryConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def name(self) -> str:
        return "open_library"

    async def fetch_metadata(self, isbn: str) -> BookMetadata | None:
        """Look up a book by ISBN.

        Returns:
            The assembled metadata, or None if Open Library has no edition
            for this ISBN.

        Raises:
            OpenLibraryMetadataError: One of its subclasses, describing the failure.
        """
        logger.debug("Querying OpenLibrary for isbn '%s'", isbn)

        async with MetadataHttpClient(
            contact=self._config.contact,
            timeout=self._config.timeout,
            transport=self._transport,
        ) as http:
            body = await http.get_text(edition_url(isbn))
            if body is None:
                return None

            edition = parse_edition(body)
            logger.debug("Parsed edition: %r", edition)

            work = await self._fetch_work(http, isbn, edition)
            authors = await self._fetch_authors(http, work)
            cover_art_b64 = await self._fetch_cover(http, edition)

        return build_metadata(isbn, edition, work, authors, cover_art_b64)

    async def _fetch_required(self, http: MetadataHttpClient, url: str) -> str:
        body = await http.get_text(url)
        if body is None:
            raise NotFoundError(url)
        return body

    async def _fetch_work(self, http: MetadataHttpClient, isbn: str, edition: Edition) -> Work:
        if not edition.works:
            raise MissingWorkError(isbn)
        if len(edition.works) > 1:
            logger.warning(
                "More than one work in edition for %s: %s",
                isbn,
                [work.key for work in edition.works],
            )

        body = await self._fetch_required(http, resource_url(edition.works[0].key))
        work = parse_work(body)
        logger.debug("Parsed work: %r", work)
        return work

    async def _fetch_authors(self, http: MetadataHttpClient, work: Work) -> list[str]:
        """Resolve author names, in work order, for references with the author role."""
        authors: list[str] = []
        for reference in work.authors:
            if not reference.is_author_role:
                continue
            body = await self._fetch_required(http, resource_url(reference.author.key))
            author = parse_author(body)
            logger.debug("Parsed author: %r", author)
            if author.name:
                authors.append(author.name)
        return authors

    async def _fetch_cover(self, http: MetadataHttpClient, edition: Edition) -> str | None:
        if not edition.covers:
            return None
        url = cover_url(edition.covers[0])
        data = await http.get_bytes(url)
        if data is None:
            logger.warning("Cover %s listed on the edition was not found", url)
            return None
        return encode_cover(data)
