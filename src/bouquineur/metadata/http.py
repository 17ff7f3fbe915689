# ABOUTME: Async HTTP client for metadata web services.
# ABOUTME: Builds a per-fetch httpx.AsyncClient with a contact User-Agent and injectable transport.

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

USER_AGENT_PRODUCT = "bouquineur"


class OpenLibraryMetadataError(Exception):
    """Base class for failures while fetching metadata from Open Library."""


class MakeClientError(OpenLibraryMetadataError):
    """Raised when the HTTP client cannot be built from the configuration."""


class RequestError(OpenLibraryMetadataError):
    """Raised on a transport-level HTTP failure (DNS, connection, TLS, timeout)."""


class HttpStatusError(RequestError):
    """Raised when a resource answers with a non-success status other than 404."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"HTTP {status_code} from {url}")
        self.url = url
        self.status_code = status_code


def build_user_agent(contact: str) -> str:
    """Build the User-Agent header value carrying the operator's contact string.

    Raises:
        MakeClientError: If the contact cannot be sent in an HTTP header.
    """
    if not contact.strip() or not contact.isascii() or not contact.isprintable():
        raise MakeClientError(f"Invalid contact for the User-Agent header: {contact!r}")
    return f"{USER_AGENT_PRODUCT} ({contact})"


class MetadataHttpClient:
    """Thin async wrapper around httpx.AsyncClient for metadata lookups.

    Meant to be used as an async context manager, one instance per fetch:

        async with MetadataHttpClient(contact="me@example.org") as http:
            body = await http.get_text(url)
    """

    def __init__(
        self,
        *,
        contact: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": build_user_agent(contact)},
            "follow_redirects": True,
        }
        # None keeps httpx's own default timeout
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport
        try:
            self._client = httpx.AsyncClient(**client_kwargs)
        except (ValueError, TypeError) as exc:
            raise MakeClientError(f"Could not make HTTP client: {exc}") from exc

    async def __aenter__(self) -> "MetadataHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, url: str) -> httpx.Response | None:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise RequestError(f"Request failed: {url}: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("404 from %s", url)
            return None
        if not response.is_success:
            raise HttpStatusError(url, response.status_code)
        return response

    async def get_text(self, url: str) -> str | None:
        """GET a resource and return its body as text.

        Returns:
            The response body, or None if the server answered 404.

        Raises:
            RequestError: On transport failures.
            HttpStatusError: On any other non-success status.
        """
        response = await self._get(url)
        return response.text if response is not None else None

    async def get_bytes(self, url: str) -> bytes | None:
        """GET a resource and return its raw body, or None on 404."""
        response = await self._get(url)
        return response.content if response is not None else None
