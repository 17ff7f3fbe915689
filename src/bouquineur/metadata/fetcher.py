# ABOUTME: Single entry point for metadata lookups across all configured providers.
# ABOUTME: Picks a provider, dispatches the fetch, and wraps provider errors with its identity.

import logging

import httpx

from bouquineur.config import ConfigError, MetadataConfig
from bouquineur.metadata.calibre import CalibreMetadataError, CalibreProvider
from bouquineur.metadata.http import OpenLibraryMetadataError
from bouquineur.metadata.openlibrary import OpenLibraryProvider
from bouquineur.metadata.provider import MetadataProvider
from bouquineur.metadata.types import BookMetadata

logger = logging.getLogger(__name__)


class MetadataError(Exception):
    """Raised when a provider fails; ``provider`` names it and ``error`` is the cause."""

    def __init__(
        self,
        provider: MetadataProvider,
        error: CalibreMetadataError | OpenLibraryMetadataError,
    ) -> None:
        super().__init__(f"Could not fetch metadata with {provider.label}: {error}")
        self.provider = provider
        self.error = error


class MetadataFetcher:
    """Dispatches ISBN lookups to the enabled metadata providers.

    Provider configuration is checked when the fetcher is built, so a fetch
    never reaches a provider whose settings are missing.
    """

    def __init__(
        self,
        config: MetadataConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._providers: dict[MetadataProvider, CalibreProvider | OpenLibraryProvider] = {}
        for provider in config.enabled_providers:
            if provider is MetadataProvider.CALIBRE:
                if config.calibre is None:
                    raise ConfigError("Calibre is enabled but [metadata.calibre] is missing")
                self._providers[provider] = CalibreProvider(config.calibre)
            elif provider is MetadataProvider.OPEN_LIBRARY:
                if config.open_library is None:
                    raise ConfigError(
                        "OpenLibrary is enabled but [metadata.open_library] is missing"
                    )
                self._providers[provider] = OpenLibraryProvider(
                    config.open_library, transport=transport
                )

        self._default = config.resolved_default
        if len(self._providers) > 1 and self._default is None:
            raise ConfigError("A default provider is required when several are enabled")

    @property
    def enabled(self) -> bool:
        return bool(self._providers)

    @property
    def providers(self) -> list[MetadataProvider]:
        return list(self._providers)

    @property
    def default_provider(self) -> MetadataProvider | None:
        return self._default

    def select(self, provider: MetadataProvider | None = None) -> MetadataProvider:
        """Resolve the provider to use for a lookup.

        Raises:
            ConfigError: If no provider is enabled, or the requested one is not.
        """
        if not self._providers:
            raise ConfigError("No metadata provider is enabled")
        selected = provider or self._default
        if selected is None or selected not in self._providers:
            raise ConfigError(f"Metadata provider '{selected}' is not enabled")
        return selected

    async def fetch(
        self, isbn: str, provider: MetadataProvider | None = None
    ) -> BookMetadata | None:
        """Fetch metadata for an ISBN from one provider.

        Args:
            isbn: The ISBN, without separators.
            provider: Which provider to ask; defaults to the configured default.

        Returns:
            The provider's record, or None when the provider ran cleanly but
            knows nothing about this ISBN.

        Raises:
            MetadataError: If the provider failed.
            ConfigError: If the requested provider is not enabled.
        """
        selected = self.select(provider)
        logger.debug("Fetching metadata for %s with %s", isbn, selected.label)
        try:
            return await self._providers[selected].fetch_metadata(isbn)
        except (CalibreMetadataError, OpenLibraryMetadataError) as exc:
            raise MetadataError(selected, exc) from exc
