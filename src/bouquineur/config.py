# ABOUTME: Configuration loading and validation for Bouquineur.
# ABOUTME: Reads a TOML file into pydantic models and checks provider blocks once at startup.

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from bouquineur.metadata.provider import MetadataProvider

CONFIG_ENV_VAR = "BOUQUINEUR_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".bouquineur" / "config.toml"
DEFAULT_DB_PATH = Path.home() / ".bouquineur" / "library.db"


class ConfigError(Exception):
    """Raised when the configuration is missing, unreadable, or inconsistent."""


class CalibreConfig(BaseModel):
    """Settings for the local metadata-fetching tool."""

    model_config = ConfigDict(extra="forbid")

    fetcher: Path
    timeout: float | None = None


class OpenLibraryConfig(BaseModel):
    """Settings for the Open Library web service."""

    model_config = ConfigDict(extra="forbid")

    contact: str
    timeout: float | None = None

    @field_validator("contact")
    @classmethod
    def _contact_is_header_safe(cls, value: str) -> str:
        # The contact string ends up in the User-Agent header
        if not value.strip():
            raise ValueError("contact must not be empty")
        if not value.isascii() or not value.isprintable():
            raise ValueError("contact must be printable ASCII")
        return value


class MetadataConfig(BaseModel):
    """Which providers are enabled, the default one, and their settings.

    When ``providers`` is omitted every provider with a configuration block
    is enabled. When it is given, each listed provider must have its block.
    """

    model_config = ConfigDict(extra="forbid")

    providers: list[MetadataProvider] | None = None
    default_provider: MetadataProvider | None = None
    calibre: CalibreConfig | None = None
    open_library: OpenLibraryConfig | None = None

    @model_validator(mode="after")
    def _check_providers(self) -> "MetadataConfig":
        if self.providers is not None:
            for provider in self.providers:
                if self.block_for(provider) is None:
                    raise ValueError(
                        f"provider '{provider}' is enabled but [metadata.{provider}] is missing"
                    )

        enabled = self.enabled_providers
        if self.default_provider is not None and self.default_provider not in enabled:
            raise ValueError(f"default_provider '{self.default_provider}' is not enabled")
        if len(enabled) > 1 and self.default_provider is None:
            raise ValueError("default_provider is required when several providers are enabled")
        return self

    def block_for(self, provider: MetadataProvider) -> CalibreConfig | OpenLibraryConfig | None:
        """Return the configuration block for a provider, or None if absent."""
        if provider is MetadataProvider.CALIBRE:
            return self.calibre
        return self.open_library

    @property
    def enabled_providers(self) -> list[MetadataProvider]:
        if self.providers is not None:
            return list(dict.fromkeys(self.providers))
        return [p for p in MetadataProvider.all() if self.block_for(p) is not None]

    @property
    def resolved_default(self) -> MetadataProvider | None:
        """The provider used when a caller does not pick one."""
        enabled = self.enabled_providers
        if len(enabled) == 1:
            return enabled[0]
        return self.default_provider


class Config(BaseModel):
    """Top-level Bouquineur configuration."""

    model_config = ConfigDict(extra="forbid")

    database: Path = DEFAULT_DB_PATH
    log_level: str = "INFO"
    metadata: MetadataConfig = MetadataConfig()

    @field_validator("database")
    @classmethod
    def _expand_database(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level


def resolve_config_path(path: Path | None = None) -> Path:
    """Pick the configuration file: explicit path, then environment, then default."""
    if path is not None:
        return path
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_PATH


def parse_config(text: str) -> Config:
    """Parse and validate configuration from TOML text.

    Raises:
        ConfigError: If the TOML is malformed or fails validation.
    """
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Could not parse the configuration file: {exc}") from exc

    try:
        return Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def load_config(path: Path | None = None) -> Config:
    """Load and validate the Bouquineur configuration file.

    Args:
        path: Explicit configuration file. Falls back to ``$BOUQUINEUR_CONFIG``
            and then ``~/.bouquineur/config.toml``.

    Raises:
        ConfigError: If no file exists at the resolved path, or it is invalid.
    """
    config_path = resolve_config_path(path).expanduser()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not load the configuration file '{config_path}': {exc}") from exc
    return parse_config(text)
