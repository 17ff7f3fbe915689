# ABOUTME: Shared Click options and context for Bouquineur CLI commands.
# ABOUTME: Provides the lazily-loaded configuration plus --user, --provider, and --db flags.

from dataclasses import dataclass, field
from pathlib import Path

import click

from bouquineur.config import Config, load_config
from bouquineur.metadata.provider import MetadataProvider

USER_ENV_VAR = "BOUQUINEUR_USER"


@dataclass
class AppContext:
    """Per-invocation state shared by every command through ``ctx.obj``."""

    config_path: Path | None = None
    _config: Config | None = field(default=None, repr=False)

    @property
    def config(self) -> Config:
        """The validated configuration, loaded on first use.

        Raises:
            ConfigError: If the configuration is missing or invalid.
        """
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config


pass_app = click.make_pass_decorator(AppContext, ensure=True)


def _to_provider(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> MetadataProvider | None:
    return MetadataProvider.from_serialized(value) if value is not None else None


provider_option = click.option(
    "--provider",
    type=click.Choice([p.serialized() for p in MetadataProvider.all()]),
    default=None,
    callback=_to_provider,
    help="Metadata provider to use (default: the configured default).",
)

user_option = click.option(
    "--user",
    "user_name",
    envvar=USER_ENV_VAR,
    required=True,
    help=f"Name of the library owner (or set {USER_ENV_VAR}).",
)

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the catalog database (default: from the configuration).",
)
