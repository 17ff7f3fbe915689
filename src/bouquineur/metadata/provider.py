# ABOUTME: The closed set of metadata providers Bouquineur can dispatch to.
# ABOUTME: Each member has a display label and a stable serialized token.

from enum import Enum


class MetadataProvider(str, Enum):
    """A source of book metadata.

    The member value is the serialized token used in configuration files
    and on the command line.
    """

    CALIBRE = "calibre"
    OPEN_LIBRARY = "open_library"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def serialized(self) -> str:
        return self.value

    @classmethod
    def all(cls) -> list["MetadataProvider"]:
        return list(cls)

    @classmethod
    def from_serialized(cls, token: str) -> "MetadataProvider":
        """Look up a provider by its serialized token.

        Raises:
            ValueError: If no provider has that token.
        """
        try:
            return cls(token)
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            msg = f"Unknown metadata provider {token!r} (expected one of: {valid})"
            raise ValueError(msg) from None

    def __str__(self) -> str:
        return self.value


_LABELS = {
    MetadataProvider.CALIBRE: "Calibre",
    MetadataProvider.OPEN_LIBRARY: "OpenLibrary",
}
