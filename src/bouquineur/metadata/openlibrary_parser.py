# ABOUTME: Pydantic models and parsing helpers for Open Library API JSON responses.
# ABOUTME: Validates edition/work/author documents and normalizes them into BookMetadata.

import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from bouquineur.metadata.dates import parse_publish_date
from bouquineur.metadata.http import OpenLibraryMetadataError
from bouquineur.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

AUTHOR_ROLE = "/type/author_role"
_LANGUAGE_PREFIX = "/languages/"


class JsonError(OpenLibraryMetadataError):
    """Raised when an Open Library response does not have the expected shape.

    ``path`` locates the offending field, e.g. ``works.0.key``.
    """

    def __init__(self, resource: str, path: str, message: str) -> None:
        super().__init__(f"Could not parse {resource} JSON response at {path}: {message}")
        self.resource = resource
        self.path = path
        self.message = message


class Text(BaseModel):
    value: str


class Reference(BaseModel):
    key: str


class AuthorReference(BaseModel):
    author: Reference
    type: Reference | None = None

    @property
    def is_author_role(self) -> bool:
        return self.type is not None and self.type.key == AUTHOR_ROLE


class Identifiers(BaseModel):
    """External identifiers listed on an edition, each a list of ids."""

    amazon: list[str] = []
    google: list[str] = []
    goodreads: list[str] = []
    librarything: list[str] = []


class Edition(BaseModel):
    publish_date: str | None = None
    publishers: list[str] = []
    languages: list[Reference] = []
    number_of_pages: int | None = None
    covers: list[int] = []
    works: list[Reference] = []
    identifiers: Identifiers = Identifiers()


class Work(BaseModel):
    # Open Library stores descriptions either as a bare string or as
    # {"type": "/type/text", "value": "..."}
    description: str | Text | None = None
    subjects: list[str] = []
    authors: list[AuthorReference] = []
    title: str | None = None

    @property
    def description_text(self) -> str | None:
        if isinstance(self.description, Text):
            return self.description.value
        return self.description


class Author(BaseModel):
    name: str | None = None


ModelT = TypeVar("ModelT", bound=BaseModel)


def format_error_path(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as a dotted path, ``.`` for the document root."""
    if not loc:
        return "."
    return ".".join(str(part) for part in loc)


def parse_resource(model: type[ModelT], resource: str, text: str) -> ModelT:
    """Validate a JSON document against one of the response models.

    Raises:
        JsonError: Naming the resource and the path of the first invalid field.
    """
    try:
        return model.model_validate_json(text)
    except ValidationError as exc:
        first = exc.errors()[0]
        error = JsonError(resource, format_error_path(first["loc"]), first["msg"])
        logger.error("Could not parse %s: %s", resource, error)
        raise error from exc


def parse_edition(text: str) -> Edition:
    return parse_resource(Edition, "edition", text)


def parse_work(text: str) -> Work:
    return parse_resource(Work, "work", text)


def parse_author(text: str) -> Author:
    return parse_resource(Author, "author", text)


def parse_language(languages: list[Reference]) -> str | None:
    """Extract the short language code from the first language reference."""
    if not languages:
        return None
    key = languages[0].key
    if not key.startswith(_LANGUAGE_PREFIX):
        return None
    return key[len(_LANGUAGE_PREFIX) :] or None


def _first(values: list[str]) -> str | None:
    return values[0] if values else None


def build_metadata(
    isbn: str,
    edition: Edition,
    work: Work,
    authors: list[str],
    cover_art_b64: str | None = None,
) -> BookMetadata:
    """Combine parsed Open Library resources into one BookMetadata record."""
    return BookMetadata(
        isbn=isbn,
        title=work.title,
        authors=authors,
        tags=list(work.subjects),
        summary=work.description_text,
        published=parse_publish_date(edition.publish_date),
        publisher=_first(edition.publishers),
        language=parse_language(edition.languages),
        google_id=_first(edition.identifiers.google),
        amazon_id=_first(edition.identifiers.amazon),
        librarything_id=_first(edition.identifiers.librarything),
        goodreads_id=_first(edition.identifiers.goodreads),
        page_count=edition.number_of_pages,
        cover_art_b64=cover_art_b64,
    )
