# ABOUTME: Parses OPF package metadata (as printed by Calibre's fetcher) into BookMetadata.
# ABOUTME: Uses lxml with entity resolution and network access disabled.

from collections.abc import Iterator
from datetime import date, datetime

from lxml import etree

from bouquineur.metadata.types import BookMetadata, encode_cover

OPF_NS = "http://www.idpf.org/2007/opf"


class OpfParseError(Exception):
    """Raised when an OPF document is not well-formed XML."""


class OpfDateError(Exception):
    """Raised when an OPF date element is not an RFC 3339 date-time."""


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True)


def _localname(element: etree._Element) -> str:
    return etree.QName(element).localname


class _OpfMetadata:
    """Lookup helpers over the children of an OPF <metadata> element.

    Elements are matched on local name only, so ``dc:title`` and a bare
    ``title`` are treated alike.
    """

    def __init__(self, element: etree._Element) -> None:
        self._element = element

    def elements(self, name: str) -> Iterator[etree._Element]:
        for child in self._element.iter(etree.Element):
            if _localname(child) == name:
                yield child

    def with_opf_attr(self, name: str, attr: str, value: str) -> Iterator[etree._Element]:
        key = f"{{{OPF_NS}}}{attr}"
        for child in self.elements(name):
            if child.get(key) == value:
                yield child

    def first_text(self, name: str) -> str | None:
        for child in self.elements(name):
            return child.text
        return None

    def first_text_with_opf_attr(self, name: str, attr: str, value: str) -> str | None:
        for child in self.with_opf_attr(name, attr, value):
            return child.text
        return None


def _texts(elements: Iterator[etree._Element]) -> list[str]:
    return [child.text for child in elements if child.text is not None]


def _find_metadata(root: etree._Element) -> etree._Element | None:
    for element in root.iter(etree.Element):
        if _localname(element) == "metadata":
            return element
    return None


def _parse_rfc3339_date(text: str | None) -> date | None:
    if text is None:
        return None
    try:
        return datetime.fromisoformat(text.strip()).date()
    except ValueError as exc:
        raise OpfDateError(f"Invalid date in OPF document: {text!r}") from exc


def parse_opf(document: str, cover_art: bytes = b"") -> BookMetadata | None:
    """Parse an OPF document into BookMetadata.

    Args:
        document: The OPF XML text.
        cover_art: Cover image bytes written by the fetcher, possibly empty.

    Returns:
        The parsed metadata, or None if the document has no <metadata> element.

    Raises:
        OpfParseError: If the document is not well-formed XML.
        OpfDateError: If the <date> element is not an RFC 3339 date-time.
    """
    try:
        root = etree.fromstring(document.encode("utf-8"), parser=_make_parser())
    except etree.XMLSyntaxError as exc:
        raise OpfParseError(f"Response is not a valid xml document: {exc}") from exc

    element = _find_metadata(root)
    if element is None:
        return None

    opf = _OpfMetadata(element)
    return BookMetadata(
        title=opf.first_text("title"),
        isbn=opf.first_text_with_opf_attr("identifier", "scheme", "ISBN"),
        authors=_texts(opf.with_opf_attr("creator", "role", "aut")),
        tags=_texts(opf.elements("subject")),
        summary=opf.first_text("description"),
        published=_parse_rfc3339_date(opf.first_text("date")),
        publisher=opf.first_text("publisher"),
        language=opf.first_text("language"),
        google_id=opf.first_text_with_opf_attr("identifier", "scheme", "GOOGLE"),
        amazon_id=opf.first_text_with_opf_attr("identifier", "scheme", "AMAZON"),
        cover_art_b64=encode_cover(cover_art),
    )
