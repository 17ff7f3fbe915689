# ABOUTME: Publish-date normalization for free-text dates from metadata services.
# ABOUTME: Tries an ordered chain of parsers and keeps the first calendar date that works.

import logging
import re
from collections.abc import Callable
from datetime import date, datetime

logger = logging.getLogger(__name__)

_YEAR_RE = re.compile(r"\d{4}")

# Written-out dates as Open Library editions carry them. Each format needs a
# day, a month and a year so partial dates fall through to the next parser.
_HUMAN_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%m/%d/%Y",
)
_WHITESPACE_RE = re.compile(r"\s+")


def parse_iso_datetime(text: str) -> date | None:
    """Parse an ISO 8601 / RFC 3339 date or date-time, e.g. ``2020-08-15T00:00:00Z``."""
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_human_date(text: str) -> date | None:
    """Parse a written-out date such as ``August 15, 2020`` or ``15 Aug 2020``."""
    text = _WHITESPACE_RE.sub(" ", text)
    for fmt in _HUMAN_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_bare_year(text: str) -> date | None:
    """Interpret a bare four-digit year as January 1 of that year."""
    if not _YEAR_RE.fullmatch(text):
        return None
    year = int(text)
    if year < 1:
        return None
    return date(year, 1, 1)


DATE_PARSERS: tuple[Callable[[str], date | None], ...] = (
    parse_iso_datetime,
    parse_human_date,
    parse_bare_year,
)


def parse_publish_date(text: str | None) -> date | None:
    """Normalize a free-text publish date to a calendar date.

    Each parser in DATE_PARSERS is tried in order; the first one that yields
    a date wins. Returns None when none of them understands the text, which
    is not an error: the rest of the record is still usable.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None

    for parser in DATE_PARSERS:
        result = parser(text)
        if result is not None:
            return result

    logger.debug("Could not interpret publish date %r", text)
    return None
