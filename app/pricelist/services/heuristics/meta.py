"""
Light heuristics to guess document metadata the caller left blank.
"""

import logging
import re
from datetime import date, datetime

from dateutil import parser as date_parser

from ...models import Meta

logger = logging.getLogger(__name__)

HEADER_LINES = 50

# Manufacturer/supplier banners are usually an all-caps line near the top
_CAPS_LINE = re.compile(r"^[A-Z0-9 ()&.,/-]{6,}$")
_LETTER = re.compile(r"[A-Z]")
_PRICE_LIST_TITLE = re.compile(r"PRICE\s*LIST", re.IGNORECASE)
_TRAILING_PUNCTUATION = re.compile(r"\s*[.,:;-]+$")

_ISO_DATE = re.compile(
    r"\b(20\d{2})[-/.](0[1-9]|1[0-2])[-/.](0[1-9]|[12]\d|3[01])\b"
)
_DAY_FIRST_DATE = re.compile(
    r"\b(0[1-9]|[12]\d|3[01])[-/.](0[1-9]|1[0-2])[-/.](20\d{2})\b"
)
_MONTH_YEAR = re.compile(
    r"\b((?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*)\.?\s+(20\d{2})\b",
    re.IGNORECASE,
)


def _header(text: str) -> list[str]:
    lines = (line.strip() for line in text.splitlines())
    return [line for line in lines if line][:HEADER_LINES]


def guess_company(lines: list[str]) -> str:
    """Longest all-caps line that is not a "PRICE LIST" title."""
    candidates = [
        line
        for line in lines
        if _CAPS_LINE.match(line)
        and _LETTER.search(line)
        and not _PRICE_LIST_TITLE.search(line)
    ]
    if not candidates:
        return ""
    best = max(candidates, key=len)
    return _TRAILING_PUNCTUATION.sub("", best).strip()


def guess_validity_date(lines: list[str]) -> str:
    """
    First ISO, day-first or "Month YYYY" date, normalised to YYYY-MM-DD.

    Patterns are tried in that order over the whole header; a month-only
    date resolves to the first day of the month.
    """
    top = "\n".join(lines)

    match = _ISO_DATE.search(top)
    if match:
        year, month, day = match.groups()
        try:
            return date(int(year), int(month), int(day)).isoformat()
        except ValueError:
            logger.debug("Ignoring impossible date %s", match.group(0))

    match = _DAY_FIRST_DATE.search(top)
    if match:
        day, month, year = match.groups()
        try:
            return date(int(year), int(month), int(day)).isoformat()
        except ValueError:
            logger.debug("Ignoring impossible date %s", match.group(0))

    match = _MONTH_YEAR.search(top)
    if match:
        month_name, year = match.groups()
        try:
            parsed = date_parser.parse(
                f"{month_name} {year}", default=datetime(int(year), 1, 1)
            )
            return parsed.date().replace(day=1).isoformat()
        except (ValueError, OverflowError):
            logger.debug("Could not parse month name %r", month_name)

    return ""


def guess_meta(text: str) -> Meta:
    """Guess supplier, manufacturer and validity date from the document top."""
    lines = _header(text)
    company = guess_company(lines)
    return Meta(
        supplier=company,
        manufacturer=company,
        validity_date=guess_validity_date(lines),
    )


def merge_meta(meta: Meta, guessed: Meta) -> Meta:
    """Fill blank caller fields from guesses; caller values always win."""
    updates = {
        name: getattr(guessed, name)
        for name in ("supplier", "manufacturer", "validity_date", "file_name")
        if not getattr(meta, name) and getattr(guessed, name)
    }
    if updates:
        logger.info("Filled blank meta fields from document text: %s", sorted(updates))
    return meta.model_copy(update=updates)
