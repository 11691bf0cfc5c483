"""
Money and currency parsing for price list text.

Handles:
- Monetary token detection (symbol-prefixed or bare numbers)
- Thousands/decimal separator ambiguity ("4.377,00" vs "4,377.00")
- Document currency inference from symbols and ISO codes
"""

import logging
import re
from decimal import Decimal, InvalidOperation

from price_parser import Price

from ...models import Currency, to_cents

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

# Optional currency symbol, then either a space-grouped amount with cents
# ("1 250,00") or an integer part with optional thousands groups and an
# optional 1-2 digit fraction. Not glued to words, percentages or longer
# numbers on either side.
MONEY_PATTERN = re.compile(
    r"(?<![\w.,-])(?:[€$£]\s?)?"
    r"(?:\d{1,3}(?:[ \u00a0]\d{3})+[.,]\d{2}|\d+(?:[.,]\d{3})*(?:[.,]\d{1,2})?)"
    r"(?![\w%]|[.,]\d)"
)

_NON_NUMERIC = re.compile(r"[^\d.,-]")
_YEAR = re.compile(r"(?:19|20)\d{2}")
# "Rev. 1.0", "v. 2", "Version 3"; a bare "V" is usually volts
_VERSION_PREFIX = re.compile(r"\b(?:rev\.?|ver\.?|version|v\.)\s*$", re.IGNORECASE)

# Symbol match always beats an ISO code match
_CURRENCY_SYMBOLS = (
    ("€", Currency.EUR),
    ("$", Currency.USD),
    ("£", Currency.GBP),
)
_CURRENCY_CODES = re.compile(r"\b(EUR|USD|GBP)\b", re.IGNORECASE)


def _parse_plain_number(number: str) -> Decimal | None:
    """
    Resolve separators for amounts price-parser cannot read.

    When both "," and "." occur, the later one is the decimal point. A lone
    separator kind is a thousands separator if it repeats or is followed by
    exactly three digits, and the decimal point otherwise.
    """
    if "," in number and "." in number:
        if number.rfind(",") > number.rfind("."):
            number = number.replace(".", "").replace(",", ".")
        else:
            number = number.replace(",", "")
    elif "," in number or "." in number:
        separator = "," if "," in number else "."
        head, _, tail = number.rpartition(separator)
        if number.count(separator) > 1 or len(tail) == 3:
            number = number.replace(separator, "")
        else:
            number = f"{head}.{tail}"

    try:
        return Decimal(number)
    except InvalidOperation:
        return None


def parse_money(token: str) -> Decimal:
    """
    Parse a monetary token to a Decimal with cent precision.

    Uses price-parser, which handles symbols and both "4.377,00" and
    "4,377.00" style separators. A leading minus is kept. Never raises:
    empty or unparseable input yields 0.00.
    """
    if not token:
        return ZERO

    compact = _NON_NUMERIC.sub("", token)
    negative = compact.startswith("-")

    amount = Price.fromstring(token).amount
    if amount is None:
        # Fallback for tokens price-parser does not recognise
        amount = _parse_plain_number(compact.replace("-", ""))
    if amount is None:
        logger.debug("Unparseable money token: %r", token)
        return ZERO

    value = to_cents(abs(amount))
    return -value if negative else value


def find_price_tokens(line: str) -> list[str]:
    """
    Return the monetary tokens of a line in order of appearance.

    Bare four-digit years, fragments of slash markers such as "3/12" or
    "15/01/2024" and version numbers ("Rev. 1.0") are not prices and are
    skipped.
    """
    tokens = []
    for match in MONEY_PATTERN.finditer(line):
        token = match.group(0)
        start, end = match.span()
        if line[start - 1 : start] == "/" or line[end : end + 1] == "/":
            continue
        if _YEAR.fullmatch(token):
            continue
        if _VERSION_PREFIX.search(line[:start]):
            continue
        tokens.append(token)
    return tokens


def strip_money(line: str) -> str:
    """Remove every monetary token from a line and collapse whitespace."""
    return " ".join(MONEY_PATTERN.sub(" ", line).split())


def currency_from_text(text: str) -> Currency:
    """
    Infer the document currency.

    Scans for €, $ and £ first, then for EUR/USD/GBP codes. Defaults to EUR.
    """
    for symbol, currency in _CURRENCY_SYMBOLS:
        if symbol in text:
            return currency

    match = _CURRENCY_CODES.search(text)
    if match:
        return Currency(match.group(1).upper())

    return Currency.EUR
