"""
Heuristic price row extraction from plain document text.

No learned model is involved: the text is scanned line by line, each
detected price is attributed to the most recent model code and description
seen by the context window, and the resulting rows are deduplicated.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from decimal import Decimal

from ...models import Currency, Meta, PriceRow, Tier
from .context import ContextWindow
from .exceptions import EmptyDocumentError
from .meta import guess_meta, merge_meta
from .money import currency_from_text, find_price_tokens, parse_money

logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "Price Item"
DEDUP_DESCRIPTION_CHARS = 80

BOILERPLATE_PATTERNS = (
    # "Page 3", "Page 3 of 12", "Pag. 3/12"
    re.compile(r"^(?:page|pag\.?|seite)\s*\d+(?:\s*(?:of|di|von|/)\s*\d+)?$", re.IGNORECASE),
    # "3/12", "3 / 12"
    re.compile(r"^\d+\s*/\s*\d+$"),
    # "- 3 -"
    re.compile(r"^[-–]\s*\d+\s*[-–]$"),
    re.compile(
        r"\b(?:terms|validity|copyright|all rights reserved)\b", re.IGNORECASE
    ),
    re.compile(r"[©®]\s*\d{4}"),
)


def is_boilerplate(line: str) -> bool:
    """Footers, page markers and terms/validity/copyright notices."""
    return any(pattern.search(line) for pattern in BOILERPLATE_PATTERNS)


def iter_content_lines(text: str) -> Iterator[str]:
    """Yield trimmed, non-blank, non-boilerplate lines in document order."""
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line and not is_boilerplate(line):
            yield line


def make_row(
    meta: Meta,
    currency: Currency,
    model_code: str,
    description: str,
    tier: Tier,
    price: Decimal,
) -> PriceRow:
    """Build a row with the price written to both columns of its tier."""
    description = description.strip() or model_code
    t1 = price if tier == Tier.T1 else Decimal("0")
    t2 = price if tier == Tier.T2 else Decimal("0")
    return PriceRow(
        supplier=meta.supplier,
        manufacturer=meta.manufacturer,
        model_code=model_code,
        model_description=description,
        t1_list=t1,
        t1_cost=t1,
        t2_list=t2,
        t2_cost=t2,
        iso_currency=currency,
        validity_date=meta.validity_date,
        tier=tier,
        file_name=meta.file_name,
    )


def _dedup_key(row: PriceRow) -> tuple:
    description = " ".join(row.model_description.split()).lower()
    return (
        row.model_code.strip(),
        description[:DEDUP_DESCRIPTION_CHARS],
        row.tier,
        row.price,
        row.iso_currency,
    )


def deduplicate(rows: Iterable[PriceRow]) -> list[PriceRow]:
    """Keep the first row per composite key, preserving order."""
    seen: set[tuple] = set()
    unique = []
    for row in rows:
        key = _dedup_key(row)
        if key in seen:
            continue
        seen.add(key)
        unique.append(row)
    return unique


def extract(text: str, meta: Meta | None = None, file_name: str = "") -> list[PriceRow]:
    """
    Extract priced line items from document text.

    Args:
        text: Plain text decoded from the source document.
        meta: Optional caller metadata; blank fields are guessed from the
            top of the document.
        file_name: Source file name, stamped on every row.

    Returns:
        Deduplicated rows in the order their prices appear in the text.

    Raises:
        EmptyDocumentError: If the text has zero length, which means the
            upstream decoder produced nothing.
    """
    if not text:
        raise EmptyDocumentError("Document text is empty")

    meta = meta or Meta()
    if file_name:
        meta = meta.model_copy(update={"file_name": file_name})
    if not (meta.supplier and meta.manufacturer and meta.validity_date):
        meta = merge_meta(meta, guess_meta(text))

    currency = currency_from_text(text)
    context = ContextWindow()
    rows: list[PriceRow] = []
    line_count = 0

    for line in iter_content_lines(text):
        line_count += 1
        context.observe(line)

        for token in find_price_tokens(line):
            price = parse_money(token)
            if price == 0:
                # Padding such as "0,00" is not a real line item
                continue
            model_code = context.model_code or f"ITEM_{len(rows) + 1}"
            description = context.description or FALLBACK_DESCRIPTION
            rows.append(
                make_row(meta, currency, model_code, description, context.tier, price)
            )

    unique = deduplicate(rows)
    logger.info(
        "Heuristic extraction: %d content lines, %d rows (%d duplicates dropped), currency=%s",
        line_count,
        len(unique),
        len(rows) - len(unique),
        currency.value,
    )
    return unique
