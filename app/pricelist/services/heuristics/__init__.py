"""
Heuristic price list mining package.

This package turns raw document text into PriceRow records without any
learned model, split into:
- money: monetary token detection, parsing and currency inference
- context: sliding identifier/description windows and tier inference
- meta: supplier/manufacturer/validity date guessing
- extraction: the line scanner, row synthesis and deduplication
"""

from .context import ContextWindow, find_identifiers, infer_tier
from .exceptions import EmptyDocumentError
from .extraction import deduplicate, extract, is_boilerplate, make_row
from .meta import guess_meta, merge_meta
from .money import currency_from_text, find_price_tokens, parse_money

__all__ = [
    "ContextWindow",
    "EmptyDocumentError",
    "currency_from_text",
    "deduplicate",
    "extract",
    "find_identifiers",
    "find_price_tokens",
    "guess_meta",
    "infer_tier",
    "is_boilerplate",
    "make_row",
    "merge_meta",
    "parse_money",
]
