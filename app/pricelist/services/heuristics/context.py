"""
Sliding context windows for line-by-line price list scanning.

Prices in extracted PDF text rarely share a line with their model code and
description, so the scanner remembers the most recent identifiers and text
fragments and attributes each detected price to them.
"""

import re
from collections import deque

from ...models import Tier
from .money import strip_money

IDENTIFIER_CAPACITY = 6
DESCRIPTION_CAPACITY = 4
DESCRIPTION_SPAN = 2

IDENTIFIER_PATTERN = re.compile(r"[A-Z0-9][A-Z0-9._/-]{2,}", re.IGNORECASE)
_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"\d")
_INNER_SEPARATOR = re.compile(r"\w[._/-]\w")

_T1_KEYWORDS = re.compile(r"\b(?:msrp|list|retail)", re.IGNORECASE)
_T2_KEYWORDS = re.compile(r"\b(?:net|dealer|trade|discount|offer)", re.IGNORECASE)


def _is_identifier(token: str) -> bool:
    """Mixed letters and digits, or an all-caps code with a separator."""
    if len(token) < 3 or not _LETTER.search(token):
        return False
    if _DIGIT.search(token):
        return True
    return token.isupper() and bool(_INNER_SEPARATOR.search(token))


def find_identifiers(line: str) -> list[str]:
    """Return candidate model codes of a line in order of appearance."""
    codes = []
    for match in IDENTIFIER_PATTERN.finditer(line):
        token = match.group(0).rstrip("._/-")
        if _is_identifier(token):
            codes.append(token)
    return codes


def infer_tier(context: str) -> Tier:
    """
    Classify the price column from nearby keywords.

    List/MSRP/retail wording means T1; net/dealer/trade/discount/offer
    means T2. Anything else defaults to T2.
    """
    if _T1_KEYWORDS.search(context):
        return Tier.T1
    if _T2_KEYWORDS.search(context):
        return Tier.T2
    return Tier.T2


class ContextWindow:
    """
    Bounded recent history of identifiers and description fragments.

    Lives for a single extraction call and is never shared.
    """

    def __init__(
        self,
        identifier_capacity: int = IDENTIFIER_CAPACITY,
        description_capacity: int = DESCRIPTION_CAPACITY,
    ):
        self.identifiers: deque[str] = deque(maxlen=identifier_capacity)
        self.descriptions: deque[str] = deque(maxlen=description_capacity)

    def observe(self, line: str) -> None:
        """Update both windows from one content line."""
        codes = find_identifiers(line)
        if codes:
            # A line with identifiers replaces the window outright
            self.identifiers.clear()
            self.identifiers.extend(codes)

        fragment = strip_money(line)
        if fragment:
            self.descriptions.append(fragment)

    @property
    def model_code(self) -> str | None:
        """Most recently seen identifier, if any."""
        return self.identifiers[-1] if self.identifiers else None

    @property
    def description(self) -> str:
        """The last few description fragments joined by spaces."""
        return " ".join(list(self.descriptions)[-DESCRIPTION_SPAN:])

    @property
    def tier(self) -> Tier:
        return infer_tier(self.description)
