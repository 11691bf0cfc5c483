"""
Single-pass character scanning state shared by the salvage modules.

Both the control-character escaper and the bracket-aware array finder walk
the text once, carrying a small ScanState through the loop instead of
recursing.
"""

from dataclasses import dataclass

DOUBLE_QUOTE = '"'
ANY_QUOTE = "\"'"

# Typographic quotes a model may emit in place of ASCII ones
CURLY_DOUBLE = "\u201c\u201d\u201e\u201f\u2033"
CURLY_SINGLE = "\u2018\u2019\u201a\u201b\u2032"
TYPOGRAPHIC_QUOTES = ANY_QUOTE + CURLY_DOUBLE + CURLY_SINGLE


@dataclass
class ScanState:
    """Mutable cursor state for one scan."""

    inside_string: bool = False
    previous_was_escape: bool = False
    bracket_depth: int = 0
    quote_char: str = DOUBLE_QUOTE


def closing_quotes(opener: str) -> str:
    """
    Characters that end a string opened by `opener`.

    An ASCII quote only closes its own kind. A curly opener is closed by any
    quote of the same family, since models rarely pair “ and ” consistently.
    """
    if opener in CURLY_DOUBLE:
        return DOUBLE_QUOTE + CURLY_DOUBLE
    if opener in CURLY_SINGLE:
        return "'" + CURLY_SINGLE
    return opener


def track_string(state: ScanState, ch: str, delimiters: str = DOUBLE_QUOTE) -> None:
    """Advance string/escape tracking over one character."""
    if state.inside_string:
        if state.previous_was_escape:
            state.previous_was_escape = False
        elif ch == "\\":
            state.previous_was_escape = True
        elif ch in closing_quotes(state.quote_char):
            state.inside_string = False
    elif ch in delimiters:
        state.inside_string = True
        state.quote_char = ch


def split_strings(text: str, delimiters: str = ANY_QUOTE) -> list[tuple[bool, str]]:
    """
    Split text into (is_string, chunk) segments.

    String chunks include their quotes. An unterminated string runs to the
    end of the text.
    """
    state = ScanState()
    segments: list[tuple[bool, str]] = []
    start = 0
    for i, ch in enumerate(text):
        was_inside = state.inside_string
        track_string(state, ch, delimiters)
        if not was_inside and state.inside_string:
            if i > start:
                segments.append((False, text[start:i]))
            start = i
        elif was_inside and not state.inside_string:
            segments.append((True, text[start : i + 1]))
            start = i + 1
    if start < len(text):
        segments.append((state.inside_string, text[start:]))
    return segments
