"""
Textual repairs that turn near-JSON model output into parseable JSON.

The rewrites run once, in a fixed order. Sanitizing already sanitized text
leaves it unchanged.
"""

import re
from collections.abc import Callable

from .scanner import (
    CURLY_DOUBLE,
    CURLY_SINGLE,
    TYPOGRAPHIC_QUOTES,
    ScanState,
    split_strings,
    track_string,
)

# -----------------------------------------------------------------------------
# Patterns
# -----------------------------------------------------------------------------

_LEAD_IN = re.compile(
    r"^(?:(?:sure|ok(?:ay)?|certainly)[!,.]?\s*)?"
    r"(?:here(?:['\u2019]s|\s+is|\s+are)\b[^\n:{\[]*:|json\b:?)\s*",
    re.IGNORECASE,
)
_OPEN_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?")
_CLOSE_FENCE = re.compile(r"\n?[ \t]*```\s*$")

_QUOTE_TABLE = str.maketrans(
    {
        **{quote: '"' for quote in CURLY_DOUBLE},
        **{quote: "'" for quote in CURLY_SINGLE},
    }
)
_SPACE_TABLE = str.maketrans(
    {
        "\u00a0": " ",
        **{chr(code): " " for code in range(0x2000, 0x200B)},
        "\u202f": " ",
        "\u205f": " ",
        "\u3000": " ",
        "\ufeff": " ",
        "\u2028": "\n",
        "\u2029": "\n",
    }
)

_TRAILING_COMMAS = re.compile(r"(?:,\s*)+([}\]])")
_NON_JSON_LITERALS = re.compile(r"-?\bInfinity\b|\b(?:True|False|None|NaN)\b")
_LITERAL_MAP = {"True": "true", "False": "false", "None": "null", "NaN": "null"}
_BARE_ITEMS = re.compile(r"^[\"']?items[\"']?\s*:\s*\[")
_BARE_KEY = re.compile(r"(?:(?<=[{,\s])|^)([A-Za-z_$][\w$-]*)\s*:")

_CONTROL_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def _outside_strings(text: str, rewrite: Callable[[str], str]) -> str:
    """Apply a rewrite to every chunk of text that is not a string literal."""
    return "".join(
        chunk if is_string else rewrite(chunk)
        for is_string, chunk in split_strings(text)
    )


# -----------------------------------------------------------------------------
# Rewrites, in pipeline order
# -----------------------------------------------------------------------------


def strip_wrappers(text: str) -> str:
    """Drop a BOM, a conversational lead-in and code fences."""
    text = text.lstrip("\ufeff").strip()
    text = _LEAD_IN.sub("", text, count=1)
    text = _OPEN_FENCE.sub("", text, count=1)
    text = _CLOSE_FENCE.sub("", text, count=1)
    return text.strip()


def strip_comments(text: str) -> str:
    """Remove // line comments and /* */ block comments outside strings."""
    state = ScanState()
    out: list[str] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if not state.inside_string and ch == "/" and i + 1 < n:
            following = text[i + 1]
            if following == "/":
                end = text.find("\n", i)
                i = n if end == -1 else end
                continue
            if following == "*":
                end = text.find("*/", i + 2)
                i = n if end == -1 else end + 2
                continue
        track_string(state, ch, TYPOGRAPHIC_QUOTES)
        out.append(ch)
        i += 1
    return "".join(out).strip()


def normalize_unicode(text: str) -> str:
    """
    Curly string delimiters to straight quotes, exotic spaces to ASCII space.

    Only quotes that open or close a string are straightened. A curly quote
    inside an ASCII-quoted string is content and stays as it is.
    """
    state = ScanState()
    out: list[str] = []
    for ch in text:
        was_inside = state.inside_string
        track_string(state, ch, TYPOGRAPHIC_QUOTES)
        if was_inside != state.inside_string:
            ch = ch.translate(_QUOTE_TABLE)
        out.append(ch)
    return "".join(out).translate(_SPACE_TABLE).strip()


def remove_trailing_commas(text: str) -> str:
    return _outside_strings(text, lambda chunk: _TRAILING_COMMAS.sub(r"\1", chunk))


def translate_literals(text: str) -> str:
    """Python and JavaScript literals to their JSON equivalents."""

    def replace(match: re.Match) -> str:
        return _LITERAL_MAP.get(match.group(0), "null")

    return _outside_strings(text, lambda chunk: _NON_JSON_LITERALS.sub(replace, chunk))


def wrap_bare_items(text: str) -> str:
    """Turn an `items: [...]` fragment into an object."""
    if _BARE_ITEMS.match(text):
        return "{" + text + "}"
    return text


def quote_keys(text: str) -> str:
    return _outside_strings(text, lambda chunk: _BARE_KEY.sub(r'"\1":', chunk))


def _requote(body: str) -> str:
    out: list[str] = []
    escape = False
    for ch in body:
        if escape:
            out.append("'" if ch == "'" else "\\" + ch)
            escape = False
        elif ch == "\\":
            escape = True
        elif ch == '"':
            out.append('\\"')
        else:
            out.append(ch)
    return "".join(out)


def _closing_quote(text: str, start: int) -> int:
    escape = False
    for i in range(start, len(text)):
        ch = text[i]
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif ch == "'":
            return i
    return -1


def convert_single_quotes(text: str) -> str:
    """Rewrite 'single quoted' literals as "double quoted" ones."""
    state = ScanState()
    out: list[str] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if not state.inside_string and ch == "'":
            end = _closing_quote(text, i + 1)
            if end == -1:
                out.append(text[i:])
                break
            out.append('"' + _requote(text[i + 1 : end]) + '"')
            i = end + 1
            continue
        track_string(state, ch)
        out.append(ch)
        i += 1
    return "".join(out)


def escape_control_characters(text: str) -> str:
    """Escape raw control characters that sit inside double-quoted strings."""
    state = ScanState()
    out: list[str] = []
    for ch in text:
        if state.inside_string and ord(ch) < 0x20:
            out.append(_CONTROL_ESCAPES.get(ch, f"\\u{ord(ch):04x}"))
        else:
            out.append(ch)
        track_string(state, ch)
    return "".join(out)


SANITIZE_STEPS: tuple[Callable[[str], str], ...] = (
    strip_wrappers,
    strip_comments,
    normalize_unicode,
    remove_trailing_commas,
    translate_literals,
    wrap_bare_items,
    quote_keys,
    convert_single_quotes,
    # Must stay last: single-quote conversion creates new string spans
    escape_control_characters,
)


def sanitize(raw: str) -> str:
    """Apply every repair step once, in order."""
    text = raw
    for step in SANITIZE_STEPS:
        text = step(text)
    return text
