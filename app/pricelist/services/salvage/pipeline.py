"""
Multi-stage JSON salvage for raw generative model responses.

The response is sanitized once, then parsed with progressively looser
strategies until one succeeds:

1. direct        - the whole sanitized text
2. object-slice  - first "{" to last "}"
3. array-slice   - first "[" to last "]"
4. items-array   - first complete top-level array holding row fields,
                   wrapped as {"items": [...]}

The outcome is always a SalvageResult; this module never raises.
"""

import json
import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .sanitizer import sanitize
from .scanner import ScanState, track_string

logger = logging.getLogger(__name__)

NON_JSON_ERROR = "Model returned non-JSON."
DEFAULT_PREFIX_CHARS = 2000

ROW_FIELD_MARKER = re.compile(r'"(?:ModelCode|ModelDescription)"\s*:')


class SalvageStage(str, Enum):
    """Ordered parse attempts of the salvage pipeline."""

    DIRECT = "direct"
    OBJECT_SLICE = "object-slice"
    ARRAY_SLICE = "array-slice"
    ITEMS_ARRAY = "items-array"


@dataclass(frozen=True)
class SalvageOk:
    """A parsed JSON value and the stage that produced it."""

    value: Any
    stage: SalvageStage

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SalvageFail:
    """Everything a caller needs to report an unrepairable response."""

    cleaned_text: str
    stages_tried: tuple[SalvageStage, ...]
    final_stage: SalvageStage

    @property
    def ok(self) -> bool:
        return False

    def to_diagnostic(
        self, raw: str, prefix_chars: int = DEFAULT_PREFIX_CHARS
    ) -> dict[str, Any]:
        """
        Build the error payload returned to API clients.

        Args:
            raw: The unprocessed model response.
            prefix_chars: How many characters of raw/cleaned text to include.

        Returns:
            {"error", "detail", "debug": {"cleanedPrefix", "stagesTried", "finalStage"}}
        """
        return {
            "error": NON_JSON_ERROR,
            "detail": raw[:prefix_chars],
            "debug": {
                "cleanedPrefix": self.cleaned_text[:prefix_chars],
                "stagesTried": [stage.value for stage in self.stages_tried],
                "finalStage": self.final_stage.value,
            },
        }


SalvageResult = SalvageOk | SalvageFail


# =============================================================================
# Stages
# =============================================================================


def _parse_direct(text: str) -> Any:
    return json.loads(text)


def _parse_slice(text: str, opener: str, closer: str) -> Any:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        raise ValueError(f"No {opener}...{closer} span in text")
    return json.loads(text[start : end + 1])


def iter_top_level_arrays(text: str) -> Iterator[str]:
    """
    Yield every outermost [...] span, ignoring brackets inside strings.

    Arrays nested in other arrays are part of their parent's span; arrays
    inside objects still count as outermost.
    """
    state = ScanState()
    start = -1
    for i, ch in enumerate(text):
        was_inside = state.inside_string
        track_string(state, ch)
        if was_inside or state.inside_string:
            continue
        if ch == "[":
            if state.bracket_depth == 0:
                start = i
            state.bracket_depth += 1
        elif ch == "]" and state.bracket_depth > 0:
            state.bracket_depth -= 1
            if state.bracket_depth == 0:
                yield text[start : i + 1]


def _parse_items_array(text: str) -> Any:
    for candidate in iter_top_level_arrays(text):
        if not ROW_FIELD_MARKER.search(candidate):
            continue
        try:
            value = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(value, list):
            return {"items": value}
    raise ValueError("No parseable array of price rows")


_STAGES: tuple[tuple[SalvageStage, Callable[[str], Any]], ...] = (
    (SalvageStage.DIRECT, _parse_direct),
    (SalvageStage.OBJECT_SLICE, lambda text: _parse_slice(text, "{", "}")),
    (SalvageStage.ARRAY_SLICE, lambda text: _parse_slice(text, "[", "]")),
    (SalvageStage.ITEMS_ARRAY, _parse_items_array),
)


# =============================================================================
# Main Salvage Function
# =============================================================================


def salvage(raw: str) -> SalvageResult:
    """
    Repair and parse a raw model response.

    Args:
        raw: Text returned by the generative model, possibly fenced,
            commented or otherwise not quite JSON.

    Returns:
        SalvageOk with the parsed value, or SalvageFail with the sanitized
        text and the stages attempted.
    """
    cleaned = sanitize(raw or "")
    tried: list[SalvageStage] = []

    for stage, parse in _STAGES:
        tried.append(stage)
        try:
            value = parse(cleaned)
        except (ValueError, RecursionError) as e:
            logger.debug("Salvage stage %s failed: %s", stage.value, e)
            continue
        logger.debug("Salvaged model output via stage %s", stage.value)
        return SalvageOk(value=value, stage=stage)

    logger.warning(
        "Could not salvage model output after %d stages (%d chars cleaned)",
        len(tried),
        len(cleaned),
    )
    return SalvageFail(
        cleaned_text=cleaned,
        stages_tried=tuple(tried),
        final_stage=tried[-1],
    )
