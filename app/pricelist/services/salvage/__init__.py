"""
JSON salvage package for AI-assisted extraction.

Provides:
- sanitizer: ordered textual repairs of near-JSON model output
- pipeline: the staged parse fallbacks and the SalvageResult types
- scanner: the single-pass string/bracket scanning state
"""

from .pipeline import (
    NON_JSON_ERROR,
    SalvageFail,
    SalvageOk,
    SalvageResult,
    SalvageStage,
    iter_top_level_arrays,
    salvage,
)
from .sanitizer import sanitize

__all__ = [
    "NON_JSON_ERROR",
    "SalvageFail",
    "SalvageOk",
    "SalvageResult",
    "SalvageStage",
    "iter_top_level_arrays",
    "salvage",
    "sanitize",
]
