"""
Response schema for constraining a generative extraction call.

Built from the PriceRow model so the wire names and field descriptions
cannot drift from the table the heuristic path emits.
"""

from decimal import Decimal
from typing import Any

from ..models import PriceRow

REQUIRED_ROW_FIELDS = ["ModelCode", "ModelDescription"]

_NUMERIC_TYPES = (Decimal, float, int)


def build_price_row_schema() -> dict[str, Any]:
    """Return the {"items": [PriceRow...]} object schema."""
    properties: dict[str, Any] = {}
    for name, field in PriceRow.model_fields.items():
        prop: dict[str, Any] = {
            "type": "number" if field.annotation in _NUMERIC_TYPES else "string"
        }
        if field.description:
            prop["description"] = field.description
        properties[field.alias or name] = prop

    return {
        "type": "object",
        "properties": {
            "items": {
                "type": "array",
                "description": "Extract product rows from the PDF.",
                "items": {
                    "type": "object",
                    "properties": properties,
                    "required": REQUIRED_ROW_FIELDS,
                },
            }
        },
        "required": ["items"],
    }
