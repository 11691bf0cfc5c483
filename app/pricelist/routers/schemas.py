"""
Router for the PriceRow response schema.

Serves the JSON schema a caller passes to a generative model so that its
output already has the PriceRow table shape.
"""

import logging

from fastapi import APIRouter

from ..models import SchemaResponse
from ..services.schema import build_price_row_schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schema", tags=["schemas"])


@router.get("/price-rows", response_model=SchemaResponse)
async def get_price_row_schema() -> SchemaResponse:
    """Return the {"items": [PriceRow...]} response schema."""
    return SchemaResponse(schema=build_price_row_schema())
