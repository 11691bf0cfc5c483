"""
Router for the AI-assisted extraction path.

The generative call itself happens upstream; this endpoint receives the
raw response text and repairs it into JSON.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..models import SalvageErrorResponse, SalvageRequest
from ..services.salvage import SalvageFail, salvage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/extract", tags=["extract"])


@router.post(
    "/salvage",
    responses={
        status.HTTP_502_BAD_GATEWAY: {
            "model": SalvageErrorResponse,
            "description": "The model response could not be repaired into JSON",
        }
    },
)
async def salvage_model_output(
    request: SalvageRequest,
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Repair a raw model response into structured JSON.

    Returns the parsed value as-is. The stage that succeeded is reported in
    the X-Salvage-Stage header.
    """
    result = salvage(request.raw)

    if isinstance(result, SalvageFail):
        logger.warning(
            "Model output rejected after stages %s",
            [stage.value for stage in result.stages_tried],
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=result.to_diagnostic(request.raw, settings.diagnostic_prefix_chars),
        )

    return JSONResponse(
        content=result.value,
        headers={"X-Salvage-Stage": result.stage.value},
    )
