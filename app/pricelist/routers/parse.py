"""
Router for the heuristic extraction endpoint.

Handles:
- Price list PDF upload with optional supplier/manufacturer/validity metadata
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ..config import Settings, get_settings
from ..models import Meta, ParseResponse
from ..services.heuristics import EmptyDocumentError, extract
from ..services.pdf_service import PDFConversionError, PDFService, get_pdf_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["parse"])


@router.post("/parse", response_model=ParseResponse)
async def parse_price_list(
    file: Annotated[UploadFile, File(description="Price list PDF")],
    supplier: Annotated[str, Form()] = "",
    manufacturer: Annotated[str, Form()] = "",
    validity_date: Annotated[str, Form(alias="validityDate")] = "",
    pdf_service: PDFService = Depends(get_pdf_service),
    settings: Settings = Depends(get_settings),
) -> ParseResponse:
    """
    Extract price rows from an uploaded PDF without any AI.

    Metadata left blank is guessed from the top of the document; values
    supplied here always win.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No filename provided",
        )

    if not file.filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    try:
        file_bytes = await file.read()

        if not file_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is empty.",
            )

        if len(file_bytes) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="File too large.",
            )

        logger.info("Parsing price list: %s (%d bytes)", file.filename, len(file_bytes))

        text = pdf_service.extract_text(file_bytes)
        meta = Meta(
            supplier=supplier,
            manufacturer=manufacturer,
            validity_date=validity_date,
            file_name=file.filename,
        )
        items = extract(text, meta, file.filename)

        return ParseResponse(items=items)

    except (HTTPException, PDFConversionError, EmptyDocumentError):
        # Domain errors are mapped to status codes by the app's handlers
        raise
    except Exception as e:
        logger.exception("Unexpected error parsing price list")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error: {e}",
        )
    finally:
        await file.close()
