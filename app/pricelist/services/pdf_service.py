"""
PDF processing service using pdfplumber.

Handles decoding of PDF documents to plain text for heuristic extraction.
"""

import io
import logging
from typing import BinaryIO

import pdfplumber

logger = logging.getLogger(__name__)


class PDFConversionError(Exception):
    """Raised when PDF text extraction fails."""

    pass


class PDFService:
    """
    Service for PDF processing operations.

    Uses pdfplumber (backed by pdfminer.six) to read the text layer of each
    page. Scanned PDFs without a text layer yield empty text.
    """

    def __init__(self, page_separator: str = "\n"):
        """
        Initialize the PDF service.

        Args:
            page_separator: String placed between the text of consecutive pages.
        """
        self.page_separator = page_separator

    def _read_bytes(self, file_bytes: bytes | BinaryIO) -> bytes:
        if hasattr(file_bytes, "read"):
            pdf_bytes = file_bytes.read()
        else:
            pdf_bytes = file_bytes

        if not pdf_bytes:
            raise PDFConversionError("Empty PDF file provided")

        # Validate PDF magic bytes
        if not pdf_bytes[:4] == b"%PDF":
            raise PDFConversionError(
                "Invalid PDF file: does not start with PDF header"
            )
        return pdf_bytes

    def extract_text(self, file_bytes: bytes | BinaryIO) -> str:
        """
        Extract the text of every page of a PDF.

        Args:
            file_bytes: PDF file as bytes or file-like object.

        Returns:
            Page texts joined by the page separator, or "" when no page
            has a text layer.

        Raises:
            PDFConversionError: If the input is empty, not a PDF, or cannot
                be decoded.
        """
        pdf_bytes = self._read_bytes(file_bytes)

        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            logger.error("PDF text extraction failed: %s", e)
            raise PDFConversionError(f"Could not read PDF: {e}") from e

        if not any(page.strip() for page in pages):
            # No text layer on any page (e.g. a scan)
            logger.warning("No text layer found in %d page(s)", len(pages))
            return ""

        text = self.page_separator.join(pages)
        logger.info(
            "Extracted %d characters from %d page(s)", len(text), len(pages)
        )
        return text


# Singleton instance for convenience
_pdf_service: PDFService | None = None


def get_pdf_service() -> PDFService:
    """Get or create the PDF service singleton."""
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
