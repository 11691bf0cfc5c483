"""
Services package for the price list extraction application.

Contains:
- heuristics: rule-based price row mining from plain text
- salvage: JSON repair of raw generative model output
- schema: PriceRow response schema builder
- pdf_service: PDF to text decoding
"""

from .pdf_service import PDFService

__all__ = ["PDFService"]
