"""
Routers package for FastAPI endpoints.

Organized by domain:
- parse: Heuristic extraction from uploaded PDFs
- extract: JSON salvage of raw generative model output
- schemas: PriceRow response schema
"""

from . import extract, parse, schemas

__all__ = ["extract", "parse", "schemas"]
