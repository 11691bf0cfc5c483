"""
Price List Extraction Backend Application.

A FastAPI service that turns supplier price list PDFs into a fixed-schema
table of priced line items, either with a deterministic heuristic miner or
by salvaging the raw JSON-ish output of a generative model.
"""

__version__ = "1.0.0"
