"""
Shared exceptions for the heuristic extraction modules.
"""


class EmptyDocumentError(ValueError):
    """Raised when extraction is given a zero-length document."""

    pass
