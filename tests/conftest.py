"""Pytest configuration and fixtures."""

from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from app.pricelist.main import app
from app.pricelist.services.pdf_service import get_pdf_service


class StubPDFService:
    """Stands in for PDFService and returns canned text."""

    def __init__(self, text: str):
        self.text = text
        self.calls = 0

    def extract_text(self, file_bytes) -> str:
        self.calls += 1
        return self.text


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def stub_pdf_text() -> Callable[[str], StubPDFService]:
    """Install a PDF service override that returns the given text."""

    def install(text: str) -> StubPDFService:
        stub = StubPDFService(text)
        app.dependency_overrides[get_pdf_service] = lambda: stub
        return stub

    return install


@pytest.fixture
def price_list_text() -> str:
    """A small two-item price list as a PDF text layer would render it."""
    return "\n".join(
        [
            "ACME INDUSTRIAL SYSTEMS",
            "PRICE LIST 2025",
            "Valid from 2025-03-01",
            "",
            "HD-2040 Bullet camera",
            "Dealer net € 1.250,00",
            "HD-3050 Dome camera",
            "Dealer net € 1.480,00",
            "Page 1 of 2",
            "Terms and conditions apply",
        ]
    )


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Bytes with a PDF header, enough to pass upload validation."""
    return b"%PDF-1.4\n%stub\n"


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"
