"""Tests for PDF service."""

import io

import pytest

from app.pricelist.services import pdf_service
from app.pricelist.services.pdf_service import PDFConversionError, PDFService


class FakePage:
    def __init__(self, text):
        self.text = text

    def extract_text(self):
        return self.text


class FakePDF:
    def __init__(self, texts):
        self.pages = [FakePage(t) for t in texts]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_pdfplumber(monkeypatch):
    """Replace pdfplumber.open with an in-memory document of page texts."""

    def install(texts):
        monkeypatch.setattr(
            pdf_service.pdfplumber, "open", lambda stream: FakePDF(texts)
        )

    return install


class TestPDFService:
    """Tests for PDFService class."""

    def test_init_default_values(self):
        """Test PDFService joins pages with a newline by default."""
        service = PDFService()
        assert service.page_separator == "\n"

    def test_init_custom_values(self):
        """Test PDFService accepts a custom page separator."""
        service = PDFService(page_separator="\f")
        assert service.page_separator == "\f"

    def test_extract_empty_file_raises_error(self):
        """Test that empty file raises PDFConversionError."""
        service = PDFService()
        with pytest.raises(PDFConversionError) as exc_info:
            service.extract_text(b"")
        assert "Empty" in str(exc_info.value)

    def test_extract_invalid_pdf_raises_error(self):
        """Test that non-PDF content raises PDFConversionError."""
        service = PDFService()
        with pytest.raises(PDFConversionError) as exc_info:
            service.extract_text(b"This is not a PDF")
        assert "Invalid PDF" in str(exc_info.value)

    def test_extract_accepts_file_like_object(self):
        """Test that file-like input is read before validation."""
        service = PDFService()
        with pytest.raises(PDFConversionError) as exc_info:
            service.extract_text(io.BytesIO(b""))
        assert "Empty" in str(exc_info.value)

    def test_extract_joins_pages(self, fake_pdfplumber):
        """Test page texts are joined in order, blank pages included."""
        fake_pdfplumber(["HD-2040 € 10,00", None, "HD-3050 € 12,00"])
        service = PDFService()

        text = service.extract_text(b"%PDF-1.4 stub")

        assert text == "HD-2040 € 10,00\n\nHD-3050 € 12,00"

    def test_no_text_layer_on_any_page(self, fake_pdfplumber):
        """Test a scan decodes to empty text regardless of page count."""
        service = PDFService()

        for texts in ([None], [None, ""], ["", "  \n", None]):
            fake_pdfplumber(texts)
            assert service.extract_text(b"%PDF-1.4 stub") == ""

    def test_decoder_failure_is_wrapped(self, monkeypatch):
        """Test that pdfplumber errors surface as PDFConversionError."""

        def broken_open(stream):
            raise RuntimeError("No /Root object")

        monkeypatch.setattr(pdf_service.pdfplumber, "open", broken_open)
        service = PDFService()

        with pytest.raises(PDFConversionError) as exc_info:
            service.extract_text(b"%PDF-1.4 garbage")
        assert "Could not read PDF" in str(exc_info.value)


class TestGetPDFService:
    """Tests for the PDF service singleton."""

    def test_returns_same_instance(self):
        assert pdf_service.get_pdf_service() is pdf_service.get_pdf_service()
