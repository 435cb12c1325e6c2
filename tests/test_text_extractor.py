"""Tests for the document text extractor."""

import pytest

from app.backend.services.exceptions import (
    InsufficientContentError,
    ProcessingError,
    UnsupportedMediaTypeError,
)
from app.backend.services.fallback_parser import parse_quotation_text
from app.backend.services.text_extractor import (
    TextExtractor,
    decode_plain_text,
    extract_pdf_text,
)

DOCX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


class TestTextExtractor:
    """Tests for TextExtractor dispatch and content checks."""

    def test_init_default_values(self):
        """Test TextExtractor initializes with default values."""
        extractor = TextExtractor()
        assert extractor.min_text_length == 50

    def test_plain_text(self, sample_text: str):
        """Test plain text is decoded as UTF-8."""
        extractor = TextExtractor()
        text = extractor.extract_text(sample_text.encode("utf-8"), "text/plain", "q.txt")
        assert text == sample_text

    def test_plain_text_with_charset_parameter(self, sample_text: str):
        """Test media type parameters are ignored when dispatching."""
        extractor = TextExtractor()
        text = extractor.extract_text(
            sample_text.encode("utf-8"), "text/plain; charset=utf-8", "q.txt"
        )
        assert "Destination: Goa" in text

    def test_invalid_utf8_is_replaced(self):
        """Test undecodable bytes do not fail extraction."""
        raw = b"Destination: Goa \xff\xfe " + b"x" * 60
        text = decode_plain_text(raw)
        assert text.startswith("Destination: Goa")
        assert "�" in text

    def test_pdf(self, sample_pdf_bytes: bytes):
        """Test text is extracted from a PDF."""
        extractor = TextExtractor()
        text = extractor.extract_text(sample_pdf_bytes, "application/pdf", "q.pdf")
        assert len(text.strip()) >= 50
        assert "Goa" in text
        assert "45,000" in text

    def test_docx_by_media_type(self, sample_docx_bytes: bytes):
        """Test Word documents are recognised by media type."""
        extractor = TextExtractor()
        text = extractor.extract_text(sample_docx_bytes, DOCX_MEDIA_TYPE, "quote")
        assert "Destination: Kerala, India" in text
        assert "Hotel: Lake Palace Resort" in text
        assert "Alleppey" in text

    def test_docx_by_filename(self, sample_docx_bytes: bytes):
        """Test Word documents are recognised by .docx extension."""
        extractor = TextExtractor()
        text = extractor.extract_text(
            sample_docx_bytes, "application/octet-stream", "Quote.DOCX"
        )
        assert "Kerala" in text

    def test_docx_text_feeds_parser(self, sample_docx_bytes: bytes):
        """Test Word text is parseable by the fallback parser."""
        text = TextExtractor().extract_text(sample_docx_bytes, DOCX_MEDIA_TYPE, "q.docx")
        record = parse_quotation_text(text)
        assert record.destination == "Kerala"
        assert record.duration == "4 Days 3 Nights"
        assert record.base_cost == 38500
        assert [h.name for h in record.hotels] == ["Lake Palace Resort"]

    def test_unsupported_media_type(self):
        """Test unknown media types raise UnsupportedMediaTypeError."""
        extractor = TextExtractor()
        with pytest.raises(UnsupportedMediaTypeError):
            extractor.extract_text(b"\x89PNG" + b"0" * 100, "image/png", "scan.png")

    def test_unsupported_checked_before_content(self):
        """Test an empty upload of an unknown type is unsupported, not short."""
        with pytest.raises(UnsupportedMediaTypeError):
            TextExtractor().extract_text(b"", "application/zip", "a.zip")

    def test_empty_file_is_insufficient(self):
        """Test a 0-byte document raises InsufficientContentError."""
        with pytest.raises(InsufficientContentError):
            TextExtractor().extract_text(b"", "text/plain", "empty.txt")

    def test_short_file_is_insufficient(self):
        """Test a 10-character document raises InsufficientContentError."""
        with pytest.raises(InsufficientContentError) as exc_info:
            TextExtractor().extract_text(b"0123456789", "text/plain", "short.txt")
        assert "10" in str(exc_info.value)

    def test_whitespace_does_not_count(self):
        """Test surrounding whitespace is ignored for the length check."""
        raw = b"   \n\n" + b"a" * 49 + b"\n\n    "
        with pytest.raises(InsufficientContentError):
            TextExtractor().extract_text(raw, "text/plain", "pad.txt")

    def test_custom_min_length(self):
        """Test the minimum length is configurable."""
        extractor = TextExtractor(min_text_length=5)
        assert extractor.extract_text(b"Hello", "text/plain", "h.txt") == "Hello"

    def test_register_handler(self, sample_text: str):
        """Test new formats can be added without changing existing handlers."""
        extractor = TextExtractor()
        extractor.register_handler(
            lambda content_type, filename: content_type == "text/markdown",
            decode_plain_text,
        )
        text = extractor.extract_text(
            sample_text.encode("utf-8"), "text/markdown", "quote.md"
        )
        assert text == sample_text


class TestPdfExtraction:
    """Tests for PDF decoding errors."""

    def test_invalid_pdf_raises_error(self, invalid_file_bytes: bytes):
        """Test that non-PDF content raises ProcessingError."""
        with pytest.raises(ProcessingError) as exc_info:
            extract_pdf_text(invalid_file_bytes)
        assert "Invalid PDF" in str(exc_info.value)

    def test_corrupted_pdf_raises_error(self):
        """Test that a truncated PDF raises ProcessingError."""
        with pytest.raises(ProcessingError):
            extract_pdf_text(b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog")
