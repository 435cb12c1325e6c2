"""
Document text extraction service.

Converts an uploaded document buffer into plain text using pypdf (PDF) and
python-docx (Word). Handlers are dispatched on the declared media type and
file name, so new formats can be registered without touching existing ones.
"""

import io
import logging
from typing import Callable

from .exceptions import (
    InsufficientContentError,
    ProcessingError,
    UnsupportedMediaTypeError,
)

logger = logging.getLogger(__name__)

# (content_type, filename) -> whether the handler accepts the document
MediaMatcher = Callable[[str, str], bool]
TextHandler = Callable[[bytes], str]


def _base_media_type(content_type: str | None) -> str:
    """Strip parameters such as ``; charset=utf-8`` from a media type."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def is_pdf(content_type: str, filename: str) -> bool:
    return content_type == "application/pdf"


def is_word_document(content_type: str, filename: str) -> bool:
    return "word" in content_type or filename.lower().endswith(".docx")


def is_plain_text(content_type: str, filename: str) -> bool:
    return content_type == "text/plain"


def extract_pdf_text(file_bytes: bytes) -> str:
    """
    Extract embedded text from every page of a PDF.

    Args:
        file_bytes: Raw PDF content.

    Returns:
        Page texts joined by newlines, in the order pypdf exposes them.

    Raises:
        ProcessingError: If the PDF cannot be read.
    """
    try:
        from pypdf import PdfReader
        from pypdf.errors import PdfReadError
    except ImportError as e:
        logger.error("pypdf not installed: %s", e)
        raise ProcessingError("pypdf library not installed. Run: pip install pypdf") from e

    # Validate PDF magic bytes
    if not file_bytes[:4] == b"%PDF":
        raise ProcessingError("Invalid PDF file: does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(file_bytes))
        pages = [page.extract_text() or "" for page in reader.pages]
        logger.info("Extracted text from %d PDF page(s)", len(pages))
        return "\n".join(pages)

    except PdfReadError as e:
        logger.error("PDF read error: %s", e)
        raise ProcessingError(f"Invalid or corrupted PDF file: {e}") from e

    except Exception as e:
        logger.exception("Unexpected error during PDF text extraction")
        raise ProcessingError(f"PDF text extraction failed: {e}") from e


def extract_docx_text(file_bytes: bytes) -> str:
    """
    Extract raw text from a Word document, discarding styling.

    Paragraphs come first, followed by the text of each table cell on its own
    line.

    Raises:
        ProcessingError: If the document cannot be opened.
    """
    try:
        from docx import Document
    except ImportError as e:
        logger.error("python-docx not installed: %s", e)
        raise ProcessingError(
            "python-docx library not installed. Run: pip install python-docx"
        ) from e

    try:
        document = Document(io.BytesIO(file_bytes))
    except Exception as e:
        logger.error("Could not open Word document: %s", e)
        raise ProcessingError(f"Invalid or corrupted Word document: {e}") from e

    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.extend(cell.text for cell in row.cells if cell.text.strip())
    return "\n".join(lines)


def decode_plain_text(file_bytes: bytes) -> str:
    """Decode a plain-text upload as UTF-8."""
    return file_bytes.decode("utf-8", errors="replace")


class TextExtractor:
    """
    Pluggable media-type dispatch from document bytes to plain text.

    Handlers are tried in registration order; the first whose matcher accepts
    the (content type, file name) pair wins.
    """

    def __init__(self, min_text_length: int = 50):
        """
        Initialize the extractor with the default PDF, Word and text handlers.

        Args:
            min_text_length: Minimum stripped text length accepted for parsing.
        """
        self.min_text_length = min_text_length
        self._handlers: list[tuple[MediaMatcher, TextHandler]] = []
        self.register_handler(is_pdf, extract_pdf_text)
        self.register_handler(is_word_document, extract_docx_text)
        self.register_handler(is_plain_text, decode_plain_text)

    def register_handler(self, matcher: MediaMatcher, handler: TextHandler) -> None:
        """Add a format handler, tried after the ones already registered."""
        self._handlers.append((matcher, handler))

    def get_handler(self, content_type: str | None, filename: str | None) -> TextHandler:
        """
        Find the handler for a document.

        Raises:
            UnsupportedMediaTypeError: If no handler accepts the document.
        """
        media_type = _base_media_type(content_type)
        for matcher, handler in self._handlers:
            if matcher(media_type, filename or ""):
                return handler
        raise UnsupportedMediaTypeError(f"No text extractor for media type '{media_type}'")

    def extract_text(
        self,
        file_bytes: bytes,
        content_type: str | None,
        filename: str | None = None,
    ) -> str:
        """
        Convert a document buffer to plain text.

        Args:
            file_bytes: Raw document content.
            content_type: Declared media type of the upload.
            filename: Original file name, used to recognise .docx uploads.

        Returns:
            The extracted text.

        Raises:
            UnsupportedMediaTypeError: If the media type is not supported.
            InsufficientContentError: If the text is shorter than min_text_length.
            ProcessingError: If the decoder fails on the document.
        """
        handler = self.get_handler(content_type, filename)
        text = handler(file_bytes) if file_bytes else ""

        if len(text.strip()) < self.min_text_length:
            logger.warning(
                "Insufficient text extracted from %s (%d chars)",
                filename or "document",
                len(text.strip()),
            )
            raise InsufficientContentError(
                f"Extracted {len(text.strip())} characters, "
                f"need at least {self.min_text_length}"
            )

        logger.info("Extracted text length: %d", len(text))
        return text


# Singleton instance for convenience
_text_extractor: TextExtractor | None = None


def get_text_extractor() -> TextExtractor:
    """Get or create the text extractor singleton."""
    global _text_extractor
    if _text_extractor is None:
        from ..config import get_settings

        _text_extractor = TextExtractor(min_text_length=get_settings().min_text_length)
    return _text_extractor
