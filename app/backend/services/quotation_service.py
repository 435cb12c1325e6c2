"""
Quotation processing pipeline.

Runs one uploaded document through size checks, text extraction and
model-or-fallback extraction, then stamps the result with processing metadata.
"""

import logging
from datetime import datetime, timezone

from ..models import ProcessedQuotation, QuotationRecord
from .ai import QuotationAIService, get_ai_service
from .exceptions import (
    DocumentTooLargeError,
    NoFileProvidedError,
    ProcessingError,
    QuotationProcessingError,
)
from .text_extractor import TextExtractor, get_text_extractor

logger = logging.getLogger(__name__)


class QuotationService:
    """Coordinates text extraction and quotation extraction for one upload."""

    def __init__(
        self,
        text_extractor: TextExtractor | None = None,
        ai_service: QuotationAIService | None = None,
        max_upload_bytes: int | None = None,
        preview_length: int | None = None,
    ):
        from ..config import get_settings

        settings = get_settings()
        self.text_extractor = text_extractor or get_text_extractor()
        self.ai_service = ai_service or get_ai_service()
        self.max_upload_bytes = max_upload_bytes or settings.max_upload_bytes
        self.preview_length = preview_length or settings.preview_length

    def check_size(self, size: int) -> None:
        """
        Reject uploads above the configured limit.

        Raises:
            DocumentTooLargeError: If size exceeds max_upload_bytes.
        """
        if size > self.max_upload_bytes:
            raise DocumentTooLargeError(
                f"Upload is {size} bytes; the limit is {self.max_upload_bytes} bytes"
            )

    def attach_metadata(
        self,
        record: QuotationRecord,
        text: str,
        filename: str,
    ) -> ProcessedQuotation:
        """Add file name, processing time and a text preview to a record."""
        return ProcessedQuotation(
            **record.model_dump(),
            file_name=filename,
            processed_at=datetime.now(timezone.utc).isoformat(),
            extracted_text_preview=text[: self.preview_length],
        )

    async def process_document(
        self,
        file_bytes: bytes | None,
        content_type: str | None,
        filename: str | None,
    ) -> ProcessedQuotation:
        """
        Turn an uploaded quotation document into a processed record.

        Args:
            file_bytes: Raw upload content, or None if no file was sent.
            content_type: Declared media type of the upload.
            filename: Original file name.

        Returns:
            ProcessedQuotation built from the model reply or the fallback parser.

        Raises:
            NoFileProvidedError: If no file was sent.
            DocumentTooLargeError: If the upload exceeds the size limit.
            UnsupportedMediaTypeError: If the media type is not supported.
            InsufficientContentError: If too little text could be extracted.
            ProcessingError: For decoder failures or unexpected errors.
        """
        if file_bytes is None:
            raise NoFileProvidedError()

        filename = filename or "document"
        logger.info("Processing file: %s (%d bytes)", filename, len(file_bytes))
        self.check_size(len(file_bytes))

        try:
            text = self.text_extractor.extract_text(file_bytes, content_type, filename)
            record = await self.ai_service.extract_quotation(text)
            return self.attach_metadata(record, text, filename)
        except QuotationProcessingError:
            raise
        except Exception as e:
            logger.exception("Unexpected error processing %s", filename)
            raise ProcessingError(str(e)) from e


# Singleton instance for convenience
_quotation_service: QuotationService | None = None


def get_quotation_service() -> QuotationService:
    """Get or create the quotation service singleton."""
    global _quotation_service
    if _quotation_service is None:
        _quotation_service = QuotationService()
    return _quotation_service
