"""
Exceptions raised while turning an uploaded document into a quotation.

Each error kind carries the HTTP status and the client-facing message used by
the API exception handler. Model-service failures are deliberately absent:
they never leave the orchestrator.
"""


class QuotationProcessingError(Exception):
    """Base class for errors that terminate a processing request."""

    status_code: int = 500
    error: str = "Failed to process file"

    def __init__(self, details: str | None = None):
        super().__init__(details or self.error)
        self.details = details


class NoFileProvidedError(QuotationProcessingError):
    """Raised when the request carries no file."""

    status_code = 400
    error = "No file uploaded"


class UnsupportedMediaTypeError(QuotationProcessingError):
    """Raised when no text handler accepts the declared media type."""

    status_code = 400
    error = "Unsupported file type"


class InsufficientContentError(QuotationProcessingError):
    """Raised when extraction yields too little text to parse."""

    status_code = 400
    error = "Could not extract sufficient text from file"


class DocumentTooLargeError(QuotationProcessingError):
    """Raised when the upload exceeds the configured size limit."""

    status_code = 413
    error = "File too large"


class ProcessingError(QuotationProcessingError):
    """Raised for decoder failures and unexpected internal errors."""

    pass
