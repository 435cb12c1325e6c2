"""
Exceptions used inside the AI extraction package.

AIServiceError never reaches API callers: QuotationAIService converts it into a
fallback parse.
"""


class AIServiceError(Exception):
    """Raised when a model call fails or returns an unusable reply."""

    pass
