"""
AI service package for quotation extraction.

This package provides:
- extraction: the OpenAI call, reply validation and the ModelAttempt result
- exceptions: errors raised inside the package (never surfaced to callers)

The QuotationAIService class combines model extraction with the rule-based
fallback parser so that callers always receive a QuotationRecord.
"""

import logging
from typing import Any

from ...models import QuotationRecord
from ..fallback_parser import parse_quotation_text
from .exceptions import AIServiceError
from .extraction import (
    EXTRACTION_SYSTEM_PROMPT,
    ModelAttempt,
    attempt_model_extraction,
    parse_model_response,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AIServiceError",
    "EXTRACTION_SYSTEM_PROMPT",
    "ModelAttempt",
    "QuotationAIService",
    "attempt_model_extraction",
    "get_ai_service",
    "parse_model_response",
]


# =============================================================================
# QuotationAIService Class
# =============================================================================


class QuotationAIService:
    """
    Service for turning quotation text into a QuotationRecord.

    Uses an OpenAI chat model first and the rule-based fallback parser when
    the model is unavailable or returns something unusable.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
        client: Any = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: OpenAI API key. If None, reads from config/environment.
            model: OpenAI chat model to use.
            temperature: Sampling temperature.
            max_tokens: Maximum reply length in tokens.
            timeout: Seconds to wait for a reply before falling back.
            client: Pre-built AsyncOpenAI-compatible client (used by tests).
        """
        from ...config import get_settings

        settings = get_settings()
        if api_key is None and client is None:
            api_key = settings.openai_api_key

        self.api_key = api_key
        self.model = model or settings.openai_model
        self.temperature = (
            settings.openai_temperature if temperature is None else temperature
        )
        self.max_tokens = max_tokens or settings.openai_max_tokens
        self.timeout = settings.openai_timeout if timeout is None else timeout
        self._client = client
        self.fallback_only = client is None and not self.api_key

        if self.fallback_only:
            logger.warning(
                "AI Service running in FALLBACK-ONLY MODE. "
                "Set OPENAI_API_KEY in .env for model-based extraction."
            )

    @property
    def client(self):
        """Lazy-load the AsyncOpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError(
                    "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
                )
            try:
                from openai import AsyncOpenAI

                # No retries; a failed call goes straight to the fallback
                self._client = AsyncOpenAI(api_key=self.api_key, max_retries=0)
            except ImportError as e:
                raise AIServiceError(
                    "openai library not installed. Run: pip install openai"
                ) from e
        return self._client

    async def attempt_model(self, text: str) -> ModelAttempt:
        """Run a single model extraction without falling back."""
        if self.fallback_only:
            return ModelAttempt(error="No OpenAI API key configured")
        try:
            client = self.client
        except AIServiceError as e:
            return ModelAttempt(error=str(e))
        return await attempt_model_extraction(
            text,
            client,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
        )

    async def extract_quotation(self, text: str) -> QuotationRecord:
        """
        Extract a quotation record, falling back to rule-based parsing.

        Never raises for model-service failures.

        Args:
            text: Plain text extracted from the quotation document.

        Returns:
            QuotationRecord from the model, or from the fallback parser.
        """
        attempt = await self.attempt_model(text)
        if attempt.succeeded:
            logger.info("AI processing complete")
            return attempt.record

        logger.warning(
            "Model extraction unavailable, falling back to manual parsing: %s",
            attempt.error,
        )
        return parse_quotation_text(text)


# =============================================================================
# Singleton Factory
# =============================================================================

_ai_service: QuotationAIService | None = None


def get_ai_service() -> QuotationAIService:
    """Get or create the AI service singleton."""
    global _ai_service
    if _ai_service is None:
        _ai_service = QuotationAIService()
    return _ai_service
