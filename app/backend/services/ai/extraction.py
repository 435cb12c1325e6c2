"""
Model-based quotation extraction.

Sends the document text to an OpenAI chat model with a fixed extraction prompt
and validates the JSON reply against QuotationRecord. Failures are returned as
a ModelAttempt carrying the error instead of being raised, so the caller has
exactly one recovery path.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ...models import QuotationRecord
from .exceptions import AIServiceError

logger = logging.getLogger(__name__)


# =============================================================================
# Extraction Prompts
# =============================================================================

EXTRACTION_SYSTEM_PROMPT = """You are a travel quotation parser. Extract information from DMC quotations and return ONLY valid JSON in this exact format:
{
  "destination": "string",
  "duration": "X Days Y Nights",
  "paxCount": "X Adults",
  "baseCost": number,
  "hotels": [{"name": "string", "location": "string", "nights": number, "roomType": "string"}],
  "inclusions": ["string1", "string2"],
  "exclusions": ["string1", "string2"],
  "itinerary": [{"day": number, "title": "string", "activities": ["string1", "string2"]}]
}

Extract only what's clearly mentioned. If information is not found, use empty arrays or "Not specified" for strings, 0 for numbers."""

EXTRACTION_USER_PROMPT = "Extract travel quotation details from this text:\n\n"


# =============================================================================
# Result Type
# =============================================================================


@dataclass(frozen=True)
class ModelAttempt:
    """Outcome of one model call: either a record or the reason it failed."""

    record: QuotationRecord | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.record is not None


# =============================================================================
# Helper Functions
# =============================================================================


def parse_model_response(content: str | None) -> QuotationRecord:
    """
    Parse a model reply into a QuotationRecord.

    Args:
        content: Raw message content returned by the model.

    Returns:
        The validated record.

    Raises:
        AIServiceError: If the reply is empty, not JSON, or not record-shaped.
    """
    if not content or not content.strip():
        raise AIServiceError("Empty response from OpenAI")

    try:
        response_data = json.loads(content)
    except (ValueError, RecursionError) as e:
        logger.error("Failed to parse extraction response: %s", content[:500])
        raise AIServiceError(f"Invalid JSON in extraction response: {e}") from e

    if not isinstance(response_data, dict):
        raise AIServiceError(
            f"Expected a JSON object, got {type(response_data).__name__}"
        )

    try:
        return QuotationRecord.model_validate(response_data)
    except ValidationError as e:
        logger.error("Extraction response does not match quotation shape: %s", e)
        raise AIServiceError(f"Invalid quotation structure: {e}") from e


async def request_quotation(
    text: str,
    client: Any,  # AsyncOpenAI client
    model: str = "gpt-3.5-turbo",
    temperature: float = 0.1,
    max_tokens: int = 1500,
    timeout: float | None = None,
) -> QuotationRecord:
    """
    Ask the model for a quotation record.

    Raises:
        AIServiceError: On any service failure or unusable reply.
    """
    try:
        response = await asyncio.wait_for(
            client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
                    {"role": "user", "content": EXTRACTION_USER_PROMPT + text},
                ],
                response_format={"type": "json_object"},
                temperature=temperature,
                max_tokens=max_tokens,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise AIServiceError(f"OpenAI request timed out after {timeout}s") from e
    except Exception as e:
        raise AIServiceError(f"OpenAI request failed: {e}") from e

    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise AIServiceError(f"Unexpected response structure: {e}") from e

    return parse_model_response(content)


# =============================================================================
# Main Extraction Function
# =============================================================================


async def attempt_model_extraction(
    text: str,
    client: Any,  # AsyncOpenAI client
    model: str = "gpt-3.5-turbo",
    temperature: float = 0.1,
    max_tokens: int = 1500,
    timeout: float | None = None,
) -> ModelAttempt:
    """
    Run one model extraction and capture its outcome.

    Never raises for service or parsing failures; they are reported through
    ModelAttempt.error.

    Args:
        text: Plain document text.
        client: AsyncOpenAI client instance.
        model: Chat model name.
        temperature: Sampling temperature (kept low for stable output).
        max_tokens: Cap on the reply length.
        timeout: Seconds to wait for the reply; None waits indefinitely.

    Returns:
        ModelAttempt with either the record or the failure reason.
    """
    logger.info("Requesting model extraction (%s, %d chars)", model, len(text))
    try:
        record = await request_quotation(
            text,
            client,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
    except AIServiceError as e:
        return ModelAttempt(error=str(e))
    except Exception as e:
        logger.exception("Unexpected error during model extraction")
        return ModelAttempt(error=f"Unexpected extraction error: {e}")

    return ModelAttempt(record=record)
