"""
Services package for the quotation parser.

Contains:
- text_extractor: PDF / Word / text to plain text conversion
- fallback_parser: rule-based quotation parsing
- ai: OpenAI extraction with fallback to the rule-based parser
- quotation_service: the end-to-end upload pipeline
"""

from .ai import QuotationAIService
from .quotation_service import QuotationService
from .text_extractor import TextExtractor

__all__ = ["QuotationAIService", "QuotationService", "TextExtractor"]
