"""
DMC Quotation Parser Backend Application.

A FastAPI service that turns travel quotations from Destination Management
Companies into structured records using AI (OpenAI), with a rule-based
fallback parser.
"""

__version__ = "1.0.0"
