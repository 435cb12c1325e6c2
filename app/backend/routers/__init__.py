"""
Routers package for FastAPI endpoints.

Organized by domain:
- quotations: Quotation document upload and parsing
"""

from . import quotations

__all__ = ["quotations"]
