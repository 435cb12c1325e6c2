"""Pytest configuration and fixtures."""

import io
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.backend.main import app
from app.backend.services.ai import QuotationAIService
from app.backend.services.quotation_service import (
    QuotationService,
    get_quotation_service,
)
from app.backend.services.text_extractor import TextExtractor

SAMPLE_QUOTATION = """Goa Holiday Quotation
Destination: Goa, India
Duration: 5 Days / 4 Nights
Travelers: 2 Adults
Hotel: Taj Exotica, Benaulim
Hotel: Taj Exotica, Benaulim
Total Package Cost: Rs. 45,000
Inclusions
- Daily breakfast
- Airport transfers
- Daily breakfast
Exclusions
- Airfare
- Personal expenses
Itinerary
Day 1: Arrival in Goa
- Airport pickup
- Check-in at the resort
Day 2: North Goa sightseeing
- Visit Fort Aguada
Day 3
- Leisure day at the beach
"""


def build_pdf(lines: list[str]) -> bytes:
    """Build a single-page PDF with one text line per entry, using Helvetica."""
    escaped = [
        line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        for line in lines
    ]
    stream = "BT\n/F1 12 Tf\n14 TL\n72 740 Td\n"
    stream += "".join(f"({line}) Tj T*\n" for line in escaped)
    stream += "ET"

    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        "<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        "/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        f"<< /Length {len(stream)} >>\nstream\n{stream}\nendstream",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    pdf = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf += f"{number} 0 obj\n{body}\nendobj\n".encode("latin-1")

    xref_offset = len(pdf)
    pdf += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode("latin-1")
    for offset in offsets:
        pdf += f"{offset:010d} 00000 n \n".encode("latin-1")
    pdf += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("latin-1")
    return pdf


@pytest.fixture
def sample_text() -> str:
    """A plain-text DMC quotation covering every fallback rule."""
    return SAMPLE_QUOTATION


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """A small text PDF containing a quotation."""
    return build_pdf(
        [
            "Destination: Goa, India",
            "Duration: 5 Days / 4 Nights",
            "Total Package Cost: Rs. 45,000",
        ]
    )


@pytest.fixture
def sample_docx_bytes() -> bytes:
    """A Word document with quotation paragraphs and a hotel table."""
    from docx import Document

    document = Document()
    document.add_heading("Kerala Backwaters Quotation", level=1)
    document.add_paragraph("Destination: Kerala, India")
    document.add_paragraph("Duration: 4 Days / 3 Nights")
    document.add_paragraph("Total Package Cost: Rs. 38,500")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Hotel: Lake Palace Resort"
    table.rows[0].cells[1].text = "Alleppey"

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file, although it is long enough to be parsed."


@pytest.fixture
def quotation_service() -> QuotationService:
    """A quotation service that never calls OpenAI."""
    return QuotationService(
        text_extractor=TextExtractor(),
        ai_service=QuotationAIService(api_key=""),
    )


@pytest.fixture
def client(quotation_service: QuotationService) -> Generator[TestClient, None, None]:
    """Create a test client running the API in fallback-only mode."""
    app.dependency_overrides[get_quotation_service] = lambda: quotation_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
