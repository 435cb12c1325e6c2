"""
FastAPI application for the DMC quotation parser.

Provides endpoints for:
- Uploading a travel quotation (PDF, DOCX or text) and receiving a
  structured quotation record
- Health checks
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .models import HealthResponse
from .routers import quotations
from .services.exceptions import QuotationProcessingError
from .services.quotation_service import get_quotation_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting DMC Quotation Parser...")
    # Initialize services on startup
    get_quotation_service()
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down DMC Quotation Parser...")


# Create FastAPI application
app = FastAPI(
    title="DMC Quotation Parser API",
    description="Structured extraction of travel quotations using AI with rule-based fallback",
    version=__version__,
    debug=get_settings().debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        message="DMC Quotation Parser API is running",
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__, message="Service is healthy")


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(quotations.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(QuotationProcessingError)
async def quotation_processing_error_handler(
    request: Request, exc: QuotationProcessingError
):
    """Render processing errors as {"error", "details"} bodies."""
    content = {"error": exc.error}
    if exc.details:
        content["details"] = exc.details
    if exc.status_code >= 500:
        logger.error("Processing error: %s", exc)
    return JSONResponse(status_code=exc.status_code, content=content)
