"""
Router for DMC quotation processing.

Handles:
- Uploading a quotation document (PDF, DOCX or text) and returning the
  structured quotation
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from ..models import ErrorResponse, ProcessQuotationResponse
from ..services.exceptions import NoFileProvidedError
from ..services.quotation_service import QuotationService, get_quotation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["quotations"])


@router.post(
    "/process-dmc",
    response_model=ProcessQuotationResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def process_dmc(
    service: Annotated[QuotationService, Depends(get_quotation_service)],
    dmc_file: Annotated[
        UploadFile | None,
        File(alias="dmcFile", description="Quotation document to parse"),
    ] = None,
) -> ProcessQuotationResponse:
    """
    Parse an uploaded DMC quotation.

    Extracts the document text, asks the model for a structured quotation and
    falls back to rule-based parsing if the model is unavailable.
    Processing errors are rendered by the application's exception handler.
    """
    if dmc_file is None:
        raise NoFileProvidedError()

    try:
        # Reject oversized uploads before reading them into memory
        if dmc_file.size is not None:
            service.check_size(dmc_file.size)

        file_bytes = await dmc_file.read()
        data = await service.process_document(
            file_bytes,
            dmc_file.content_type,
            dmc_file.filename,
        )
    finally:
        await dmc_file.close()

    return ProcessQuotationResponse(data=data)
