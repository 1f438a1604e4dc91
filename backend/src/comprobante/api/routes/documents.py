"""
Document endpoints.

Builds documents from posted JSON and returns their derived amounts.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from comprobante.api.dependencies import get_factory, require_registered
from comprobante.api.schemas import ErrorResponse, TotalsResponse
from comprobante.config import get_settings
from comprobante.domain.documents import Ticket
from comprobante.factory import GatewayFactory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "/{document_type}/totals",
    response_model=TotalsResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Document type has no totals"},
        404: {"model": ErrorResponse, "description": "Document type not found"},
        422: {"model": ErrorResponse, "description": "Document failed validation"},
    },
)
async def compute_document_totals(
    document_type: str,
    payload: dict[str, Any] = Body(..., description="Raw document parameters"),
    validate: bool = Query(True, description="Validate the document before computing"),
    gateway: str | None = Query(None, description="Prefer this gateway's document classes"),
    factory: GatewayFactory = Depends(get_factory),
) -> TotalsResponse:
    """
    Compute subtotal, discounts, taxes and total of a document.

    The configured default currency applies when the payload has none.
    """
    require_registered(factory, document_type)
    require_registered(factory, gateway)

    settings = get_settings()
    parameters = {"currency": settings.default_currency, **payload}

    document = factory.create_document(document_type, parameters, gateway=gateway)
    if not isinstance(document, Ticket):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Document type '{document_type}' has no totals",
        )

    if validate:
        document.validate()

    totals = document.totals()
    logger.info(f"Computed totals for {document.type}: total={totals.total}")

    return TotalsResponse.from_totals(
        totals,
        document_type=document.type,
        currency=document.currency,
        validated=validate,
    )
