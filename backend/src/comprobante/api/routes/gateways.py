"""
Gateway endpoints.

Lists available gateways and signs documents through them.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from comprobante.api.dependencies import get_factory, require_registered
from comprobante.api.schemas import (
    ErrorResponse,
    GatewayListResponse,
    GatewayResponse,
    SignResponse,
)
from comprobante.domain.documents import Ticket
from comprobante.factory import GatewayFactory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gateways", tags=["gateways"])


@router.get("", response_model=GatewayListResponse)
async def list_gateways(factory: GatewayFactory = Depends(get_factory)) -> GatewayListResponse:
    """Check the supported gateways and list those that can be loaded."""
    return GatewayListResponse(gateways=factory.find())


@router.get(
    "/{name}",
    response_model=GatewayResponse,
    responses={404: {"model": ErrorResponse, "description": "Gateway not found"}},
)
async def get_gateway(name: str, factory: GatewayFactory = Depends(get_factory)) -> GatewayResponse:
    """Resolve a gateway name and describe what it can do."""
    require_registered(factory, name)
    gateway = factory.create(name)

    return GatewayResponse(
        name=gateway.name,
        short_name=gateway.short_name,
        identifier=factory.gateway_class_name(name),
        operations=gateway.operations(),
        parameters=gateway.to_dict(),
    )


@router.post(
    "/{name}/sign/{document_type}",
    response_model=SignResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Gateway cannot sign this document"},
        404: {"model": ErrorResponse, "description": "Gateway or document type not found"},
        422: {"model": ErrorResponse, "description": "Document failed validation"},
    },
)
async def sign_document(
    name: str,
    document_type: str,
    payload: dict[str, Any] = Body(..., description="Raw document parameters"),
    factory: GatewayFactory = Depends(get_factory),
) -> SignResponse:
    """
    Build a document through a gateway, validate it and sign it.

    The gateway's own document classes take precedence over the core ones.
    """
    require_registered(factory, name)
    require_registered(factory, document_type)
    gateway = factory.create(name)
    if not gateway.supports_sign:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Gateway '{gateway.name}' does not support signing",
        )

    document = gateway.create_document(document_type, payload)
    if not isinstance(document, Ticket):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Document type '{document_type}' cannot be signed",
        )
    document.validate()

    logger.info(f"Signing {document.type} through gateway '{gateway.short_name}'")
    response = gateway.sign(document=document).send()

    return SignResponse(
        gateway=gateway.short_name,
        document_type=document.type,
        successful=response.is_successful,
        message=response.message,
        signature=getattr(response, "signature", None),
        signed_at=getattr(response, "signed_at", None),
        total=document.format_currency(document.total),
    )
