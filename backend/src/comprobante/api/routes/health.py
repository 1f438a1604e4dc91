"""
Health check endpoint.

Provides system health status for monitoring and load balancers.
"""

from fastapi import APIRouter, Depends

from comprobante import __version__
from comprobante.api.dependencies import get_factory
from comprobante.api.schemas import HealthResponse
from comprobante.config import get_settings
from comprobante.factory import GatewayFactory

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(factory: GatewayFactory = Depends(get_factory)) -> HealthResponse:
    """
    Check system health.

    Reports the version, the configured currency and the gateways that
    have been registered so far.
    """
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=__version__,
        default_currency=settings.default_currency,
        gateways=factory.all(),
    )
