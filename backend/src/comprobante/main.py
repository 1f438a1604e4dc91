"""
FastAPI application entry point.

This is the main application that ties together all components:
- API routes for document totals and gateway signing
- Mapping of package errors to HTTP responses
- Logging configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from comprobante import __version__
from comprobante.api.routes import documents, gateways, health
from comprobante.api.schemas import ErrorResponse
from comprobante.config import get_settings
from comprobante.exceptions import (
    ClassNotFoundError,
    ComprobanteError,
    InvalidNumericValueError,
    ValidationError,
)
from comprobante.factory import get_default_factory

logger = logging.getLogger(__name__)

# Most specific first; the first matching class decides the status code
ERROR_STATUS_CODES: tuple[tuple[type[ComprobanteError], int], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidNumericValueError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ClassNotFoundError, status.HTTP_404_NOT_FOUND),
)


def status_code_for(exc: ComprobanteError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Registers the gateways that can be loaded so that /health and the
    gateway list reflect them from the first request.
    """
    settings = get_settings()

    logger.info(f"Starting Comprobante v{__version__}")
    logger.info(f"Default currency: {settings.default_currency}")
    logger.info(f"Debug mode: {settings.debug}")

    gateways = get_default_factory().find()
    logger.info(f"Gateways available: {', '.join(gateways) or 'none'}")

    yield  # Application runs here

    logger.info("Shutting down Comprobante")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance ready to serve requests.
    """
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )

    app = FastAPI(
        title="Comprobante API",
        description=(
            "Electronic invoicing documents.\n\n"
            "Computes document totals and signs documents through "
            "pluggable gateways."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(documents.router, prefix="/api/v1")
    app.include_router(gateways.router, prefix="/api/v1")

    @app.exception_handler(ComprobanteError)
    async def comprobante_exception_handler(request: Request, exc: ComprobanteError):
        """Translate package errors into ErrorResponse bodies."""
        status_code = status_code_for(exc)
        logger.warning(f"{request.method} {request.url.path} failed ({exc.code}): {exc}")

        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=type(exc).__name__,
                detail=str(exc),
                code=exc.code,
            ).model_dump(),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler for unhandled errors."""
        logger.exception(f"Unhandled error: {exc}")

        # Don't expose internal errors in production
        if settings.debug:
            detail = str(exc)
        else:
            detail = "An internal error occurred"

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": detail,
            },
        )

    return app


# Create the application instance
app = create_app()


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "comprobante.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
