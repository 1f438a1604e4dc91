"""
Pydantic schemas for API request/response validation.

Documents are posted as raw JSON objects (the same mappings the document
classes accept), so only responses are modelled here.
All monetary values use strings to avoid floating point issues.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from comprobante.domain.totals import DocumentTotals, TaxSummary


# =============================================================================
# Document Schemas
# =============================================================================

class TaxSummaryResponse(BaseModel):
    """Aggregated tax of one type across all items."""
    type: str | None
    name: str | None = None
    rate: str | None = None
    base_amount: str
    amount: str
    rate_type: str | None = None
    fixed_amount: str | None = None

    @classmethod
    def from_summary(cls, summary: TaxSummary) -> "TaxSummaryResponse":
        return cls(
            type=summary.type,
            name=summary.name,
            rate=None if summary.rate is None else f"{summary.rate:f}",
            base_amount=f"{summary.base_amount:f}",
            amount=f"{summary.amount:f}",
            rate_type=summary.rate_type,
            fixed_amount=None if summary.fixed_amount is None else f"{summary.fixed_amount:f}",
        )


class TotalsResponse(BaseModel):
    """Derived amounts of a document."""
    document_type: str | None
    currency: str | None = None
    validated: bool = Field(
        default=False,
        description="Whether the document passed validation before computing",
    )
    subtotal: str
    discounts_amount: str
    taxes_amount: str
    total: str
    taxes: list[TaxSummaryResponse] = []

    @classmethod
    def from_totals(
        cls,
        totals: DocumentTotals,
        document_type: str | None,
        currency: str | None,
        validated: bool,
    ) -> "TotalsResponse":
        return cls(
            document_type=document_type,
            currency=currency,
            validated=validated,
            taxes=[TaxSummaryResponse.from_summary(summary) for summary in totals.taxes],
            **totals.as_strings(),
        )


# =============================================================================
# Gateway Schemas
# =============================================================================

class GatewayListResponse(BaseModel):
    """Gateways available in this deployment."""
    gateways: list[str]


class GatewayResponse(BaseModel):
    """A resolved gateway."""
    name: str
    short_name: str
    identifier: str
    operations: list[str] = []
    parameters: dict[str, Any] = {}


class SignResponse(BaseModel):
    """Result of signing a document."""
    gateway: str
    document_type: str | None
    successful: bool
    message: str | None = None
    signature: str | None = None
    signed_at: datetime | None = None
    total: str


# =============================================================================
# Common Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    default_currency: str
    gateways: list[str] = []


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str | None = None
    code: str | None = None
