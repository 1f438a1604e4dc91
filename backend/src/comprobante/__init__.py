"""
Comprobante - electronic invoicing documents and signing gateways.

Build documents from raw data, compute their totals with exact decimal
arithmetic, and hand them to a gateway for signing.
"""

from .domain import CreditNote, Invoice, Ticket
from .exceptions import ClassNotFoundError, ComprobanteError, ValidationError
from .factory import ClassRegistry, GatewayFactory, get_default_factory, set_default_factory

__version__ = "0.1.0"

__all__ = [
    "ClassNotFoundError",
    "ClassRegistry",
    "ComprobanteError",
    "CreditNote",
    "GatewayFactory",
    "Invoice",
    "Ticket",
    "ValidationError",
    "get_default_factory",
    "set_default_factory",
    "__version__",
]
