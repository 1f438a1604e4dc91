"""
Gateways package - signing providers.

Each provider lives in its own subpackage exposing a ``Gateway`` class;
``GatewayFactory`` resolves short names such as "Offline" to them.
"""

from .base import SUPPORTED_OPERATIONS, AbstractGateway
from .messages import AbstractRequest, AbstractResponse

__all__ = ["AbstractGateway", "AbstractRequest", "AbstractResponse", "SUPPORTED_OPERATIONS"]
