"""
Offline gateway - signs documents locally with a content fingerprint.

Useful for tests, demos and for issuing documents when no provider is
configured.
"""

from .gateway import Gateway
from .messages import SignRequest, SignResponse

__all__ = ["Gateway", "SignRequest", "SignResponse"]
