"""
Base class for signing gateways.

A gateway wraps one external signing/stamping provider. It holds the
provider's parameters (credentials, test mode, currency) and turns calls
like ``gateway.sign(document=invoice)`` into request objects that carry
those parameters plus the call's own.

Design Decisions:
- Gateways never talk to the network directly; the HTTP client is an opaque
  object handed through to requests
- ``default_parameters`` lists choices as lists; the first one is the default
- Operation support is discovered by method presence, so a provider that
  cannot cancel simply does not define ``cancel``
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from comprobante.config import get_settings
from comprobante.domain.documents import AbstractDocument
from comprobante.domain.money import CurrencyMixin
from comprobante.domain.parametrized import Parametrized

from .messages import AbstractRequest

if TYPE_CHECKING:
    from comprobante.factory import GatewayFactory

logger = logging.getLogger(__name__)

SUPPORTED_OPERATIONS = ("sign", "cancel", "verify")


class AbstractGateway(CurrencyMixin, Parametrized, ABC):
    """
    Base gateway.

    Subclasses provide ``name`` and any of the operations in
    ``SUPPORTED_OPERATIONS``, each returning a request built with
    ``create_request``.
    """

    def __init__(
        self,
        http_client: Any = None,
        factory: "GatewayFactory | None" = None,
        short_name: str | None = None,
    ) -> None:
        self.http_client = http_client
        self._factory = factory
        self._short_name = short_name
        super().__init__()

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable gateway name."""

    @property
    def short_name(self) -> str:
        """Name this gateway was created from (its identifier if unknown)."""
        if self._short_name:
            return self._short_name
        return f"{type(self).__module__}:{type(self).__name__}"

    def default_parameters(self) -> dict[str, Any]:
        """
        Default parameters of this gateway.

        A list value enumerates the accepted choices, the first being the
        default (e.g. ``{"environment": ["sandbox", "production"]}``).
        """
        return {
            "test_mode": False,
            "currency": get_settings().default_currency,
        }

    def _initialize_defaults(self) -> None:
        super()._initialize_defaults()
        for key, value in self.default_parameters().items():
            if self._has_parameter(key):
                continue
            if isinstance(value, list):
                value = value[0] if value else None
            self._set_parameter(key, value)

    @property
    def test_mode(self) -> bool:
        return bool(self._get_parameter("test_mode"))

    def set_test_mode(self, value: bool) -> Self:
        return self._set_parameter("test_mode", value)

    def supports(self, operation: str) -> bool:
        return callable(getattr(self, operation, None))

    @property
    def supports_sign(self) -> bool:
        return self.supports("sign")

    @property
    def supports_cancel(self) -> bool:
        return self.supports("cancel")

    @property
    def supports_verify(self) -> bool:
        return self.supports("verify")

    def operations(self) -> list[str]:
        return [operation for operation in SUPPORTED_OPERATIONS if self.supports(operation)]

    def create_request[R: AbstractRequest](
        self,
        request_class: type[R],
        parameters: Mapping[str, Any] | None = None,
    ) -> R:
        """
        Create a request carrying this gateway's parameters.

        Request parameters override gateway parameters of the same name.
        """
        merged = self.parameters
        merged.update(parameters or {})
        logger.debug(f"Creating {request_class.__name__} for gateway '{self.short_name}'")
        return request_class(self.http_client, merged)

    def create_document(
        self,
        name: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> AbstractDocument:
        """
        Create a document, preferring this gateway's own document classes.

        The gateway's currency is applied unless the parameters set one.
        """
        if self._factory is None:
            from comprobante.factory import GatewayFactory

            self._factory = GatewayFactory()

        merged = {"currency": self.currency}
        merged.update(parameters or {})
        return self._factory.create_document(name, merged, gateway=self.short_name)
