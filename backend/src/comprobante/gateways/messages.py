"""
Request and response objects exchanged with gateways.

A request is configured, sent once, and from then on frozen:

    request = gateway.sign(document=invoice)
    request.on("afterSignRequest", audit)
    response = request.send()
    response.is_successful
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Self

from comprobante.domain.money import CurrencyMixin
from comprobante.domain.parametrized import Parametrized, is_empty
from comprobante.events import Event, EventEmitter
from comprobante.exceptions import (
    MissingRequiredFieldError,
    RequestLockedError,
    ResponseNotAvailableError,
)

logger = logging.getLogger(__name__)


class AbstractRequest(EventEmitter, CurrencyMixin, Parametrized, ABC):
    """
    Base request.

    Subclasses implement ``get_data`` (validate and collect the payload) and
    ``send_data`` (hand it to the provider and wrap the reply).
    """

    def __init__(self, http_client: Any = None, parameters: Mapping[str, Any] | None = None) -> None:
        self.http_client = http_client
        self._response: AbstractResponse | None = None
        super().__init__(parameters)

    def initialize(self, parameters: Mapping[str, Any] | None = None) -> Self:
        if getattr(self, "_response", None) is not None:
            raise RequestLockedError()
        return super().initialize(parameters)

    def _set_parameter(self, key: str, value: Any) -> Self:
        if getattr(self, "_response", None) is not None:
            raise RequestLockedError()
        return super()._set_parameter(key, value)

    def validate(self, *keys: str) -> None:
        """
        Validate the request.

        Args:
            *keys: Parameters that must be present and non-empty

        Raises:
            MissingRequiredFieldError: For the first missing key
        """
        super().validate()
        for key in keys:
            if is_empty(self._get_parameter(key)):
                raise MissingRequiredFieldError(key)

    @property
    def test_mode(self) -> bool:
        return bool(self._get_parameter("test_mode"))

    def set_test_mode(self, value: bool) -> Self:
        return self._set_parameter("test_mode", value)

    @abstractmethod
    def get_data(self) -> Any:
        """Validate the request and build the payload to send."""

    @abstractmethod
    def send_data(self, data: Any) -> "AbstractResponse":
        """Send a payload to the provider and wrap the reply."""

    def send(self) -> "AbstractResponse":
        """
        Send the request.

        Triggers ``before<RequestClass>`` and ``after<RequestClass>`` around
        the call. The request cannot be modified afterwards.
        """
        data = self.get_data()
        event_suffix = type(self).__name__

        self.trigger(f"before{event_suffix}", Event(sender=self))
        response = self.send_data(data)
        self._response = response
        self.trigger(f"after{event_suffix}", Event(sender=self))

        logger.info(
            f"{event_suffix} sent: {'successful' if response.is_successful else 'failed'}"
        )
        return response

    @property
    def response(self) -> "AbstractResponse":
        if self._response is None:
            raise ResponseNotAvailableError()
        return self._response


class AbstractResponse(ABC):
    """Reply to a request; ``data`` is whatever the provider returned."""

    def __init__(self, request: AbstractRequest, data: Any) -> None:
        self.request = request
        self.data = data

    @property
    @abstractmethod
    def is_successful(self) -> bool:
        """Whether the provider accepted the request."""

    @property
    def message(self) -> str | None:
        return None

    @property
    def code(self) -> str | None:
        return None
