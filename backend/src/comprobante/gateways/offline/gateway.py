from typing import Any, Self

from comprobante.gateways.base import AbstractGateway

from .messages import SignRequest


class Gateway(AbstractGateway):
    """Gateway that signs without contacting any provider."""

    @property
    def name(self) -> str:
        return "Offline"

    def default_parameters(self) -> dict[str, Any]:
        parameters = super().default_parameters()
        parameters["country_code"] = ""
        return parameters

    @property
    def country_code(self) -> str | None:
        """ISO 3166 country whose rules the documents follow."""
        return self._get_parameter("country_code")

    def set_country_code(self, value: str) -> Self:
        return self._set_parameter("country_code", value)

    def sign(self, **parameters: Any) -> SignRequest:
        """Create a request signing ``document``."""
        return self.create_request(SignRequest, parameters)
