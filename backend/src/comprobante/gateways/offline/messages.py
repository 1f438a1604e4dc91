import logging
from datetime import datetime, timezone
from typing import Any, Self

from comprobante.domain.documents import AbstractDocument
from comprobante.domain.hashing import compute_payload_hash
from comprobante.exceptions import InvalidFieldTypeError
from comprobante.gateways.messages import AbstractRequest, AbstractResponse

logger = logging.getLogger(__name__)


class SignRequest(AbstractRequest):
    """Sign a document by fingerprinting its exported state."""

    @property
    def country_code(self) -> str | None:
        return self._get_parameter("country_code")

    def set_country_code(self, value: str) -> Self:
        return self._set_parameter("country_code", value)

    @property
    def document(self) -> AbstractDocument | None:
        return self._get_parameter("document")

    def set_document(self, value: AbstractDocument) -> Self:
        return self._set_parameter("document", value)

    def get_data(self) -> dict[str, Any]:
        self.validate("document")
        document = self.document
        if not isinstance(document, AbstractDocument):
            raise InvalidFieldTypeError("document", "must be a document object")
        document.validate()

        return {
            "country_code": self.country_code,
            "document": document.to_dict(),
        }

    def send_data(self, data: dict[str, Any]) -> "SignResponse":
        fingerprint = compute_payload_hash(data["document"])
        logger.info(f"Signed {self.document.type} offline: {fingerprint}")
        return SignResponse(
            self,
            {
                **data,
                "signature": fingerprint,
                "signed_at": datetime.now(timezone.utc),
                "test_mode": self.test_mode,
            },
        )


class SignResponse(AbstractResponse):
    """Result of an offline signature; always successful."""

    @property
    def is_successful(self) -> bool:
        return True

    @property
    def message(self) -> str | None:
        return "Document signed offline"

    @property
    def signature(self) -> str:
        return self.data["signature"]

    @property
    def signed_at(self) -> datetime:
        return self.data["signed_at"]

    @property
    def document(self) -> dict[str, Any]:
        return self.data["document"]
