"""
Typed exceptions raised by the document model, the registry and gateways.

Every exception carries a machine-readable ``code`` plus the structured data
needed to act on it, so callers can catch by type instead of parsing messages:

    ComprobanteError
    |
    +-- ValidationError
    |   +-- MissingRequiredFieldError
    |   +-- InvalidFieldTypeError
    |
    +-- ClassNotFoundError
    +-- InvalidNumericValueError
    |
    +-- RequestError
        +-- RequestLockedError
        +-- ResponseNotAvailableError
"""

from typing import Any


class ComprobanteError(Exception):
    """Base class for all package errors."""

    code: str = "COMPROBANTE_ERROR"


class ValidationError(ComprobanteError):
    """A parametrized entity failed validation on a single field."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"The {field} parameter {reason}")


class MissingRequiredFieldError(ValidationError):
    """A required parameter is absent or empty."""

    code: str = "MISSING_REQUIRED_FIELD"

    def __init__(self, field: str):
        super().__init__(field, "is required")


class InvalidFieldTypeError(ValidationError):
    """A parameter is present but holds the wrong kind of value."""

    code: str = "INVALID_FIELD_TYPE"


class ClassNotFoundError(ComprobanteError):
    """A resolved gateway or document identifier cannot be loaded."""

    code: str = "CLASS_NOT_FOUND"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Class '{identifier}' not found")


class InvalidNumericValueError(ComprobanteError, ValueError):
    """An externally supplied amount cannot be converted to a number."""

    code: str = "INVALID_NUMERIC_VALUE"

    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class RequestError(ComprobanteError):
    """Base class for gateway request lifecycle errors."""

    code: str = "REQUEST_ERROR"


class RequestLockedError(RequestError):
    """Raised when a request is modified after it has been sent."""

    code: str = "REQUEST_LOCKED"

    def __init__(self) -> None:
        super().__init__("Request cannot be modified after it has been sent")


class ResponseNotAvailableError(RequestError):
    """Raised when the response is read before the request was sent."""

    code: str = "RESPONSE_NOT_AVAILABLE"

    def __init__(self) -> None:
        super().__init__("You must call send() before accessing the response")
