"""
Monetary value handling.

All amounts are ``Decimal``. External input (JSON numbers, form strings)
goes through ``to_decimal`` once, at the setter, so arithmetic further down
never sees floats or malformed strings.

Design Decisions:
- Floats are converted through their shortest string form, so 0.1 becomes
  Decimal("0.1") and not the full binary expansion
- Booleans are rejected even though ``bool`` is an ``int`` subclass
- Rounding is ROUND_HALF_UP to the currency's minor unit, applied only where
  the caller asks for it (per-tax amounts)
"""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, ClassVar

from comprobante.exceptions import InvalidFieldTypeError, InvalidNumericValueError

DEFAULT_DECIMAL_PLACES = 2

ZERO = Decimal("0")

# Generic number, optional leading minus and optional decimals
_DECIMAL_STRING_RE = re.compile(r"^-?[0-9]+(\.[0-9]*)?$")


def to_decimal(value: Any) -> Decimal:
    """
    Convert an externally supplied amount to Decimal.

    Args:
        value: Decimal, int, float or a plain decimal string ("-12.50")

    Returns:
        The value as a Decimal

    Raises:
        InvalidNumericValueError: For any other type, booleans, non-finite
            numbers and strings that are not plain decimal numbers
    """
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise InvalidNumericValueError(value, "Data type is not a valid decimal number")

    if isinstance(value, str):
        cleaned = value.strip()
        if not _DECIMAL_STRING_RE.match(cleaned):
            raise InvalidNumericValueError(value, "String is not a valid decimal number")
        return Decimal(cleaned)

    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidNumericValueError(value, "Value is not a valid decimal number") from e

    if not result.is_finite():
        raise InvalidNumericValueError(value, "Value is not a finite number")
    return result


def quantize_string(decimal_places: int) -> str:
    """String for Decimal.quantize() at the given precision."""
    if decimal_places <= 0:
        return "1"
    return "0." + "0" * decimal_places


def round_money(amount: Decimal, decimal_places: int = DEFAULT_DECIMAL_PLACES) -> Decimal:
    """Round half-up to the given number of decimal places."""
    return amount.quantize(Decimal(quantize_string(decimal_places)), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Currency:
    """A single ISO 4217 currency."""

    code: str
    numeric: str
    decimal_places: int
    name: str

    # Currencies commonly seen on fiscal documents; unknown codes fall back
    # to DEFAULT_DECIMAL_PLACES
    _CURRENCIES: ClassVar[dict[str, "Currency"]] = {}

    @classmethod
    def find(cls, code: str | None) -> "Currency | None":
        """Look up a currency by its alphabetic code (case-insensitive)."""
        if not code:
            return None
        return cls._CURRENCIES.get(code.upper())

    @classmethod
    def all(cls) -> list["Currency"]:
        return sorted(cls._CURRENCIES.values(), key=lambda currency: currency.code)


Currency._CURRENCIES.update(
    {
        currency.code: currency
        for currency in (
            Currency("ARS", "032", 2, "Argentine Peso"),
            Currency("AUD", "036", 2, "Australian Dollar"),
            Currency("BHD", "048", 3, "Bahraini Dinar"),
            Currency("BRL", "986", 2, "Brazilian Real"),
            Currency("CAD", "124", 2, "Canadian Dollar"),
            Currency("CHF", "756", 2, "Swiss Franc"),
            Currency("CLP", "152", 0, "Chilean Peso"),
            Currency("COP", "170", 2, "Colombian Peso"),
            Currency("EUR", "978", 2, "Euro"),
            Currency("GBP", "826", 2, "Pound Sterling"),
            Currency("JOD", "400", 3, "Jordanian Dinar"),
            Currency("JPY", "392", 0, "Japanese Yen"),
            Currency("KRW", "410", 0, "South Korean Won"),
            Currency("KWD", "414", 3, "Kuwaiti Dinar"),
            Currency("MXN", "484", 2, "Mexican Peso"),
            Currency("OMR", "512", 3, "Omani Rial"),
            Currency("PEN", "604", 2, "Peruvian Sol"),
            Currency("PYG", "600", 0, "Paraguayan Guarani"),
            Currency("USD", "840", 2, "US Dollar"),
            Currency("UYU", "858", 2, "Uruguayan Peso"),
        )
    }
)


class CurrencyMixin:
    """
    Currency accessors for parametrized objects.

    Expects the host class to provide ``_get_parameter``/``_set_parameter``.
    """

    @property
    def currency(self) -> str | None:
        return self._get_parameter("currency")

    def set_currency(self, value: str | None):
        """
        Set the ISO 4217 code, upper-cased.

        Raises:
            InvalidFieldTypeError: If the code is not a string
        """
        if value is not None and not isinstance(value, str):
            raise InvalidFieldTypeError("currency", "must be a string")
        return self._set_parameter("currency", value.upper() if value else value)

    @property
    def currency_numeric(self) -> str | None:
        currency = Currency.find(self.currency)
        return currency.numeric if currency else None

    @property
    def currency_decimal_places(self) -> int:
        currency = Currency.find(self.currency)
        return currency.decimal_places if currency else DEFAULT_DECIMAL_PLACES

    def format_currency(self, amount: Any) -> str:
        """Format an amount with the currency's decimal places and no grouping."""
        return f"{round_money(to_decimal(amount), self.currency_decimal_places):f}"
