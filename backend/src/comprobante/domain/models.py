"""
Domain entities composing a fiscal document.

Parties (Person, Address), line objects (Item, Tax, Discount) and typed links
between documents (Relation). All of them are Parametrized: built from a raw
mapping, written only through their setters, validated on demand.

Design Decisions:
- Amounts are Decimal, converted at the setter through ``to_decimal``
- Nested input (an address inside a person, taxes inside an item) is turned
  into entities as it is set, so validation can walk typed objects
- Defaults needed by arithmetic (quantity 1, discount 0, base amount 0) are
  applied at read time and never stored
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Self

from email_validator import EmailNotValidError, validate_email

from comprobante.exceptions import InvalidFieldTypeError

from .bag import Bag
from .money import DEFAULT_DECIMAL_PLACES, ZERO, round_money, to_decimal
from .parametrized import Parametrized, build_bag

ONE = Decimal("1")
HUNDRED = Decimal("100")


def _optional_decimal(value: Any) -> Decimal | None:
    return None if value is None else to_decimal(value)


class Address(Parametrized):
    """
    A postal address.

    Example:
        address = Address({
            "address_1": "123 Fake Street",
            "address_2": "Tower 4",
            "postcode": "12345",
            "locality": "Lixnaw",
            "state": "Kerry",
            "country": "IE",
        })
        str(address)  # "123 Fake Street, Tower 4, 12345, Lixnaw, Kerry"
    """

    # Order of the human-readable form; country is left out
    DISPLAY_PARTS = (
        "address_1",
        "address_2",
        "address_3",
        "neighborhood",
        "postcode",
        "locality",
        "state",
    )

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["address_1", "locality", "country"])

    @property
    def address_1(self) -> str | None:
        return self._get_parameter("address_1")

    def set_address_1(self, value: str) -> Self:
        return self._set_parameter("address_1", value)

    @property
    def address_2(self) -> str | None:
        return self._get_parameter("address_2")

    def set_address_2(self, value: str) -> Self:
        return self._set_parameter("address_2", value)

    @property
    def address_3(self) -> str | None:
        return self._get_parameter("address_3")

    def set_address_3(self, value: str) -> Self:
        return self._set_parameter("address_3", value)

    @property
    def neighborhood(self) -> str | None:
        return self._get_parameter("neighborhood")

    def set_neighborhood(self, value: str) -> Self:
        return self._set_parameter("neighborhood", value)

    @property
    def postcode(self) -> str | None:
        return self._get_parameter("postcode")

    def set_postcode(self, value: str) -> Self:
        return self._set_parameter("postcode", value)

    @property
    def locality(self) -> str | None:
        return self._get_parameter("locality")

    def set_locality(self, value: str) -> Self:
        return self._set_parameter("locality", value)

    @property
    def state(self) -> str | None:
        return self._get_parameter("state")

    def set_state(self, value: str) -> Self:
        return self._set_parameter("state", value)

    @property
    def country(self) -> str | None:
        """ISO country code."""
        return self._get_parameter("country")

    def set_country(self, value: str) -> Self:
        return self._set_parameter("country", value)

    def __str__(self) -> str:
        parts = (self._get_parameter(part) for part in self.DISPLAY_PARTS)
        return ", ".join(str(part) for part in parts if part)


class Person(Parametrized):
    """
    A party to a document: the issuer (``from``) or the receiver (``to``).

    ``address`` accepts either an Address or the raw mapping for one.
    """

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["id", "name"])

    def validate(self) -> None:
        super().validate()

        self._validate_type("id", str, "a string")
        self._validate_type("name", str, "a string")
        self._validate_type("type", str, "a string")

        email = self.email
        if email is not None:
            if not isinstance(email, str):
                raise InvalidFieldTypeError("email", "must be a valid email")
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError as e:
                raise InvalidFieldTypeError("email", "must be a valid email") from e

        self._validate_type("phone", str, "a string")
        self._validate_type("fax", str, "a string")
        self._validate_entity("address", Address, "an Address object")

    @property
    def id(self) -> str | None:
        """Tax or registration identifier of the party."""
        return self._get_parameter("id")

    def set_id(self, value: str) -> Self:
        return self._set_parameter("id", value)

    @property
    def type(self) -> str | None:
        return self._get_parameter("type")

    def set_type(self, value: str) -> Self:
        return self._set_parameter("type", value)

    @property
    def name(self) -> str | None:
        return self._get_parameter("name")

    def set_name(self, value: str) -> Self:
        return self._set_parameter("name", value)

    @property
    def email(self) -> str | None:
        return self._get_parameter("email")

    def set_email(self, value: str) -> Self:
        return self._set_parameter("email", value)

    @property
    def phone(self) -> str | None:
        return self._get_parameter("phone")

    def set_phone(self, value: str) -> Self:
        return self._set_parameter("phone", value)

    @property
    def fax(self) -> str | None:
        return self._get_parameter("fax")

    def set_fax(self, value: str) -> Self:
        return self._set_parameter("fax", value)

    @property
    def address(self) -> Address | None:
        return self._get_parameter("address")

    def set_address(self, value: Address | Mapping[str, Any]) -> Self:
        if isinstance(value, Mapping):
            value = Address(value)
        return self._set_parameter("address", value)


class Tax(Parametrized):
    """
    A single tax, charged as a rate over a base amount or as a fixed amount.

    Example:
        tax = Tax({"type": "vat", "rate": 16})   # name defaults to "VAT"
        tax.amount_for(Decimal("190"))           # Decimal("30.40")

    The rate may be negative (withholdings, rebates). When ``fixed_amount``
    is set it is returned as-is, whatever the base.
    ``decimal_places`` is the precision of ``amount``; documents set it to
    their currency's minor unit on the taxes they derive.
    """

    def __init__(
        self,
        parameters: Mapping[str, Any] | None = None,
        decimal_places: int = DEFAULT_DECIMAL_PLACES,
    ) -> None:
        self.decimal_places = decimal_places
        super().__init__(parameters)
        self.add_parameters_required(["type", "rate"])

    def initialize(self, parameters: Mapping[str, Any] | None = None) -> Self:
        if isinstance(parameters, Mapping):
            parameters = dict(parameters)
            if parameters.get("type") is None and isinstance(parameters.get("name"), str):
                parameters["type"] = parameters["name"].lower()
            if parameters.get("name") is None and isinstance(parameters.get("type"), str):
                parameters["name"] = parameters["type"].upper()
        return super().initialize(parameters)

    @property
    def type(self) -> str | None:
        return self._get_parameter("type")

    def set_type(self, value: str) -> Self:
        return self._set_parameter("type", value)

    @property
    def name(self) -> str | None:
        return self._get_parameter("name")

    def set_name(self, value: str) -> Self:
        return self._set_parameter("name", value)

    @property
    def rate(self) -> Decimal | None:
        """Percentage rate, e.g. Decimal("16") for 16%."""
        return self._get_parameter("rate")

    def set_rate(self, value: Any) -> Self:
        return self._set_parameter("rate", to_decimal(value))

    @property
    def rate_type(self) -> str | None:
        return self._get_parameter("rate_type")

    def set_rate_type(self, value: str) -> Self:
        return self._set_parameter("rate_type", value)

    @property
    def base_amount(self) -> Decimal:
        return self._get_parameter("base_amount") or ZERO

    def set_base_amount(self, value: Any) -> Self:
        return self._set_parameter("base_amount", to_decimal(value))

    def add_base_amount(self, value: Any) -> Self:
        return self._set_parameter("base_amount", self.base_amount + to_decimal(value))

    @property
    def fixed_amount(self) -> Decimal | None:
        return self._get_parameter("fixed_amount")

    def set_fixed_amount(self, value: Any) -> Self:
        return self._set_parameter("fixed_amount", _optional_decimal(value))

    def add_fixed_amount(self, value: Any) -> Self:
        current = self.fixed_amount or ZERO
        return self._set_parameter("fixed_amount", current + to_decimal(value))

    def amount_for(
        self,
        base_amount: Any = None,
        decimal_places: int | None = None,
    ) -> Decimal:
        """
        Tax amount over a base.

        Args:
            base_amount: Base to apply the rate to; defaults to the
                accumulated ``base_amount``
            decimal_places: Precision of the result (ROUND_HALF_UP);
                defaults to ``self.decimal_places``

        Returns:
            ``fixed_amount`` if set, otherwise base * rate / 100 rounded
        """
        if self.fixed_amount is not None:
            return self.fixed_amount

        base = self.base_amount if base_amount is None else to_decimal(base_amount)
        rate = self.rate if self.rate is not None else ZERO
        if decimal_places is None:
            decimal_places = self.decimal_places
        return round_money(base * rate / HUNDRED, decimal_places)

    @property
    def amount(self) -> Decimal:
        return self.amount_for()


class Discount(Parametrized):
    """A named flat deduction applied to the whole document."""

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["name", "amount"])

    @property
    def name(self) -> str | None:
        return self._get_parameter("name")

    def set_name(self, value: str) -> Self:
        return self._set_parameter("name", value)

    @property
    def description(self) -> str | None:
        return self._get_parameter("description")

    def set_description(self, value: str) -> Self:
        return self._set_parameter("description", value)

    @property
    def amount(self) -> Decimal | None:
        return self._get_parameter("amount")

    def set_amount(self, value: Any) -> Self:
        return self._set_parameter("amount", to_decimal(value))


class Item(Parametrized):
    """
    A single priced line of a document.

    Example:
        item = Item({
            "name": "Consulting hour",
            "quantity": 2,
            "price": "50.00",
            "discount": 10,
            "taxes": [{"type": "vat", "rate": 16}],
        })
        item.amount                # Decimal("100.00")
        item.base_amount_for_tax   # Decimal("90.00")
    """

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["name", "price"])

    def validate(self) -> None:
        super().validate()
        self._validate_type("name", str, "a string")
        self._validate_bag("taxes", Tax, "Tax objects")

    @property
    def code(self) -> str | None:
        return self._get_parameter("code")

    def set_code(self, value: str) -> Self:
        return self._set_parameter("code", value)

    @property
    def name(self) -> str | None:
        return self._get_parameter("name")

    def set_name(self, value: str) -> Self:
        return self._set_parameter("name", value)

    @property
    def description(self) -> str | None:
        return self._get_parameter("description")

    def set_description(self, value: str) -> Self:
        return self._set_parameter("description", value)

    @property
    def quantity(self) -> Decimal:
        """Quantity sold; one unit when not given."""
        quantity = self._get_parameter("quantity")
        return ONE if quantity is None else quantity

    def set_quantity(self, value: Any) -> Self:
        return self._set_parameter("quantity", _optional_decimal(value))

    @property
    def unit(self) -> str | None:
        return self._get_parameter("unit")

    def set_unit(self, value: str) -> Self:
        return self._set_parameter("unit", value)

    @property
    def unit_code(self) -> str | None:
        return self._get_parameter("unit_code")

    def set_unit_code(self, value: str) -> Self:
        return self._set_parameter("unit_code", value)

    @property
    def price(self) -> Decimal | None:
        return self._get_parameter("price")

    def set_price(self, value: Any) -> Self:
        return self._set_parameter("price", to_decimal(value))

    @property
    def discount(self) -> Decimal:
        discount = self._get_parameter("discount")
        return ZERO if discount is None else discount

    def set_discount(self, value: Any) -> Self:
        return self._set_parameter("discount", _optional_decimal(value))

    @property
    def taxes(self) -> Bag[Tax]:
        return self._lazy_bag("taxes")

    def set_taxes(self, value: Any) -> Self:
        return self._set_parameter("taxes", build_bag(value, Tax))

    @property
    def amount(self) -> Decimal:
        """price * quantity; a missing price counts as zero."""
        price = self.price if self.price is not None else ZERO
        return price * self.quantity

    @property
    def base_amount_for_tax(self) -> Decimal:
        return self.amount - self.discount


class Relation(Parametrized):
    """
    A typed link from a document to another object.

    Example:
        Relation({"type": "return", "name": "Invoice A-123", "object": invoice})
    """

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["type", "object"])

    @property
    def type(self) -> str | None:
        return self._get_parameter("type")

    def set_type(self, value: str) -> Self:
        return self._set_parameter("type", value)

    @property
    def name(self) -> str | None:
        return self._get_parameter("name")

    def set_name(self, value: str) -> Self:
        return self._set_parameter("name", value)

    @property
    def object(self) -> Any:
        """The referenced document or entity."""
        return self._get_parameter("object")

    def set_object(self, value: Any) -> Self:
        return self._set_parameter("object", value)
