"""
Document types: Ticket, Invoice and CreditNote.

    AbstractDocument          type, content, relations, extra, currency
    +-- Ticket                from, date, items, discounts, payment data
        +-- Invoice           to
            +-- CreditNote    type fixed to "creditNote"

Example:
    ticket = Ticket({
        "id": "2015-123",
        "from": {"id": "AAA010101AAA", "name": "Acme"},
        "items": [
            {"name": "A", "price": 100, "quantity": 1, "taxes": [{"type": "vat", "rate": 16}]},
            {"name": "B", "price": 50, "quantity": 2, "discount": 10,
             "taxes": [{"type": "vat", "rate": 16}]},
        ],
    })
    ticket.subtotal   # Decimal("200")
    ticket.total      # Decimal("220.40")

Derived amounts are recomputed on every access from the current state;
see ``comprobante.domain.totals`` for the algorithm.
"""

from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from types import MappingProxyType
from typing import Any, ClassVar, Self

from .bag import Bag
from .models import Discount, Item, Person, Relation, Tax
from .money import CurrencyMixin
from .parametrized import Parametrized, build_bag, export_value
from .totals import (
    DocumentTotals,
    TaxSummary,
    aggregate_taxes,
    compute_discounts_amount,
    compute_subtotal,
    compute_taxes_amount,
    compute_totals,
)


def _parse_datetime(value: str) -> datetime | str:
    """ISO 8601 string to datetime; other strings are returned unchanged."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return value


class AbstractDocument(CurrencyMixin, Parametrized):
    """
    Base class for every document type.

    Subclasses fix their ``type`` through ``document_type``; a ``type`` given
    in the raw parameters is overwritten.
    """

    document_type: ClassVar[str | None] = None

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["type"])

    def _initialize_defaults(self) -> None:
        super()._initialize_defaults()
        if self.document_type is not None:
            self.set_type(self.document_type)
        if not self._has_parameter("content"):
            self.set_content({})

    def validate(self) -> None:
        super().validate()
        self._validate_type("type", str, "a string")
        self._validate_bag("relations", Relation, "Relation objects")

    @property
    def type(self) -> str | None:
        return self._get_parameter("type")

    def set_type(self, value: str) -> Self:
        return self._set_parameter("type", value)

    @property
    def content(self) -> Any:
        return self._get_parameter("content")

    def set_content(self, value: Any) -> Self:
        return self._set_parameter("content", value)

    @property
    def relations(self) -> Bag[Relation]:
        return self._lazy_bag("relations")

    def add_relation(self, value: Relation | Mapping[str, Any]) -> Self:
        if isinstance(value, Mapping):
            value = Relation(value)
        self.relations.add(value)
        return self

    def set_relations(self, value: Any) -> Self:
        return self._set_parameter("relations", build_bag(value, Relation))

    @property
    def extra(self) -> Any:
        return self._get_parameter("extra")

    def set_extra(self, value: Any) -> Self:
        return self._set_parameter("extra", value)

    def view(self) -> Mapping[str, Any]:
        """
        Read-only view of the document's full state, for renderers.

        Values are exported to plain data, so the view cannot be used to
        mutate the document.
        """
        return MappingProxyType(self._view_data())

    def _view_data(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "currency": self.currency,
            "content": export_value(self.content),
            "relations": export_value(self.relations),
            "extra": export_value(self.extra),
        }


class Ticket(AbstractDocument):
    """
    A simplified receipt issued by a single party.

    The full list of attributes accepted on construction:

    * id, series, date, currency
    * from (Person or mapping)
    * items (list of Item or mappings)
    * taxes (applied to every item, kept for backward compatibility)
    * discounts, discount (deprecated: single flat discount)
    * payment_type, payment_method, payment_conditions, payment_account
    * scheme, usage
    * content, relations, extra

    Unknown parameters are ignored.
    """

    document_type = "ticket"

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["from"])

    def initialize(self, parameters: Mapping[str, Any] | None = None) -> Self:
        # Document-wide taxes land on the items, so items must be set first
        taxes = None
        if isinstance(parameters, Mapping) and "taxes" in parameters:
            parameters = dict(parameters)
            taxes = parameters.pop("taxes")

        super().initialize(parameters)

        if taxes is not None:
            self.set_taxes(taxes)
        return self

    def _initialize_defaults(self) -> None:
        super()._initialize_defaults()
        if not self.date:
            self.set_date(datetime.now(timezone.utc))

    def validate(self) -> None:
        super().validate()
        self._validate_entity("from", Person, "a Person object")
        self._validate_type("date", (date, datetime), "a date")
        self._validate_bag("items", Item, "Item objects")
        self._validate_bag("discounts", Discount, "Discount objects")

    @property
    def id(self) -> str | None:
        return self._get_parameter("id")

    def set_id(self, value: str) -> Self:
        return self._set_parameter("id", value)

    @property
    def series(self) -> str | None:
        return self._get_parameter("series")

    def set_series(self, value: str) -> Self:
        return self._set_parameter("series", value)

    @property
    def date(self) -> datetime | date | None:
        return self._get_parameter("date")

    def set_date(self, value: datetime | str | None) -> Self:
        """
        Set the issue date.

        ISO 8601 strings are parsed; any other string is stored unchanged
        and reported by ``validate()``.
        """
        if isinstance(value, str):
            value = _parse_datetime(value)
        return self._set_parameter("date", value)

    @property
    def from_(self) -> Person | None:
        """The issuing party (``from`` is a Python keyword)."""
        return self._get_parameter("from")

    def set_from(self, value: Person | Mapping[str, Any]) -> Self:
        if isinstance(value, Mapping):
            value = Person(value)
        return self._set_parameter("from", value)

    @property
    def items(self) -> Bag[Item]:
        return self._lazy_bag("items")

    def set_items(self, value: Any) -> Self:
        return self._set_parameter("items", build_bag(value, Item))

    @property
    def taxes(self) -> Bag[Tax]:
        """One Tax per type present on the items, carrying the accumulated base."""
        return Bag(summary.to_tax() for summary in self.tax_summaries())

    def set_taxes(self, value: Any) -> Self:
        """Apply the given taxes to every item currently on the document."""
        for item in self.items:
            if isinstance(item, Item):
                taxes = value.all() if isinstance(value, Bag) else value
                item.set_taxes(taxes)
        return self

    @property
    def discounts(self) -> Bag[Discount]:
        return self._lazy_bag("discounts")

    def set_discounts(self, value: Any) -> Self:
        return self._set_parameter("discounts", build_bag(value, Discount))

    @property
    def discount(self) -> Decimal:
        """Deprecated: use ``discounts_amount``."""
        return self.discounts_amount

    def set_discount(self, value: Any) -> Self:
        """Deprecated: a single flat discount named "Discount"."""
        return self.set_discounts([{"name": "Discount", "amount": value}])

    @property
    def payment_type(self) -> str | None:
        return self._get_parameter("payment_type")

    def set_payment_type(self, value: str) -> Self:
        return self._set_parameter("payment_type", value)

    @property
    def payment_method(self) -> str | None:
        return self._get_parameter("payment_method")

    def set_payment_method(self, value: str) -> Self:
        return self._set_parameter("payment_method", value)

    @property
    def payment_conditions(self) -> str | None:
        return self._get_parameter("payment_conditions")

    def set_payment_conditions(self, value: str) -> Self:
        return self._set_parameter("payment_conditions", value)

    @property
    def payment_account(self) -> str | None:
        return self._get_parameter("payment_account")

    def set_payment_account(self, value: str) -> Self:
        return self._set_parameter("payment_account", value)

    @property
    def scheme(self) -> str | None:
        return self._get_parameter("scheme")

    def set_scheme(self, value: str) -> Self:
        return self._set_parameter("scheme", value)

    @property
    def usage(self) -> str | None:
        """What the receiver will use the document for."""
        return self._get_parameter("usage")

    def set_usage(self, value: str) -> Self:
        return self._set_parameter("usage", value)

    def tax_summaries(self) -> list[TaxSummary]:
        return aggregate_taxes(self.items, self.currency_decimal_places)

    @property
    def subtotal(self) -> Decimal:
        return compute_subtotal(self.items)

    @property
    def taxes_amount(self) -> Decimal:
        return compute_taxes_amount(self.tax_summaries())

    @property
    def discounts_amount(self) -> Decimal:
        return compute_discounts_amount(self.discounts, self.items)

    @property
    def total(self) -> Decimal:
        return self.subtotal - self.discounts_amount + self.taxes_amount

    def totals(self) -> DocumentTotals:
        """All derived amounts computed in one pass."""
        return compute_totals(self.items, self.discounts, self.currency_decimal_places)

    def _view_data(self) -> dict[str, Any]:
        totals = self.totals()
        data = super()._view_data()
        data.update(
            {
                "id": self.id,
                "series": self.series,
                "date": self.date,
                "from": export_value(self.from_),
                "items": export_value(self.items),
                "taxes": [summary.to_tax().to_dict() for summary in totals.taxes],
                "discounts": export_value(self.discounts),
                "subtotal": totals.subtotal,
                "discounts_amount": totals.discounts_amount,
                "taxes_amount": totals.taxes_amount,
                "total": totals.total,
            }
        )
        return data


class Invoice(Ticket):
    """A full invoice: a ticket addressed to an identified receiver (``to``)."""

    document_type = "invoice"

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        super().__init__(parameters)
        self.add_parameters_required(["to"])

    def validate(self) -> None:
        super().validate()
        self._validate_entity("to", Person, "a Person object")

    @property
    def to(self) -> Person | None:
        return self._get_parameter("to")

    def set_to(self, value: Person | Mapping[str, Any]) -> Self:
        if isinstance(value, Mapping):
            value = Person(value)
        return self._set_parameter("to", value)

    def _view_data(self) -> dict[str, Any]:
        data = super()._view_data()
        data["to"] = export_value(self.to)
        return data


class CreditNote(Invoice):
    """
    Credit note correcting a previous invoice.

    The corrected invoice is usually linked through a relation:

        note.add_relation({"type": "corrects", "object": invoice})
    """

    document_type = "creditNote"
