"""
Unit tests for parametrized entities.

Verifies:
- Construction from raw mappings and the setter registration table
- Required parameters and type validation
- Per-entity conversions and defaults
"""

from decimal import Decimal

import pytest

from comprobante.domain.bag import Bag
from comprobante.domain.documents import Invoice, Ticket
from comprobante.domain.models import Address, Discount, Item, Person, Relation, Tax
from comprobante.exceptions import (
    InvalidFieldTypeError,
    InvalidNumericValueError,
    MissingRequiredFieldError,
    ValidationError,
)


class TestSetterTable:
    """Tests for key to setter dispatch."""

    def test_table_is_per_class(self):
        """Test subclasses extend the parent table without touching it."""
        assert "to" in Invoice._setters
        assert "to" not in Ticket._setters
        assert "from" in Ticket._setters

    def test_mixin_setters_are_registered(self):
        """Test setters contributed by mixins are picked up."""
        assert "currency" in Ticket._setters

    def test_camel_and_snake_keys(self):
        """Test both spellings of a key reach the same setter."""
        assert Item({"unit_code": "H87"}).unit_code == "H87"
        assert Item({"unitCode": "H87"}).unit_code == "H87"

    def test_unknown_keys_ignored(self):
        """Test keys without a setter are dropped."""
        item = Item({"name": "Widget", "price": 1, "colour": "red"})
        assert "colour" not in item.parameters

    def test_non_mapping_sets_nothing(self):
        """Test non-mapping input leaves the entity empty."""
        assert Discount(["name", "amount"]).parameters == {}

    def test_initialize_discards_previous_state(self):
        """Test initialize() starts from an empty container."""
        item = Item({"name": "Widget", "price": 1})
        item.initialize({"name": "Gadget"})
        assert item.name == "Gadget"
        assert item.price is None

    def test_setters_chain(self):
        """Test setters return the entity."""
        item = Item().set_name("Widget").set_price("9.99")
        assert item.price == Decimal("9.99")


class TestRequiredParameters:
    """Tests for required parameter validation."""

    def test_missing_required(self):
        """Test the first missing required parameter is reported."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            Person({"name": "Acme"}).validate()
        assert exc_info.value.field == "id"
        assert str(exc_info.value) == "The id parameter is required"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_counts_as_missing(self, value):
        """Test None and the empty string are both missing."""
        with pytest.raises(MissingRequiredFieldError):
            Person({"id": value, "name": "Acme"}).validate()

    def test_zero_is_present(self):
        """Test a zero amount satisfies the requirement."""
        Discount({"name": "Promo", "amount": 0}).validate()

    def test_required_accumulates_along_hierarchy(self):
        """Test a subclass requires everything its parent does."""
        assert Invoice().parameters_required == ("type", "from", "to")

    def test_add_parameters_required_skips_duplicates(self):
        """Test re-adding a name keeps a single entry."""
        person = Person()
        person.add_parameters_required(["id", "email"])
        assert person.parameters_required == ("id", "name", "email")

    def test_validation_error_hierarchy(self):
        """Test all field errors share one base class."""
        assert issubclass(MissingRequiredFieldError, ValidationError)
        assert issubclass(InvalidFieldTypeError, ValidationError)


class TestAddress:
    """Tests for Address."""

    def test_str_joins_present_parts(self):
        """Test the display form skips missing parts and the country."""
        address = Address({
            "address_1": "123 Fake Street",
            "address_2": "Tower 4",
            "postcode": "12345",
            "locality": "Lixnaw",
            "state": "Kerry",
            "country": "IE",
        })
        assert str(address) == "123 Fake Street, Tower 4, 12345, Lixnaw, Kerry"

    def test_requires_country(self):
        """Test address_1, locality and country are required."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            Address({"address_1": "123 Fake Street", "locality": "Lixnaw"}).validate()
        assert exc_info.value.field == "country"


class TestPerson:
    """Tests for Person."""

    def test_address_mapping_becomes_entity(self, issuer):
        """Test a nested mapping is converted to an Address."""
        person = Person(issuer)
        assert isinstance(person.address, Address)
        assert person.address.locality == "Cuauhtemoc"
        person.validate()

    def test_invalid_email(self):
        """Test malformed emails are rejected."""
        person = Person({"id": "1", "name": "Acme", "email": "not-an-email"})
        with pytest.raises(InvalidFieldTypeError) as exc_info:
            person.validate()
        assert exc_info.value.field == "email"
        assert str(exc_info.value) == "The email parameter must be a valid email"

    def test_non_string_id(self):
        """Test identifiers must be strings."""
        with pytest.raises(InvalidFieldTypeError) as exc_info:
            Person({"id": 123, "name": "Acme"}).validate()
        assert exc_info.value.field == "id"

    def test_nested_address_is_validated(self):
        """Test an incomplete address fails the person's validation."""
        person = Person({"id": "1", "name": "Acme", "address": {"address_1": "Somewhere"}})
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            person.validate()
        assert exc_info.value.field == "locality"

    def test_address_wrong_type(self):
        """Test a non-Address address is rejected."""
        person = Person({"id": "1", "name": "Acme", "address": "Av. Reforma 222"})
        with pytest.raises(InvalidFieldTypeError):
            person.validate()


class TestTax:
    """Tests for Tax."""

    def test_type_derived_from_name(self):
        """Test a missing type is the lower-cased name."""
        assert Tax({"name": "VAT", "rate": 16}).type == "vat"

    def test_name_derived_from_type(self):
        """Test a missing name is the upper-cased type."""
        assert Tax({"type": "vat", "rate": 16}).name == "VAT"

    def test_rate_is_decimal(self):
        """Test rates are converted on set."""
        assert Tax({"type": "vat", "rate": "16.00"}).rate == Decimal("16.00")

    def test_invalid_rate_raises_on_set(self):
        """Test conversion errors surface at construction."""
        with pytest.raises(InvalidNumericValueError):
            Tax({"type": "vat", "rate": "sixteen"})

    def test_amount_over_base(self):
        """Test rate applied to an explicit base."""
        tax = Tax({"type": "vat", "rate": 16})
        assert tax.amount_for(Decimal("190")) == Decimal("30.40")

    def test_accumulated_base(self):
        """Test add_base_amount accumulates."""
        tax = Tax({"type": "vat", "rate": 16})
        tax.add_base_amount(100).add_base_amount("90")
        assert tax.base_amount == Decimal("190")
        assert tax.amount == Decimal("30.40")

    def test_fixed_amount_wins(self):
        """Test a fixed amount ignores the rate and base."""
        tax = Tax({"type": "ieps", "rate": 8, "fixed_amount": "3.50"})
        assert tax.amount_for(Decimal("1000")) == Decimal("3.50")

    def test_negative_rate(self):
        """Test withholdings use negative rates."""
        tax = Tax({"type": "isr", "rate": -10})
        assert tax.amount_for(Decimal("100")) == Decimal("-10.00")

    def test_decimal_places(self):
        """Test the precision used when none is passed."""
        tax = Tax({"type": "vat", "rate": 16, "base_amount": 33}, decimal_places=0)
        assert tax.amount == Decimal("5")
        assert tax.amount_for(Decimal("33"), 2) == Decimal("5.28")
        assert Tax({"type": "vat", "rate": 16}).decimal_places == 2

    def test_missing_rate_is_zero(self):
        """Test an unset rate contributes nothing."""
        assert Tax({"type": "exempt"}).amount_for(Decimal("100")) == Decimal("0.00")


class TestItem:
    """Tests for Item."""

    def test_defaults_at_read_time(self):
        """Test quantity defaults to one and discount to zero."""
        item = Item({"name": "Widget", "price": "12.50"})
        assert item.quantity == Decimal("1")
        assert item.discount == Decimal("0")
        assert "quantity" not in item.parameters

    def test_amount(self):
        """Test amount is price times quantity."""
        item = Item({"name": "Widget", "price": "12.50", "quantity": 3})
        assert item.amount == Decimal("37.50")

    def test_missing_price_amount_is_zero(self):
        """Test a missing price does not break arithmetic."""
        assert Item({"name": "Widget"}).amount == Decimal("0")

    def test_base_amount_for_tax_nets_discount(self):
        """Test the item discount reduces the tax base."""
        item = Item({"name": "B", "price": 50, "quantity": 2, "discount": 10})
        assert item.base_amount_for_tax == Decimal("90")

    def test_taxes_from_mappings(self):
        """Test tax mappings become Tax entities."""
        item = Item({"name": "Widget", "price": 1, "taxes": [{"type": "vat", "rate": 16}]})
        assert isinstance(item.taxes, Bag)
        assert isinstance(item.taxes[0], Tax)

    def test_single_tax_mapping(self):
        """Test a lone mapping counts as a one-element list."""
        item = Item({"name": "Widget", "price": 1, "taxes": {"type": "vat", "rate": 16}})
        assert item.taxes.count() == 1

    def test_taxes_lazy_bag(self):
        """Test the taxes bag exists even when never set."""
        item = Item({"name": "Widget", "price": 1})
        item.taxes.add(Tax({"type": "vat", "rate": 16}))
        assert item.taxes.count() == 1

    def test_invalid_tax_entry(self):
        """Test non-Tax entries fail validation."""
        item = Item({"name": "Widget", "price": 1, "taxes": ["vat"]})
        with pytest.raises(InvalidFieldTypeError) as exc_info:
            item.validate()
        assert exc_info.value.field == "taxes"

    def test_non_string_name(self):
        """Test item names must be strings."""
        with pytest.raises(InvalidFieldTypeError):
            Item({"name": 42, "price": 1}).validate()

    def test_to_dict(self):
        """Test export of nested taxes."""
        data = Item({"name": "Widget", "price": 1, "taxes": [{"type": "vat", "rate": 16}]}).to_dict()
        assert data["name"] == "Widget"
        assert data["taxes"][0]["type"] == "vat"
        assert data["taxes"][0]["rate"] == Decimal("16")


class TestRelation:
    """Tests for Relation."""

    def test_requires_object(self):
        """Test type and object are required."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            Relation({"type": "corrects"}).validate()
        assert exc_info.value.field == "object"

    def test_object_reference(self):
        """Test the related object is kept as given."""
        invoice = Invoice({"id": "A-1"})
        relation = Relation({"type": "corrects", "name": "A-1", "object": invoice})
        assert relation.object is invoice
        relation.validate()
