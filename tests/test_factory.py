"""
Tests for the class registry and the gateway factory.

Verifies:
- Identifier loading from the table and by import
- Gateway registration, discovery and creation
- Document class resolution with gateway overrides
- The opt-in process-wide factory
"""

import logging
from typing import Any, Self

import pytest

from comprobante.domain.documents import CreditNote, Invoice, Ticket
from comprobante.exceptions import ClassNotFoundError
from comprobante.factory import (
    ClassRegistry,
    GatewayFactory,
    get_default_factory,
    set_default_factory,
)
from comprobante.gateways.base import AbstractGateway
from comprobante.gateways.offline import Gateway as OfflineGateway


class ExpressGateway(AbstractGateway):
    """Gateway with an environment choice and no operations."""

    @property
    def name(self) -> str:
        return "Express"

    def default_parameters(self) -> dict[str, Any]:
        parameters = super().default_parameters()
        parameters["environment"] = ["sandbox", "production"]
        return parameters

    @property
    def environment(self) -> str | None:
        return self._get_parameter("environment")

    def set_environment(self, value: str) -> Self:
        return self._set_parameter("environment", value)


class ExpressInvoice(Invoice):
    """Invoice variant shipped by the Express gateway."""


@pytest.fixture
def acme_factory() -> GatewayFactory:
    registry = ClassRegistry.with_defaults()
    registry.register("acme.gateways.zeta:Gateway", ExpressGateway)
    registry.register("acme.gateways.express:Gateway", ExpressGateway)
    registry.register("acme.gateways.express.documents:Invoice", ExpressInvoice)
    return GatewayFactory(
        registry,
        gateway_root="acme.gateways",
        supported_gateways=["Zeta", "Missing", "Express"],
    )


class TestClassRegistry:
    """Tests for ClassRegistry."""

    def test_defaults(self):
        """Test core documents and the Offline gateway are pre-registered."""
        registry = ClassRegistry.with_defaults()
        assert registry.get("comprobante.domain.documents:Invoice") is Invoice
        assert registry.get("comprobante.domain.documents:CreditNote") is CreditNote
        assert registry.get("comprobante.gateways.offline:Gateway") is OfflineGateway

    def test_register_and_unregister(self):
        """Test table entries can be added and removed."""
        registry = ClassRegistry()
        registry.register("acme.signing:Gateway", ExpressGateway)
        assert registry.identifiers() == ["acme.signing:Gateway"]
        registry.unregister("acme.signing:Gateway")
        registry.unregister("acme.signing:Gateway")
        assert registry.identifiers() == []

    def test_load_by_import(self):
        """Test identifiers outside the table are imported."""
        registry = ClassRegistry()
        assert registry.get("comprobante.domain.documents:Ticket") is None
        assert registry.load("comprobante.domain.documents:Ticket") is Ticket

    def test_missing_module(self):
        """Test a module that does not exist is reported as not found."""
        registry = ClassRegistry()
        assert registry.load("acme.signing:Gateway") is None
        assert registry.load("comprobante.gateways.no_such_gateway:Gateway") is None
        assert not registry.exists("comprobante.gateways.no_such_gateway:Gateway")

    def test_missing_attribute(self):
        """Test a missing attribute in an existing module."""
        assert ClassRegistry().load("comprobante.domain.documents:Receipt") is None

    def test_non_callable_attribute(self):
        """Test module constants are not implementations."""
        assert ClassRegistry().load("comprobante.helpers:GATEWAY_SUFFIX") is None

    def test_load_subclass(self):
        """Test only subclasses of the requested base are returned."""
        registry = ClassRegistry.with_defaults()
        assert registry.load_subclass("comprobante.domain.documents:Ticket", Ticket) is Ticket
        assert registry.load_subclass("comprobante.domain.documents:Ticket", AbstractGateway) is None
        assert registry.load_subclass("comprobante.helpers:is_qualified", Ticket) is None
        assert registry.load_subclass("acme.signing:Gateway", AbstractGateway) is None

    def test_unqualified_identifier(self):
        """Test identifiers without a module cannot be imported."""
        assert ClassRegistry().load("Gateway") is None

    def test_broken_module_propagates(self, tmp_path, monkeypatch):
        """Test import errors inside an existing module are not hidden."""
        (tmp_path / "broken_signing_module.py").write_text("import module_that_is_not_installed\n")
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(ModuleNotFoundError):
            ClassRegistry().load("broken_signing_module:Gateway")


class TestGatewayRegistration:
    """Tests for all/register/replace/find."""

    def test_register_is_idempotent(self, factory, caplog):
        """Test registering a name twice keeps one entry and logs once."""
        with caplog.at_level(logging.INFO, logger="comprobante.factory"):
            factory.register("Offline")
            factory.register("Offline")

        assert factory.all() == ["Offline"]
        assert caplog.text.count("Registered gateway 'Offline'") == 1

    def test_replace(self, factory):
        """Test replace() twice with the same list is stable."""
        factory.replace(["Offline", "Other"])
        factory.replace(["Offline", "Other"])
        assert factory.all() == ["Offline", "Other"]

    def test_all_returns_copy(self, factory):
        """Test the registered list cannot be modified from outside."""
        factory.all().append("Rogue")
        assert factory.all() == []

    def test_find_skips_unavailable(self, factory, caplog):
        """Test only loadable gateways are registered."""
        with caplog.at_level(logging.WARNING, logger="comprobante.factory"):
            assert factory.find() == ["Offline"]
        assert "FacturacionModerna" in caplog.text

    def test_find_is_sorted(self, acme_factory):
        """Test the result is sorted by name."""
        assert acme_factory.find() == ["Express", "Zeta"]

    def test_find_keeps_previous_registrations(self, factory):
        """Test manually registered names survive discovery."""
        factory.register("Zulu")
        assert factory.find() == ["Offline", "Zulu"]

    def test_find_skips_non_gateway_classes(self, caplog):
        """Test a table entry that is not a gateway class is not registered."""
        registry = ClassRegistry.with_defaults()
        registry.register("acme.gateways.ledger:Gateway", Ticket)
        factory = GatewayFactory(registry, gateway_root="acme.gateways", supported_gateways=["Ledger"])

        with caplog.at_level(logging.WARNING, logger="comprobante.factory"):
            assert factory.find() == []
        assert "Ledger" in caplog.text

    def test_supported_gateways_from_settings(self):
        """Test the configured list is used when none is given."""
        assert "Offline" in GatewayFactory().supported_gateways()


class TestGatewayCreation:
    """Tests for GatewayFactory.create."""

    def test_create_offline(self, factory):
        """Test creating the built-in gateway."""
        gateway = factory.create("Offline")
        assert isinstance(gateway, OfflineGateway)
        assert gateway.name == "Offline"
        assert gateway.short_name == "Offline"

    def test_create_by_identifier(self, factory):
        """Test a qualified identifier also works as a name."""
        gateway = factory.create("comprobante.gateways.offline:Gateway")
        assert isinstance(gateway, OfflineGateway)
        assert gateway.short_name == "Offline"

    def test_create_unknown(self, factory):
        """Test unknown gateways raise ClassNotFoundError."""
        with pytest.raises(ClassNotFoundError) as exc_info:
            factory.create("NoSuchGateway")
        assert exc_info.value.identifier == "comprobante.gateways.no_such_gateway:Gateway"
        assert exc_info.value.code == "CLASS_NOT_FOUND"

    @pytest.mark.parametrize(
        "name",
        ["comprobante.domain.documents:Ticket", "comprobante.helpers:camel_case"],
    )
    def test_create_rejects_non_gateway(self, factory, name):
        """Test identifiers naming anything but a gateway class are not found."""
        with pytest.raises(ClassNotFoundError) as exc_info:
            factory.create(name)
        assert exc_info.value.identifier == name

    def test_create_with_parameters(self, factory):
        """Test parameters and the HTTP client reach the gateway."""
        client = object()
        gateway = factory.create("Offline", http_client=client, test_mode=True, currency="mxn")
        assert gateway.http_client is client
        assert gateway.test_mode is True
        assert gateway.currency == "MXN"

    def test_default_parameters(self, acme_factory):
        """Test list defaults take their first choice."""
        gateway = acme_factory.create("Express")
        assert gateway.environment == "sandbox"
        assert gateway.test_mode is False
        assert gateway.currency == "USD"

    def test_default_overridden(self, acme_factory):
        """Test given parameters win over defaults."""
        gateway = acme_factory.create("Express", environment="production")
        assert gateway.environment == "production"

    def test_short_name_under_custom_root(self, acme_factory):
        """Test short names are relative to the factory's root."""
        assert acme_factory.create("Express").short_name == "Express"


class TestDocumentResolution:
    """Tests for document class lookup."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("ticket", Ticket),
            ("invoice", Invoice),
            ("credit_note", CreditNote),
            ("creditNote", CreditNote),
            ("comprobante.domain.documents:Ticket", Ticket),
        ],
    )
    def test_core_documents(self, factory, name, expected):
        """Test every spelling resolves to the core class."""
        assert factory.document_class(name) is expected

    def test_unknown_document(self, factory):
        """Test unknown types raise ClassNotFoundError."""
        with pytest.raises(ClassNotFoundError) as exc_info:
            factory.document_class("receipt")
        assert exc_info.value.identifier == "comprobante.domain.documents:Receipt"

    @pytest.mark.parametrize(
        "name,identifier",
        [
            ("bag", "comprobante.domain.documents:Bag"),
            ("decimal", "comprobante.domain.documents:Decimal"),
            ("comprobante.gateways.offline:Gateway", "comprobante.gateways.offline:Gateway"),
        ],
    )
    def test_non_document_names(self, factory, name, identifier):
        """Test names resolving to classes other than documents are not found."""
        with pytest.raises(ClassNotFoundError) as exc_info:
            factory.create_document(name)
        assert exc_info.value.identifier == identifier

    def test_gateway_override(self, acme_factory):
        """Test a gateway's own document wins."""
        assert acme_factory.document_class("invoice", gateway="Express") is ExpressInvoice
        assert (
            acme_factory.document_class_name("invoice", gateway="Express")
            == "acme.gateways.express.documents:Invoice"
        )

    def test_gateway_fallback(self, acme_factory):
        """Test types the gateway does not override come from the core."""
        assert acme_factory.document_class("ticket", gateway="Express") is Ticket

    def test_gateway_without_documents_module(self, factory):
        """Test the Offline gateway uses the core documents."""
        assert factory.document_class("invoice", gateway="Offline") is Invoice

    def test_create_document(self, factory, invoice_payload):
        """Test resolving and instantiating in one call."""
        invoice = factory.create_document("invoice", invoice_payload)
        assert isinstance(invoice, Invoice)
        assert invoice.id == "2024-0001"

    def test_gateway_creates_its_own_documents(self, acme_factory, invoice_payload):
        """Test documents created through a gateway use its classes and currency."""
        del invoice_payload["currency"]
        gateway = acme_factory.create("Express", currency="eur")
        invoice = gateway.create_document("invoice", invoice_payload)
        assert isinstance(invoice, ExpressInvoice)
        assert invoice.currency == "EUR"


class TestDefaultFactory:
    """Tests for the process-wide factory."""

    def test_created_on_first_use(self):
        """Test the default factory is created once and reused."""
        first = get_default_factory()
        assert get_default_factory() is first

    def test_can_be_replaced(self, factory):
        """Test installing a configured factory."""
        set_default_factory(factory)
        assert get_default_factory() is factory
