"""
Shared fixtures: raw document payloads and an isolated gateway factory.
"""

from typing import Any

import pytest

from comprobante.factory import ClassRegistry, GatewayFactory, set_default_factory


@pytest.fixture
def issuer() -> dict[str, Any]:
    return {
        "id": "AAA010101AAA",
        "name": "Acme Servicios",
        "email": "facturacion@acme.mx",
        "address": {
            "address_1": "Av. Reforma 222",
            "postcode": "06600",
            "locality": "Cuauhtemoc",
            "state": "CDMX",
            "country": "MX",
        },
    }


@pytest.fixture
def receiver() -> dict[str, Any]:
    return {"id": "XAXX010101000", "name": "Publico en General"}


@pytest.fixture
def items() -> list[dict[str, Any]]:
    """A (100 x 1) and B (50 x 2, discount 10), both with 16% VAT."""
    return [
        {"name": "A", "price": 100, "quantity": 1, "taxes": [{"type": "vat", "rate": 16}]},
        {
            "name": "B",
            "price": 50,
            "quantity": 2,
            "discount": 10,
            "taxes": [{"type": "vat", "rate": 16}],
        },
    ]


@pytest.fixture
def invoice_payload(issuer, receiver, items) -> dict[str, Any]:
    return {
        "id": "2024-0001",
        "series": "A",
        "date": "2024-03-15T10:30:00+00:00",
        "currency": "MXN",
        "from": issuer,
        "to": receiver,
        "items": items,
    }


@pytest.fixture
def factory() -> GatewayFactory:
    return GatewayFactory(
        ClassRegistry.with_defaults(),
        supported_gateways=["Offline", "FacturacionModerna"],
    )


@pytest.fixture(autouse=True)
def reset_default_factory():
    """Keep the process-wide factory from leaking between tests."""
    set_default_factory(None)
    yield
    set_default_factory(None)
