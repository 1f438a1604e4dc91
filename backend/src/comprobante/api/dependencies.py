"""
Shared route dependencies.

The API opts into the process-wide factory; tests swap it through
``app.dependency_overrides[get_factory]``.

Qualified ``module:Attribute`` names from a request are only honoured when
the factory's registry table lists them, so a client cannot make the
service import arbitrary modules.
"""

from comprobante.exceptions import ClassNotFoundError
from comprobante.factory import GatewayFactory, get_default_factory
from comprobante.helpers import is_qualified


def get_factory() -> GatewayFactory:
    return get_default_factory()


def require_registered(factory: GatewayFactory, name: str | None) -> None:
    """
    Reject a qualified name that is not in the registry table.

    Raises:
        ClassNotFoundError: If ``name`` is qualified and unregistered
    """
    if name and is_qualified(name) and factory.registry.get(name) is None:
        raise ClassNotFoundError(name)
