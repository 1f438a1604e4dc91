"""
Gateway and document name resolution.

Short names ("Offline", "invoice") are mapped to implementation identifiers
by ``comprobante.helpers``; this module turns identifiers into classes and
instances.

Design Decisions:
- ClassRegistry is an explicit table from identifier to factory callable.
  Identifiers not in the table are imported as ``module:Attribute``, so an
  installed third-party package is found without registering it
- A missing module or attribute means "not found"; an ImportError raised
  while importing an existing module is a bug in that module and propagates
- GatewayFactory is a plain object. ``get_default_factory`` exists for
  callers who want a process-wide instance, but nothing uses it implicitly
- Neither class is thread-safe; configure the factory at start-up and treat
  it as read-only afterwards, or serialize access externally
"""

import importlib
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from comprobante.config import get_settings
from comprobante.domain.documents import AbstractDocument, CreditNote, Invoice, Ticket
from comprobante.exceptions import ClassNotFoundError
from comprobante.gateways.base import AbstractGateway
from comprobante.gateways.offline import Gateway as OfflineGateway
from comprobante.helpers import (
    CORE_DOCUMENT_MODULE,
    DEFAULT_GATEWAY_ROOT,
    QUALIFIED_MARKER,
    document_class_names,
    gateway_class_name,
    gateway_short_name,
    split_identifier,
)

logger = logging.getLogger(__name__)


class ClassRegistry:
    """
    Table of implementations keyed by ``module:Attribute`` identifier.

    Example:
        registry = ClassRegistry.with_defaults()
        registry.register("acme.signing:Gateway", AcmeGateway)
        registry.load("acme.signing:Gateway")   # AcmeGateway
    """

    def __init__(self, implementations: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self._implementations: dict[str, Callable[..., Any]] = dict(implementations or {})

    @classmethod
    def with_defaults(cls) -> "ClassRegistry":
        """Registry pre-loaded with the core documents and the Offline gateway."""
        registry = cls()
        for document_class in (Ticket, Invoice, CreditNote):
            registry.register(
                f"{CORE_DOCUMENT_MODULE}{QUALIFIED_MARKER}{document_class.__name__}",
                document_class,
            )
        registry.register(gateway_class_name("Offline", DEFAULT_GATEWAY_ROOT), OfflineGateway)
        return registry

    def register(self, identifier: str, implementation: Callable[..., Any]) -> None:
        self._implementations[identifier] = implementation

    def unregister(self, identifier: str) -> None:
        self._implementations.pop(identifier, None)

    def identifiers(self) -> list[str]:
        return sorted(self._implementations)

    def get(self, identifier: str) -> Callable[..., Any] | None:
        """Look up an identifier in the table only, without importing."""
        return self._implementations.get(identifier)

    def load(self, identifier: str) -> Callable[..., Any] | None:
        """
        Resolve an identifier to its implementation.

        Returns:
            The registered or importable implementation, or None when the
            module or attribute does not exist
        """
        implementation = self._implementations.get(identifier)
        if implementation is not None:
            return implementation

        module_name, attribute = split_identifier(identifier)
        if not module_name or not attribute:
            return None

        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            if e.name and (module_name == e.name or module_name.startswith(f"{e.name}.")):
                logger.debug(f"Module for '{identifier}' not found: {e.name}")
                return None
            raise

        implementation = getattr(module, attribute, None)
        if not callable(implementation):
            logger.debug(f"Attribute '{attribute}' not found in module '{module_name}'")
            return None
        return implementation

    def exists(self, identifier: str) -> bool:
        return self.load(identifier) is not None

    def load_subclass[T](self, identifier: str, base: type[T]) -> type[T] | None:
        """
        Resolve an identifier to a subclass of ``base``.

        Anything else the identifier names (functions, unrelated classes,
        module constants) counts as not found.
        """
        implementation = self.load(identifier)
        if isinstance(implementation, type) and issubclass(implementation, base):
            return implementation
        if implementation is not None:
            logger.debug(f"'{identifier}' is not a {base.__name__} subclass")
        return None


class GatewayFactory:
    """
    Creates gateways and documents from short names.

    Example:
        factory = GatewayFactory()
        factory.find()                          # ["Offline"]
        gateway = factory.create("Offline")
        invoice = gateway.create_document("invoice", {...})
    """

    def __init__(
        self,
        registry: ClassRegistry | None = None,
        gateway_root: str | None = None,
        supported_gateways: Iterable[str] | None = None,
    ) -> None:
        """
        Initialize factory.

        Args:
            registry: Implementation table (core defaults if None)
            gateway_root: Package for short gateway names (from settings if None)
            supported_gateways: Names checked by ``find`` (from settings if None)
        """
        settings = get_settings()
        self.registry = registry or ClassRegistry.with_defaults()
        self.gateway_root = gateway_root or settings.gateway_root
        self._supported = list(
            settings.supported_gateways if supported_gateways is None else supported_gateways
        )
        self._gateways: list[str] = []

    def all(self) -> list[str]:
        """All registered gateway names."""
        return list(self._gateways)

    def replace(self, gateways: Iterable[str]) -> None:
        """Replace the list of registered gateway names."""
        self._gateways = list(gateways)

    def register(self, name: str) -> None:
        """Register a gateway name; registering twice has no effect."""
        if name not in self._gateways:
            self._gateways.append(name)
            logger.info(f"Registered gateway '{name}'")

    def supported_gateways(self) -> list[str]:
        """Gateway names that may be available."""
        return list(self._supported)

    def find(self) -> list[str]:
        """
        Register every supported gateway whose class can be loaded.

        Returns:
            All registered names, sorted
        """
        for name in self.supported_gateways():
            identifier = self.gateway_class_name(name)
            if self.registry.load_subclass(identifier, AbstractGateway) is not None:
                self.register(name)
            else:
                logger.warning(f"Supported gateway '{name}' is not available ({identifier})")

        self._gateways.sort()
        return self.all()

    def gateway_class_name(self, name: str) -> str:
        return gateway_class_name(name, self.gateway_root)

    def gateway_short_name(self, identifier: str) -> str:
        return gateway_short_name(identifier, self.gateway_root)

    def create(self, name: str, http_client: Any = None, **parameters: Any) -> AbstractGateway:
        """
        Create a new gateway instance.

        Args:
            name: Short gateway name or qualified identifier
            http_client: Transport handed to the gateway's requests
            **parameters: Gateway parameters (credentials, test mode, ...)

        Raises:
            ClassNotFoundError: If no gateway class can be loaded
        """
        identifier = self.gateway_class_name(name)
        gateway_class = self.registry.load_subclass(identifier, AbstractGateway)
        if gateway_class is None:
            raise ClassNotFoundError(identifier)

        gateway = gateway_class(
            http_client=http_client,
            factory=self,
            short_name=self.gateway_short_name(identifier),
        )
        if parameters:
            gateway.initialize(parameters)

        logger.info(f"Created gateway '{name}' ({identifier})")
        return gateway

    def document_class_name(self, name: str, gateway: str | None = None) -> str:
        """
        Identifier of the document class for a type name.

        The gateway's own ``documents`` module wins when it defines the type;
        otherwise the core document is used, whether or not it exists.
        """
        candidates = document_class_names(name, gateway, self.gateway_root)
        for identifier in candidates[:-1]:
            if self.registry.load_subclass(identifier, AbstractDocument) is not None:
                return identifier
        return candidates[-1]

    def document_class(self, name: str, gateway: str | None = None) -> type[AbstractDocument]:
        """
        Resolve a document type name to its class.

        Raises:
            ClassNotFoundError: If neither the gateway nor the core defines a
                document class of that name
        """
        identifier = self.document_class_name(name, gateway)
        document_class = self.registry.load_subclass(identifier, AbstractDocument)
        if document_class is None:
            raise ClassNotFoundError(identifier)

        logger.debug(f"Resolved document '{name}' to {identifier}")
        return document_class

    def create_document(
        self,
        name: str,
        parameters: Mapping[str, Any] | None = None,
        gateway: str | None = None,
    ) -> AbstractDocument:
        """Resolve and instantiate a document from raw parameters."""
        return self.document_class(name, gateway)(parameters)


# Process-wide factory, created only when a caller asks for it
_default_factory: GatewayFactory | None = None


def get_default_factory() -> GatewayFactory:
    """Get or create the process-wide factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = GatewayFactory()
    return _default_factory


def set_default_factory(factory: GatewayFactory | None) -> None:
    """Install (or with None, drop) the process-wide factory."""
    global _default_factory
    _default_factory = factory
