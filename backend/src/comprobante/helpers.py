"""
Naming helpers shared by the entity layer and the gateway factory.

Two kinds of names pass through here:

1. Parameter keys. Raw input uses snake_case (``unit_code``) or camelCase
   (``unitCode``); both normalize to the camelCase key under which an
   entity registers its ``set_unit_code`` setter.
2. Implementation identifiers. Gateways and documents are addressed by
   ``"package.module:Attribute"`` strings. Short names map onto that form
   under a fixed root package:

       acme.signing:Gateway  => acme.signing:Gateway (already qualified)
       FacturacionModerna    => comprobante.gateways.facturacion_moderna:Gateway
       Other_Express         => comprobante.gateways.other:ExpressGateway
       Other.Express         => comprobante.gateways.other:ExpressGateway
"""

import re

DEFAULT_GATEWAY_ROOT = "comprobante.gateways"
CORE_DOCUMENT_MODULE = "comprobante.domain.documents"

GATEWAY_SUFFIX = "Gateway"
QUALIFIED_MARKER = ":"

_CAMEL_RE = re.compile(r"_([a-z])")
_UPPER_RE = re.compile(r"(?<!^)(?<!_)(?=[A-Z])")
_SEGMENT_RE = re.compile(r"[_.]")


def camel_case(value: str) -> str:
    """
    Convert a string to camelCase.

    Strings already in camelCase are left alone. Underscores followed by a
    digit are kept, so ``address_1`` stays ``address_1``.
    """
    return _CAMEL_RE.sub(lambda match: match.group(1).upper(), value)


def snake_case(value: str) -> str:
    """Convert a CamelCase or camelCase string to snake_case."""
    return _UPPER_RE.sub("_", value).lower()


def pascal_case(value: str) -> str:
    """Convert ``credit_note`` or ``creditNote`` to ``CreditNote``."""
    value = camel_case(value)
    return value[:1].upper() + value[1:]


def is_qualified(name: str) -> bool:
    """True if the name is already a ``module:Attribute`` identifier."""
    return QUALIFIED_MARKER in name


def split_identifier(identifier: str) -> tuple[str, str]:
    """Split ``module:Attribute`` into its module path and attribute name."""
    module, _, attribute = identifier.rpartition(QUALIFIED_MARKER)
    return module, attribute


def gateway_class_name(short_name: str, root: str = DEFAULT_GATEWAY_ROOT) -> str:
    """
    Resolve a short gateway name to a fully qualified gateway identifier.

    Underscores and dots in the short name separate namespace segments.
    A single segment names a package that exposes ``Gateway``; with more
    than one, the last segment becomes the ``<Name>Gateway`` attribute.

    Raises:
        ValueError: If the name has no segments at all
    """
    if is_qualified(short_name):
        return short_name

    segments = [segment for segment in _SEGMENT_RE.split(short_name) if segment]
    if not segments:
        raise ValueError(f"Invalid gateway name: {short_name!r}")

    if len(segments) == 1:
        module = f"{root}.{snake_case(segments[0])}"
        return f"{module}{QUALIFIED_MARKER}{GATEWAY_SUFFIX}"

    module = ".".join([root, *(snake_case(segment) for segment in segments[:-1])])
    return f"{module}{QUALIFIED_MARKER}{segments[-1]}{GATEWAY_SUFFIX}"


def gateway_short_name(identifier: str, root: str = DEFAULT_GATEWAY_ROOT) -> str:
    """
    Resolve a gateway identifier back to its short name.

    Identifiers outside ``root`` (or not following the naming convention)
    have no short form and are returned unchanged, which still works as a
    name for ``gateway_class_name``.
    """
    module, attribute = split_identifier(identifier)
    if not module.startswith(f"{root}.") or not attribute.endswith(GATEWAY_SUFFIX):
        return identifier

    segments = [pascal_case(part) for part in module[len(root) + 1:].split(".")]
    prefix = attribute[: -len(GATEWAY_SUFFIX)]
    if prefix:
        segments.append(prefix)
    return "_".join(segments)


def gateway_namespace(short_name: str, root: str = DEFAULT_GATEWAY_ROOT) -> str:
    """Module path that holds the gateway (and its document overrides)."""
    module, _ = split_identifier(gateway_class_name(short_name, root))
    return module


def document_class_names(
    short_name: str,
    gateway: str | None = None,
    root: str = DEFAULT_GATEWAY_ROOT,
) -> list[str]:
    """
    Candidate identifiers for a document type, most specific first.

    A gateway may ship its own ``documents`` module overriding a core type;
    the core document of the same name is always the last candidate.
    """
    if is_qualified(short_name):
        return [short_name]

    class_name = pascal_case(short_name)
    candidates = []
    if gateway:
        namespace = gateway_namespace(gateway, root)
        candidates.append(f"{namespace}.documents{QUALIFIED_MARKER}{class_name}")
    candidates.append(f"{CORE_DOCUMENT_MODULE}{QUALIFIED_MARKER}{class_name}")
    return candidates
