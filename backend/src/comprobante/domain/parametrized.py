"""
Parametrized entities - the base of every document, party and line object.

An entity is built from a raw mapping (typically decoded JSON):

    item = Item({"name": "Widget", "price": "12.50", "unit_code": "H87"})

Each key is normalized to camelCase and looked up in the class's field
registration table, which maps accepted keys to ``set_<field>`` setters.
The table is built once, when the class is defined, from the setters the
class (and its bases and mixins) declare. Keys without a setter are ignored.

Design Decisions:
- Setters are the only write path, so conversions (numbers to Decimal,
  nested mappings to entities) happen in exactly one place
- Required keys accumulate along the constructor chain; a subclass requires
  everything its parent does
- Validation is explicit and fail-fast; computing totals never validates
"""

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar, Self

from comprobante.exceptions import InvalidFieldTypeError, MissingRequiredFieldError
from comprobante.helpers import camel_case

from .bag import Bag
from .parameters import ParameterContainer

logger = logging.getLogger(__name__)

SETTER_PREFIX = "set_"

_PASSTHROUGH_TYPES = (str, int, float, bool, Decimal, date, datetime)


def build_setter_table(cls: type) -> dict[str, Callable[[Any, Any], Any]]:
    """Map camelCase parameter keys to the setters declared along the MRO."""
    table: dict[str, Callable[[Any, Any], Any]] = {}
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            if attr.startswith(SETTER_PREFIX) and inspect.isfunction(value):
                table[camel_case(attr[len(SETTER_PREFIX):])] = value
    return table


def export_value(value: Any) -> Any:
    """Recursively convert a parameter value into plain data."""
    if value is None or isinstance(value, _PASSTHROUGH_TYPES):
        return value
    if isinstance(value, Bag):
        return [export_value(element) for element in value]
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Mapping):
        return {key: export_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [export_value(item) for item in value]
    if hasattr(value, "__dict__"):
        return {key: item for key, item in vars(value).items() if not key.startswith("_")}
    return value


def build_bag[T](value: Any, factory: Callable[[Mapping[str, Any]], T]) -> Bag[T]:
    """
    Build a Bag of entities from raw input.

    A Bag is kept as-is, a single mapping counts as a one-element list and
    mappings inside a list are turned into entities. Anything else is kept
    unchanged so that ``validate()`` can report it.
    """
    if isinstance(value, Bag):
        return value
    if value is None:
        return Bag()
    if isinstance(value, (Mapping, str, bytes)) or not isinstance(value, Iterable):
        value = [value]
    return Bag(factory(element) if isinstance(element, Mapping) else element for element in value)


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class Parametrized:
    """
    Base class for all parametrized objects.

    Subclasses declare their fields by defining ``set_<field>`` methods and
    their requirements by calling ``add_parameters_required`` in
    ``__init__`` after ``super().__init__``.
    """

    _setters: ClassVar[dict[str, Callable[[Any, Any], Any]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._setters = build_setter_table(cls)

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        self._parameters = ParameterContainer()
        self._parameters_required: list[str] = []
        self.initialize(parameters)

    def initialize(self, parameters: Mapping[str, Any] | None = None) -> Self:
        """
        Initialize the object with parameters.

        Any previously stored parameter is discarded. Unknown keys are
        ignored; anything other than a mapping sets nothing.
        """
        self._parameters = ParameterContainer()

        if isinstance(parameters, Mapping):
            for key, value in parameters.items():
                setter = self._setters.get(camel_case(str(key)))
                if setter is None:
                    logger.debug(f"Ignoring unknown parameter '{key}' for {type(self).__name__}")
                    continue
                setter(self, value)
        elif parameters is not None:
            logger.debug(f"Ignoring non-mapping parameters for {type(self).__name__}")

        self._initialize_defaults()
        return self

    def _initialize_defaults(self) -> None:
        """Hook for subclasses to fill defaults after parameters are applied."""

    @property
    def parameters(self) -> dict[str, Any]:
        """All parameters as a shallow copy."""
        return self._parameters.all()

    def _get_parameter(self, key: str, default: Any = None) -> Any:
        return self._parameters.get(key, default)

    def _has_parameter(self, key: str) -> bool:
        return self._parameters.has(key)

    def _set_parameter(self, key: str, value: Any) -> Self:
        self._parameters.set(key, value)
        return self

    @property
    def parameters_required(self) -> tuple[str, ...]:
        return tuple(self._parameters_required)

    def add_parameters_required(self, names: Iterable[str]) -> None:
        """Add required parameter names, keeping order and skipping duplicates."""
        for name in names:
            if name not in self._parameters_required:
                self._parameters_required.append(name)

    def validate(self) -> None:
        """
        Validate this object.

        Raises:
            MissingRequiredFieldError: For the first required parameter that
                is absent or empty
            InvalidFieldTypeError: When a subclass type rule fails
        """
        self.validate_required_parameters()

    def validate_required_parameters(self) -> None:
        for key in self._parameters_required:
            if is_empty(self._get_parameter(key)):
                raise MissingRequiredFieldError(key)

    def _validate_type(self, key: str, expected: type | tuple[type, ...], description: str) -> None:
        """Check the type of a parameter; unset (None) parameters are skipped."""
        value = self._get_parameter(key)
        if value is not None and not isinstance(value, expected):
            raise InvalidFieldTypeError(key, f"must be {description}")

    def _validate_entity(self, key: str, expected: type, description: str) -> None:
        """Type check a nested entity, then validate it."""
        self._validate_type(key, expected, description)
        value = self._get_parameter(key)
        if value is not None:
            value.validate()

    def _validate_bag(self, key: str, expected: type, description: str) -> None:
        """Type check and validate every element of a bag parameter."""
        bag = self._get_parameter(key)
        if bag is None:
            return
        if not isinstance(bag, Bag):
            raise InvalidFieldTypeError(key, "must be a list of entries")
        for element in bag:
            if not isinstance(element, expected):
                raise InvalidFieldTypeError(key, f"must only contain {description}")
            element.validate()

    def _lazy_bag(self, key: str) -> Bag:
        """Return the bag stored under ``key``, creating it on first access."""
        bag = self._get_parameter(key)
        if not isinstance(bag, Bag):
            bag = Bag()
            self._set_parameter(key, bag)
        return bag

    def to_dict(self) -> dict[str, Any]:
        """Export all parameters as plain nested data."""
        return {key: export_value(value) for key, value in self._parameters}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._parameters.all()!r})"
