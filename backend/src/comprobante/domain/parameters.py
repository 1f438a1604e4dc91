"""
Attribute storage shared by every parametrized entity.

Values are opaque at this layer: no coercion, no validation. Presence
(``has``) is tracked separately from the stored value so that a parameter
explicitly set to ``0`` or ``""`` is still reported as present.
"""

from collections.abc import Iterator
from typing import Any


class ParameterContainer:
    """Ordered key -> value store with presence checks."""

    def __init__(self, parameters: dict[str, Any] | None = None) -> None:
        self._parameters: dict[str, Any] = dict(parameters or {})

    def set(self, key: str, value: Any) -> None:
        self._parameters[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._parameters.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._parameters

    def remove(self, key: str) -> None:
        self._parameters.pop(key, None)

    def all(self) -> dict[str, Any]:
        """Return a shallow copy of every stored parameter."""
        return dict(self._parameters)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self._parameters.items()))

    def __len__(self) -> int:
        return len(self._parameters)

    def __contains__(self, key: object) -> bool:
        return key in self._parameters

    def __repr__(self) -> str:
        return f"ParameterContainer({self._parameters!r})"
