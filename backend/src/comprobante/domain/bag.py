"""
Bag - an ordered, append-only multi-element collection.

Documents keep their items, discounts and relations in bags, and items keep
their taxes in one. Elements are never removed one by one; ``replace`` is the
only way to start over.
"""

from collections.abc import Iterable, Iterator


class Bag[T]:
    """Ordered collection of elements that allows duplicates."""

    def __init__(self, elements: Iterable[T] = ()) -> None:
        self._elements: list[T] = []
        self.replace(elements)

    def all(self) -> list[T]:
        """Return every element in insertion order."""
        return list(self._elements)

    def replace(self, elements: Iterable[T] = ()) -> None:
        """Replace the contents of this bag with the given elements."""
        self._elements = []
        for element in elements:
            self.add(element)

    def add(self, element: T) -> None:
        self._elements.append(element)

    def count(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._elements))

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, index: int) -> T:
        return self._elements[index]

    def __repr__(self) -> str:
        return f"Bag({self._elements!r})"
