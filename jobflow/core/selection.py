from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True)
class SelectionSet(Generic[T]):
    """Immutable, duplicate-free multi-select of identifiers.

    Members keep the order in which they were first added. Every operation
    returns a new set; callers replace their stored value with the result.
    """

    items: tuple[T, ...] = ()

    @classmethod
    def of(cls, ids: Iterable[T]) -> "SelectionSet[T]":
        seen: dict[T, None] = {}
        for i in ids:
            seen.setdefault(i, None)
        return cls(tuple(seen))

    def toggle(self, item: T) -> "SelectionSet[T]":
        if item in self.items:
            return SelectionSet(tuple(i for i in self.items if i != item))
        return SelectionSet(self.items + (item,))

    def contains(self, item: T) -> bool:
        return item in self.items

    def size(self) -> int:
        return len(self.items)

    def to_list(self) -> list[T]:
        return list(self.items)

    def __contains__(self, item: object) -> bool:
        return item in self.items

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
