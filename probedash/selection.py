"""Single-selection list with wraparound navigation."""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


class CyclicSelectionList(Generic[T]):
    """Ordered items plus an optional selected index.

    The selected index, when set, is always within bounds. Navigating an empty
    list does nothing and leaves the selection unset.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = list(items)
        self._selected: int | None = None

    @property
    def items(self) -> list[T]:
        return list(self._items)

    @property
    def selected(self) -> int | None:
        return self._selected

    @property
    def selected_item(self) -> T | None:
        if self._selected is None:
            return None
        return self._items[self._selected]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def next(self) -> None:
        if not self._items:
            return
        if self._selected is None:
            self._selected = 0
        else:
            self._selected = (self._selected + 1) % len(self._items)

    def previous(self) -> None:
        if not self._items:
            return
        if self._selected is None:
            self._selected = 0
        elif self._selected == 0:
            self._selected = len(self._items) - 1
        else:
            self._selected -= 1

    def replace(self, items: Iterable[T]) -> None:
        """Swap in a new item sequence and select its first entry, if any."""
        self._items = list(items)
        self._selected = 0 if self._items else None
