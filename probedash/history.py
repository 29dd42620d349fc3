"""Fixed-capacity sample buffers feeding the sparklines."""

from __future__ import annotations

from collections import deque
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class BoundedHistory(Generic[T]):
    """The most recent ``capacity`` samples, oldest first."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"history capacity must be at least 1, got {capacity}")
        self._samples: deque[T] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    @property
    def latest(self) -> T | None:
        return self._samples[-1] if self._samples else None

    def append(self, value: T) -> None:
        # deque evicts exactly one sample from the head once at maxlen
        self._samples.append(value)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[T]:
        return iter(self._samples)

    def to_list(self) -> list[T]:
        return list(self._samples)
