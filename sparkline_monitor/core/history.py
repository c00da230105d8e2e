"""Fixed-capacity rolling sample buffers."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterator, Optional, Tuple, TypeVar

from .config import HISTORY_CAPACITY

T = TypeVar("T")


class RollingHistory(Generic[T]):
    """
    FIFO buffer of the most recent samples of one metric.
    Iteration is oldest → newest; pushing past capacity drops the oldest.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self._capacity = int(capacity)
        self._samples: Deque[T] = deque(maxlen=self._capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, value: T) -> None:
        self._samples.append(value)

    def as_slice(self) -> Tuple[T, ...]:
        return tuple(self._samples)

    def latest(self) -> Optional[T]:
        return self._samples[-1] if self._samples else None

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._samples))

    def __repr__(self) -> str:
        return f"RollingHistory(capacity={self._capacity}, len={len(self)})"
