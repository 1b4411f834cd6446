"""Fixed-capacity window buffers backing the windowed indicators.

``CircularWindow`` keeps the last N raw values in a ring buffer.
``MonotonicExtremumWindow`` layers a deque of candidate indices on top of
it so the rolling minimum or maximum is available in O(1) per bar instead of
rescanning the window.
"""
from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Generic, Iterator, List, Optional, TypeVar

from barstream.core.errors import require_positive
from barstream.core.types import Num

T = TypeVar("T")


class CircularWindow(Generic[T]):
    """Ring buffer of the last ``capacity`` appended values."""

    def __init__(self, capacity: int) -> None:
        self.capacity = require_positive("capacity", capacity)
        self._items: List[Optional[T]] = [None] * capacity
        self._count = 0

    @property
    def appended(self) -> int:
        """Number of values appended since construction (not capped)."""

        return self._count

    def __len__(self) -> int:
        return min(self._count, self.capacity)

    @property
    def is_full(self) -> bool:
        return self._count >= self.capacity

    @property
    def next_slot(self) -> int:
        """Buffer index the next appended value will occupy."""

        return self._count % self.capacity

    def append(self, value: T) -> Optional[T]:
        """Store ``value`` and return the value it overwrote, if any."""

        slot = self.next_slot
        evicted = self._items[slot] if self.is_full else None
        self._items[slot] = value
        self._count += 1
        return evicted

    def at_slot(self, slot: int) -> T:
        """Return the raw value stored at buffer index ``slot``."""

        return self._items[slot]  # type: ignore[return-value]

    def __iter__(self) -> Iterator[T]:
        """Iterate from the oldest to the newest stored value."""

        size = len(self)
        start = (self._count - size) % self.capacity
        for offset in range(size):
            yield self._items[(start + offset) % self.capacity]  # type: ignore[misc]

    def newest(self) -> T:
        if self._count == 0:
            raise IndexError("window is empty")
        return self._items[(self._count - 1) % self.capacity]  # type: ignore[return-value]


class MonotonicExtremumWindow:
    """Rolling extremum over the last ``capacity`` values.

    ``prefer(a, b)`` answers whether ``a`` beats ``b`` (``a < b`` for a
    minimum). The deque holds buffer indices whose values are strictly
    preferred from back to front; its front is the current extremum. NaN
    values occupy a buffer slot but never enter the deque, so an all-NaN
    window has no candidate and reports NaN.
    """

    def __init__(
        self,
        capacity: int,
        prefer: Callable[[Num, Num], bool],
        is_nan: Callable[[Num], bool],
        nan: Num,
    ) -> None:
        self._window: CircularWindow[Num] = CircularWindow(capacity)
        self._candidates: Deque[int] = deque()
        self._prefer = prefer
        self._is_nan = is_nan
        self._nan = nan

    @property
    def capacity(self) -> int:
        return self._window.capacity

    @property
    def is_full(self) -> bool:
        return self._window.is_full

    def append(self, value: Num) -> Num:
        """Push ``value`` into the window and return the new extremum."""

        slot = self._window.next_slot
        if self._window.is_full and self._candidates and self._candidates[0] == slot:
            self._candidates.popleft()

        value_is_nan = self._is_nan(value)
        while self._candidates:
            back = self._window.at_slot(self._candidates[-1])
            if self._is_nan(back) or (not value_is_nan and not self._prefer(back, value)):
                self._candidates.pop()
            else:
                break

        self._window.append(value)
        if not value_is_nan:
            self._candidates.append(slot)
        return self.current()

    def current(self) -> Num:
        if not self._candidates:
            return self._nan
        return self._window.at_slot(self._candidates[0])


__all__ = ["CircularWindow", "MonotonicExtremumWindow"]
