"""Count-bounded ring buffer for per-agent value history."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class RollingWindow(Generic[T]):
    """
    Bounded ordered buffer, most-recent-last.

    Appends go to the tail; once length exceeds capacity the oldest
    samples are dropped from the head. Capacity can change at runtime:
    growing takes effect organically on later pushes, shrinking drops
    the excess head immediately so the bound always holds.

    Attributes:
        capacity: Maximum number of samples retained.
    """

    capacity: int
    _data: deque[T] = field(default_factory=deque)

    def __post_init__(self) -> None:
        """Validate capacity and trim any initial data."""
        if self.capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {self.capacity}")
        self._data = deque(self._data)
        self._trim()

    def push(self, value: T) -> None:
        """
        Append a sample, dropping from the head past capacity.

        Args:
            value: The sample to store.
        """
        self._data.append(value)
        self._trim()

    def extend(self, values: Iterable[T]) -> None:
        """Append several samples in order."""
        for value in values:
            self.push(value)

    def resize(self, capacity: int) -> int:
        """
        Change capacity.

        Args:
            capacity: New maximum number of samples.

        Returns:
            Number of samples dropped (0 unless shrinking below length).
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {capacity}")
        self.capacity = capacity
        return self._trim()

    def _trim(self) -> int:
        """Drop head elements until length <= capacity."""
        dropped = 0
        while len(self._data) > self.capacity:
            self._data.popleft()
            dropped += 1
        return dropped

    def values(self) -> list[T]:
        """Copy of the retained samples, oldest first."""
        return list(self._data)

    def tail(self, n: int) -> list[T]:
        """Copy of the newest ``n`` samples, oldest first."""
        if n <= 0:
            return []
        return list(self._data)[-n:]

    @property
    def last(self) -> T:
        """Most recent sample."""
        if not self._data:
            raise IndexError("last of empty RollingWindow")
        return self._data[-1]

    def __len__(self) -> int:
        """Return current number of samples."""
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)
