"""
Fixed-capacity history of price observations.

Implements BoundedHistoryBuffer[capacity] -> ring of Observation

The buffer is an index-addressed ring: a preallocated slot list plus a write
cursor. Appends are O(1) and overwrite the oldest slot once the buffer is
full; reading the k most recent observations is O(k) with O(1) access to any
single slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..errors import InsufficientDataError


def _require_uint(value: int, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    return value


@dataclass(frozen=True)
class Observation:
    """A single stored value and the time it was recorded."""

    value: int
    timestamp: int

    def __post_init__(self) -> None:
        _require_uint(self.value, name="value")
        _require_uint(self.timestamp, name="timestamp")


class BoundedHistoryBuffer:
    """
    Append-only ring of the most recent ``capacity`` observations.

    Note: eviction is not an error. Once ``len(buffer) == capacity`` every
    append silently drops the oldest observation.
    """

    def __init__(self, capacity: int):
        """Initialize an empty buffer holding at most ``capacity`` observations."""
        _require_uint(capacity, name="capacity")
        if capacity == 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._slots: List[Optional[Observation]] = [None] * capacity
        # Index of the slot the next append writes to.
        self._cursor = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._size

    def is_full(self) -> bool:
        return self._size == self._capacity

    def append(self, value: int, timestamp: int) -> Observation:
        """
        Record a new observation, evicting the oldest one when full.

        Args:
            value: Non-negative fixed-point value
            timestamp: Non-negative unix timestamp in seconds

        Returns:
            The stored observation
        """
        obs = Observation(value=value, timestamp=timestamp)
        self._slots[self._cursor] = obs
        self._cursor = (self._cursor + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1
        return obs

    def _slot_back(self, offset: int) -> Observation:
        # offset 0 is the most recent observation.
        obs = self._slots[(self._cursor - 1 - offset) % self._capacity]
        assert obs is not None
        return obs

    def read_last(self, k: int) -> List[Observation]:
        """
        Return the ``k`` most recent observations, most recent first.

        Raises:
            InsufficientDataError: If fewer than ``k`` observations are stored
            ValueError: If ``k`` is negative
        """
        _require_uint(k, name="k")
        if k > self._size:
            raise InsufficientDataError(requested=k, available=self._size)
        return [self._slot_back(i) for i in range(k)]

    def latest(self) -> Observation:
        """Most recent observation. Raises InsufficientDataError when empty."""
        if self._size == 0:
            raise InsufficientDataError(requested=1, available=0)
        return self._slot_back(0)

    def __repr__(self) -> str:
        return f"BoundedHistoryBuffer({self._size}/{self._capacity} entries)"
