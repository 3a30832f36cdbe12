"""
Raw price oracle interface.

The medianizer itself (multi-signer median over signed quotes) lives outside
this package. Feeds and managers only depend on ``PriceOracle.read()``.
``ManualPriceOracle`` is an in-memory oracle whose value is set directly,
used for simulations and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..errors import OracleUnavailableError


@dataclass(frozen=True)
class PriceReading:
    """A trusted scalar price and the time it was published."""

    value: int
    timestamp: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError(f"value must be positive: {self.value}")
        if self.timestamp < 0:
            raise ValueError(f"timestamp must be non-negative: {self.timestamp}")


class PriceOracle(Protocol):
    address: str

    def read(self) -> PriceReading:
        """Latest price. Raises OracleUnavailableError when there is none."""
        ...


class ManualPriceOracle:
    """In-memory oracle. ``poke`` publishes a price; timestamps never go backwards."""

    def __init__(self, address: str, value: Optional[int] = None, timestamp: int = 0):
        self.address = address
        self._reading: Optional[PriceReading] = None
        if value is not None:
            self.poke(value, timestamp)

    def poke(self, value: int, timestamp: int) -> PriceReading:
        if self._reading is not None and timestamp < self._reading.timestamp:
            raise ValueError(
                f"timestamp {timestamp} is older than current reading {self._reading.timestamp}"
            )
        self._reading = PriceReading(value=value, timestamp=timestamp)
        return self._reading

    def void(self) -> None:
        """Invalidate the current price (reads fail until the next poke)."""
        self._reading = None

    def read(self) -> PriceReading:
        if self._reading is None:
            raise OracleUnavailableError(f"oracle {self.address} has no valid price")
        return self._reading

    def __repr__(self) -> str:
        return f"ManualPriceOracle({self.address!r}, {self._reading!r})"
