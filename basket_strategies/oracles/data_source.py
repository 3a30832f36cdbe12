"""
Data sources: produce the next value a time-series feed should store.

A data source is read by its feed during ``poke`` and receives a frozen
``TimeSeriesState`` snapshot of that feed, so it never touches feed storage
directly.

- ``OracleDataSource`` passes the raw oracle price through.
- ``LinearizedPriceDataSource`` tolerates a late poke by blending the fresh
  oracle price with the last stored value, weighted by how late the poke is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from ..core.interpolation import interpolate_delayed_price_update, is_update_late
from ..errors import TooEarlyError, UnauthorizedError
from ..events import OracleUpdated
from .price_oracle import PriceOracle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeSeriesState:
    """What a data source may know about the feed that reads it."""

    next_available_update: int
    update_interval: int
    latest_value: int

    def __post_init__(self) -> None:
        if self.update_interval <= 0:
            raise ValueError(f"update_interval must be positive: {self.update_interval}")
        if self.next_available_update < 0:
            raise ValueError(f"next_available_update must be non-negative: {self.next_available_update}")


class DataSource(Protocol):
    address: str

    def read(self, state: TimeSeriesState, now: int) -> int:
        ...


class OracleDataSource:
    """Pass-through data source over a replaceable raw oracle."""

    def __init__(self, address: str, oracle: PriceOracle, *, owner: str, description: str = ""):
        self.address = address
        self.owner = owner
        self.description = description
        self._oracle = oracle

    @property
    def oracle(self) -> PriceOracle:
        return self._oracle

    def _require_on_schedule(self, state: TimeSeriesState, now: int) -> None:
        if now < state.next_available_update:
            raise TooEarlyError(now=now, next_available_update=state.next_available_update)

    def read(self, state: TimeSeriesState, now: int) -> int:
        self._require_on_schedule(state, now)
        return self._oracle.read().value

    def change_oracle(self, new_oracle: PriceOracle, *, caller: str) -> OracleUpdated:
        """Repoint to a new raw oracle. Owner only."""
        if caller != self.owner:
            raise UnauthorizedError(caller=caller, action="change oracle")
        self._oracle = new_oracle
        event = OracleUpdated(new_oracle=new_oracle.address, emitter=self.address)
        logger.info("data source %s now reads oracle %s", self.address, new_oracle.address)
        return event


class LinearizedPriceDataSource(OracleDataSource):
    """Oracle data source that interpolates pokes later than ``update_tolerance``."""

    def __init__(
        self,
        address: str,
        oracle: PriceOracle,
        *,
        owner: str,
        update_tolerance: int,
        description: str = "",
    ):
        if update_tolerance < 0:
            raise ValueError(f"update_tolerance must be non-negative: {update_tolerance}")
        super().__init__(address, oracle, owner=owner, description=description)
        self.update_tolerance = update_tolerance

    def read(self, state: TimeSeriesState, now: int) -> int:
        self._require_on_schedule(state, now)
        new_price = self._oracle.read().value

        if not is_update_late(now, state.next_available_update, self.update_tolerance):
            return new_price

        time_from_expected_update = now - state.next_available_update
        interpolated = interpolate_delayed_price_update(
            new_price,
            state.update_interval,
            time_from_expected_update,
            state.latest_value,
        )
        logger.warning(
            "late poke on %s: %ss past schedule, interpolated %s -> %s",
            self.address,
            time_from_expected_update,
            new_price,
            interpolated,
        )
        return interpolated
