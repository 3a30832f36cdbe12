"""
Interval-gated time-series feed.

A feed owns one ``BoundedHistoryBuffer`` and one replaceable data source.
``poke(now)`` is the only writer: once ``now`` reaches
``next_available_update`` it pulls a value from the data source, appends it,
and advances the schedule by exactly one ``update_interval``. Advancing from
the previous schedule (not from ``now``) keeps the cadence drift-free: a late
poke shortens the wait before the next one instead of shifting every later
update.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import FeedConfig
from ..errors import InsufficientDataError, TooEarlyError, UnauthorizedError
from ..events import DataSourceUpdated
from ..state.history import BoundedHistoryBuffer, Observation
from .data_source import DataSource, LinearizedPriceDataSource, OracleDataSource, TimeSeriesState
from .price_oracle import PriceOracle

logger = logging.getLogger(__name__)


class TimeSeriesFeed:
    """Fixed-cadence price history fed by a data source."""

    def __init__(
        self,
        address: str,
        data_source: DataSource,
        *,
        owner: str,
        update_interval: int,
        max_data_points: int,
        seeded_values: Sequence[int],
        next_available_update: int,
        now: int,
        description: str = "",
    ):
        if update_interval <= 0:
            raise ValueError(f"update_interval must be positive: {update_interval}")
        if max_data_points <= 0:
            raise ValueError(f"max_data_points must be positive: {max_data_points}")
        if not seeded_values:
            raise ValueError("seeded_values must contain at least one value")
        if next_available_update < now:
            raise ValueError(
                f"next_available_update {next_available_update} must not be before now {now}"
            )

        self.address = address
        self.owner = owner
        self.description = description
        self._data_source = data_source
        self._update_interval = update_interval
        self._next_available_update = next_available_update
        self._history = BoundedHistoryBuffer(max_data_points)

        # Seeds are oldest-first and back-dated one interval apart, ending at `now`.
        last = len(seeded_values) - 1
        for i, value in enumerate(seeded_values):
            self._history.append(value, max(0, now - (last - i) * update_interval))

    # -- Read surface ---------------------------------------------------------

    @property
    def update_interval(self) -> int:
        return self._update_interval

    @property
    def next_available_update(self) -> int:
        return self._next_available_update

    @property
    def max_data_points(self) -> int:
        return self._history.capacity

    @property
    def data_source(self) -> DataSource:
        return self._data_source

    def __len__(self) -> int:
        return len(self._history)

    def read_observations(self, data_points: int) -> List[Observation]:
        """Most recent ``data_points`` observations, most recent first."""
        if data_points > self.max_data_points:
            raise InsufficientDataError(requested=data_points, available=self.max_data_points)
        return self._history.read_last(data_points)

    def read(self, data_points: int) -> List[int]:
        """Most recent ``data_points`` values, most recent first."""
        return [obs.value for obs in self.read_observations(data_points)]

    def state(self) -> TimeSeriesState:
        """Snapshot handed to the data source."""
        return TimeSeriesState(
            next_available_update=self._next_available_update,
            update_interval=self._update_interval,
            latest_value=self._history.latest().value,
        )

    # -- Gated writers --------------------------------------------------------

    def poke(self, now: int) -> Observation:
        """Record the data source's current value if the update interval has elapsed."""
        if now < self._next_available_update:
            raise TooEarlyError(now=now, next_available_update=self._next_available_update)

        value = self._data_source.read(self.state(), now)

        obs = self._history.append(value, now)
        self._next_available_update += self._update_interval
        logger.info(
            "feed %s poked at %s: value=%s next_available_update=%s",
            self.address,
            now,
            value,
            self._next_available_update,
        )
        return obs

    def change_data_source(self, new_data_source: DataSource, *, caller: str) -> DataSourceUpdated:
        """Repoint the feed to a new data source. Owner only."""
        if caller != self.owner:
            raise UnauthorizedError(caller=caller, action="change data source")
        self._data_source = new_data_source
        logger.info("feed %s now reads data source %s", self.address, new_data_source.address)
        return DataSourceUpdated(new_data_source=new_data_source.address, emitter=self.address)

    def __repr__(self) -> str:
        return (
            f"TimeSeriesFeed({self.address!r}, {len(self._history)}/{self.max_data_points} points, "
            f"next_available_update={self._next_available_update})"
        )


def create_driftless_feed(
    address: str,
    oracle: PriceOracle,
    *,
    owner: str,
    now: int,
    config: FeedConfig = FeedConfig(),
    seeded_values: Sequence[int] = (),
    source_address: Optional[str] = None,
) -> TimeSeriesFeed:
    """Pass-through feed seeded with ``seeded_values`` plus the oracle's current price.

    The first update becomes available one interval after ``now``.
    """
    source = OracleDataSource(
        source_address or f"{address}/source",
        oracle,
        owner=owner,
        description=config.description,
    )
    current = oracle.read().value
    return TimeSeriesFeed(
        address,
        source,
        owner=owner,
        update_interval=config.update_interval,
        max_data_points=config.max_data_points,
        seeded_values=[*seeded_values, current],
        next_available_update=now + config.update_interval,
        now=now,
        description=config.description,
    )


def create_linearized_feed(
    address: str,
    oracle: PriceOracle,
    *,
    owner: str,
    now: int,
    seeded_values: Sequence[int],
    config: FeedConfig = FeedConfig(),
    source_address: Optional[str] = None,
) -> TimeSeriesFeed:
    """Feed over a ``LinearizedPriceDataSource`` using ``config.update_tolerance``."""
    source = LinearizedPriceDataSource(
        source_address or f"{address}/source",
        oracle,
        owner=owner,
        update_tolerance=config.update_tolerance,
        description=config.description,
    )
    return TimeSeriesFeed(
        address,
        source,
        owner=owner,
        update_interval=config.update_interval,
        max_data_points=config.max_data_points,
        seeded_values=seeded_values,
        next_available_update=now + config.update_interval,
        now=now,
        description=config.description,
    )
