"""
Meta-oracles: statistics computed on demand from a feed's history, plus the
``PriceSource`` adapters managers use to obtain one price per asset.
"""

from __future__ import annotations

from typing import Protocol

from ..core.moving_average import calculate_moving_average
from ..core.rsi import calculate_rsi
from .feed import TimeSeriesFeed
from .price_oracle import PriceOracle


class MovingAverageOracle:
    """Simple moving average over the most recent ``data_points`` feed values."""

    def __init__(self, address: str, feed: TimeSeriesFeed, description: str = ""):
        self.address = address
        self.feed = feed
        self.description = description

    def read(self, data_points: int) -> int:
        return calculate_moving_average(self.feed.read(data_points), data_points)


class RSIOracle:
    """RSI over the most recent ``time_period`` price changes of a feed, scaled by 1e18."""

    def __init__(self, address: str, feed: TimeSeriesFeed, description: str = ""):
        self.address = address
        self.feed = feed
        self.description = description

    def read(self, time_period: int) -> int:
        if time_period <= 0:
            raise ValueError(f"time_period must be positive: {time_period}")
        return calculate_rsi(self.feed.read(time_period + 1), time_period)


# -- Price sources -------------------------------------------------------------


class PriceSource(Protocol):
    def current_price(self) -> int:
        ...


class FixedPriceSource:
    """Constant price, e.g. a dollar-pegged stablecoin at 1e18."""

    def __init__(self, price: int):
        if price <= 0:
            raise ValueError(f"price must be positive: {price}")
        self.price = price

    def current_price(self) -> int:
        return self.price


class OraclePriceSource:
    """Latest raw oracle price."""

    def __init__(self, oracle: PriceOracle):
        self.oracle = oracle

    def current_price(self) -> int:
        return self.oracle.read().value


class FeedPriceSource:
    """Most recent value stored in a feed."""

    def __init__(self, feed: TimeSeriesFeed):
        self.feed = feed

    def current_price(self) -> int:
        return self.feed.read(1)[0]


class MovingAveragePriceSource:
    """Moving average of a fixed number of data points."""

    def __init__(self, oracle: MovingAverageOracle, data_points: int):
        if data_points <= 0:
            raise ValueError(f"data_points must be positive: {data_points}")
        self.oracle = oracle
        self.data_points = data_points

    def current_price(self) -> int:
        return self.oracle.read(self.data_points)
