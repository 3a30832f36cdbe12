"""
Price oracles, data sources and time-series feeds
"""

from .data_source import DataSource, LinearizedPriceDataSource, OracleDataSource, TimeSeriesState
from .feed import TimeSeriesFeed, create_driftless_feed, create_linearized_feed
from .meta_oracles import (
    FeedPriceSource,
    FixedPriceSource,
    MovingAverageOracle,
    MovingAveragePriceSource,
    OraclePriceSource,
    PriceSource,
    RSIOracle,
)
from .price_oracle import ManualPriceOracle, PriceOracle, PriceReading

__all__ = [
    "DataSource",
    "LinearizedPriceDataSource",
    "OracleDataSource",
    "TimeSeriesState",
    "TimeSeriesFeed",
    "create_driftless_feed",
    "create_linearized_feed",
    "FeedPriceSource",
    "FixedPriceSource",
    "MovingAverageOracle",
    "MovingAveragePriceSource",
    "OraclePriceSource",
    "PriceSource",
    "RSIOracle",
    "ManualPriceOracle",
    "PriceOracle",
    "PriceReading",
]
