# [TESTER] v1

from __future__ import annotations

import pytest

from basket_strategies.core.rsi import RSI_MAX
from basket_strategies.errors import InsufficientDataError, OracleUnavailableError
from basket_strategies.oracles import (
    FeedPriceSource,
    FixedPriceSource,
    ManualPriceOracle,
    MovingAverageOracle,
    MovingAveragePriceSource,
    OraclePriceSource,
    RSIOracle,
    create_driftless_feed,
)

E18 = 10**18
DEPLOYED_AT = 1_600_000_000


@pytest.fixture
def oracle():
    return ManualPriceOracle("0xmedianizer", 120 * E18, timestamp=DEPLOYED_AT)


@pytest.fixture
def feed(oracle):
    # Oldest first: 100, 110, 90, 120 (current).
    return create_driftless_feed(
        "0xfeed", oracle, owner="0xowner", now=DEPLOYED_AT, seeded_values=[100 * E18, 110 * E18, 90 * E18],
    )


class TestMovingAverageOracle:
    def test_window(self, feed) -> None:
        ma = MovingAverageOracle("0xma", feed, "20DayMA")
        assert ma.read(2) == 105 * E18
        assert ma.read(4) == 105 * E18
        assert ma.read(3) == 320 * E18 // 3

    def test_window_longer_than_history(self, feed) -> None:
        with pytest.raises(InsufficientDataError):
            MovingAverageOracle("0xma", feed).read(5)


class TestRSIOracle:
    def test_reads_period_plus_one_points(self, feed) -> None:
        rsi = RSIOracle("0xrsi", feed)
        # Changes newest first: +30, -20, +10
        assert rsi.read(3) == 66666666666666666666

    def test_single_change(self, feed) -> None:
        assert RSIOracle("0xrsi", feed).read(1) == RSI_MAX

    def test_period_too_long(self, feed) -> None:
        with pytest.raises(InsufficientDataError):
            RSIOracle("0xrsi", feed).read(4)

    def test_zero_period_rejected(self, feed) -> None:
        with pytest.raises(ValueError):
            RSIOracle("0xrsi", feed).read(0)


class TestPriceSources:
    def test_fixed(self) -> None:
        assert FixedPriceSource(E18).current_price() == E18

    def test_fixed_rejects_zero(self) -> None:
        with pytest.raises(ValueError):
            FixedPriceSource(0)

    def test_oracle(self, oracle) -> None:
        source = OraclePriceSource(oracle)
        assert source.current_price() == 120 * E18
        oracle.void()
        with pytest.raises(OracleUnavailableError):
            source.current_price()

    def test_feed_latest(self, feed) -> None:
        assert FeedPriceSource(feed).current_price() == 120 * E18

    def test_moving_average(self, feed) -> None:
        source = MovingAveragePriceSource(MovingAverageOracle("0xma", feed), 2)
        assert source.current_price() == 105 * E18

    def test_moving_average_rejects_zero_window(self, feed) -> None:
        with pytest.raises(ValueError):
            MovingAveragePriceSource(MovingAverageOracle("0xma", feed), 0)
