# [TESTER] v1

# Prices are passed most-recent-first, the order feeds return them.

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from basket_strategies.core.rsi import RSI_MAX, RSI_PRECISION, calculate_rsi, sum_price_changes
from basket_strategies.errors import InsufficientDataError


# ---------------------------------------------------------------------------
# sum_price_changes
# ---------------------------------------------------------------------------

def test_sum_price_changes_pairs_newer_with_older() -> None:
    # newest 3, then 1, oldest 2: +2 then -1
    assert sum_price_changes([3, 1, 2]) == (2, 1)


def test_sum_price_changes_flat() -> None:
    assert sum_price_changes([7, 7, 7]) == (0, 0)


# ---------------------------------------------------------------------------
# calculate_rsi
# ---------------------------------------------------------------------------

class TestCalculateRsi:
    def test_rising_series_is_max(self) -> None:
        assert calculate_rsi([5, 4, 3, 2, 1], 4) == RSI_MAX

    def test_falling_series_is_zero(self) -> None:
        assert calculate_rsi([1, 2, 3, 4, 5], 4) == 0

    def test_flat_series_is_max(self) -> None:
        assert calculate_rsi([7, 7, 7], 2) == 100 * RSI_PRECISION

    def test_mixed_keeps_fractional_points(self) -> None:
        # 100 * 2 / 3 = 66.67 points, floored at 1e18 scale
        assert calculate_rsi([3, 1, 2], 2) == 66666666666666666666

    def test_scale_is_applied_before_division(self) -> None:
        rsi = calculate_rsi([3, 1, 2], 2)
        assert rsi // RSI_PRECISION == 66
        assert rsi % RSI_PRECISION == 666666666666666666

    def test_only_window_is_used(self) -> None:
        # The older 100 falls outside a one-change window.
        assert calculate_rsi([10, 5, 100], 1) == RSI_MAX

    def test_needs_period_plus_one_prices(self) -> None:
        with pytest.raises(InsufficientDataError) as exc_info:
            calculate_rsi([1, 2], 2)
        assert exc_info.value.requested == 3

    def test_zero_period_rejected(self) -> None:
        with pytest.raises(ValueError):
            calculate_rsi([1, 2], 0)

    @settings(max_examples=200, deadline=None)
    @given(prices=st.lists(st.integers(min_value=0, max_value=10**24), min_size=2, max_size=30))
    def test_bounded(self, prices) -> None:
        rsi = calculate_rsi(prices, len(prices) - 1)
        assert 0 <= rsi <= RSI_MAX
