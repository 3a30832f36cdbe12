"""Auction price curve parameters for a rebalance.

The auction is centred on the fair value of the next set measured in current
sets, expressed in units of the auction library's price divisor. The price
range widens by 1% of fair value (0.5% either side) per thirty minutes of
time-to-pivot:

    fair   = next_value * divisor // current_value
    half   = (time_to_pivot // 1800) * fair // 200
    start  = fair - half
    pivot  = fair + half

Pivots shorter than thirty minutes truncate to zero periods (start == pivot).
"""

from __future__ import annotations

from dataclasses import dataclass

THIRTY_MINUTES_IN_SECONDS: int = 1800
HALF_RANGE_DENOMINATOR: int = 200
# Longest pivot whose price range keeps the start price non-negative.
MAX_AUCTION_TIME_TO_PIVOT: int = HALF_RANGE_DENOMINATOR * THIRTY_MINUTES_IN_SECONDS


@dataclass(frozen=True)
class AuctionPriceParameters:
    fair_value: int
    start_price: int
    pivot_price: int


def calculate_auction_price_parameters(
    current_set_dollar_amount: int,
    next_set_dollar_amount: int,
    auction_library_price_divisor: int,
    auction_time_to_pivot: int,
) -> AuctionPriceParameters:
    """Compute ``(start_price, pivot_price)`` around the next/current fair value."""
    if current_set_dollar_amount <= 0:
        raise ValueError(f"current_set_dollar_amount must be positive: {current_set_dollar_amount}")
    if next_set_dollar_amount < 0:
        raise ValueError(f"next_set_dollar_amount must be non-negative: {next_set_dollar_amount}")
    if auction_library_price_divisor <= 0:
        raise ValueError(f"auction_library_price_divisor must be positive: {auction_library_price_divisor}")
    if auction_time_to_pivot < 0:
        raise ValueError(f"auction_time_to_pivot must be non-negative: {auction_time_to_pivot}")

    fair_value = (next_set_dollar_amount * auction_library_price_divisor) // current_set_dollar_amount
    thirty_minute_periods = auction_time_to_pivot // THIRTY_MINUTES_IN_SECONDS
    half_price_range = (thirty_minute_periods * fair_value) // HALF_RANGE_DENOMINATOR

    # More than 200 periods would push the start price below zero.
    if half_price_range > fair_value:
        raise ValueError(
            f"auction_time_to_pivot too long: half range {half_price_range} exceeds fair value {fair_value}"
        )

    return AuctionPriceParameters(
        fair_value=fair_value,
        start_price=fair_value - half_price_range,
        pivot_price=fair_value + half_price_range,
    )
