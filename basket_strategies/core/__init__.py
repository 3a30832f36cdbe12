"""
Pure integer arithmetic: interpolation, statistics, valuation, auction curves
"""

from .auction import MAX_AUCTION_TIME_TO_PIVOT, AuctionPriceParameters, calculate_auction_price_parameters
from .interpolation import interpolate_delayed_price_update, is_update_late
from .moving_average import calculate_moving_average
from .rsi import RSI_MAX, RSI_PRECISION, calculate_rsi
from .valuation import (
    NextSetUnits,
    allocation_outside_band,
    calculate_allocation_percentage,
    calculate_next_set_units,
    calculate_set_token_dollar_value,
    calculate_token_allocation_amount_usd,
    minimum_natural_unit,
)

__all__ = [
    "MAX_AUCTION_TIME_TO_PIVOT",
    "AuctionPriceParameters",
    "calculate_auction_price_parameters",
    "interpolate_delayed_price_update",
    "is_update_late",
    "calculate_moving_average",
    "RSI_MAX",
    "RSI_PRECISION",
    "calculate_rsi",
    "NextSetUnits",
    "allocation_outside_band",
    "calculate_allocation_percentage",
    "calculate_next_set_units",
    "calculate_set_token_dollar_value",
    "calculate_token_allocation_amount_usd",
    "minimum_natural_unit",
]
