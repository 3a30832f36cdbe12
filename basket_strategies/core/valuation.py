"""Basket valuation and next-composition arithmetic for rebalancing managers.

Every function is stateless and operates on plain Python ints.

Units/conventions:
- Prices are USD per whole token, scaled by 1e18.
- A basket ("set") token has 18 decimals. ``units[i]`` is the amount of
  component ``i`` base units held per ``natural_unit`` of set base units.
- Dollar values are per whole set token, scaled by 1e18.

All divisions are Python ``//`` (floor). The order of multiplication and
division below is part of the contract: tests pin exact integer outputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

SET_TOKEN_DECIMALS: int = 18
MAX_TOKEN_DECIMALS: int = 18
PERCENT: int = 100


def calculate_token_allocation_amount_usd(
    token_price: int,
    natural_unit: int,
    unit: int,
    token_decimals: int,
) -> int:
    """USD value of one component inside one whole set token.

    ``price * (unit * 10**18 // natural_unit) // 10**decimals``; must be > 0.
    """
    if natural_unit <= 0:
        raise ValueError(f"natural_unit must be positive: {natural_unit}")
    component_units_in_full_token = (unit * 10**SET_TOKEN_DECIMALS) // natural_unit
    value = (token_price * component_units_in_full_token) // 10**token_decimals
    if value <= 0:
        raise ValueError(
            f"component value must be positive (price={token_price}, unit={unit}, "
            f"natural_unit={natural_unit}, decimals={token_decimals})"
        )
    return value


def calculate_set_token_dollar_value(
    token_prices: Sequence[int],
    natural_unit: int,
    units: Sequence[int],
    token_decimals: Sequence[int],
) -> int:
    """Sum of component USD values for one whole set token."""
    if not (len(token_prices) == len(units) == len(token_decimals)):
        raise ValueError("token_prices, units and token_decimals must have equal length")
    return sum(
        calculate_token_allocation_amount_usd(price, natural_unit, unit, decimals)
        for price, unit, decimals in zip(token_prices, units, token_decimals)
    )


def calculate_allocation_percentage(value: int, other_value: int) -> int:
    """Whole-percent share of ``value`` in ``value + other_value`` (floors)."""
    total = value + other_value
    if total <= 0:
        raise ValueError("total value must be positive")
    return (value * PERCENT) // total


def allocation_outside_band(allocation: int, maximum_lower_threshold: int, minimum_upper_threshold: int) -> bool:
    """True when the allocation has drifted far enough to justify a rebalance.

    The band is half-open: ``[lower, upper)`` is "too close".
    """
    return allocation >= minimum_upper_threshold or allocation < maximum_lower_threshold


@dataclass(frozen=True)
class NextSetUnits:
    """Units and natural unit of a proposed two-component set."""

    units: Tuple[int, int]
    natural_unit: int

    def __post_init__(self) -> None:
        if self.natural_unit <= 0:
            raise ValueError(f"natural_unit must be positive: {self.natural_unit}")
        for u in self.units:
            if u <= 0:
                raise ValueError(f"units must be positive: {self.units}")


def minimum_natural_unit(decimals_a: int, decimals_b: int, price_precision: int) -> int:
    """Smallest natural unit that lets the lower-decimal component hold 1 base unit.

    A set token can only express component amounts of at least one base unit
    per natural unit, so the natural unit must cover the decimal gap between
    the set token and its least precise component.
    """
    for name, dec in (("decimals_a", decimals_a), ("decimals_b", decimals_b)):
        if not (0 <= dec <= MAX_TOKEN_DECIMALS):
            raise ValueError(f"{name} must be in [0, {MAX_TOKEN_DECIMALS}]: {dec}")
    if price_precision <= 0:
        raise ValueError(f"price_precision must be positive: {price_precision}")
    return 10 ** (SET_TOKEN_DECIMALS - min(decimals_a, decimals_b)) * price_precision


def calculate_next_set_units(
    price_a: int,
    price_b: int,
    decimals_a: int,
    decimals_b: int,
    multiplier_a: int,
    multiplier_b: int,
    price_precision: int = 1,
) -> NextSetUnits:
    """Units for a set whose value split matches ``multiplier_a : multiplier_b``.

    The dearer asset (per whole token) is held in whole-token multiples of its
    multiplier; the cheaper asset is held as ``price_dear / price_cheap`` whole
    tokens per multiplier, floored at ``price_precision`` resolution.
    """
    if price_a <= 0 or price_b <= 0:
        raise ValueError(f"prices must be positive: {price_a}, {price_b}")
    if multiplier_a <= 0 or multiplier_b <= 0:
        raise ValueError(f"multipliers must be positive: {multiplier_a}, {multiplier_b}")

    natural_unit = minimum_natural_unit(decimals_a, decimals_b, price_precision)
    min_decimals = min(decimals_a, decimals_b)
    scale_a = 10 ** (decimals_a - min_decimals) * price_precision
    scale_b = 10 ** (decimals_b - min_decimals) * price_precision

    if price_a >= price_b:
        unit_a = multiplier_a * scale_a
        unit_b = (price_a * scale_b // price_b) * multiplier_b
    else:
        unit_a = (price_b * scale_a // price_a) * multiplier_a
        unit_b = multiplier_b * scale_b

    return NextSetUnits(units=(unit_a, unit_b), natural_unit=natural_unit)
