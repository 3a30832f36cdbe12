"""
Two-asset allocation rebalancing manager.

``propose(basket, now)`` decides whether a two-component basket has drifted
far enough from its target weights to justify a rebalance and, if so, sends
the basket its next composition plus an auction price curve.

Steps (all checks happen before the single external call, so a failure
anywhere leaves nothing behind):

1. The basket is registered with the core and is in ``DEFAULT`` with its
   rebalance interval elapsed.
2. Both asset prices are read from their price sources.
3. The current basket's allocation to asset A must be outside the
   ``[maximum_lower_threshold, minimum_upper_threshold)`` band.
4. The next set's units restore the ``multiplier_a : multiplier_b`` value split.
5. Auction start/pivot prices are centred on next/current fair value.
6. ``basket.propose`` is called; any failure is re-raised as ``PropagatedRevert``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from ..config import ManagerConfig
from ..core.auction import calculate_auction_price_parameters
from ..core.valuation import (
    MAX_TOKEN_DECIMALS,
    allocation_outside_band,
    calculate_allocation_percentage,
    calculate_next_set_units,
    calculate_token_allocation_amount_usd,
)
from ..errors import (
    AllocationTooCloseError,
    InsufficientDataError,
    InvalidStateError,
    OracleUnavailableError,
    PropagatedRevert,
)
from ..events import ManagerProposal
from ..oracles.meta_oracles import PriceSource
from .basket import BasketToken, RebalanceProposal, RebalanceState, SetComposition, SetRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetConfig:
    """One basket component: token address, decimals, target weight and price source."""

    address: str
    decimals: int
    multiplier: int
    price_source: PriceSource

    def __post_init__(self) -> None:
        if not (0 <= self.decimals <= MAX_TOKEN_DECIMALS):
            raise ValueError(f"decimals must be in [0, {MAX_TOKEN_DECIMALS}]: {self.decimals}")
        if self.multiplier <= 0:
            raise ValueError(f"multiplier must be positive: {self.multiplier}")


def validate_manager_propose(basket: BasketToken, now: int) -> None:
    """Basket must be in DEFAULT with its rebalance interval elapsed."""
    if basket.rebalance_state is not RebalanceState.DEFAULT:
        raise InvalidStateError(
            f"basket {basket.address} must be in Default state, is {basket.rebalance_state.value}"
        )
    ready_at = basket.last_rebalance_timestamp + basket.rebalance_interval
    if now < ready_at:
        raise InvalidStateError(
            f"rebalance interval not elapsed for {basket.address}: ready at {ready_at}, now {now}"
        )


def query_price(source: PriceSource) -> int:
    """Read one price; a too-short history counts as an unavailable oracle."""
    try:
        return source.current_price()
    except InsufficientDataError as exc:
        raise OracleUnavailableError(f"price history too short: {exc}") from exc


class TwoAssetRebalancingManager:
    """Rebalances a two-component basket back to its multiplier-weighted split."""

    def __init__(
        self,
        address: str,
        *,
        core: SetRegistry,
        asset_a: AssetConfig,
        asset_b: AssetConfig,
        config: ManagerConfig,
    ):
        if asset_a.address == asset_b.address:
            raise ValueError(f"assets must differ: {asset_a.address}")
        self.address = address
        self.core = core
        self.asset_a = asset_a
        self.asset_b = asset_b
        self.config = config

    @property
    def components(self) -> Tuple[str, str]:
        return (self.asset_a.address, self.asset_b.address)

    def _component_values(self, current_set: SetComposition, price_a: int, price_b: int) -> Tuple[int, int]:
        try:
            unit_a = current_set.unit_of(self.asset_a.address)
            unit_b = current_set.unit_of(self.asset_b.address)
        except KeyError as exc:
            raise InvalidStateError(f"current set does not hold the managed components: {exc}") from exc
        value_a = calculate_token_allocation_amount_usd(
            price_a, current_set.natural_unit, unit_a, self.asset_a.decimals,
        )
        value_b = calculate_token_allocation_amount_usd(
            price_b, current_set.natural_unit, unit_b, self.asset_b.decimals,
        )
        return value_a, value_b

    def check_sufficient_allocation_change(self, current_set: SetComposition, price_a: int, price_b: int) -> int:
        """Require the allocation to be outside the band; returns the current set's dollar value."""
        value_a, value_b = self._component_values(current_set, price_a, price_b)
        allocation = calculate_allocation_percentage(value_a, value_b)
        lower = self.config.maximum_lower_threshold
        upper = self.config.minimum_upper_threshold
        if not allocation_outside_band(allocation, lower, upper):
            raise AllocationTooCloseError(allocation=allocation, lower=lower, upper=upper)
        return value_a + value_b

    def calculate_next_set(self, price_a: int, price_b: int) -> Tuple[SetComposition, int]:
        """Next composition and its dollar value per whole set."""
        next_units = calculate_next_set_units(
            price_a,
            price_b,
            self.asset_a.decimals,
            self.asset_b.decimals,
            self.asset_a.multiplier,
            self.asset_b.multiplier,
            self.config.price_precision,
        )
        next_set = SetComposition(
            components=self.components,
            units=next_units.units,
            natural_unit=next_units.natural_unit,
        )
        value_a, value_b = self._component_values(next_set, price_a, price_b)
        return next_set, value_a + value_b

    def build_proposal(self, basket: BasketToken, now: int) -> Tuple[RebalanceProposal, int, int]:
        """Run every check and computation of ``propose`` without calling the basket."""
        if not self.core.is_valid_set(basket.address):
            raise InvalidStateError(f"basket {basket.address} is not tracked by core")
        validate_manager_propose(basket, now)

        price_a = query_price(self.asset_a.price_source)
        price_b = query_price(self.asset_b.price_source)

        current_value = self.check_sufficient_allocation_change(basket.current_set, price_a, price_b)
        next_set, next_value = self.calculate_next_set(price_a, price_b)

        params = calculate_auction_price_parameters(
            current_value,
            next_value,
            self.config.auction_price_divisor,
            self.config.auction_time_to_pivot,
        )
        proposal = RebalanceProposal(
            next_set=next_set,
            auction_library=self.config.auction_library,
            auction_time_to_pivot=self.config.auction_time_to_pivot,
            auction_start_price=params.start_price,
            auction_pivot_price=params.pivot_price,
        )
        return proposal, price_a, price_b

    def propose(self, basket: BasketToken, *, now: int) -> ManagerProposal:
        proposal, price_a, price_b = self.build_proposal(basket, now)
        try:
            basket.propose(proposal, caller=self.address, now=now)
        except Exception as exc:
            raise PropagatedRevert(f"basket {basket.address} rejected proposal: {exc}") from exc

        logger.info(
            "manager %s proposed rebalance of %s: units=%s natural_unit=%s start=%s pivot=%s",
            self.address,
            basket.address,
            proposal.next_set.units,
            proposal.next_set.natural_unit,
            proposal.auction_start_price,
            proposal.auction_pivot_price,
        )
        return ManagerProposal(price_a=price_a, price_b=price_b, manager=self.address)
