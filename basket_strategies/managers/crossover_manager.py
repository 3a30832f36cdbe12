"""
Moving-average crossover strategy manager.

The basket is always fully in one of two single-asset collateral sets: a
"risk" set (e.g. ETH) or a "stable" set (e.g. USDC). When the risk asset's
spot price crosses its moving average the manager moves the basket into the
other set:

- held in stable and spot > moving average  -> propose the risk set
- held in risk and spot < moving average    -> propose the stable set

A crossover has to be seen twice. ``initial_propose`` records the time the
crossover was first observed; ``confirm_propose`` must then land inside
``[first + min_time, first + max_time]`` and still see the crossover before
the proposal is sent. This filters out crossovers that reverse within hours.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import CrossoverConfig
from ..core.auction import calculate_auction_price_parameters
from ..core.valuation import MAX_TOKEN_DECIMALS, calculate_set_token_dollar_value
from ..errors import InvalidStateError, PropagatedRevert, TooEarlyError
from ..events import CrossoverProposal
from ..oracles.meta_oracles import MovingAverageOracle, MovingAveragePriceSource, PriceSource
from .basket import BasketToken, RebalanceProposal, SetComposition, SetRegistry
from .rebalancing_manager import query_price, validate_manager_propose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollateralSet:
    """A single-asset set the basket can hold, with its asset's pricing."""

    composition: SetComposition
    decimals: int
    price_source: PriceSource

    def __post_init__(self) -> None:
        if len(self.composition.components) != 1:
            raise ValueError("collateral sets must hold exactly one component")
        if not (0 <= self.decimals <= MAX_TOKEN_DECIMALS):
            raise ValueError(f"decimals must be in [0, {MAX_TOKEN_DECIMALS}]: {self.decimals}")

    def dollar_value(self, price: int) -> int:
        return calculate_set_token_dollar_value(
            [price], self.composition.natural_unit, self.composition.units, [self.decimals],
        )


class MovingAverageCrossoverManager:
    """Flips a basket between stable and risk collateral on confirmed MA crossovers."""

    def __init__(
        self,
        address: str,
        *,
        core: SetRegistry,
        moving_average_oracle: MovingAverageOracle,
        stable_collateral: CollateralSet,
        risk_collateral: CollateralSet,
        config: CrossoverConfig,
    ):
        if stable_collateral.composition == risk_collateral.composition:
            raise ValueError("stable and risk collateral sets must differ")
        self.address = address
        self.core = core
        self.moving_average_oracle = moving_average_oracle
        self.stable_collateral = stable_collateral
        self.risk_collateral = risk_collateral
        self.config = config
        self._moving_average_source = MovingAveragePriceSource(
            moving_average_oracle, config.moving_average_days,
        )
        self.last_crossover_confirmation_timestamp = 0

    def _validate(self, basket: BasketToken, now: int) -> None:
        if not self.core.is_valid_set(basket.address):
            raise InvalidStateError(f"basket {basket.address} is not tracked by core")
        validate_manager_propose(basket, now)

    def _held_in_stable(self, basket: BasketToken) -> bool:
        current = basket.current_set
        if current == self.stable_collateral.composition:
            return True
        if current == self.risk_collateral.composition:
            return False
        raise InvalidStateError(f"basket {basket.address} holds neither collateral set")

    def _require_crossover(self, basket: BasketToken) -> tuple[int, int, bool]:
        """Return ``(spot, moving_average, held_in_stable)`` or raise if no crossover."""
        held_in_stable = self._held_in_stable(basket)
        spot = query_price(self.risk_collateral.price_source)
        moving_average = query_price(self._moving_average_source)
        if held_in_stable and spot <= moving_average:
            raise InvalidStateError(
                f"no bullish crossover: spot {spot} must be above moving average {moving_average}"
            )
        if not held_in_stable and spot >= moving_average:
            raise InvalidStateError(
                f"no bearish crossover: spot {spot} must be below moving average {moving_average}"
            )
        return spot, moving_average, held_in_stable

    def initial_propose(self, basket: BasketToken, *, now: int) -> CrossoverProposal:
        """Record a first sighting of a crossover, opening the confirmation window."""
        self._validate(basket, now)
        window_end = self.last_crossover_confirmation_timestamp + self.config.crossover_confirmation_max_time
        if now <= window_end:
            raise InvalidStateError(f"confirmation window still open until {window_end}")

        spot, moving_average, _ = self._require_crossover(basket)
        self.last_crossover_confirmation_timestamp = now
        logger.info(
            "manager %s saw crossover on %s at %s: spot=%s moving_average=%s",
            self.address, basket.address, now, spot, moving_average,
        )
        return CrossoverProposal(
            spot_price=spot, moving_average_price=moving_average, confirmed=False, manager=self.address,
        )

    def confirm_propose(self, basket: BasketToken, *, now: int) -> CrossoverProposal:
        """Confirm a still-standing crossover and propose the other collateral set."""
        self._validate(basket, now)
        opens_at = self.last_crossover_confirmation_timestamp + self.config.crossover_confirmation_min_time
        closes_at = self.last_crossover_confirmation_timestamp + self.config.crossover_confirmation_max_time
        if now < opens_at:
            raise TooEarlyError(now=now, next_available_update=opens_at)
        if now > closes_at:
            raise InvalidStateError(f"confirmation window closed at {closes_at}")

        spot, moving_average, held_in_stable = self._require_crossover(basket)
        if held_in_stable:
            current, nxt = self.stable_collateral, self.risk_collateral
        else:
            current, nxt = self.risk_collateral, self.stable_collateral

        current_value = current.dollar_value(query_price(current.price_source))
        next_value = nxt.dollar_value(query_price(nxt.price_source))
        params = calculate_auction_price_parameters(
            current_value,
            next_value,
            self.config.auction_price_divisor,
            self.config.auction_time_to_pivot,
        )
        proposal = RebalanceProposal(
            next_set=nxt.composition,
            auction_library=self.config.auction_library,
            auction_time_to_pivot=self.config.auction_time_to_pivot,
            auction_start_price=params.start_price,
            auction_pivot_price=params.pivot_price,
        )
        try:
            basket.propose(proposal, caller=self.address, now=now)
        except Exception as exc:
            raise PropagatedRevert(f"basket {basket.address} rejected proposal: {exc}") from exc

        logger.info(
            "manager %s confirmed crossover on %s: moving to %s (start=%s pivot=%s)",
            self.address, basket.address, nxt.composition.components[0],
            params.start_price, params.pivot_price,
        )
        return CrossoverProposal(
            spot_price=spot, moving_average_price=moving_average, confirmed=True, manager=self.address,
        )
