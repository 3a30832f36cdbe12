# [TESTER] v1

# Risk collateral is 1 WETH per set; stable collateral is 100 USDC per set.
# The ETH feed holds 100, 110, 120 (oldest first), so the 3-day moving
# average is 110.

from __future__ import annotations

import pytest

from basket_strategies.config import CrossoverConfig
from basket_strategies.errors import InvalidStateError, PropagatedRevert, TooEarlyError
from basket_strategies.events import CrossoverProposal
from basket_strategies.managers import (
    CollateralSet,
    InMemoryBasketToken,
    MovingAverageCrossoverManager,
    RebalanceState,
    SetComposition,
    SetRegistry,
)
from basket_strategies.oracles import (
    FixedPriceSource,
    ManualPriceOracle,
    MovingAverageOracle,
    OraclePriceSource,
    create_driftless_feed,
)

E18 = 10**18
ONE_DAY = 86_400
SIX_HOURS = 21_600
TWELVE_HOURS = 43_200
T0 = 1_600_000_000
NOW = T0 + 1_000

BASKET = "0xmaco-set"
MANAGER = "0xmaco-manager"

RISK = SetComposition(components=("0xweth",), units=(1,), natural_unit=1)
STABLE = SetComposition(components=("0xusdc",), units=(100,), natural_unit=10**12)


@pytest.fixture
def eth_oracle():
    return ManualPriceOracle("0xeth-medianizer", 120 * E18, timestamp=T0)


@pytest.fixture
def registry():
    reg = SetRegistry()
    reg.enable(BASKET)
    return reg


@pytest.fixture
def manager(eth_oracle, registry):
    feed = create_driftless_feed(
        "0xeth-feed", eth_oracle, owner="0xowner", now=T0, seeded_values=[100 * E18, 110 * E18],
    )
    return MovingAverageCrossoverManager(
        MANAGER,
        core=registry,
        moving_average_oracle=MovingAverageOracle("0xeth-ma", feed),
        stable_collateral=CollateralSet(STABLE, 6, FixedPriceSource(E18)),
        risk_collateral=CollateralSet(RISK, 18, OraclePriceSource(eth_oracle)),
        config=CrossoverConfig(auction_library="0xauction", moving_average_days=3),
    )


def _basket(current_set, *, manager=MANAGER):
    return InMemoryBasketToken(
        BASKET,
        manager=manager,
        current_set=current_set,
        rebalance_interval=ONE_DAY,
        proposal_period=ONE_DAY,
    )


# ---------------------------------------------------------------------------
# CollateralSet
# ---------------------------------------------------------------------------

class TestCollateralSet:
    def test_dollar_values(self) -> None:
        assert CollateralSet(RISK, 18, FixedPriceSource(1)).dollar_value(120 * E18) == 120 * E18
        assert CollateralSet(STABLE, 6, FixedPriceSource(1)).dollar_value(E18) == 100 * E18

    def test_multi_component_rejected(self) -> None:
        pair = SetComposition(components=("a", "b"), units=(1, 1), natural_unit=1)
        with pytest.raises(ValueError):
            CollateralSet(pair, 18, FixedPriceSource(1))

    def test_same_sets_rejected(self, manager) -> None:
        with pytest.raises(ValueError):
            MovingAverageCrossoverManager(
                MANAGER,
                core=manager.core,
                moving_average_oracle=manager.moving_average_oracle,
                stable_collateral=manager.risk_collateral,
                risk_collateral=manager.risk_collateral,
                config=manager.config,
            )


# ---------------------------------------------------------------------------
# Bullish crossover (stable -> risk)
# ---------------------------------------------------------------------------

class TestBullishCrossover:
    def test_initial_then_confirm(self, manager) -> None:
        basket = _basket(STABLE)

        opened = manager.initial_propose(basket, now=NOW)
        assert opened == CrossoverProposal(
            spot_price=120 * E18, moving_average_price=110 * E18, confirmed=False, manager=MANAGER,
        )
        assert manager.last_crossover_confirmation_timestamp == NOW
        assert basket.rebalance_state is RebalanceState.DEFAULT

        confirmed = manager.confirm_propose(basket, now=NOW + SIX_HOURS)
        assert confirmed.confirmed
        assert basket.rebalance_state is RebalanceState.PROPOSAL
        proposal = basket.proposal
        assert proposal.next_set == RISK
        # fair = 120 * 1000 // 100 = 1200, half = 48 * 1200 // 200 = 288
        assert (proposal.auction_start_price, proposal.auction_pivot_price) == (912, 1488)

    def test_confirm_too_early(self, manager) -> None:
        basket = _basket(STABLE)
        manager.initial_propose(basket, now=NOW)
        with pytest.raises(TooEarlyError):
            manager.confirm_propose(basket, now=NOW + SIX_HOURS - 1)

    def test_confirm_too_late(self, manager) -> None:
        basket = _basket(STABLE)
        manager.initial_propose(basket, now=NOW)
        with pytest.raises(InvalidStateError):
            manager.confirm_propose(basket, now=NOW + TWELVE_HOURS + 1)

    def test_confirm_at_window_end(self, manager) -> None:
        basket = _basket(STABLE)
        manager.initial_propose(basket, now=NOW)
        manager.confirm_propose(basket, now=NOW + TWELVE_HOURS)
        assert basket.rebalance_state is RebalanceState.PROPOSAL

    def test_second_initial_inside_window(self, manager) -> None:
        basket = _basket(STABLE)
        manager.initial_propose(basket, now=NOW)
        with pytest.raises(InvalidStateError):
            manager.initial_propose(basket, now=NOW + TWELVE_HOURS)
        manager.initial_propose(basket, now=NOW + TWELVE_HOURS + 1)
        assert manager.last_crossover_confirmation_timestamp == NOW + TWELVE_HOURS + 1

    def test_no_crossover(self, manager, eth_oracle) -> None:
        eth_oracle.poke(105 * E18, NOW)
        with pytest.raises(InvalidStateError):
            manager.initial_propose(_basket(STABLE), now=NOW)
        assert manager.last_crossover_confirmation_timestamp == 0

    def test_crossover_reverses_before_confirmation(self, manager, eth_oracle) -> None:
        basket = _basket(STABLE)
        manager.initial_propose(basket, now=NOW)
        eth_oracle.poke(105 * E18, NOW + SIX_HOURS)
        with pytest.raises(InvalidStateError):
            manager.confirm_propose(basket, now=NOW + SIX_HOURS)
        assert basket.rebalance_state is RebalanceState.DEFAULT


# ---------------------------------------------------------------------------
# Bearish crossover (risk -> stable)
# ---------------------------------------------------------------------------

class TestBearishCrossover:
    def test_initial_then_confirm(self, manager, eth_oracle) -> None:
        eth_oracle.poke(100 * E18, NOW)
        basket = _basket(RISK)
        manager.initial_propose(basket, now=NOW)
        manager.confirm_propose(basket, now=NOW + SIX_HOURS)
        proposal = basket.proposal
        assert proposal.next_set == STABLE
        assert (proposal.auction_start_price, proposal.auction_pivot_price) == (760, 1240)

    def test_spot_above_average_is_not_a_crossover(self, manager) -> None:
        with pytest.raises(InvalidStateError):
            manager.initial_propose(_basket(RISK), now=NOW)


# ---------------------------------------------------------------------------
# Basket checks
# ---------------------------------------------------------------------------

class TestBasketChecks:
    def test_unknown_composition(self, manager) -> None:
        other = SetComposition(components=("0xdai",), units=(1,), natural_unit=1)
        with pytest.raises(InvalidStateError):
            manager.initial_propose(_basket(other), now=NOW)

    def test_untracked_basket(self, manager, registry) -> None:
        registry.disable(BASKET)
        with pytest.raises(InvalidStateError):
            manager.initial_propose(_basket(STABLE), now=NOW)

    def test_basket_rejection_propagates(self, manager) -> None:
        basket = _basket(STABLE, manager="0xsomeone-else")
        manager.initial_propose(basket, now=NOW)
        with pytest.raises(PropagatedRevert):
            manager.confirm_propose(basket, now=NOW + SIX_HOURS)
