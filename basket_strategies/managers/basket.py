"""
Basket-token interface consumed by rebalancing managers.

The basket token (a "rebalancing set") owns its own state machine:

    DEFAULT --propose--> PROPOSAL --start_rebalance--> REBALANCE
    REBALANCE --settle_rebalance--> DEFAULT
    REBALANCE --end_failed_auction--> DRAWDOWN

Managers only read its phase and composition and call ``propose``.
``InMemoryBasketToken`` is a reference implementation of that surface for
simulations and tests; it does not move any tokens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional, Protocol, Set, Tuple

from ..errors import InvalidStateError, UnauthorizedError

logger = logging.getLogger(__name__)


@unique
class RebalanceState(Enum):
    DEFAULT = "Default"
    PROPOSAL = "Proposal"
    REBALANCE = "Rebalance"
    DRAWDOWN = "Drawdown"


@dataclass(frozen=True)
class SetComposition:
    """Components held per ``natural_unit`` of basket base units."""

    components: Tuple[str, ...]
    units: Tuple[int, ...]
    natural_unit: int

    def __post_init__(self) -> None:
        if not self.components:
            raise ValueError("components must be non-empty")
        if len(self.components) != len(self.units):
            raise ValueError(
                f"components/units length mismatch: {len(self.components)} != {len(self.units)}"
            )
        if len(set(self.components)) != len(self.components):
            raise ValueError(f"duplicate components: {self.components}")
        if self.natural_unit <= 0:
            raise ValueError(f"natural_unit must be positive: {self.natural_unit}")
        for unit in self.units:
            if not isinstance(unit, int) or isinstance(unit, bool) or unit <= 0:
                raise ValueError(f"units must be positive ints: {self.units}")

    def unit_of(self, component: str) -> int:
        try:
            return self.units[self.components.index(component)]
        except ValueError:
            raise KeyError(f"{component} is not a component of this set") from None


@dataclass(frozen=True)
class RebalanceProposal:
    next_set: SetComposition
    auction_library: str
    auction_time_to_pivot: int
    auction_start_price: int
    auction_pivot_price: int

    def __post_init__(self) -> None:
        if self.auction_start_price > self.auction_pivot_price:
            raise ValueError(
                f"auction_start_price {self.auction_start_price} must be <= "
                f"auction_pivot_price {self.auction_pivot_price}"
            )


class BasketToken(Protocol):
    address: str

    @property
    def rebalance_state(self) -> RebalanceState: ...

    @property
    def current_set(self) -> SetComposition: ...

    @property
    def last_rebalance_timestamp(self) -> int: ...

    @property
    def rebalance_interval(self) -> int: ...

    def propose(self, proposal: RebalanceProposal, *, caller: str, now: int) -> None: ...


class SetRegistry:
    """Basket tokens the protocol core created and has not disabled."""

    def __init__(self) -> None:
        self._valid: Set[str] = set()

    def enable(self, address: str) -> None:
        self._valid.add(address)

    def disable(self, address: str) -> None:
        self._valid.discard(address)

    def is_valid_set(self, address: str) -> bool:
        return address in self._valid


class InMemoryBasketToken:
    """Reference basket token tracking phase, composition and the pending proposal."""

    def __init__(
        self,
        address: str,
        *,
        manager: str,
        current_set: SetComposition,
        rebalance_interval: int,
        proposal_period: int,
        last_rebalance_timestamp: int = 0,
    ):
        if rebalance_interval < 0 or proposal_period < 0:
            raise ValueError("rebalance_interval and proposal_period must be non-negative")
        self.address = address
        self.manager = manager
        self.proposal_period = proposal_period
        self._rebalance_interval = rebalance_interval
        self._current_set = current_set
        self._last_rebalance_timestamp = last_rebalance_timestamp
        self._state = RebalanceState.DEFAULT
        self._proposal: Optional[RebalanceProposal] = None
        self._proposal_start_time = 0

    @property
    def rebalance_state(self) -> RebalanceState:
        return self._state

    @property
    def current_set(self) -> SetComposition:
        return self._current_set

    @property
    def last_rebalance_timestamp(self) -> int:
        return self._last_rebalance_timestamp

    @property
    def rebalance_interval(self) -> int:
        return self._rebalance_interval

    @property
    def proposal(self) -> Optional[RebalanceProposal]:
        return self._proposal

    def _require_state(self, expected: RebalanceState, action: str) -> None:
        if self._state is not expected:
            raise InvalidStateError(
                f"{action} requires state {expected.value}, basket {self.address} is {self._state.value}"
            )

    def propose(self, proposal: RebalanceProposal, *, caller: str, now: int) -> None:
        if caller != self.manager:
            raise UnauthorizedError(caller=caller, action=f"propose on {self.address}")
        self._require_state(RebalanceState.DEFAULT, "propose")
        if now < self._last_rebalance_timestamp + self._rebalance_interval:
            raise InvalidStateError(f"rebalance interval has not elapsed for {self.address}")
        self._proposal = proposal
        self._proposal_start_time = now
        self._state = RebalanceState.PROPOSAL
        logger.info("basket %s entered proposal at %s", self.address, now)

    def start_rebalance(self, now: int) -> None:
        self._require_state(RebalanceState.PROPOSAL, "start_rebalance")
        if now < self._proposal_start_time + self.proposal_period:
            raise InvalidStateError(f"proposal period has not elapsed for {self.address}")
        self._state = RebalanceState.REBALANCE
        logger.info("basket %s started rebalance at %s", self.address, now)

    def settle_rebalance(self, now: int) -> None:
        self._require_state(RebalanceState.REBALANCE, "settle_rebalance")
        assert self._proposal is not None
        self._current_set = self._proposal.next_set
        self._proposal = None
        self._last_rebalance_timestamp = now
        self._state = RebalanceState.DEFAULT
        logger.info("basket %s settled rebalance at %s", self.address, now)

    def end_failed_auction(self, now: int) -> None:
        self._require_state(RebalanceState.REBALANCE, "end_failed_auction")
        self._state = RebalanceState.DRAWDOWN
        logger.info("basket %s entered drawdown at %s", self.address, now)
