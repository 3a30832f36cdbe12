"""Events emitted by successful admin calls and proposals.

Events are returned to the caller (and logged); nothing in this package
keeps an event log of its own.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OracleUpdated:
    """A data source was repointed to a new raw oracle."""

    new_oracle: str
    emitter: str


@dataclass(frozen=True)
class DataSourceUpdated:
    """A feed was repointed to a new data source."""

    new_data_source: str
    emitter: str


@dataclass(frozen=True)
class ManagerProposal:
    """A manager proposed a rebalance; carries the prices it decided on."""

    price_a: int
    price_b: int
    manager: str


@dataclass(frozen=True)
class CrossoverProposal:
    """A crossover manager opened or confirmed a proposal window."""

    spot_price: int
    moving_average_price: int
    confirmed: bool
    manager: str
