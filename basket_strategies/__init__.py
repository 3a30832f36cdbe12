"""`basket_strategies`: price-history feeds and rebalancing managers for basket tokens.

Layout:
- `core`: pure integer arithmetic (interpolation, moving average, RSI,
  basket valuation, auction price curves),
- `state`: the bounded observation history store,
- `oracles`: raw oracle interface, data sources, time-series feeds, meta-oracles,
- `managers`: basket-token interface and the rebalancing managers.
"""

from .errors import (
    AllocationTooCloseError,
    InsufficientDataError,
    InvalidStateError,
    OracleUnavailableError,
    PropagatedRevert,
    StrategyError,
    TooEarlyError,
    UnauthorizedError,
)

__version__ = "0.1.0"

__all__ = [
    "AllocationTooCloseError",
    "InsufficientDataError",
    "InvalidStateError",
    "OracleUnavailableError",
    "PropagatedRevert",
    "StrategyError",
    "TooEarlyError",
    "UnauthorizedError",
]
