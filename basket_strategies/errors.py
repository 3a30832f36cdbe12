"""Exception types for price-history feeds and rebalancing managers.

Every error is raised synchronously and aborts the whole call; the store
objects are only mutated after all checks pass, so no partial effect is left
behind. Argument validation (bad constructor values, malformed integers)
raises ``ValueError`` / ``TypeError`` instead.
"""

from __future__ import annotations


class StrategyError(Exception):
    """Base class for all domain errors in this package."""


class TooEarlyError(StrategyError):
    """Raised when a gated update is attempted before its scheduled time."""

    def __init__(self, now: int, next_available_update: int) -> None:
        self.now = now
        self.next_available_update = next_available_update
        super().__init__(
            f"update not available until {next_available_update} (now={now})"
        )


class InsufficientDataError(StrategyError):
    """Raised when a requested window exceeds the stored (or allowed) history."""

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(f"requested {requested} data points, only {available} available")


class AllocationTooCloseError(StrategyError):
    """Raised when the current allocation is still inside the no-rebalance band."""

    def __init__(self, allocation: int, lower: int, upper: int) -> None:
        self.allocation = allocation
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"allocation {allocation}% must be >= {upper}% or < {lower}% to rebalance"
        )


class InvalidStateError(StrategyError):
    """Raised when an external collaborator is not in a state that allows the call."""


class UnauthorizedError(StrategyError):
    """Raised when the caller lacks the role required for an admin call."""

    def __init__(self, caller: str, action: str) -> None:
        self.caller = caller
        self.action = action
        super().__init__(f"{caller} is not authorized to {action}")


class OracleUnavailableError(StrategyError):
    """Raised when an upstream price cannot be read."""


class PropagatedRevert(StrategyError):
    """Raised when a call into the basket token fails; the cause is chained."""
