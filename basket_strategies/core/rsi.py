"""Relative strength index over a window of price changes.

Input ordering: ``prices`` is most-recent-first, the order feeds return, so
``prices[i - 1]`` is the newer price and ``prices[i]`` the older one of each
pair. A window of ``n`` changes needs ``n + 1`` prices.

The classic form ``100 - 100 / (1 + avg_gain / avg_loss)`` reduces to
``100 * gains / (gains + losses)`` because the ``1 / n`` averaging cancels.
The result is fixed point: scaled by ``RSI_PRECISION`` before the single
division, which floors. ``RSI_MAX`` is 100 points at that scale.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ..errors import InsufficientDataError

RSI_PRECISION: int = 10**18
RSI_MAX: int = 100 * RSI_PRECISION


def sum_price_changes(prices: Sequence[int]) -> Tuple[int, int]:
    """Return ``(gains, losses)`` summed over consecutive pairs (losses unsigned)."""
    gains = 0
    losses = 0
    for i in range(1, len(prices)):
        newer = prices[i - 1]
        older = prices[i]
        if newer > older:
            gains += newer - older
        else:
            losses += older - newer
    return gains, losses


def calculate_rsi(prices: Sequence[int], time_period: int) -> int:
    """RSI over ``time_period`` price changes, scaled by ``RSI_PRECISION``.

    A window without losses returns ``RSI_MAX``, including a flat window.
    """
    if time_period <= 0:
        raise ValueError(f"time_period must be positive: {time_period}")
    needed = time_period + 1
    if len(prices) < needed:
        raise InsufficientDataError(requested=needed, available=len(prices))

    gains, losses = sum_price_changes(prices[:needed])
    if losses == 0:
        return RSI_MAX
    return (RSI_MAX * gains) // (gains + losses)
