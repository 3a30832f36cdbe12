"""Simple moving average over the most recent data points."""

from __future__ import annotations

from typing import Sequence

from ..errors import InsufficientDataError


def calculate_moving_average(prices: Sequence[int], data_points: int) -> int:
    """Arithmetic mean of the first ``data_points`` entries of ``prices``.

    ``prices`` is most-recent-first (the order feeds return). Floors.
    """
    if data_points <= 0:
        raise ValueError(f"data_points must be positive: {data_points}")
    if len(prices) < data_points:
        raise InsufficientDataError(requested=data_points, available=len(prices))
    return sum(prices[:data_points]) // data_points
