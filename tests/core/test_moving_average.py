# [TESTER] v1

from __future__ import annotations

import pytest

from basket_strategies.core.moving_average import calculate_moving_average
from basket_strategies.errors import InsufficientDataError


def test_uses_most_recent_points() -> None:
    assert calculate_moving_average([5, 4, 3, 2, 1], 3) == 4


def test_full_window() -> None:
    assert calculate_moving_average([5, 4, 3, 2, 1], 5) == 3


def test_floors() -> None:
    assert calculate_moving_average([10, 11], 2) == 10


def test_too_few_prices() -> None:
    with pytest.raises(InsufficientDataError) as exc_info:
        calculate_moving_average([1, 2], 3)
    assert exc_info.value.requested == 3
    assert exc_info.value.available == 2


@pytest.mark.parametrize("data_points", [0, -1])
def test_non_positive_window_rejected(data_points) -> None:
    with pytest.raises(ValueError):
        calculate_moving_average([1, 2, 3], data_points)
