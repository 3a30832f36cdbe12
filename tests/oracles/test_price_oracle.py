# [TESTER] v1

from __future__ import annotations

import pytest

from basket_strategies.errors import OracleUnavailableError
from basket_strategies.oracles import ManualPriceOracle, PriceReading


def test_empty_oracle_is_unavailable() -> None:
    with pytest.raises(OracleUnavailableError):
        ManualPriceOracle("0xmedianizer").read()


def test_poke_then_read() -> None:
    oracle = ManualPriceOracle("0xmedianizer")
    oracle.poke(250 * 10**18, 1_000)
    assert oracle.read() == PriceReading(value=250 * 10**18, timestamp=1_000)


def test_constructor_value() -> None:
    oracle = ManualPriceOracle("0xmedianizer", 5, timestamp=7)
    assert oracle.read().value == 5


def test_timestamps_never_go_backwards() -> None:
    oracle = ManualPriceOracle("0xmedianizer", 5, timestamp=10)
    with pytest.raises(ValueError):
        oracle.poke(6, 9)
    assert oracle.read().value == 5


def test_void_invalidates_until_next_poke() -> None:
    oracle = ManualPriceOracle("0xmedianizer", 5, timestamp=10)
    oracle.void()
    with pytest.raises(OracleUnavailableError):
        oracle.read()
    oracle.poke(6, 11)
    assert oracle.read().value == 6


@pytest.mark.parametrize("value,timestamp", [(0, 1), (-1, 1), (1, -1)])
def test_reading_validation(value, timestamp) -> None:
    with pytest.raises(ValueError):
        PriceReading(value=value, timestamp=timestamp)
