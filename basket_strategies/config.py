"""
Configuration for feeds and rebalancing managers.

Configs are frozen dataclasses validated in ``__post_init__``. They can be
built directly or loaded from a YAML document:

    schema: basket-strategies/config/v1
    feeds:
      eth_daily:
        update_interval: 86400
        update_tolerance: 21600
        max_data_points: 200
        description: 200DailyETHPrice
    managers:
      btc_dai:
        auction_library: "0xauction"
        auction_time_to_pivot: 86400
        maximum_lower_threshold: 48
        minimum_upper_threshold: 52
    crossover_managers:
      eth_maco:
        auction_library: "0xauction"
        moving_average_days: 20

Loading is fail-closed: unknown keys, missing required keys and non-integer
numbers are rejected with ``ConfigError``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import yaml

from .core.auction import MAX_AUCTION_TIME_TO_PIVOT

CONFIG_SCHEMA = "basket-strategies/config/v1"
CONFIG_PATH_ENV = "BASKET_STRATEGIES_CONFIG"

ONE_DAY_IN_SECONDS = 86_400
ONE_HOUR_IN_SECONDS = 3_600


class ConfigError(ValueError):
    """Raised when a configuration document is malformed."""


def _require_int(value: Any, *, name: str, lo: int = 0, hi: Optional[int] = None) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"{name} must be an int")
    if value < lo:
        raise ConfigError(f"{name} must be >= {lo}: {value}")
    if hi is not None and value > hi:
        raise ConfigError(f"{name} must be <= {hi}: {value}")


@dataclass(frozen=True)
class FeedConfig:
    update_interval: int = ONE_DAY_IN_SECONDS
    # How late a poke may land before the linearized source interpolates.
    update_tolerance: int = ONE_DAY_IN_SECONDS // 4
    max_data_points: int = 200
    description: str = ""

    def __post_init__(self) -> None:
        _require_int(self.update_interval, name="update_interval", lo=1)
        _require_int(self.update_tolerance, name="update_tolerance")
        _require_int(self.max_data_points, name="max_data_points", lo=1)


@dataclass(frozen=True)
class ManagerConfig:
    auction_library: str
    maximum_lower_threshold: int
    minimum_upper_threshold: int
    auction_time_to_pivot: int = ONE_DAY_IN_SECONDS
    auction_price_divisor: int = 1000
    price_precision: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.auction_library, str) or not self.auction_library.strip():
            raise ConfigError("auction_library must be a non-empty string")
        _require_int(self.maximum_lower_threshold, name="maximum_lower_threshold", hi=100)
        _require_int(self.minimum_upper_threshold, name="minimum_upper_threshold", hi=100)
        if self.maximum_lower_threshold > self.minimum_upper_threshold:
            raise ConfigError(
                f"maximum_lower_threshold {self.maximum_lower_threshold} must be <= "
                f"minimum_upper_threshold {self.minimum_upper_threshold}"
            )
        _require_int(
            self.auction_time_to_pivot, name="auction_time_to_pivot", lo=1, hi=MAX_AUCTION_TIME_TO_PIVOT,
        )
        _require_int(self.auction_price_divisor, name="auction_price_divisor", lo=1)
        _require_int(self.price_precision, name="price_precision", lo=1)


@dataclass(frozen=True)
class CrossoverConfig:
    auction_library: str
    moving_average_days: int
    crossover_confirmation_min_time: int = 6 * ONE_HOUR_IN_SECONDS
    crossover_confirmation_max_time: int = 12 * ONE_HOUR_IN_SECONDS
    auction_time_to_pivot: int = ONE_DAY_IN_SECONDS
    auction_price_divisor: int = 1000

    def __post_init__(self) -> None:
        if not isinstance(self.auction_library, str) or not self.auction_library.strip():
            raise ConfigError("auction_library must be a non-empty string")
        _require_int(self.moving_average_days, name="moving_average_days", lo=1)
        _require_int(self.crossover_confirmation_min_time, name="crossover_confirmation_min_time")
        _require_int(self.crossover_confirmation_max_time, name="crossover_confirmation_max_time")
        if self.crossover_confirmation_min_time > self.crossover_confirmation_max_time:
            raise ConfigError("crossover_confirmation_min_time must be <= crossover_confirmation_max_time")
        _require_int(
            self.auction_time_to_pivot, name="auction_time_to_pivot", lo=1, hi=MAX_AUCTION_TIME_TO_PIVOT,
        )
        _require_int(self.auction_price_divisor, name="auction_price_divisor", lo=1)


@dataclass(frozen=True)
class StrategyConfig:
    feeds: Dict[str, FeedConfig] = field(default_factory=dict)
    managers: Dict[str, ManagerConfig] = field(default_factory=dict)
    crossover_managers: Dict[str, CrossoverConfig] = field(default_factory=dict)


_C = TypeVar("_C", FeedConfig, ManagerConfig, CrossoverConfig)


def _require_mapping(obj: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise ConfigError(f"{name} must be a mapping")
    return obj


def _build(cls: Type[_C], obj: Any, *, name: str) -> _C:
    raw = _require_mapping(obj, name=name)
    allowed = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ConfigError(f"{name} has unknown keys: {', '.join(unknown)}")
    try:
        return cls(**raw)
    except TypeError as exc:
        # Missing required keys surface as TypeError from the dataclass __init__.
        raise ConfigError(f"{name}: {exc}") from exc
    except ConfigError as exc:
        raise ConfigError(f"{name}: {exc}") from exc


def _build_section(cls: Type[_C], root: Mapping[str, Any], key: str) -> Dict[str, _C]:
    section = root.get(key)
    if section is None:
        return {}
    entries = _require_mapping(section, name=key)
    return {str(entry): _build(cls, obj, name=f"{key}.{entry}") for entry, obj in entries.items()}


def config_from_mapping(root_obj: Any) -> StrategyConfig:
    root = _require_mapping(root_obj, name="config")
    schema = root.get("schema")
    if schema != CONFIG_SCHEMA:
        raise ConfigError(f"unsupported config schema: {schema!r}")
    unknown = sorted(set(root) - {"schema", "feeds", "managers", "crossover_managers"})
    if unknown:
        raise ConfigError(f"config has unknown keys: {', '.join(unknown)}")
    return StrategyConfig(
        feeds=_build_section(FeedConfig, root, "feeds"),
        managers=_build_section(ManagerConfig, root, "managers"),
        crossover_managers=_build_section(CrossoverConfig, root, "crossover_managers"),
    )


def load_config(path: Union[str, Path, None] = None) -> StrategyConfig:
    """Load a YAML config file (default: ``$BASKET_STRATEGIES_CONFIG``)."""
    if path is None:
        raw_env = os.environ.get(CONFIG_PATH_ENV, "").strip()
        if not raw_env:
            raise ConfigError(f"no config path given and {CONFIG_PATH_ENV} is not set")
        path = raw_env
    raw = Path(path).read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    return config_from_mapping(doc)
