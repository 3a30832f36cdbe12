"""
Rebalancing managers and the basket-token surface they drive
"""

from .basket import (
    BasketToken,
    InMemoryBasketToken,
    RebalanceProposal,
    RebalanceState,
    SetComposition,
    SetRegistry,
)
from .crossover_manager import CollateralSet, MovingAverageCrossoverManager
from .rebalancing_manager import AssetConfig, TwoAssetRebalancingManager

__all__ = [
    "BasketToken",
    "InMemoryBasketToken",
    "RebalanceProposal",
    "RebalanceState",
    "SetComposition",
    "SetRegistry",
    "CollateralSet",
    "MovingAverageCrossoverManager",
    "AssetConfig",
    "TwoAssetRebalancingManager",
]
