"""Shared type aliases for the core and domain layers."""
from typing import Literal

GoodId = Literal["water", "food", "fuel", "ammo", "scrap", "medicine"]
MarketModeKind = Literal[
    "ALL_NEUTRAL",
    "ONE_CHEAP",
    "TWO_CHEAP",
    "ONE_EXPENSIVE",
    "CHEAP_AND_EXPENSIVE",
]

__all__ = ["GoodId", "MarketModeKind"]
