"""The closed set of tradable goods."""
from __future__ import annotations

from typing import Dict, Tuple

from wasteland.core.types import GoodId

GOODS: Tuple[GoodId, ...] = ("water", "food", "fuel", "ammo", "scrap", "medicine")
SUPPLY_GOODS: Tuple[GoodId, ...] = ("water", "food")

GOOD_NAMES: Dict[GoodId, str] = {
    "water": "Water",
    "food": "Food",
    "fuel": "Fuel",
    "ammo": "Ammo",
    "scrap": "Scrap",
    "medicine": "Medicine",
}


def is_good(value: object) -> bool:
    """Return True if the value names one of the tradable goods."""
    return isinstance(value, str) and value in GOODS


def good_order(good_id: GoodId) -> int:
    """Return the canonical sort position of a good."""
    return GOODS.index(good_id)
