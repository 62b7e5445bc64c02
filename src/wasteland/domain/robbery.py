"""Loot selection for ambushes on the road."""
from __future__ import annotations

from typing import Dict, Mapping, Tuple

from wasteland.core.types import GoodId
from wasteland.domain.goods import good_order
from wasteland.domain.inventory import Inventory
from wasteland.domain.market import NEUTRAL_PRICE, inventory_value


def stolen_value_target(inventory: Inventory, prices: Mapping[GoodId, int], share: Tuple[int, int]) -> int:
    """Return how much value the bandits aim to take."""
    numerator, denominator = share
    return inventory_value(inventory, prices) * numerator // denominator


def select_loot(inventory: Inventory, prices: Mapping[GoodId, int], budget: int) -> Dict[GoodId, int]:
    """Pick the goods to steal, dearest first, without exceeding the budget.

    A lone cheap unit is taken outright even though it does not fit the
    budget, so an ambush never leaves an ungrabbable crumb behind.
    """
    if inventory.distinct_count() == 1:
        (good_id,) = inventory.goods()
        if inventory.get(good_id) == 1 and prices[good_id] < NEUTRAL_PRICE:
            return {good_id: 1}

    loot: Dict[GoodId, int] = {}
    remaining = budget
    held = sorted(inventory.goods(), key=lambda good_id: (-prices[good_id], good_order(good_id)))
    for good_id in held:
        if remaining <= 0:
            break
        price = prices[good_id]
        quantity = min(inventory.get(good_id), remaining // price)
        if quantity > 0:
            loot[good_id] = quantity
            remaining -= quantity * price
    return loot
