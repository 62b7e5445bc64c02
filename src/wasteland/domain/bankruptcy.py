"""Terminal-state classifier for a player's holdings."""
from __future__ import annotations

from typing import Mapping

from wasteland.core.types import GoodId
from wasteland.domain.inventory import Inventory
from wasteland.domain.market import CHEAP_PRICE


def is_bankrupt(inventory: Inventory, prices: Mapping[GoodId, int]) -> bool:
    """Return True when the holdings can no longer sustain play.

    The player is ruined with nothing left, or with a single cheap unit that
    cannot be bartered into water or food because both cost more here.
    """
    if inventory.is_empty():
        return True
    if inventory.distinct_count() == 1:
        (good_id,) = inventory.goods()
        if (
            inventory.get(good_id) == 1
            and prices[good_id] == CHEAP_PRICE
            and prices["water"] > CHEAP_PRICE
            and prices["food"] > CHEAP_PRICE
        ):
            return True
    return False
