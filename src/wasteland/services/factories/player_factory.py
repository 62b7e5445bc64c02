"""Factory for the player's opening position."""
from __future__ import annotations

from wasteland.core.rng import RNG, SCOPE_STARTING_INVENTORY
from wasteland.domain.defs import BalanceDef
from wasteland.domain.goods import GOODS, SUPPLY_GOODS
from wasteland.domain.inventory import Inventory
from wasteland.domain.state import Player, TradeLimits


def create_starting_player(seed: int, start_city_id: str, balance: BalanceDef) -> Player:
    """Create the player with guaranteed supplies plus a few random trade goods."""
    inventory = Inventory.from_mapping(balance.starting_supplies)
    rng = RNG.scoped(seed, 0, SCOPE_STARTING_INVENTORY)
    trade_goods = [good_id for good_id in GOODS if good_id not in SUPPLY_GOODS]
    for _ in range(balance.starting_extra_units):
        inventory.add(rng.choice(trade_goods), 1)
    return Player(
        city_id=start_city_id,
        inventory=inventory,
        trade_limits=TradeLimits(last_city_id=start_city_id),
    )
