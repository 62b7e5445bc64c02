"""Pricing of hired protection for a trip."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from wasteland.core.types import GoodId
from wasteland.domain.goods import SUPPLY_GOODS, good_order
from wasteland.domain.inventory import Inventory
from wasteland.domain.state import GameState
from wasteland.services.market_service import MarketService


@dataclass(slots=True)
class GuardQuote:
    """What the guards ask for and whether the player can pay it."""

    robbable_value: int
    fee: int
    payment: Dict[GoodId, int] = field(default_factory=dict)

    @property
    def affordable(self) -> bool:
        return self.robbable_value >= 1 and self.fee >= 1 and bool(self.payment)


class GuardService:
    """Builds guard payments that never touch the last water or food."""

    def __init__(self, market_service: MarketService) -> None:
        self._market_service = market_service

    def quote(self, state: GameState) -> GuardQuote:
        prices = self._market_service.prices_for(state)
        if prices is None:
            return GuardQuote(robbable_value=0, fee=0)
        inventory = state.player.inventory
        robbable_value = self.robbable_value(inventory, prices)
        fee = robbable_value // self._market_service.balance.guard_fee_divisor
        if robbable_value < 1 or fee < 1:
            return GuardQuote(robbable_value=robbable_value, fee=fee)
        return GuardQuote(
            robbable_value=robbable_value,
            fee=fee,
            payment=self.build_payment(inventory, prices, fee),
        )

    @staticmethod
    def spare_units(inventory: Inventory, good_id: GoodId) -> int:
        """Return how many units of a good the guards may take."""
        count = inventory.get(good_id)
        if good_id in SUPPLY_GOODS:
            return max(0, count - 1)
        return count

    def robbable_value(self, inventory: Inventory, prices: Mapping[GoodId, int]) -> int:
        return sum(self.spare_units(inventory, good_id) * prices[good_id] for good_id in inventory.goods())

    def build_payment(self, inventory: Inventory, prices: Mapping[GoodId, int], fee: int) -> Dict[GoodId, int]:
        """Collect goods, dearest first, until the fee is covered."""
        payment: Dict[GoodId, int] = {}
        collected = 0
        candidates = [good_id for good_id in inventory.goods() if self.spare_units(inventory, good_id) > 0]
        candidates.sort(key=lambda good_id: (-prices[good_id], good_order(good_id)))
        for good_id in candidates:
            if collected >= fee:
                break
            price = prices[good_id]
            quantity = min((fee - collected) // price, self.spare_units(inventory, good_id))
            if quantity == 0 and collected == 0:
                # Nothing fits the fee exactly; the guards settle for one unit.
                quantity = 1
            if quantity > 0:
                payment[good_id] = quantity
                collected += quantity * price
        return payment
