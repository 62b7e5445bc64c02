"""Barter validation and settlement."""
from __future__ import annotations

import logging
from typing import Dict, Mapping

from wasteland.core.types import GoodId
from wasteland.domain.goods import GOOD_NAMES, is_good
from wasteland.domain.market import bundle_value
from wasteland.domain.state import GameState, TradeLimits
from wasteland.services.events import ActionResult, TradeExecutedEvent, TradeVerdict
from wasteland.services.market_service import MarketService

logger = logging.getLogger(__name__)

GoodsMapping = Mapping[GoodId, int]


class TradeService:
    """Checks offers against local prices and applies accepted barters."""

    def __init__(self, market_service: MarketService) -> None:
        self._market_service = market_service

    @property
    def per_trade_cap(self) -> int:
        return self._market_service.balance.per_trade_cap

    @property
    def visit_trade_cap(self) -> int:
        return self._market_service.balance.visit_trade_cap

    def propose_trade(self, state: GameState, give: GoodsMapping, take: GoodsMapping) -> TradeVerdict:
        """Judge an offer without changing anything."""
        for label, bundle in (("offered", give), ("requested", take)):
            for good_id, quantity in bundle.items():
                if not is_good(good_id):
                    return _reject("unknown_good", f"Nobody here trades in '{good_id}'.")
                if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
                    return _reject("invalid_quantity", f"The {label} amount of {good_id} is not valid.")
        give = _positive(give)
        take = _positive(take)
        if not give and not take:
            return _reject("empty_trade", "Nothing is being exchanged.")

        prices = self._market_service.prices_for(state)
        if prices is None:
            return _reject("no_market", "There is no market in this city.")

        for good_id, quantity in take.items():
            if quantity > self.per_trade_cap:
                return _reject(
                    "over_trade_cap",
                    f"Traders hand over at most {self.per_trade_cap} {GOOD_NAMES[good_id]} per deal.",
                )

        give_value = bundle_value(give, prices)
        take_value = bundle_value(take, prices)
        if take_value > give_value:
            return TradeVerdict(
                accepted=False,
                give_value=give_value,
                take_value=take_value,
                reason="insufficient_value",
                message=f"Your offer is worth {give_value}, you ask for {take_value}.",
            )

        inventory = state.player.inventory
        for good_id, quantity in give.items():
            if inventory.get(good_id) < quantity:
                return TradeVerdict(
                    accepted=False,
                    give_value=give_value,
                    take_value=take_value,
                    reason="insufficient_goods",
                    message=f"You do not have {quantity} {GOOD_NAMES[good_id]}.",
                )
        return TradeVerdict(accepted=True, give_value=give_value, take_value=take_value)

    def execute_trade(self, state: GameState, give: GoodsMapping, take: GoodsMapping) -> ActionResult:
        """Apply an offer in full, or not at all."""
        verdict = self.propose_trade(state, give, take)
        if not verdict.accepted:
            return verdict.as_failure()
        give = _positive(give)
        take = _positive(take)

        player = state.player
        limits = player.trade_limits
        if limits.last_city_id != player.city_id:
            limits = TradeLimits(last_city_id=player.city_id)
        for good_id, quantity in take.items():
            if limits.bought.get(good_id, 0) + quantity > self.visit_trade_cap:
                return ActionResult.failed(
                    "over_visit_cap",
                    f"This city will not sell you more than {self.visit_trade_cap} "
                    f"{GOOD_NAMES[good_id]} per visit.",
                )
        for good_id, quantity in give.items():
            if limits.sold.get(good_id, 0) + quantity > self.visit_trade_cap:
                return ActionResult.failed(
                    "over_visit_cap",
                    f"This city will not buy more than {self.visit_trade_cap} "
                    f"{GOOD_NAMES[good_id]} from you per visit.",
                )

        player.inventory.remove_all(give)
        player.inventory.add_all(take)
        limits.record(give, take)
        player.trade_limits = limits
        logger.debug(
            "Trade in %s at tick %d: gave %s (%d) for %s (%d)",
            player.city_id,
            state.tick,
            give,
            verdict.give_value,
            take,
            verdict.take_value,
        )
        return ActionResult(
            events=[
                TradeExecutedEvent(
                    give=give,
                    take=take,
                    give_value=verdict.give_value,
                    take_value=verdict.take_value,
                )
            ]
        )

    def remaining_allowance(self, state: GameState) -> Dict[str, Dict[GoodId, int]]:
        """Return how many more units of each traded good may be bought/sold this visit."""
        limits = state.player.trade_limits
        if limits.last_city_id != state.player.city_id:
            return {"bought": {}, "sold": {}}
        return {
            "bought": {good_id: self.visit_trade_cap - count for good_id, count in limits.bought.items()},
            "sold": {good_id: self.visit_trade_cap - count for good_id, count in limits.sold.items()},
        }


def _positive(bundle: GoodsMapping) -> Dict[GoodId, int]:
    return {good_id: quantity for good_id, quantity in bundle.items() if quantity > 0}


def _reject(reason: str, message: str) -> TradeVerdict:
    return TradeVerdict(accepted=False, reason=reason, message=message)
