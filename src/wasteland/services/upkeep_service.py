"""Daily upkeep: spending water or food and advancing the clock."""
from __future__ import annotations

import logging
from typing import List

from wasteland.core.rng import RNG, SCOPE_RESOURCE_SPEND
from wasteland.core.types import GoodId
from wasteland.domain.inventory import Inventory
from wasteland.domain.state import GameState
from wasteland.services.events import (
    ActionResult,
    DayAdvancedEvent,
    GameEvent,
    ResourceSpentEvent,
)
from wasteland.services.market_service import MarketService

logger = logging.getLogger(__name__)

NO_SUPPLIES_MESSAGE = "You have no water or food left to last another day."


class UpkeepService:
    """Consumes supplies and moves the world forward one tick at a time."""

    def __init__(self, market_service: MarketService) -> None:
        self._market_service = market_service

    @staticmethod
    def can_spend(inventory: Inventory) -> bool:
        """Return True if a day's upkeep could be paid from the inventory."""
        return inventory.has("water") or inventory.has("food")

    def choose_upkeep_good(self, state: GameState, inventory: Inventory | None = None) -> GoodId | None:
        """Return which supply today's upkeep consumes, or None if neither is held.

        With both available a coin flip keyed to the current tick decides, so
        the same day always eats the same supply.
        """
        held = inventory if inventory is not None else state.player.inventory
        has_water = held.has("water")
        has_food = held.has("food")
        if has_water and has_food:
            rng = RNG.scoped(state.seed, state.tick, SCOPE_RESOURCE_SPEND)
            return "water" if rng.chance(0.5) else "food"
        if has_water:
            return "water"
        if has_food:
            return "food"
        return None

    def spend_resource(self, state: GameState) -> ActionResult:
        """Consume one unit of water or food from the player's inventory."""
        good_id = self.choose_upkeep_good(state)
        if good_id is None:
            return ActionResult.failed("no_supplies", NO_SUPPLIES_MESSAGE)
        inventory = state.player.inventory
        inventory.remove(good_id, 1)
        logger.debug("Tick %d upkeep consumed %s", state.tick, good_id)
        return ActionResult(events=[ResourceSpentEvent(good_id=good_id, remaining=inventory.get(good_id))])

    def do_tick(self, state: GameState) -> ActionResult:
        """Wait a day in the current city."""
        good_id = self.choose_upkeep_good(state)
        if good_id is None:
            return ActionResult.failed("no_supplies", NO_SUPPLIES_MESSAGE)
        inventory = state.player.inventory.copy()
        inventory.remove(good_id, 1)

        events: List[GameEvent] = [ResourceSpentEvent(good_id=good_id, remaining=inventory.get(good_id))]
        events.extend(self.advance_clock(state))
        state.player.inventory = inventory
        state.player.trade_limits.reset(state.player.city_id)
        return ActionResult(events=events)

    def advance_clock(self, state: GameState) -> List[GameEvent]:
        """Advance the tick by one and refresh markets for the new tick."""
        state.world.tick += 1
        events: List[GameEvent] = [DayAdvancedEvent(tick=state.world.tick)]
        events.extend(self._market_service.refresh_markets(state.world))
        return events
