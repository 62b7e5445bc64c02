"""Travel between neighboring cities, with or without guards."""
from __future__ import annotations

import logging
from typing import List, Mapping

from wasteland.core.rng import RNG, SCOPE_ROBBERY_ROLL
from wasteland.core.types import GoodId
from wasteland.domain.bankruptcy import is_bankrupt
from wasteland.domain.goods import is_good
from wasteland.domain.inventory import Inventory
from wasteland.domain.robbery import select_loot, stolen_value_target
from wasteland.domain.state import GameState, PendingTravel
from wasteland.services.errors import TravelStateError
from wasteland.services.events import (
    ActionResult,
    AmbushEvent,
    BankruptcyEvent,
    GameEvent,
    GuardsPaidEvent,
    ResourceSpentEvent,
    RobberyResolvedEvent,
    TravelPerformedEvent,
)
from wasteland.services.market_service import MarketService
from wasteland.services.upkeep_service import NO_SUPPLIES_MESSAGE, UpkeepService

logger = logging.getLogger(__name__)


class TravelService:
    """Moves the player along roads; every trip costs exactly one day."""

    def __init__(self, market_service: MarketService, upkeep_service: UpkeepService) -> None:
        self._market_service = market_service
        self._upkeep_service = upkeep_service

    def travel(self, state: GameState, to_city_id: str) -> ActionResult:
        """Travel without any ambush roll."""
        self._ensure_no_pending(state)
        blocked = self._check_route(state, to_city_id)
        if blocked is not None:
            return blocked
        upkeep_good = self._upkeep_service.choose_upkeep_good(state)
        if upkeep_good is None:
            return ActionResult.failed("no_supplies", NO_SUPPLIES_MESSAGE)
        inventory = state.player.inventory.copy()
        return ActionResult(events=self._arrive(state, inventory, to_city_id, upkeep_good, guarded=False))

    def travel_with_guards(
        self, state: GameState, to_city_id: str, payment: Mapping[GoodId, int]
    ) -> ActionResult:
        """Pay the guards, then travel safely."""
        self._ensure_no_pending(state)
        blocked = self._check_route(state, to_city_id)
        if blocked is not None:
            return blocked
        for good_id, quantity in payment.items():
            if (
                not is_good(good_id)
                or not isinstance(quantity, int)
                or isinstance(quantity, bool)
                or quantity < 0
            ):
                return ActionResult.failed("invalid_payment", "The guards do not accept that payment.")
        payment = {good_id: quantity for good_id, quantity in payment.items() if quantity > 0}
        inventory = state.player.inventory.copy()
        if not inventory.remove_all(payment):
            return ActionResult.failed("invalid_payment", "You cannot cover the guards' price.")
        upkeep_good = self._upkeep_service.choose_upkeep_good(state, inventory)
        if upkeep_good is None:
            return ActionResult.failed("no_supplies", NO_SUPPLIES_MESSAGE)

        events: List[GameEvent] = [GuardsPaidEvent(payment=payment)]
        events.extend(self._arrive(state, inventory, to_city_id, upkeep_good, guarded=True))
        return ActionResult(events=events)

    def begin_travel(self, state: GameState, to_city_id: str) -> ActionResult:
        """Set out unguarded.

        The ambush roll is keyed to the tick before departure. Without an
        ambush the trip completes at once; with one, the loot is fixed now and
        the trip stays pending until ``complete_travel`` is called.
        """
        self._ensure_no_pending(state)
        blocked = self._check_route(state, to_city_id)
        if blocked is not None:
            return blocked
        upkeep_good = self._upkeep_service.choose_upkeep_good(state)
        if upkeep_good is None:
            return ActionResult.failed("no_supplies", NO_SUPPLIES_MESSAGE)

        balance = self._market_service.balance
        rng = RNG.scoped(state.seed, state.tick, SCOPE_ROBBERY_ROLL)
        if not rng.chance(balance.robbery_chance):
            logger.debug("Tick %d: safe road to %s", state.tick, to_city_id)
            return self.travel(state, to_city_id)

        prices = self._market_service.prices_for(state)
        remaining = state.player.inventory.copy()
        remaining.remove(upkeep_good, 1)
        if prices is None:
            stolen = {}
        else:
            budget = stolen_value_target(remaining, prices, balance.robbery_share)
            stolen = select_loot(remaining, prices, budget)
        state.pending_travel = PendingTravel(destination_id=to_city_id, stolen=stolen, upkeep_good=upkeep_good)
        logger.info("Ambushed on the road to %s at tick %d; bandits take %s", to_city_id, state.tick, stolen)
        return ActionResult(events=[AmbushEvent(destination_id=to_city_id, stolen=dict(stolen))])

    def complete_travel(self, state: GameState) -> ActionResult:
        """Hand over the loot and arrive at the pending destination."""
        pending = state.pending_travel
        if pending is None:
            raise TravelStateError("No ambush is waiting to be resolved.")
        inventory = state.player.inventory.copy()
        if not inventory.remove_all(pending.stolen):
            raise TravelStateError("Inventory changed while an ambush was pending.")

        events: List[GameEvent] = [RobberyResolvedEvent(stolen=dict(pending.stolen))]
        events.extend(self._arrive(state, inventory, pending.destination_id, pending.upkeep_good, guarded=False))
        state.pending_travel = None

        prices = self._market_service.prices_for(state)
        if prices is not None and is_bankrupt(state.player.inventory, prices):
            logger.info("Player is bankrupt in %s at tick %d", state.player.city_id, state.tick)
            events.append(BankruptcyEvent(city_id=state.player.city_id))
        return ActionResult(events=events)

    def _arrive(
        self,
        state: GameState,
        inventory: Inventory,
        to_city_id: str,
        upkeep_good: GoodId,
        *,
        guarded: bool,
    ) -> List[GameEvent]:
        from_city_id = state.player.city_id
        inventory.remove(upkeep_good, 1)
        events: List[GameEvent] = [ResourceSpentEvent(good_id=upkeep_good, remaining=inventory.get(upkeep_good))]
        events.extend(self._upkeep_service.advance_clock(state))
        state.player.inventory = inventory
        state.player.city_id = to_city_id
        state.player.trade_limits.reset(to_city_id)
        destination = state.world.get_city(to_city_id)
        events.append(
            TravelPerformedEvent(
                from_city_id=from_city_id,
                to_city_id=to_city_id,
                to_city_name=destination.name if destination else to_city_id,
                guarded=guarded,
            )
        )
        logger.info("Arrived in %s at tick %d", to_city_id, state.tick)
        return events

    @staticmethod
    def _check_route(state: GameState, to_city_id: str) -> ActionResult | None:
        world = state.world
        if world.get_city(to_city_id) is None:
            return ActionResult.failed("unknown_city", f"There is no city called '{to_city_id}'.")
        if world.find_road(state.player.city_id, to_city_id) is None:
            return ActionResult.failed("no_road", "No road leads there from here.")
        return None

    @staticmethod
    def _ensure_no_pending(state: GameState) -> None:
        if state.pending_travel is not None:
            raise TravelStateError("Resolve the ambush before doing anything else.")
