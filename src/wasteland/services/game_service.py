"""Game engine facade: one handle per game session."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from wasteland.core.types import GoodId
from wasteland.data.repositories import BalanceRepository, CitiesRepository, RoadsRepository
from wasteland.data.repositories.balance_repo import DEFAULT_BALANCE_ID
from wasteland.domain.bankruptcy import is_bankrupt
from wasteland.domain.defs import BalanceDef
from wasteland.domain.market import CHEAP_PRICE, inventory_value
from wasteland.domain.state import GameState, World
from wasteland.services.errors import TravelStateError
from wasteland.services.events import ActionResult, BankruptcyEvent, TradeVerdict
from wasteland.services.factories import create_starting_player, create_world_graph
from wasteland.services.guard_service import GuardQuote, GuardService
from wasteland.services.market_service import MarketService
from wasteland.services.save_service import SavePayload, SaveService
from wasteland.services.trade_service import TradeService
from wasteland.services.travel_service import TravelService
from wasteland.services.upkeep_service import UpkeepService

logger = logging.getLogger(__name__)

_MAX_SEED = 2**31 - 1


@dataclass(slots=True)
class NeighborView:
    city_id: str
    name: str
    risk: float


@dataclass(slots=True)
class CityView:
    """Everything the presentation needs to draw the current city."""

    city_id: str
    name: str
    tick: int
    seed: int
    market_kind: str | None
    prices: Dict[GoodId, int]
    cheap: List[GoodId]
    expensive: List[GoodId]
    inventory: Dict[GoodId, int]
    inventory_value: int
    can_spend: bool
    bankrupt: bool
    allowance: Dict[str, Dict[GoodId, int]] = field(default_factory=dict)
    neighbors: List[NeighborView] = field(default_factory=list)


class GameService:
    """Owns the services of one engine and routes player intents to them."""

    def __init__(
        self,
        *,
        balance_repo: BalanceRepository | None = None,
        cities_repo: CitiesRepository | None = None,
        roads_repo: RoadsRepository | None = None,
        balance_id: str = DEFAULT_BALANCE_ID,
        balance: BalanceDef | None = None,
    ) -> None:
        self._cities_repo = cities_repo or CitiesRepository()
        self._roads_repo = roads_repo or RoadsRepository(cities_repo=self._cities_repo)
        if balance is None:
            balance = (balance_repo or BalanceRepository()).get(balance_id)
        self._balance = balance
        self.market_service = MarketService(balance)
        self.upkeep_service = UpkeepService(self.market_service)
        self.trade_service = TradeService(self.market_service)
        self.guard_service = GuardService(self.market_service)
        self.travel_service = TravelService(self.market_service, self.upkeep_service)
        self.save_service = SaveService(cities_repo=self._cities_repo)

    @property
    def balance(self) -> BalanceDef:
        return self._balance

    def initialize_game(self, seed: int | None = None) -> GameState:
        """Create a new world and player; a missing seed is drawn from OS entropy."""
        if seed is None:
            seed = secrets.randbelow(_MAX_SEED)
        cities, roads = create_world_graph(self._cities_repo, self._roads_repo)
        world = World(seed=seed, tick=0, cities=cities, roads=roads)
        self.market_service.seed_markets(world)
        player = create_starting_player(seed, cities[0].id, self._balance)
        logger.info("New game: seed=%d balance=%s start=%s", seed, self._balance.id, player.city_id)
        return GameState(world=world, player=player)

    def spend_resource(self, state: GameState) -> ActionResult:
        self._ensure_idle(state)
        return self._with_bankruptcy_check(state, self.upkeep_service.spend_resource(state))

    def do_tick(self, state: GameState) -> ActionResult:
        self._ensure_idle(state)
        return self._with_bankruptcy_check(state, self.upkeep_service.do_tick(state))

    def propose_trade(
        self, state: GameState, give: Mapping[GoodId, int], take: Mapping[GoodId, int]
    ) -> TradeVerdict:
        return self.trade_service.propose_trade(state, give, take)

    def execute_trade(
        self, state: GameState, give: Mapping[GoodId, int], take: Mapping[GoodId, int]
    ) -> ActionResult:
        self._ensure_idle(state)
        return self._with_bankruptcy_check(state, self.trade_service.execute_trade(state, give, take))

    def travel(self, state: GameState, to_city_id: str) -> ActionResult:
        return self._with_bankruptcy_check(state, self.travel_service.travel(state, to_city_id))

    def travel_with_guards(
        self, state: GameState, to_city_id: str, payment: Mapping[GoodId, int]
    ) -> ActionResult:
        return self._with_bankruptcy_check(
            state, self.travel_service.travel_with_guards(state, to_city_id, payment)
        )

    def begin_travel(self, state: GameState, to_city_id: str) -> ActionResult:
        result = self.travel_service.begin_travel(state, to_city_id)
        if state.pending_travel is not None:
            return result
        return self._with_bankruptcy_check(state, result)

    def complete_travel(self, state: GameState) -> ActionResult:
        return self.travel_service.complete_travel(state)

    def quote_guards(self, state: GameState) -> GuardQuote:
        return self.guard_service.quote(state)

    def is_bankrupt(self, state: GameState) -> bool:
        prices = self.market_service.prices_for(state)
        if prices is None:
            return state.player.inventory.is_empty()
        return is_bankrupt(state.player.inventory, prices)

    def save(self, state: GameState) -> SavePayload:
        if state.pending_travel is not None:
            raise TravelStateError("Cannot save while an ambush is pending.")
        return self.save_service.serialize(state)

    def load(self, payload: Mapping[str, object]) -> GameState:
        return self.save_service.deserialize(payload)

    def build_city_view(self, state: GameState) -> CityView:
        world = state.world
        player = state.player
        city = world.get_city(player.city_id)
        market = state.current_market()
        prices = self.market_service.prices_for(state) or {}
        neighbors = []
        for neighbor in world.neighbors_of(player.city_id):
            road = world.find_road(player.city_id, neighbor.id)
            neighbors.append(
                NeighborView(city_id=neighbor.id, name=neighbor.name, risk=road.risk if road else 0.0)
            )
        return CityView(
            city_id=player.city_id,
            name=city.name if city else player.city_id,
            tick=world.tick,
            seed=world.seed,
            market_kind=market.mode.kind if market else None,
            prices=prices,
            cheap=[good_id for good_id, price in prices.items() if price == CHEAP_PRICE],
            expensive=list(market.mode.expensive) if market else [],
            inventory=player.inventory.as_dict(),
            inventory_value=inventory_value(player.inventory, prices) if prices else 0,
            can_spend=self.upkeep_service.can_spend(player.inventory),
            bankrupt=self.is_bankrupt(state),
            allowance=self.trade_service.remaining_allowance(state),
            neighbors=neighbors,
        )

    def _with_bankruptcy_check(self, state: GameState, result: ActionResult) -> ActionResult:
        if result.success and not result.bankrupt and self.is_bankrupt(state):
            logger.info("Player is bankrupt in %s at tick %d", state.player.city_id, state.tick)
            result.events.append(BankruptcyEvent(city_id=state.player.city_id))
        return result

    @staticmethod
    def _ensure_idle(state: GameState) -> None:
        if state.pending_travel is not None:
            raise TravelStateError("Resolve the ambush before doing anything else.")
