"""Domain-level state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from wasteland.core.types import GoodId
from wasteland.domain.defs import CityDef, RoadDef
from wasteland.domain.inventory import Inventory
from wasteland.domain.market import CityMarketState


@dataclass(slots=True)
class TradeLimits:
    """Units bought and sold per good during the current visit."""

    bought: Dict[GoodId, int] = field(default_factory=dict)
    sold: Dict[GoodId, int] = field(default_factory=dict)
    last_city_id: str = ""

    def reset(self, city_id: str) -> None:
        """Open a fresh trading window in the given city."""
        self.bought = {}
        self.sold = {}
        self.last_city_id = city_id

    def record(self, give: Mapping[GoodId, int], take: Mapping[GoodId, int]) -> None:
        for good_id, quantity in take.items():
            if quantity > 0:
                self.bought[good_id] = self.bought.get(good_id, 0) + quantity
        for good_id, quantity in give.items():
            if quantity > 0:
                self.sold[good_id] = self.sold.get(good_id, 0) + quantity


@dataclass(slots=True)
class Player:
    city_id: str
    inventory: Inventory = field(default_factory=Inventory)
    trade_limits: TradeLimits = field(default_factory=TradeLimits)


@dataclass(slots=True)
class World:
    """Seed, clock, static map and the mutable market of every city."""

    seed: int
    tick: int
    cities: List[CityDef]
    roads: List[RoadDef]
    markets: Dict[str, CityMarketState] = field(default_factory=dict)

    def get_city(self, city_id: str) -> CityDef | None:
        for city in self.cities:
            if city.id == city_id:
                return city
        return None

    def find_road(self, city_a: str, city_b: str) -> RoadDef | None:
        for road in self.roads:
            if road.connects(city_a, city_b):
                return road
        return None

    def neighbors_of(self, city_id: str) -> List[CityDef]:
        city = self.get_city(city_id)
        if city is None:
            return []
        return [candidate for candidate in self.cities if candidate.id in city.neighbors]


@dataclass(slots=True)
class PendingTravel:
    """An ambush that has been rolled but not yet acknowledged.

    Never persisted; it lives only between begin and complete travel.
    """

    destination_id: str
    stolen: Dict[GoodId, int]
    upkeep_good: GoodId


@dataclass(slots=True)
class GameState:
    """One game session: the persisted world and player plus transient travel."""

    world: World
    player: Player
    pending_travel: PendingTravel | None = None

    @property
    def seed(self) -> int:
        return self.world.seed

    @property
    def tick(self) -> int:
        return self.world.tick

    def current_market(self) -> CityMarketState | None:
        return self.world.markets.get(self.player.city_id)
