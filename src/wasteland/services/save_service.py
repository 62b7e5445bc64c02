"""Serialization helpers for manual save/load."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from wasteland.core.types import GoodId
from wasteland.data.repositories import CitiesRepository
from wasteland.domain.defs import CityDef, RoadDef
from wasteland.domain.goods import GOODS
from wasteland.domain.inventory import Inventory
from wasteland.domain.market import CityMarketState, MarketMode
from wasteland.domain.state import GameState, Player, TradeLimits, World
from wasteland.services.errors import SaveLoadError

logger = logging.getLogger(__name__)

SavePayload = Dict[str, Any]


class SaveService:
    """Converts the world and player to/from a validated, versioned payload.

    Pending ambushes are not saved; a game is only saved between actions.
    """

    SAVE_VERSION = 1

    def __init__(self, *, cities_repo: CitiesRepository | None = None) -> None:
        self._cities_repo = cities_repo

    def serialize(self, state: GameState) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": self._build_metadata(state),
            "state": {
                "world": self._serialize_world(state.world),
                "player": self._serialize_player(state.player),
            },
        }

    def deserialize(self, payload: Mapping[str, Any]) -> GameState:
        """Rehydrate a GameState from a persisted payload."""
        try:
            return self._deserialize(payload)
        except SaveLoadError as exc:
            logger.warning("Rejected save data: %s", exc)
            raise

    def _deserialize(self, payload: Mapping[str, Any]) -> GameState:
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format changed. Please start a new game.")
        state_payload = self._require_dict(payload.get("state"), "state")
        world = self._coerce_world(self._require_dict(state_payload.get("world"), "state.world"))
        player = self._coerce_player(self._require_dict(state_payload.get("player"), "state.player"), world)
        return GameState(world=world, player=player)

    def _build_metadata(self, state: GameState) -> Dict[str, Any]:
        city = state.world.get_city(state.player.city_id)
        return {
            "city_id": state.player.city_id,
            "city_name": city.name if city else state.player.city_id,
            "tick": state.world.tick,
            "seed": state.world.seed,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    def _serialize_world(world: World) -> Dict[str, Any]:
        return {
            "seed": world.seed,
            "tick": world.tick,
            "cities": [
                {
                    "id": city.id,
                    "name": city.name,
                    "neighbors": list(city.neighbors),
                    "x": city.x,
                    "y": city.y,
                }
                for city in world.cities
            ],
            "roads": [
                {"from": road.from_id, "to": road.to_id, "length": road.length, "risk": road.risk}
                for road in world.roads
            ],
            "markets": {
                city_id: {
                    "mode": {
                        "kind": market.mode.kind,
                        "cheap": list(market.mode.cheap),
                        "expensive": list(market.mode.expensive),
                    },
                    "updated_at_tick": market.updated_at_tick,
                }
                for city_id, market in world.markets.items()
            },
        }

    @staticmethod
    def _serialize_player(player: Player) -> Dict[str, Any]:
        return {
            "city_id": player.city_id,
            "inventory": player.inventory.as_dict(),
            "trade_limits": {
                "bought": dict(player.trade_limits.bought),
                "sold": dict(player.trade_limits.sold),
                "last_city_id": player.trade_limits.last_city_id,
            },
        }

    def _coerce_world(self, mapping: Dict[str, Any]) -> World:
        seed = self._require_int(mapping.get("seed"), "state.world.seed")
        tick = self._require_int(mapping.get("tick"), "state.world.tick")
        if tick < 0:
            raise SaveLoadError("state.world.tick must be a non-negative integer.")
        cities = self._coerce_cities(mapping.get("cities"))
        city_ids = {city.id for city in cities}
        roads = self._coerce_roads(mapping.get("roads"), city_ids)
        markets = self._coerce_markets(mapping.get("markets"), city_ids, tick)
        return World(seed=seed, tick=tick, cities=cities, roads=roads, markets=markets)

    def _coerce_cities(self, value: Any) -> List[CityDef]:
        if not isinstance(value, list) or not value:
            raise SaveLoadError("state.world.cities must be a non-empty list.")
        cities: List[CityDef] = []
        for index, entry in enumerate(value):
            context = f"state.world.cities[{index}]"
            mapping = self._require_dict(entry, context)
            neighbors = mapping.get("neighbors")
            if not isinstance(neighbors, list):
                raise SaveLoadError(f"{context}.neighbors must be a list.")
            cities.append(
                CityDef(
                    id=self._require_str(mapping.get("id"), f"{context}.id"),
                    name=self._require_str(mapping.get("name"), f"{context}.name"),
                    neighbors=tuple(self._require_str(item, f"{context}.neighbors") for item in neighbors),
                    x=self._require_int(mapping.get("x"), f"{context}.x"),
                    y=self._require_int(mapping.get("y"), f"{context}.y"),
                )
            )
        city_ids = [city.id for city in cities]
        if len(set(city_ids)) != len(city_ids):
            raise SaveLoadError("state.world.cities contains duplicate ids.")
        for city in cities:
            self._validate_city_id(city.id)
            unknown = set(city.neighbors) - set(city_ids)
            if unknown:
                raise SaveLoadError(f"City '{city.id}' references unknown neighbors: {sorted(unknown)}.")
        return cities

    def _coerce_roads(self, value: Any, city_ids: set[str]) -> List[RoadDef]:
        if not isinstance(value, list):
            raise SaveLoadError("state.world.roads must be a list.")
        roads: List[RoadDef] = []
        for index, entry in enumerate(value):
            context = f"state.world.roads[{index}]"
            mapping = self._require_dict(entry, context)
            from_id = self._require_str(mapping.get("from"), f"{context}.from")
            to_id = self._require_str(mapping.get("to"), f"{context}.to")
            if from_id not in city_ids or to_id not in city_ids:
                raise SaveLoadError(f"{context} references an unknown city.")
            risk = mapping.get("risk")
            if not isinstance(risk, (int, float)) or isinstance(risk, bool):
                raise SaveLoadError(f"{context}.risk must be a number.")
            roads.append(
                RoadDef(
                    from_id=from_id,
                    to_id=to_id,
                    length=self._require_int(mapping.get("length"), f"{context}.length"),
                    risk=float(risk),
                )
            )
        return roads

    def _coerce_markets(self, value: Any, city_ids: set[str], tick: int) -> Dict[str, CityMarketState]:
        mapping = self._require_dict(value, "state.world.markets")
        missing = city_ids - set(mapping.keys())
        if missing:
            raise SaveLoadError(f"state.world.markets is missing cities: {sorted(missing)}.")
        markets: Dict[str, CityMarketState] = {}
        for city_id, entry in mapping.items():
            context = f"state.world.markets[{city_id}]"
            if city_id not in city_ids:
                raise SaveLoadError(f"{context} references an unknown city.")
            market = self._require_dict(entry, context)
            mode_payload = self._require_dict(market.get("mode"), f"{context}.mode")
            try:
                mode = MarketMode(
                    kind=self._require_str(mode_payload.get("kind"), f"{context}.mode.kind"),
                    cheap=tuple(self._coerce_good_list(mode_payload.get("cheap"), f"{context}.mode.cheap")),
                    expensive=tuple(
                        self._coerce_good_list(mode_payload.get("expensive"), f"{context}.mode.expensive")
                    ),
                )
            except ValueError as exc:
                raise SaveLoadError(f"{context}.mode is invalid: {exc}") from exc
            updated_at_tick = self._require_int(market.get("updated_at_tick"), f"{context}.updated_at_tick")
            if not 0 <= updated_at_tick <= tick:
                raise SaveLoadError(f"{context}.updated_at_tick must be between 0 and the world tick.")
            markets[city_id] = CityMarketState(city_id=city_id, mode=mode, updated_at_tick=updated_at_tick)
        return markets

    def _coerce_player(self, mapping: Dict[str, Any], world: World) -> Player:
        city_id = self._require_str(mapping.get("city_id"), "state.player.city_id")
        if world.get_city(city_id) is None:
            raise SaveLoadError(f"Save references unknown city: {city_id}")
        counts = self._coerce_good_counts(mapping.get("inventory"), "state.player.inventory")
        limits_payload = self._require_dict(mapping.get("trade_limits"), "state.player.trade_limits")
        trade_limits = TradeLimits(
            bought=self._coerce_good_counts(limits_payload.get("bought"), "state.player.trade_limits.bought"),
            sold=self._coerce_good_counts(limits_payload.get("sold"), "state.player.trade_limits.sold"),
            last_city_id=self._require_str(
                limits_payload.get("last_city_id"), "state.player.trade_limits.last_city_id"
            ),
        )
        return Player(city_id=city_id, inventory=Inventory.from_mapping(counts), trade_limits=trade_limits)

    def _coerce_good_counts(self, value: Any, context: str) -> Dict[GoodId, int]:
        mapping = self._require_dict(value, context)
        result: Dict[GoodId, int] = {}
        for good_id, count in mapping.items():
            if good_id not in GOODS:
                raise SaveLoadError(f"{context} references unknown good '{good_id}'.")
            quantity = self._require_int(count, f"{context}.{good_id}")
            if quantity < 0:
                raise SaveLoadError(f"{context}.{good_id} must be a non-negative integer.")
            if quantity > 0:
                result[good_id] = quantity
        return result

    def _coerce_good_list(self, value: Any, context: str) -> List[GoodId]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        goods: List[GoodId] = []
        for entry in value:
            if entry not in GOODS:
                raise SaveLoadError(f"{context} references unknown good '{entry}'.")
            goods.append(entry)
        return goods

    def _validate_city_id(self, city_id: str) -> None:
        if self._cities_repo is None:
            return
        try:
            self._cities_repo.get(city_id)
        except KeyError as exc:
            raise SaveLoadError(
                f"Save incompatible with current definitions: city '{city_id}' missing."
            ) from exc

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_dict(value: Any, context: str) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return dict(value)
