"""Market mode generation and per-tick refresh."""
from __future__ import annotations

import logging
from typing import Dict, List

from wasteland.core.rng import RNG, SCOPE_MARKET_REFRESH, SCOPE_MARKET_SEED
from wasteland.core.types import GoodId
from wasteland.domain.defs import BalanceDef
from wasteland.domain.goods import GOODS
from wasteland.domain.market import CityMarketState, MarketMode, all_prices
from wasteland.domain.state import GameState, World
from wasteland.services.events import MarketRefreshedEvent

logger = logging.getLogger(__name__)


class MarketService:
    """Sole writer of city market state."""

    def __init__(self, balance: BalanceDef) -> None:
        self._balance = balance

    @property
    def balance(self) -> BalanceDef:
        return self._balance

    def draw_market_mode(self, rng: RNG) -> MarketMode:
        """Draw a market mode by weight, then the goods it marks."""
        kind = rng.weighted_choice(self._balance.weight_table())
        if kind == "ALL_NEUTRAL":
            return MarketMode(kind=kind)
        first = rng.choice(GOODS)
        if kind == "ONE_CHEAP":
            return MarketMode(kind=kind, cheap=(first,))
        if kind == "ONE_EXPENSIVE":
            return MarketMode(kind=kind, expensive=(first,))
        second = rng.choice([good_id for good_id in GOODS if good_id != first])
        if kind == "TWO_CHEAP":
            return MarketMode(kind=kind, cheap=(first, second))
        return MarketMode(kind=kind, cheap=(first,), expensive=(second,))

    def seed_markets(self, world: World) -> None:
        """Give every city an opening market at the current tick."""
        rng = RNG.scoped(world.seed, world.tick, SCOPE_MARKET_SEED)
        world.markets = {
            city.id: CityMarketState(city_id=city.id, mode=self.draw_market_mode(rng), updated_at_tick=world.tick)
            for city in world.cities
        }

    def refresh_markets(self, world: World) -> List[MarketRefreshedEvent]:
        """Redraw the markets of a few distinct cities for ``world.tick``.

        Call after the tick has been advanced; untouched cities keep their
        previous state object.
        """
        rng = RNG.scoped(world.seed, world.tick, SCOPE_MARKET_REFRESH)
        available = [city.id for city in world.cities]
        selected: List[str] = []
        while available and len(selected) < self._balance.markets_refreshed_per_tick:
            city_id = rng.choice(available)
            available.remove(city_id)
            selected.append(city_id)

        events: List[MarketRefreshedEvent] = []
        for city_id in selected:
            mode = self.draw_market_mode(rng)
            world.markets[city_id] = CityMarketState(city_id=city_id, mode=mode, updated_at_tick=world.tick)
            events.append(MarketRefreshedEvent(city_id=city_id, mode=mode, tick=world.tick))
        logger.debug("Tick %d refreshed markets: %s", world.tick, ", ".join(selected))
        return events

    def prices_for(self, state: GameState, city_id: str | None = None) -> Dict[GoodId, int] | None:
        """Return the prices in a city (the player's by default)."""
        market = state.world.markets.get(city_id or state.player.city_id)
        if market is None:
            return None
        return all_prices(market.mode, self._balance.expensive_price)
