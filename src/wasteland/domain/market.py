"""Market modes and the price tiers they produce."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

from wasteland.core.types import GoodId, MarketModeKind
from wasteland.domain.goods import GOODS
from wasteland.domain.inventory import Inventory

CHEAP_PRICE = 1
NEUTRAL_PRICE = 2
DEFAULT_EXPENSIVE_PRICE = 3

MARKET_MODE_KINDS: Tuple[MarketModeKind, ...] = (
    "ALL_NEUTRAL",
    "ONE_CHEAP",
    "TWO_CHEAP",
    "ONE_EXPENSIVE",
    "CHEAP_AND_EXPENSIVE",
)

# kind -> (cheap count, expensive count)
_MODE_SHAPES: Dict[MarketModeKind, Tuple[int, int]] = {
    "ALL_NEUTRAL": (0, 0),
    "ONE_CHEAP": (1, 0),
    "TWO_CHEAP": (2, 0),
    "ONE_EXPENSIVE": (0, 1),
    "CHEAP_AND_EXPENSIVE": (1, 1),
}


@dataclass(frozen=True, slots=True)
class MarketMode:
    """Which goods a city sells cheap or dear right now."""

    kind: MarketModeKind
    cheap: Tuple[GoodId, ...] = ()
    expensive: Tuple[GoodId, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in _MODE_SHAPES:
            raise ValueError(f"Unknown market mode '{self.kind}'.")
        cheap_count, expensive_count = _MODE_SHAPES[self.kind]
        if len(self.cheap) != cheap_count or len(self.expensive) != expensive_count:
            raise ValueError(
                f"Market mode {self.kind} expects {cheap_count} cheap and "
                f"{expensive_count} expensive goods."
            )
        for good_id in (*self.cheap, *self.expensive):
            if good_id not in GOODS:
                raise ValueError(f"Unknown good '{good_id}'.")
        if len(set(self.cheap)) != len(self.cheap) or len(set(self.expensive)) != len(self.expensive):
            raise ValueError(f"Market mode {self.kind} repeats a good.")
        if set(self.cheap) & set(self.expensive):
            raise ValueError("A good cannot be cheap and expensive at once.")


@dataclass(frozen=True, slots=True)
class CityMarketState:
    """Current market of one city; replaced wholesale on refresh."""

    city_id: str
    mode: MarketMode
    updated_at_tick: int


def price_of(good_id: GoodId, mode: MarketMode, expensive_price: int = DEFAULT_EXPENSIVE_PRICE) -> int:
    """Return the unit price of a good under a market mode."""
    if good_id in mode.cheap:
        return CHEAP_PRICE
    if good_id in mode.expensive:
        return expensive_price
    return NEUTRAL_PRICE


def all_prices(mode: MarketMode, expensive_price: int = DEFAULT_EXPENSIVE_PRICE) -> Dict[GoodId, int]:
    """Return the price of every good under a market mode."""
    return {good_id: price_of(good_id, mode, expensive_price) for good_id in GOODS}


def bundle_value(goods: Mapping[GoodId, int], prices: Mapping[GoodId, int]) -> int:
    """Return the total value of a good->count mapping."""
    return sum(quantity * prices[good_id] for good_id, quantity in goods.items())


def inventory_value(inventory: Inventory, prices: Mapping[GoodId, int]) -> int:
    """Return the value of an inventory at the given prices."""
    return bundle_value(inventory.counts, prices)
