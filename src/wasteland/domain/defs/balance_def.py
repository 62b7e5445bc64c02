"""Balance profile definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from wasteland.core.types import GoodId, MarketModeKind
from wasteland.domain.market import MARKET_MODE_KINDS


def _standard_weights() -> Dict[MarketModeKind, int]:
    return {
        "ALL_NEUTRAL": 3,
        "ONE_CHEAP": 2,
        "TWO_CHEAP": 1,
        "ONE_EXPENSIVE": 2,
        "CHEAP_AND_EXPENSIVE": 1,
    }


@dataclass(frozen=True, slots=True)
class BalanceDef:
    """Tunable economy parameters.

    The defaults mirror the ``standard`` profile shipped in balance.json so
    tests and tools can build a profile without touching the disk.
    """

    id: str = "standard"
    market_weights: Dict[MarketModeKind, int] = field(default_factory=_standard_weights)
    expensive_price: int = 3
    per_trade_cap: int = 4
    visit_trade_cap: int = 4
    robbery_chance: float = 0.5
    robbery_share: Tuple[int, int] = (2, 3)
    guard_fee_divisor: int = 4
    markets_refreshed_per_tick: int = 2
    starting_supplies: Dict[GoodId, int] = field(default_factory=lambda: {"water": 1, "food": 1})
    starting_extra_units: int = 2

    def weight_table(self) -> Tuple[Tuple[MarketModeKind, int], ...]:
        """Return mode weights in canonical mode order."""
        return tuple((kind, self.market_weights.get(kind, 0)) for kind in MARKET_MODE_KINDS)
