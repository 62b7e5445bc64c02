"""Events emitted by state-changing game operations."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from wasteland.core.types import GoodId
from wasteland.domain.market import MarketMode


@dataclass(slots=True)
class GameEvent:
    """Base class for game events."""


@dataclass(slots=True)
class ActionFailedEvent(GameEvent):
    reason: str
    message: str


@dataclass(slots=True)
class ResourceSpentEvent(GameEvent):
    good_id: GoodId
    remaining: int


@dataclass(slots=True)
class DayAdvancedEvent(GameEvent):
    tick: int


@dataclass(slots=True)
class MarketRefreshedEvent(GameEvent):
    city_id: str
    mode: MarketMode
    tick: int


@dataclass(slots=True)
class TradeExecutedEvent(GameEvent):
    give: Dict[GoodId, int]
    take: Dict[GoodId, int]
    give_value: int
    take_value: int


@dataclass(slots=True)
class GuardsPaidEvent(GameEvent):
    payment: Dict[GoodId, int]


@dataclass(slots=True)
class TravelPerformedEvent(GameEvent):
    from_city_id: str
    to_city_id: str
    to_city_name: str
    guarded: bool


@dataclass(slots=True)
class AmbushEvent(GameEvent):
    """The party was waylaid; the loot is fixed but not yet taken."""

    destination_id: str
    stolen: Dict[GoodId, int]


@dataclass(slots=True)
class RobberyResolvedEvent(GameEvent):
    stolen: Dict[GoodId, int]


@dataclass(slots=True)
class BankruptcyEvent(GameEvent):
    city_id: str


@dataclass(slots=True)
class ActionResult:
    """Return payload of a state-changing operation.

    A result holding an ``ActionFailedEvent`` means nothing was changed.
    """

    events: List[GameEvent] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failure is None

    @property
    def failure(self) -> ActionFailedEvent | None:
        for event in self.events:
            if isinstance(event, ActionFailedEvent):
                return event
        return None

    @property
    def stolen(self) -> Dict[GoodId, int]:
        """Goods taken by bandits in this action, if any."""
        for event in self.events:
            if isinstance(event, RobberyResolvedEvent):
                return dict(event.stolen)
        return {}

    @property
    def bankrupt(self) -> bool:
        return any(isinstance(event, BankruptcyEvent) for event in self.events)

    @classmethod
    def failed(cls, reason: str, message: str) -> "ActionResult":
        return cls(events=[ActionFailedEvent(reason=reason, message=message)])


@dataclass(frozen=True, slots=True)
class TradeVerdict:
    """Outcome of checking a trade against prices and holdings."""

    accepted: bool
    give_value: int = 0
    take_value: int = 0
    reason: str | None = None
    message: str = ""

    def as_failure(self) -> ActionResult:
        return ActionResult.failed(self.reason or "rejected", self.message)


