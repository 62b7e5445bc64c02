"""Service layer exports."""

from .errors import FactoryError, SaveLoadError, TravelStateError
from .events import ActionFailedEvent, ActionResult, GameEvent, TradeVerdict
from .game_service import CityView, GameService, NeighborView
from .guard_service import GuardQuote, GuardService
from .market_service import MarketService
from .save_service import SaveService
from .trade_service import TradeService
from .travel_service import TravelService
from .upkeep_service import UpkeepService

__all__ = [
    "FactoryError",
    "SaveLoadError",
    "TravelStateError",
    "ActionFailedEvent",
    "ActionResult",
    "GameEvent",
    "TradeVerdict",
    "CityView",
    "GameService",
    "NeighborView",
    "GuardQuote",
    "GuardService",
    "MarketService",
    "SaveService",
    "TradeService",
    "TravelService",
    "UpkeepService",
]
