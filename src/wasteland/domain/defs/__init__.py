"""Domain definition exports."""

from .balance_def import BalanceDef
from .city_def import CityDef
from .road_def import RoadDef

__all__ = [
    "BalanceDef",
    "CityDef",
    "RoadDef",
]
