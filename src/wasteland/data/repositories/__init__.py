"""Repository exports."""

from .balance_repo import BalanceRepository
from .cities_repo import CitiesRepository
from .roads_repo import RoadsRepository

__all__ = [
    "BalanceRepository",
    "CitiesRepository",
    "RoadsRepository",
]
