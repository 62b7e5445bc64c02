"""Factory for the static city graph."""
from __future__ import annotations

from typing import List, Tuple

from wasteland.data.errors import DataError
from wasteland.data.repositories import CitiesRepository, RoadsRepository
from wasteland.domain.defs import CityDef, RoadDef
from wasteland.services.errors import FactoryError


def create_world_graph(
    cities_repo: CitiesRepository,
    roads_repo: RoadsRepository,
) -> Tuple[List[CityDef], List[RoadDef]]:
    """Return the fixed cities and roads of a new game, in definition order."""
    try:
        cities = cities_repo.all()
        roads = roads_repo.all()
    except DataError as exc:
        raise FactoryError(f"World definitions are invalid: {exc}") from exc
    if not cities:
        raise FactoryError("The world needs at least one city.")
    return list(cities), list(roads)
