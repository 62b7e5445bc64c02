"""Repository for road definitions."""
from __future__ import annotations

from typing import Dict

from wasteland.data.errors import DataReferenceError, DataValidationError
from wasteland.data.repositories.base import RepositoryBase
from wasteland.data.repositories.cities_repo import CitiesRepository
from wasteland.domain.defs import RoadDef

_MIN_LENGTH, _MAX_LENGTH = 1, 5
_MIN_RISK, _MAX_RISK = 0.2, 0.7


def road_key(city_a: str, city_b: str) -> str:
    """Return the direction-independent id of the road between two cities."""
    first, second = sorted((city_a, city_b))
    return f"{first}:{second}"


class RoadsRepository(RepositoryBase[RoadDef]):
    """Loads roads and checks them against the city neighbor lists."""

    def __init__(self, *, cities_repo: CitiesRepository, base_path=None) -> None:
        super().__init__("roads.json", base_path, keep_file_order=True)
        self._cities_repo = cities_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, RoadDef]:
        roads_raw = self._require_list(raw.get("roads"), "roads.json roads")
        city_ids = {city.id for city in self._cities_repo.all()}
        definitions: Dict[str, RoadDef] = {}
        for index, entry in enumerate(roads_raw):
            context = f"roads[{index}]"
            mapping = self._require_mapping(entry, context)
            from_id = self._require_str(mapping.get("from"), f"{context}.from")
            to_id = self._require_str(mapping.get("to"), f"{context}.to")
            for city_id in (from_id, to_id):
                if city_id not in city_ids:
                    raise DataReferenceError(f"{context} references unknown city '{city_id}'.")
            if from_id == to_id:
                raise DataValidationError(f"{context} must join two different cities.")
            key = road_key(from_id, to_id)
            if key in definitions:
                raise DataValidationError(f"Duplicate road between '{from_id}' and '{to_id}'.")
            length = self._require_int(mapping.get("length"), f"{context}.length")
            if not _MIN_LENGTH <= length <= _MAX_LENGTH:
                raise DataValidationError(
                    f"{context}.length must be between {_MIN_LENGTH} and {_MAX_LENGTH}."
                )
            risk = self._require_float(mapping.get("risk"), f"{context}.risk")
            if not _MIN_RISK <= risk <= _MAX_RISK:
                raise DataValidationError(
                    f"{context}.risk must be between {_MIN_RISK} and {_MAX_RISK}."
                )
            definitions[key] = RoadDef(from_id=from_id, to_id=to_id, length=length, risk=risk)

        for city in self._cities_repo.all():
            for neighbor_id in city.neighbors:
                if road_key(city.id, neighbor_id) not in definitions:
                    raise DataReferenceError(
                        f"city '{city.id}' neighbors '{neighbor_id}' but no road joins them."
                    )
        for road in definitions.values():
            if road.to_id not in self._cities_repo.get(road.from_id).neighbors:
                raise DataValidationError(
                    f"road '{road.from_id}' -> '{road.to_id}' joins cities that are not neighbors."
                )
        return definitions
