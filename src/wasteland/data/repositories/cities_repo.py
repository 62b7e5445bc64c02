"""Repository for city definitions."""
from __future__ import annotations

from typing import Dict

from wasteland.data.errors import DataReferenceError, DataValidationError
from wasteland.data.repositories.base import RepositoryBase
from wasteland.domain.defs import CityDef


class CitiesRepository(RepositoryBase[CityDef]):
    """Loads and validates city definitions.

    ``all()`` keeps file order; the first city listed is where a new game
    starts.
    """

    def __init__(self, base_path=None) -> None:
        super().__init__("cities.json", base_path, keep_file_order=True)

    def _build(self, raw: dict[str, object]) -> Dict[str, CityDef]:
        cities_raw = self._require_mapping(raw, "cities.json")
        if not cities_raw:
            raise DataValidationError("cities.json must define at least one city.")
        staged: Dict[str, dict[str, object]] = {}
        for city_id, payload in cities_raw.items():
            if not isinstance(city_id, str) or not city_id.strip():
                raise DataValidationError("city id must be a non-empty string.")
            staged[city_id] = self._require_mapping(payload, f"city '{city_id}'")

        definitions: Dict[str, CityDef] = {}
        coordinates: Dict[tuple[int, int], str] = {}
        for city_id, mapping in staged.items():
            name = self._require_str(mapping.get("name"), f"city '{city_id}' name").strip()
            if not name:
                raise DataValidationError(f"city '{city_id}' name must not be empty.")
            neighbors = self._require_str_list(mapping.get("neighbors"), f"city '{city_id}' neighbors")
            if len(set(neighbors)) != len(neighbors):
                raise DataValidationError(f"city '{city_id}' lists a neighbor twice.")
            for neighbor_id in neighbors:
                if neighbor_id == city_id:
                    raise DataValidationError(f"city '{city_id}' cannot neighbor itself.")
                if neighbor_id not in staged:
                    raise DataReferenceError(
                        f"city '{city_id}' references unknown neighbor '{neighbor_id}'."
                    )
                other_neighbors = staged[neighbor_id].get("neighbors")
                if not isinstance(other_neighbors, list) or city_id not in other_neighbors:
                    raise DataValidationError(
                        f"city '{city_id}' neighbors '{neighbor_id}' but not the other way round."
                    )
            x = self._require_int(mapping.get("x"), f"city '{city_id}' x")
            y = self._require_int(mapping.get("y"), f"city '{city_id}' y")
            if (x, y) in coordinates:
                raise DataValidationError(
                    f"city '{city_id}' shares coordinates with '{coordinates[(x, y)]}'."
                )
            coordinates[(x, y)] = city_id
            definitions[city_id] = CityDef(
                id=city_id,
                name=name,
                neighbors=tuple(neighbors),
                x=x,
                y=y,
            )
        return definitions
