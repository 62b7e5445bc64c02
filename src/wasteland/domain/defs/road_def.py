"""Road definition data structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RoadDef:
    """An undirected road between two adjacent cities."""

    from_id: str
    to_id: str
    length: int
    risk: float

    def connects(self, city_a: str, city_b: str) -> bool:
        """Return True if the road joins the two cities in either direction."""
        return (self.from_id == city_a and self.to_id == city_b) or (
            self.from_id == city_b and self.to_id == city_a
        )
