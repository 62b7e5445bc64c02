"""City definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class CityDef:
    """A city on the world map; immutable once the world exists."""

    id: str
    name: str
    neighbors: Tuple[str, ...]
    x: int
    y: int
