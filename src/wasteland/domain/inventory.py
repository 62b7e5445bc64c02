"""Player inventory keyed by good id."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from wasteland.core.types import GoodId
from wasteland.domain.goods import GOODS, good_order


@dataclass(slots=True)
class Inventory:
    """Counts of held goods.

    Only positive counts are stored; a missing key and a zero count mean the
    same thing, and every update path drops keys that reach zero.
    """

    counts: Dict[GoodId, int] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[GoodId, int]) -> "Inventory":
        inventory = cls()
        for good_id, quantity in mapping.items():
            if good_id not in GOODS:
                raise ValueError(f"Unknown good '{good_id}'.")
            if quantity < 0:
                raise ValueError(f"Negative count for '{good_id}'.")
            inventory.add(good_id, quantity)
        return inventory

    def get(self, good_id: GoodId) -> int:
        return self.counts.get(good_id, 0)

    def has(self, good_id: GoodId) -> bool:
        return self.get(good_id) > 0

    def add(self, good_id: GoodId, quantity: int = 1) -> None:
        if quantity <= 0:
            return
        self.counts[good_id] = self.counts.get(good_id, 0) + quantity

    def remove(self, good_id: GoodId, quantity: int = 1) -> bool:
        if quantity <= 0:
            return True
        current = self.counts.get(good_id, 0)
        if current < quantity:
            return False
        new_value = current - quantity
        if new_value == 0:
            self.counts.pop(good_id, None)
        else:
            self.counts[good_id] = new_value
        return True

    def can_remove_all(self, goods: Mapping[GoodId, int]) -> bool:
        """Return True if every requested quantity is held."""
        return all(self.get(good_id) >= quantity for good_id, quantity in goods.items() if quantity > 0)

    def remove_all(self, goods: Mapping[GoodId, int]) -> bool:
        """Remove a bundle of goods, or nothing at all if any is short."""
        if not self.can_remove_all(goods):
            return False
        for good_id, quantity in goods.items():
            self.remove(good_id, quantity)
        return True

    def add_all(self, goods: Mapping[GoodId, int]) -> None:
        for good_id, quantity in goods.items():
            self.add(good_id, quantity)

    def goods(self) -> List[GoodId]:
        """Return held goods in canonical order."""
        return sorted(self.counts.keys(), key=good_order)

    def distinct_count(self) -> int:
        return len(self.counts)

    def total_units(self) -> int:
        return sum(self.counts.values())

    def is_empty(self) -> bool:
        return not self.counts

    def copy(self) -> "Inventory":
        return Inventory(counts=dict(self.counts))

    def as_dict(self) -> Dict[GoodId, int]:
        return {good_id: self.counts[good_id] for good_id in self.goods()}
