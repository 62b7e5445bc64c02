"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

import hashlib
from random import Random
from typing import Sequence, Tuple, TypeVar

T_co = TypeVar("T_co")

SCOPE_MARKET_SEED = "market-seed"
SCOPE_MARKET_REFRESH = "market-refresh"
SCOPE_RESOURCE_SPEND = "resource-spend"
SCOPE_ROBBERY_ROLL = "robbery-roll"
SCOPE_STARTING_INVENTORY = "starting-inventory"


def derive_seed(seed: int, tick: int, scope: str) -> int:
    """Mix a world seed, a tick and a scope tag into one 64-bit seed.

    Every scope gets its own stream, so subsystems drawing in the same tick
    never share or shift each other's numbers.
    """
    key = f"{seed}:{tick}:{scope}".encode("utf-8")
    digest = hashlib.sha256(key).digest()
    return int.from_bytes(digest[:8], "big")


class RNG:
    """Wrapper around random.Random that provides deterministic helpers."""

    def __init__(self, seed: int) -> None:
        self._random = Random(seed)

    @classmethod
    def scoped(cls, seed: int, tick: int, scope: str) -> "RNG":
        """Return a generator keyed by (seed, tick, scope)."""
        return cls(derive_seed(seed, tick, scope))

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def int_range(self, low: int, high: int) -> int:
        """Return a random integer N such that low <= N < high."""
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high}).")
        return low + int(self.random() * (high - low))

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[self.int_range(0, len(seq))]

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.random() < probability

    def weighted_choice(self, weighted: Sequence[Tuple[T_co, int]]) -> T_co:
        """Pick an entry with probability proportional to its weight.

        Zero-weight entries are never picked.
        """
        total = sum(weight for _, weight in weighted if weight > 0)
        if total <= 0:
            raise ValueError("Cannot choose with a non-positive total weight.")
        roll = self.random() * total
        for value, weight in weighted:
            if weight <= 0:
                continue
            if roll < weight:
                return value
            roll -= weight
        # Float rounding can leave a sliver past the last bucket.
        return [value for value, weight in weighted if weight > 0][-1]
