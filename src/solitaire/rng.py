"""
Seeded randomness.

Every generator receives a SeededRandom explicitly. Boards are only reproducible when nothing in
between reaches for the global `random` module.
"""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF


def derive_seed(seed: Optional[int | str] = None) -> int:
    """Coerce a seed into an unsigned 32-bit integer, drawing a fresh one when none is usable."""
    if isinstance(seed, str):
        seed = int(seed) if seed.strip().lstrip("-").isdigit() else None
    if seed is None:
        return random.SystemRandom().getrandbits(32)
    return seed & UINT32_MASK


class SeededRandom:
    """Deterministic stream of floats in [0, 1) plus the few helpers the generators need."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def random(self) -> float:
        return self._random.random()

    def below(self, upper: int) -> int:
        """Integer in [0, upper)"""
        return int(self.random() * upper)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.below(len(items))]

    def shuffle(self, items: list[T]) -> None:
        """Fisher-Yates, in place, walking down from the last element."""
        for i in range(len(items) - 1, 0, -1):
            j = self.below(i + 1)
            items[i], items[j] = items[j], items[i]
