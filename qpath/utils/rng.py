"""Seeded random number generation for reproducible training runs."""

import random
from typing import Optional


class SeededRNG:
    """
    Seeded random number generator for reproducible results.

    Each instance owns its own ``random.Random`` stream, so it must be passed
    explicitly to everything that draws from it. Two instances created with the
    same seed produce the same sequence of draws.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)
        self._seed = seed

    @property
    def seed(self) -> Optional[int]:
        """Get the current seed."""
        return self._seed

    def random(self) -> float:
        """Generate a random float in [0.0, 1.0)."""
        return self._rng.random()

    def randrange(self, stop: int) -> int:
        """Generate a random integer N such that 0 <= N < stop."""
        return self._rng.randrange(stop)

