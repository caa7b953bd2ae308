"""Reproducible random streams for board generation."""
import random
from typing import Optional, Union


UINT32_MASK = 0xFFFFFFFF
UINT32_SCALE = 4294967296

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223


class SeededRandom:
    """Linear congruential generator with a ``random.Random``-like ``random()``.

    The same seed yields the same float sequence on every platform, which is
    what makes daily puzzles identical for all players.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._state = seed & UINT32_MASK

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % UINT32_SCALE
        return self._state / UINT32_SCALE

    def reset(self) -> None:
        """Restart the stream from the original seed."""
        self._state = self.seed & UINT32_MASK


Rng = Union[SeededRandom, random.Random]


def make_rng(seed: Optional[int] = None) -> Rng:
    """Return a seeded LCG, or an OS-entropy generator when no seed is given."""
    if seed is not None:
        return SeededRandom(int(seed))
    return random.Random()


def random_below(rng: Rng, n: int) -> int:
    """Return an integer in [0, n) drawn from a single ``rng.random()`` call."""
    return int(rng.random() * n)
