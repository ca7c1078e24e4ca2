"""
RandomOpponent: picks a uniformly random addend.

- Baseline for simulations (scripts/run_many.py) and for exercising the runner in tests.
- Ignores the running sum; close() is a no-op.

"""
from __future__ import annotations
import random

from .referee import ADDENDS


class RandomOpponent:
    """Plays 1..5 uniformly at random."""
    name: str = "Random"

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def choose(self, current_sum: int) -> int:
        return self._rng.choice(ADDENDS)

    def close(self):
        pass
