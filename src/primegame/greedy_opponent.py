"""
GreedyOpponent: the computer player.

- choose_move(): one-ply lookahead over addends 1..5; takes the largest reachable prime sum,
  or a uniformly random addend when none of the five sums is prime.
- No search beyond the immediate move; ignores both scores.

"""
from __future__ import annotations
import random

from .primality import is_prime
from .referee import ADDENDS


def choose_move(current_sum: int, rng: random.Random | None = None) -> int:
    best_move = None
    best_sum = -1
    for c in ADDENDS:
        candidate = current_sum + c
        if is_prime(candidate) and candidate > best_sum:
            best_move = c
            best_sum = candidate
    if best_move is None:
        return (rng or random).choice(ADDENDS)
    return best_move


class GreedyOpponent:
    """Computer opponent that grabs the biggest prime it can reach this move."""
    name: str = "Computer"

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def choose(self, current_sum: int) -> int:
        return choose_move(current_sum, rng=self._rng)

    def close(self):
        # Nothing to release
        pass
