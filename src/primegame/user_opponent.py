from __future__ import annotations
"""Interactive human player for the terminal; only accepts addends 1..5."""
from .referee import ADDENDS, MIN_ADDEND, MAX_ADDEND


class UserOpponent:
    name = "Human"

    def __init__(self, prompt: str | None = None):
        self.prompt = prompt or f"Choose a number {MIN_ADDEND}-{MAX_ADDEND}: "

    def choose(self, current_sum: int) -> int:
        """Prompt the user for an addend; repeat until valid."""
        while True:
            print(f"\nCurrent sum: {current_sum}")
            raw = input(self.prompt).strip()
            if not raw:
                continue
            try:
                n = int(raw)
            except ValueError:
                n = None
            if n in ADDENDS:
                return n
            print(f"Please enter a whole number from {MIN_ADDEND} to {MAX_ADDEND}.")

    def close(self):
        return
