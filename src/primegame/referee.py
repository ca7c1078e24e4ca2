"""
Referee: owns the game state and applies moves.

- Validates each move (game still running, right actor, addend 1..5) and raises an EngineError
  subclass without touching state when a check fails.
- Adds the addend to the running sum, awards the new sum as points when it is prime, appends a
  structured LogEntry, then runs the win check on the mover's updated score.
- current_state()/apply_move() hand out frozen snapshots; reset() starts a new game.

Display text is not produced here; see messages.py.
"""
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .primality import is_prime

TARGET_SCORE = 100
MIN_ADDEND = 1
MAX_ADDEND = 5
ADDENDS = tuple(range(MIN_ADDEND, MAX_ADDEND + 1))


class Actor(str, enum.Enum):
    HUMAN = "human"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Actor":
        return Actor.OPPONENT if self is Actor.HUMAN else Actor.HUMAN


class GameStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


# ---------------- Errors -----------------
class EngineError(Exception):
    """Base class for rejected moves. `kind` is a stable short label for adapters."""
    kind = "engine_error"


class InvalidAddend(EngineError):
    kind = "invalid_addend"


class NotYourTurn(EngineError):
    kind = "not_your_turn"


class GameAlreadyFinished(EngineError):
    kind = "game_already_finished"


# ---------------- Records / snapshots -----------------
@dataclass(frozen=True)
class LogEntry:
    actor: Actor
    amount_added: int
    resulting_sum: int
    scored: bool
    points_awarded: int

    def to_dict(self) -> dict:
        return {
            "actor": self.actor.value,
            "amount_added": self.amount_added,
            "resulting_sum": self.resulting_sum,
            "scored": self.scored,
            "points_awarded": self.points_awarded,
        }


def _frozen_scores(scores: Mapping[Actor, int]) -> Mapping[Actor, int]:
    return MappingProxyType(dict(scores))


@dataclass(frozen=True)
class GameState:
    """Read-only view of a game. Compare with == to check two states are identical."""
    current_sum: int = 0
    scores: Mapping[Actor, int] = field(default_factory=lambda: _frozen_scores({Actor.HUMAN: 0, Actor.OPPONENT: 0}))
    active_actor: Actor = Actor.HUMAN
    log: tuple[LogEntry, ...] = ()
    status: GameStatus = GameStatus.IN_PROGRESS
    winner: Optional[Actor] = None

    # scores is a mapping view, so snapshots compare by value but are not hashable
    __hash__ = None

    @property
    def is_finished(self) -> bool:
        return self.status is GameStatus.FINISHED

    def to_dict(self) -> dict:
        return {
            "current_sum": self.current_sum,
            "current_sum_is_prime": is_prime(self.current_sum),
            "scores": {a.value: s for a, s in self.scores.items()},
            "active_actor": self.active_actor.value,
            "status": self.status.value,
            "winner": self.winner.value if self.winner else None,
            "log": [e.to_dict() for e in self.log],
        }


@dataclass(frozen=True)
class MoveOutcome:
    current_sum: int
    scores: Mapping[Actor, int]
    active_actor: Actor
    status: GameStatus
    winner: Optional[Actor]
    entry: LogEntry

    __hash__ = None


class Referee:
    """Single-game rule engine. Not reentrant: callers serialize apply_move per instance."""

    def __init__(self):
        self.log = logging.getLogger("Referee")
        self._new_game()

    def _new_game(self) -> None:
        self._sum = 0
        self._scores: dict[Actor, int] = {Actor.HUMAN: 0, Actor.OPPONENT: 0}
        self._active = Actor.HUMAN
        self._entries: list[LogEntry] = []
        self._status = GameStatus.IN_PROGRESS
        self._winner: Optional[Actor] = None

    # ---------------- State access -----------------
    def current_state(self) -> GameState:
        return GameState(
            current_sum=self._sum,
            scores=_frozen_scores(self._scores),
            active_actor=self._active,
            log=tuple(self._entries),
            status=self._status,
            winner=self._winner,
        )

    @property
    def is_finished(self) -> bool:
        return self._status is GameStatus.FINISHED

    @property
    def winner(self) -> Optional[Actor]:
        return self._winner

    @property
    def active_actor(self) -> Actor:
        return self._active

    @property
    def current_sum(self) -> int:
        return self._sum

    def reset(self) -> GameState:
        self._new_game()
        self.log.debug("Game reset")
        return self.current_state()

    # ---------------- Move Application -----------------
    def _validate(self, actor, addend) -> Actor:
        if self._status is not GameStatus.IN_PROGRESS:
            raise GameAlreadyFinished(f"game already won by {self._winner.value if self._winner else '?'}")
        try:
            actor = Actor(actor)
        except ValueError:
            raise NotYourTurn(f"unknown actor {actor!r}") from None
        if actor is not self._active:
            raise NotYourTurn(f"{actor.value} moved but it is {self._active.value}'s turn")
        # bool is an int subclass; True must not pass as 1
        if isinstance(addend, bool) or not isinstance(addend, int) or addend not in ADDENDS:
            raise InvalidAddend(f"addend must be an integer {MIN_ADDEND}..{MAX_ADDEND}, got {addend!r}")
        return actor

    def apply_move(self, actor: Actor | str, addend: int) -> MoveOutcome:
        actor = self._validate(actor, addend)
        new_sum = self._sum + addend
        scored = is_prime(new_sum)
        points = new_sum if scored else 0
        self._scores[actor] += points
        entry = LogEntry(actor=actor, amount_added=addend, resulting_sum=new_sum, scored=scored, points_awarded=points)
        self._entries.append(entry)
        self._sum = new_sum
        self.log.debug("%s +%d -> %d scored=%s points=%d", actor.value, addend, new_sum, scored, points)

        # Only the mover can cross the target on this move
        if self._scores[actor] >= TARGET_SCORE:
            self._status = GameStatus.FINISHED
            self._winner = actor
            self.log.info("Game finished winner=%s score=%d sum=%d moves=%d",
                          actor.value, self._scores[actor], self._sum, len(self._entries))
        else:
            self._active = actor.other

        return MoveOutcome(
            current_sum=self._sum,
            scores=_frozen_scores(self._scores),
            active_actor=self._active,
            status=self._status,
            winner=self._winner,
            entry=entry,
        )
