"""
Single-game runner and config.

- GameConfig: knobs for the computer's reply delay, locale, console game log and history export.
- GameRunner: drives one game between two players (human/greedy/random) through a Referee.
  - Asks the player whose turn it is for an addend, applies it, and reports each MoveOutcome.
  - Waits opponent_delay_s before the computer side moves so a UI can show the previous result.
  - Writes a structured history JSON (per move, or at the end) and exposes metrics/summary.

"""
from __future__ import annotations
import time, logging, json, threading
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from .config import SETTINGS
from .messages import format_entry, actor_label
from .referee import Actor, EngineError, MoveOutcome, Referee


@dataclass
class GameConfig:
    # Pause before the computer side moves (presentation only; 0 disables)
    opponent_delay_s: float = field(default_factory=lambda: SETTINGS.opponent_delay_s)
    locale: str = field(default_factory=lambda: SETTINGS.locale)
    # Console logging of moves as they happen
    game_log: bool = False
    # Optional path or directory for the structured history JSON
    history_path: str | None = None
    history_every_turn: bool = False
    cancel_event: threading.Event | None = None


class GameRunner:
    def __init__(self, human, opponent, cfg: GameConfig | None = None,
                 on_move: Optional[Callable[[MoveOutcome], None]] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.log = logging.getLogger("GameRunner")
        self.players = {Actor.HUMAN: human, Actor.OPPONENT: opponent}
        self.cfg = cfg or GameConfig()
        self.ref = Referee()
        self.on_move = on_move
        self._sleep = sleep
        self.cancel_event = self.cfg.cancel_event
        self.termination_reason: str | None = None
        self.records: list[dict] = []  # per move: actor, addend, think time
        self.start_ts = time.time()
        # configured value (file or directory); cfg.history_path holds the resolved file
        self._history_target = self.cfg.history_path
        self._prepare_history_path()

    def _cancelled(self) -> bool:
        return bool(self.cancel_event and self.cancel_event.is_set())

    def _player_name(self, actor: Actor) -> str:
        return getattr(self.players[actor], "name", None) or actor_label(actor, self.cfg.locale)

    def _prepare_history_path(self):
        p = self._history_target
        if not p:
            return
        try:
            base, ext = os.path.splitext(p)
            is_dir_like = os.path.isdir(p) or (ext == "")
            if is_dir_like:
                os.makedirs(p, exist_ok=True)
                ts = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
                resolved = os.path.join(p, f"game_{ts}.json")
            else:
                dir_path = os.path.dirname(p)
                if dir_path:
                    os.makedirs(dir_path, exist_ok=True)
                resolved = p
            self.cfg.history_path = resolved
        except OSError:
            self.log.exception("Failed to prepare history path; disabling history export")
            self.cfg.history_path = None

    # ---------------- Turns -----------------
    def step(self) -> MoveOutcome:
        """Ask the side to move for an addend and apply it. EngineError propagates unchanged."""
        actor = self.ref.active_actor
        player = self.players[actor]
        if actor is Actor.OPPONENT and self.cfg.opponent_delay_s > 0:
            self._sleep(self.cfg.opponent_delay_s)
        t0 = time.time()
        addend = player.choose(self.ref.current_sum)
        ms = int((time.time() - t0) * 1000)
        try:
            outcome = self.ref.apply_move(actor, addend)
        except EngineError as e:
            self.log.error("Move rejected for %s (%s): %s", self._player_name(actor), e.kind, e)
            raise
        self.records.append({"actor": actor.value, "addend": addend, "ms": ms})
        if self.cfg.game_log:
            for line in format_entry(outcome.entry, self.cfg.locale):
                self.log.info("[move %d] %s", len(self.records), line)
        else:
            self.log.debug("Move %d %s +%d -> %d", len(self.records), actor.value, addend, outcome.current_sum)
        if self.cfg.history_path and self.cfg.history_every_turn:
            self.dump_structured_history_json()
        if self.on_move:
            self.on_move(outcome)
        return outcome

    def play(self) -> Optional[Actor]:
        """Play until someone wins (or cancel_event is set). Returns the winner, if any."""
        while not self.ref.is_finished:
            if self._cancelled():
                self.termination_reason = "cancelled"
                break
            self.step()
        if self.ref.is_finished:
            self.termination_reason = "target_reached"
        winner = self.ref.winner
        self.log.info("Game finished winner=%s reason=%s moves=%d",
                      winner.value if winner else None, self.termination_reason, len(self.records))
        self.dump_structured_history_json()
        return winner

    def reset(self):
        self.ref.reset()
        self.records = []
        self.termination_reason = None
        self.start_ts = time.time()
        self._prepare_history_path()

    # --------------- Structured history export ---------------
    def export_structured_history(self) -> dict:
        """Return the game as JSON-friendly data: players, result and one row per move with running scores."""
        state = self.ref.current_state()
        running = {Actor.HUMAN: 0, Actor.OPPONENT: 0}
        moves = []
        for i, entry in enumerate(state.log):
            running[entry.actor] += entry.points_awarded
            row = entry.to_dict()
            row["move"] = i + 1
            row["scores"] = {a.value: s for a, s in running.items()}
            if i < len(self.records):
                row["ms"] = self.records[i].get("ms")
            moves.append(row)
        return {
            "players": {a.value: self._player_name(a) for a in Actor},
            "status": state.status.value,
            "winner": state.winner.value if state.winner else None,
            "termination_reason": self.termination_reason,
            "final_sum": state.current_sum,
            "scores": {a.value: s for a, s in state.scores.items()},
            "moves": moves,
        }

    def dump_structured_history_json(self):
        path = self.cfg.history_path
        if not path:
            return
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.export_structured_history(), f, ensure_ascii=False, indent=2)
            self.log.info("Wrote structured history to %s", path)
        except OSError:
            self.log.exception("Failed writing structured history")

    def verify_history_result(self) -> dict:
        """Replay the recorded addends on a fresh referee and compare the outcome."""
        replay = Referee()
        for rec in self.records:
            try:
                replay.apply_move(rec["actor"], rec["addend"])
            except EngineError as e:
                return {"error": f"{e.kind}_at_move:{len(replay.current_state().log) + 1}"}
        a, b = replay.current_state(), self.ref.current_state()
        return {
            "reconstructed_winner": a.winner.value if a.winner else None,
            "referee_winner": b.winner.value if b.winner else None,
            "mismatch": a != b,
        }

    # ---------------- Metrics -----------------
    def metrics(self) -> dict:
        state = self.ref.current_state()
        per_actor = {}
        for a in Actor:
            entries = [e for e in state.log if e.actor is a]
            per_actor[a.value] = {
                "moves": len(entries),
                "prime_hits": sum(1 for e in entries if e.scored),
                "score": state.scores[a],
            }
        return {
            "moves_total": len(state.log),
            "players": per_actor,
            "final_sum": state.current_sum,
            "winner": state.winner.value if state.winner else None,
            "termination_reason": self.termination_reason,
            "duration_s": round(time.time() - self.start_ts, 2),
            "human_label": self._player_name(Actor.HUMAN),
            "opponent_label": self._player_name(Actor.OPPONENT),
        }

    def summary(self) -> dict:
        m = self.metrics()
        m["history_verification"] = self.verify_history_result()
        m["history_path"] = self.cfg.history_path
        return m
