"""
Display text for game events.

The referee only emits structured LogEntry records; adapters (terminal, web UI) turn them into
lines with the helpers below. Two locales: "en" (default) and "ja".
"""
from __future__ import annotations
from typing import Iterable

from .primality import is_prime
from .referee import Actor, GameState, LogEntry

DEFAULT_LOCALE = "en"

_TEXT: dict[str, dict[str, str]] = {
    "en": {
        "human": "Player",
        "opponent": "Computer",
        "chose": "{actor} chose {n}",
        "scored": "{actor} made the sum {total} and scored {total} points! (prime)",
        "not_prime": "{actor} made the sum {total} (not prime)",
        "your_turn": "Your turn",
        "opponent_turn": "Computer's turn",
        "game_over": "Game over! {actor} wins!",
        "scoreboard": "{human}: {human_score} pts | {opponent}: {opponent_score} pts | sum: {total}{prime}",
        "prime_marker": " (prime!)",
        "not_prime_marker": " (not prime)",
    },
    "ja": {
        "human": "プレイヤー",
        "opponent": "コンピュータ",
        "chose": "{actor}が{n}を選びました",
        "scored": "{actor}が合計{total}で{total}ポイント獲得しました！（素数）",
        "not_prime": "{actor}が合計{total}にしました（素数ではありません）",
        "your_turn": "あなたの番です",
        "opponent_turn": "コンピュータの番です",
        "game_over": "ゲーム終了！{actor}の勝利！",
        "scoreboard": "{human}: {human_score}点 | {opponent}: {opponent_score}点 | 現在の合計: {total}{prime}",
        "prime_marker": "（素数です！）",
        "not_prime_marker": "（素数ではありません）",
    },
}

SUPPORTED_LOCALES = tuple(_TEXT)


def _table(locale: str | None) -> dict[str, str]:
    if locale not in _TEXT:
        locale = DEFAULT_LOCALE
    return _TEXT[locale]


def actor_label(actor: Actor, locale: str | None = None) -> str:
    return _table(locale)[Actor(actor).value]


def format_entry(entry: LogEntry, locale: str | None = None) -> list[str]:
    """Lines for one move. The computer's pick is announced before the result, as the UI shows it."""
    t = _table(locale)
    who = t[entry.actor.value]
    lines = []
    if entry.actor is Actor.OPPONENT:
        lines.append(t["chose"].format(actor=who, n=entry.amount_added))
    key = "scored" if entry.scored else "not_prime"
    lines.append(t[key].format(actor=who, total=entry.resulting_sum))
    return lines


def format_log(entries: Iterable[LogEntry], locale: str | None = None) -> list[str]:
    out: list[str] = []
    for e in entries:
        out.extend(format_entry(e, locale))
    return out


def format_status(state: GameState, locale: str | None = None) -> str:
    t = _table(locale)
    if state.is_finished:
        return t["game_over"].format(actor=t[state.winner.value])
    return t["your_turn"] if state.active_actor is Actor.HUMAN else t["opponent_turn"]


def format_scoreboard(state: GameState, locale: str | None = None) -> str:
    t = _table(locale)
    return t["scoreboard"].format(
        human=t["human"],
        human_score=state.scores[Actor.HUMAN],
        opponent=t["opponent"],
        opponent_score=state.scores[Actor.OPPONENT],
        total=state.current_sum,
        prime=t["prime_marker"] if is_prime(state.current_sum) else t["not_prime_marker"],
    )
