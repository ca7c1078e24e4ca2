"""
Minimal Flask API that wires the prime points referee into a browser UI.

Endpoints:
- POST /api/games                 -> start a game (human moves first)
- GET  /api/games/<game_id>       -> current state plus formatted log lines
- POST /api/games/<game_id>/move  -> submit the human's number and receive the computer's reply
- POST /api/games/<game_id>/reset -> start over in the same session

Games live in memory only and are dropped after an hour without activity. The computer replies
in the same response; any "thinking" pause is left to the UI.
"""
from __future__ import annotations

import logging
import os
import sys
import threading
import time
import uuid
from typing import Dict, Optional

from flask import Flask, jsonify, request

ROOT = os.path.abspath(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from primegame.config import SETTINGS
from primegame.greedy_opponent import GreedyOpponent
from primegame.messages import SUPPORTED_LOCALES, format_log, format_status
from primegame.referee import Actor, EngineError, Referee

logging.basicConfig(level=getattr(logging, SETTINGS.log_level, logging.INFO), format="%(asctime)s %(levelname)s %(message)s")

app = Flask(__name__)
games_lock = threading.Lock()

GAMES: Dict[str, dict] = {}
GAME_TTL_S = 3600  # drop inactive games after an hour to avoid leaks


def _cleanup_stale_games(max_age_s: int = GAME_TTL_S):
    now = time.time()
    with games_lock:
        expired = [gid for gid, sess in GAMES.items() if now - sess.get("updated_at", now) > max_age_s]
        for gid in expired:
            GAMES.pop(gid, None)
    if expired:
        logging.info("Dropped %d stale game(s)", len(expired))


def _locale_from_request(session: Optional[dict] = None) -> str:
    loc = request.args.get("locale")
    if loc in SUPPORTED_LOCALES:
        return loc
    if session:
        return session["locale"]
    return SETTINGS.locale


def _serialize_session(session: dict, locale: str) -> dict:
    state = session["referee"].current_state()
    return {
        "game_id": session["id"],
        "state": state.to_dict(),
        "status_text": format_status(state, locale),
        "messages": format_log(state.log, locale),
    }


def _get_session(game_id: str) -> Optional[dict]:
    with games_lock:
        return GAMES.get(game_id)


def _error(kind: str, status: int = 400, **extra):
    body = {"error": kind}
    body.update(extra)
    return jsonify(body), status


@app.route("/api/games", methods=["POST"])
def create_game():
    _cleanup_stale_games()
    data = request.get_json(silent=True) or {}
    locale = data.get("locale") if data.get("locale") in SUPPORTED_LOCALES else SETTINGS.locale
    seed = data.get("seed")
    game_id = f"game_{int(time.time())}_{uuid.uuid4().hex[:6]}"
    session = {
        "id": game_id,
        "referee": Referee(),
        "opponent": GreedyOpponent(seed=seed if isinstance(seed, int) else None),
        "locale": locale,
        "created_at": time.time(),
        "updated_at": time.time(),
        "lock": threading.Lock(),
    }
    with games_lock:
        GAMES[game_id] = session
    logging.info("Created game %s locale=%s", game_id, locale)
    return jsonify(_serialize_session(session, locale)), 201


@app.route("/api/games/<game_id>", methods=["GET"])
def get_game(game_id: str):
    session = _get_session(game_id)
    if not session:
        return _error("not_found", 404)
    with session["lock"]:
        return jsonify(_serialize_session(session, _locale_from_request(session)))


@app.route("/api/games/<game_id>/move", methods=["POST"])
def game_move(game_id: str):
    _cleanup_stale_games()
    session = _get_session(game_id)
    if not session:
        return _error("not_found", 404)

    data = request.get_json(silent=True) or {}
    number = data.get("number")
    if number is None:
        return _error("number_required")

    ref: Referee = session["referee"]
    with session["lock"]:
        try:
            human = ref.apply_move(Actor.HUMAN, number)
        except EngineError as e:
            return _error(e.kind, detail=str(e))
        session["updated_at"] = time.time()

        opponent_entry = None
        if not ref.is_finished and ref.active_actor is Actor.OPPONENT:
            reply = session["opponent"].choose(ref.current_sum)
            opponent_entry = ref.apply_move(Actor.OPPONENT, reply).entry

        body = _serialize_session(session, _locale_from_request(session))
        body["human_entry"] = human.entry.to_dict()
        body["opponent_entry"] = opponent_entry.to_dict() if opponent_entry else None
        return jsonify(body)


@app.route("/api/games/<game_id>/reset", methods=["POST"])
def reset_game(game_id: str):
    session = _get_session(game_id)
    if not session:
        return _error("not_found", 404)
    with session["lock"]:
        session["referee"].reset()
        session["updated_at"] = time.time()
        return jsonify(_serialize_session(session, _locale_from_request(session)))


@app.after_request
def add_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = request.headers.get("Origin", "*")
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    # Prevent caching so the UI always sees the freshest state
    response.headers["Cache-Control"] = "no-store, max-age=0"
    return response


@app.route("/api/<path:path>", methods=["OPTIONS"])
def cors_preflight(path: str):
    return app.make_response(("", 204))


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=SETTINGS.server_port, debug=True)
