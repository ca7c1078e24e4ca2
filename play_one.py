import argparse
import json
import logging
import os
import sys

ROOT = os.path.abspath(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from primegame.config import SETTINGS
from primegame.game import GameConfig, GameRunner
from primegame.greedy_opponent import GreedyOpponent
from primegame.messages import SUPPORTED_LOCALES, format_entry, format_scoreboard, format_status
from primegame.referee import MIN_ADDEND, MAX_ADDEND
from primegame.user_opponent import UserOpponent


def load_json_config(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logging.getLogger("play_one").error("Failed to read config %s: %s", path, e)
        return {}


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Play the prime points game against the computer in the terminal.")
    ap.add_argument("--config", default=None, help="Optional JSON config file to load defaults from.")
    ap.add_argument("--locale", choices=list(SUPPORTED_LOCALES), default=None, help="Language for game messages")
    ap.add_argument("--delay", type=float, default=None, help="Seconds to wait before the computer moves")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the computer's random fallback moves")
    ap.add_argument("--auto", action="store_true", help="Let the computer play both sides")
    ap.add_argument("--history-out", default=None, help="Optional path (file or directory) for the JSON history")
    ap.add_argument("--log-level", default=None, help="Python logging level (e.g., INFO, DEBUG)")

    args = ap.parse_args(argv)

    cfg_dict = load_json_config(args.config) if args.config else {}

    # Resolve values with precedence: CLI arg if provided -> config -> settings
    def pick(*keys, default=None):
        for k in keys:
            v = getattr(args, k, None)
            if v is not None:
                return v
            if k in cfg_dict and cfg_dict[k] is not None:
                return cfg_dict[k]
        return default

    log_level = str(pick("log_level", default=SETTINGS.log_level)).upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    log = logging.getLogger("play_one")

    locale = pick("locale", default=SETTINGS.locale)
    delay = float(pick("delay", default=SETTINGS.opponent_delay_s))
    seed = pick("seed", default=None)
    history_out = pick("history_out", default=SETTINGS.history_dir or None)
    auto = args.auto or bool(cfg_dict.get("auto", False))

    if auto:
        human = GreedyOpponent(seed=None if seed is None else int(seed) + 1)
    else:
        human = UserOpponent(prompt=f"Choose a number {MIN_ADDEND}-{MAX_ADDEND}: ")
    opp = GreedyOpponent(seed=None if seed is None else int(seed))

    def show(outcome):
        for line in format_entry(outcome.entry, locale):
            print(line)
        state = runner.ref.current_state()
        print(format_scoreboard(state, locale))
        print(format_status(state, locale))

    gcfg = GameConfig(opponent_delay_s=delay, locale=locale, history_path=history_out)
    runner = GameRunner(human=human, opponent=opp, cfg=gcfg, on_move=show)
    log.info("Starting game: human=%s opponent=%s delay=%.2fs locale=%s", human.name, opp.name, delay, locale)

    print(format_scoreboard(runner.ref.current_state(), locale))
    try:
        winner = runner.play()
    except (KeyboardInterrupt, EOFError):
        print()
        log.info("Game abandoned after %d moves", len(runner.records))
        return 1
    finally:
        human.close()
        opp.close()

    print("Winner:", winner.value if winner else None)
    print("Metrics:", runner.metrics())
    return 0


if __name__ == "__main__":
    sys.exit(main())
