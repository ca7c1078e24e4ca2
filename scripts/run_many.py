"""
RUN_MANY.py — Simulation runner
- Plays N computer-vs-computer games (greedy or random on each side) with no delay.
- Optionally appends one JSON line of metrics per game to --jsonl.
- Prints a grand summary (wins per side, avg moves, avg final sum, prime hit rate, wall time).
Usage: python -u scripts/run_many.py --games 200 --human-side random --opponent greedy --seed 7
"""
import argparse, json, logging, os, sys, statistics, time
from typing import List, Dict

# Ensure project src added
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from primegame.config import SETTINGS
from primegame.game import GameRunner, GameConfig
from primegame.greedy_opponent import GreedyOpponent
from primegame.random_opponent import RandomOpponent

PLAYERS = {'greedy': GreedyOpponent, 'random': RandomOpponent}


def _parse_log_level(name: str | None) -> int:
    name = (name or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def run_games(games: int, human_kind: str, opponent_kind: str, seed: int | None = None, jsonl_f=None) -> List[Dict]:
    all_metrics = []
    for i in range(games):
        # Distinct, reproducible seeds per side and per game
        s_h = None if seed is None else seed * 1000 + 2 * i
        s_o = None if seed is None else seed * 1000 + 2 * i + 1
        human = PLAYERS[human_kind](seed=s_h)
        opp = PLAYERS[opponent_kind](seed=s_o)
        runner = GameRunner(human=human, opponent=opp, cfg=GameConfig(opponent_delay_s=0.0))
        runner.play()
        m = runner.metrics()
        m['game_index'] = i
        all_metrics.append(m)
        print(f"[Game {i+1}] winner={m['winner']} moves={m['moves_total']} final_sum={m['final_sum']}")
        if jsonl_f:
            jsonl_f.write(json.dumps(m) + '\n')
            jsonl_f.flush()
        human.close()
        opp.close()
    return all_metrics


def summarize(all_metrics: List[Dict]) -> Dict:
    winners = [m.get('winner') for m in all_metrics]
    moves = [m.get('moves_total', 0) for m in all_metrics]
    sums = [m.get('final_sum', 0) for m in all_metrics]
    hits = sum(p['prime_hits'] for m in all_metrics for p in m['players'].values())
    return {
        'games': len(all_metrics),
        'human_wins': winners.count('human'),
        'opponent_wins': winners.count('opponent'),
        'avg_moves': statistics.mean(moves) if moves else 0,
        'avg_final_sum': statistics.mean(sums) if sums else 0,
        'prime_hit_rate': (hits / sum(moves)) if sum(moves) else 0.0,
    }


def main(argv=None):
    ap = argparse.ArgumentParser(description='Simulate many computer-vs-computer games and summarize the results.')
    ap.add_argument('--games', type=int, default=100, help='Number of games to play')
    ap.add_argument('--human-side', choices=sorted(PLAYERS), default='random', help='Player on the first-moving (human) side')
    ap.add_argument('--opponent', choices=sorted(PLAYERS), default='greedy', help='Player on the opponent side')
    ap.add_argument('--seed', type=int, default=None, help='Base seed for reproducible runs')
    ap.add_argument('--jsonl', default=None, help='Append per-game metrics to this JSONL file')
    ap.add_argument('--log-level', default=None, help='Python logging level (default from settings)')
    args = ap.parse_args(argv)

    logging.basicConfig(level=_parse_log_level(args.log_level or SETTINGS.log_level),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    log = logging.getLogger('run_many')

    if args.games < 1:
        log.error('--games must be at least 1')
        sys.exit(1)

    t0 = time.time()
    jsonl_f = None
    if args.jsonl:
        d = os.path.dirname(args.jsonl)
        if d:
            os.makedirs(d, exist_ok=True)
        jsonl_f = open(args.jsonl, 'a', encoding='utf-8')
    try:
        all_metrics = run_games(args.games, args.human_side, args.opponent, args.seed, jsonl_f)
    finally:
        if jsonl_f:
            jsonl_f.close()

    s = summarize(all_metrics)
    print('\nGrand summary:')
    print(f"Games: {s['games']}  {args.human_side} (human side) wins={s['human_wins']}  {args.opponent} (opponent side) wins={s['opponent_wins']}")
    print(f"Avg moves: {s['avg_moves']:.1f}")
    print(f"Avg final sum: {s['avg_final_sum']:.1f}")
    print(f"Prime hit rate: {s['prime_hit_rate']*100:.2f}%")
    print(f"Wall time: {time.time()-t0:.1f}s")
    return s


if __name__ == '__main__':
    main()
