"""
Benchmark the AI policy: seat each registered agent in the human chair, play full matches against
the match engine's AI and save per-match CSV rows, per-opponent aggregates and a win% chart.
Usage: python scripts/run_simulation.py --opponents all --matches 50 --data-dir data
"""
import os
import argparse
import datetime
import inspect
import logging
import random
from collections import defaultdict
from typing import Any, Dict, List

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from dice_duel.persistence import csv_io
from dice_duel.agents import AGENT_MAP
from dice_duel.core.config import MatchConfig, StartingPlayer
from dice_duel.core.engine import MatchController
from dice_duel.core.state import PhaseKind, Player
from dice_duel.persistence.recorder import InMemoryRecorder

log = logging.getLogger("run_simulation")


def make_agent(key: str, seed: int):
    cls = AGENT_MAP[key]
    if 'rng' in inspect.signature(cls).parameters:
        return cls(rng=random.Random(seed))
    return cls()


def run_match(opponent_key: str, policy_key: str, cfg: MatchConfig, match_index: int, seed: int) -> Dict[str, Any]:
    """
    Play one full match: `opponent_key` drives the human seat, `policy_key` the AI seat.
    """
    recorder = InMemoryRecorder()
    controller = MatchController(cfg, ai_agent=make_agent(policy_key, seed), rng=random.Random(seed), recorder=recorder)
    opponent = make_agent(opponent_key, seed + 1)
    view = controller.get_game_state()
    while view.phase.kind is not PhaseKind.GAME_OVER:
        if view.phase.kind is PhaseKind.ROUND_OVER:
            view = controller.next_round()
            continue
        action = opponent.choose_action(controller.get_view(Player.HUMAN))
        view = controller.play(action)

    events = recorder.pop_events()
    ended = [e for e in events if e.event_type == "RoundEnded"]
    return {
        "match_id": controller.match_id,
        "match_index": match_index,
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "opponent": opponent_key,
        "policy": policy_key,
        "winner": view.phase.winner.value,
        "human_wins": view.human_wins,
        "ai_wins": view.ai_wins,
        "rounds_played": len(ended),
        "bids": sum(1 for e in events if e.event_type == "BidPlaced"),
        "challenges": sum(1 for e in events if e.event_type == "ChallengeCalled"),
        "bluffs_caught": sum(1 for e in ended if not e.payload["was_true"]),
    }


def aggregate_and_plot(opponent_stats: Dict[str, dict], out_path: str):
    opponents = sorted(opponent_stats.keys())
    win_perc = [opponent_stats[o]['policy_win_percent'] for o in opponents]

    width = max(6, int(len(opponents) * 0.8))
    plt.figure(figsize=(width, 4))
    bars = plt.bar(opponents, win_perc, color='C0')
    plt.ylabel('AI policy match win (%)')
    plt.ylim(0, 100)
    plt.title('AI policy win% per human-seat opponent')
    for rect, val in zip(bars, win_perc):
        plt.text(rect.get_x() + rect.get_width() / 2.0, rect.get_height() + 1.0, f"{val:.1f}%", ha='center', va='bottom', fontsize=8)
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()


def run_simulation(opponent_keys: List[str], policy_key: str, matches: int, cfg: MatchConfig, data_dir: str, seed: int):
    os.makedirs(data_dir, exist_ok=True)
    summary_csv = os.path.join(data_dir, 'match_summary.csv')
    stats_csv = os.path.join(data_dir, 'opponent_stats.csv')
    chart_png = os.path.join(data_dir, 'policy_win_percentages.png')

    stats = defaultdict(lambda: defaultdict(int))
    for opponent_key in opponent_keys:
        rows = []
        for i in range(matches):
            row = run_match(opponent_key, policy_key, cfg, i, seed + 2 * i)
            rows.append(row)
            s = stats[opponent_key]
            s['matches'] += 1
            s['rounds'] += row['rounds_played']
            s['policy_round_wins'] += row['ai_wins']
            if row['winner'] == Player.AI.value:
                s['policy_match_wins'] += 1
        csv_io.append_rows_to_csv(rows, summary_csv, csv_io.get_match_summary_header())
        log.info("%s: policy won %d/%d matches", opponent_key, stats[opponent_key]['policy_match_wins'], matches)

    stat_rows = []
    for opponent_key in sorted(stats):
        s = stats[opponent_key]
        s['policy_win_percent'] = (s['policy_match_wins'] / s['matches'] * 100.0) if s['matches'] else 0.0
        stat_rows.append({'opponent': opponent_key, **{k: s[k] for k in csv_io.get_opponent_stats_header()[1:]}})
    csv_io.append_rows_to_csv(stat_rows, stats_csv, csv_io.get_opponent_stats_header())

    aggregate_and_plot(stats, chart_png)

    print(f"Simulation finished. Match summaries saved to {summary_csv}")
    print(f"Per-opponent stats: {stats_csv}")
    print(f"Win percentage chart: {chart_png}")


def parse_agent_list(s: str) -> List[str]:
    if s.strip().lower() == 'all':
        return sorted(AGENT_MAP.keys())
    return [x.strip() for x in s.split(',') if x.strip()]


def main():
    parser = argparse.ArgumentParser(description='Benchmark the AI policy against agents in the human seat')
    parser.add_argument('--opponents', type=str, default='all', help='Comma-separated agent keys from AGENT_MAP or "all"')
    parser.add_argument('--policy', type=str, default='probability', help='Agent key for the AI seat')
    parser.add_argument('--matches', type=int, default=50, help='Matches per opponent')
    parser.add_argument('--rounds', type=int, default=5, help='Rounds per match')
    parser.add_argument('--opener', choices=[s.value for s in StartingPlayer], default=StartingPlayer.ALTERNATE.value)
    parser.add_argument('--seed', type=int, default=69)
    parser.add_argument('--data-dir', type=str, default='data', help='Directory to save csv and charts')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    # per-round engine logging is too chatty for thousands of matches
    logging.getLogger("dice_duel").setLevel(logging.WARNING)
    keys = parse_agent_list(args.opponents) + [args.policy]
    unknown = [a for a in keys if a not in AGENT_MAP]
    if unknown:
        raise SystemExit(f"Unknown agents: {unknown}. Supported: {list(AGENT_MAP.keys())}")

    cfg = MatchConfig(max_rounds=args.rounds, starting_player=StartingPlayer(args.opener))
    run_simulation(parse_agent_list(args.opponents), args.policy, args.matches, cfg, args.data_dir, args.seed)


if __name__ == '__main__':
    main()
