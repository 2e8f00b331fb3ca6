"""
csv_io.py
CSV writers for simulation output: one summary row per simulated match and one aggregate row per
opponent agent.
"""

import os
import csv
from typing import Dict, List, Any

MATCH_SUMMARY_HEADER = [
    "match_id", "match_index", "timestamp", "opponent", "policy", "winner",
    "human_wins", "ai_wins", "rounds_played", "bids", "challenges", "bluffs_caught",
]
OPPONENT_STATS_HEADER = [
    "opponent", "matches", "policy_match_wins", "policy_win_percent", "rounds", "policy_round_wins",
]

def append_rows_to_csv(rows: List[Dict[str, Any]], csv_path: str, header: List[str]):
    write_header = not os.path.exists(csv_path)
    with open(csv_path, "a", newline='', encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        if write_header:
            writer.writeheader()
        for row in rows:
            writer.writerow(row)

def get_match_summary_header():
    return MATCH_SUMMARY_HEADER.copy()

def get_opponent_stats_header():
    return OPPONENT_STATS_HEADER.copy()
