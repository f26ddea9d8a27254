# whist_scorer/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, List, Tuple

from .state import GameState

FIELDNAMES = [
    "round_index",
    "hand_size",
    "suit",
    "dealer_index",
    "player_index",
    "player_name",
    "bid",
    "tricks_taken",
    "round_score",
    "total",
]


def build_round_score_rows(game_state: GameState) -> List[Dict[str, Any]]:
    """
    Build a list of rows summarizing per-round scores for CSV export.

    Each row corresponds to (round, player) and has keys in FIELDNAMES. Rounds
    that were never scored are skipped, so a game quit midway still exports
    everything up to the quit.
    """
    config = game_state.config
    rows: List[Dict[str, Any]] = []

    for round_state in game_state.rounds:
        if not round_state.scored:
            continue
        for pid in range(config.player_count):
            rows.append(
                {
                    "round_index": round_state.round_index,
                    "hand_size": round_state.hand_size,
                    "suit": round_state.suit.value,
                    "dealer_index": round_state.dealer_index,
                    "player_index": pid,
                    "player_name": config.player_name(pid),
                    "bid": round_state.bids[pid],
                    "tricks_taken": round_state.tricks_taken[pid],
                    "round_score": round_state.round_scores[pid],
                    "total": round_state.totals_after_round[pid],
                }
            )

    return rows


def write_round_scores_csv(game_state: GameState, path) -> int:
    """
    Write per-round scores to a CSV file and return the number of data rows.

    `path` can be a string or any path-like object accepted by `open`.
    """
    rows = build_round_score_rows(game_state)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in FIELDNAMES})
    return len(rows)


def leaderboard(game_state: GameState) -> List[Tuple[str, int]]:
    """(name, total) pairs from the last scored round, best first."""
    scored = [r for r in game_state.rounds if r.scored]
    if not scored:
        totals = [0] * game_state.config.player_count
    else:
        totals = scored[-1].totals_after_round
    standings = [
        (game_state.config.player_name(pid), total) for pid, total in enumerate(totals)
    ]
    return sorted(standings, key=lambda item: item[1], reverse=True)
