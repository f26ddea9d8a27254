# whist_scorer/schedule.py
from __future__ import annotations

from typing import List

from .config import Configuration
from .rules import dealer_index, generate_suit_cycle, round_hand_sizes
from .state import RoundState


def build_rounds(config: Configuration) -> List[RoundState]:
    """
    Expand a sanitized configuration into the full round schedule.

    Every per-player array starts at zero. Without a round limit the
    schedule has 2 * starting_hand_size - 1 rounds.
    """
    hands = round_hand_sizes(config.starting_hand_size, config.number_of_rounds)
    suits = generate_suit_cycle(config.suit_start, len(hands))
    players = config.player_count

    return [
        RoundState(
            round_index=round_index,
            hand_size=hand_size,
            suit=suits[round_index],
            dealer_index=dealer_index(config.first_dealer_index, round_index, players),
            bids=[0] * players,
            tricks_taken=[0] * players,
            round_scores=[0] * players,
            totals_after_round=[0] * players,
        )
        for round_index, hand_size in enumerate(hands)
    ]
