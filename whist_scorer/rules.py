# whist_scorer/rules.py
from __future__ import annotations

from typing import List, Optional, Sequence

from .cards import DECK_SIZE, SUIT_ORDERS, Suit, SuitStart

EXACT_BID_BONUS = 10


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def validate_deck_constraint(player_count: int, hand_size: int) -> bool:
    """True when every player can be dealt `hand_size` cards from one deck."""
    return player_count * hand_size <= DECK_SIZE


def max_hand_size(player_count: int) -> int:
    return DECK_SIZE // max(1, player_count)


def generate_hand_sequence(starting_hand_size: int) -> List[int]:
    """
    Hand sizes for a full game: n, n-1, ..., 1, 2, ..., n.

    Returns an empty list for n <= 0.
    """
    if starting_hand_size < 1:
        return []
    down = list(range(starting_hand_size, 0, -1))
    up = list(range(2, starting_hand_size + 1))
    return down + up


def clamp_round_count(requested_rounds: int, starting_hand_size: int) -> int:
    max_rounds = max(1, starting_hand_size * 2 - 1)
    return clamp(requested_rounds, 1, max_rounds)


def round_hand_sizes(
    starting_hand_size: int,
    requested_rounds: Optional[int] = None,
) -> List[int]:
    """First `requested_rounds` entries of the hand sequence (all of it if None)."""
    sequence = generate_hand_sequence(starting_hand_size)
    if requested_rounds is None:
        return sequence
    return sequence[: clamp_round_count(requested_rounds, starting_hand_size)]


def generate_suit_cycle(start: SuitStart, round_count: int) -> List[Suit]:
    base_order = SUIT_ORDERS[start]
    return [base_order[i % len(base_order)] for i in range(max(0, round_count))]


def dealer_index(first_dealer: int, round_index: int, player_count: int) -> int:
    return (first_dealer + round_index) % player_count


def bidding_order(dealer: int, player_count: int) -> List[int]:
    """
    Seats in bidding order for a round.

    Bidding starts left of the dealer and proceeds clockwise so the dealer
    bids last.
    """
    return [(dealer + offset) % player_count for offset in range(1, player_count + 1)]


def first_leader_index(dealer: int, player_count: int) -> int:
    return (dealer + 1) % player_count


def forbidden_last_bid(
    bids: Sequence[int],
    hand_size: int,
    order: Sequence[int],
) -> Optional[int]:
    """
    The single value the last bidder may not choose, or None.

    It is the value that would make the bids total exactly `hand_size`.
    Values outside [0, hand_size] are not reported since the last bidder
    could never choose them anyway.
    """
    if not order:
        return None
    others_total = sum(bids[seat] for seat in order[:-1])
    forbidden = hand_size - others_total
    if 0 <= forbidden <= hand_size:
        return forbidden
    return None


def is_bid_allowed(
    player_index: int,
    value: int,
    bids: Sequence[int],
    hand_size: int,
    order: Sequence[int],
) -> bool:
    if value < 0 or value > hand_size:
        return False
    if not order or player_index != order[-1]:
        return True
    forbidden = forbidden_last_bid(bids, hand_size, order)
    return forbidden is None or value != forbidden


def round_score(bid: int, tricks_taken: int) -> int:
    """
    Score a single player's round:

    - Always one point per trick taken.
    - Plus EXACT_BID_BONUS when tricks_taken == bid.
    """
    return tricks_taken + (EXACT_BID_BONUS if bid == tricks_taken else 0)


def round_scores(bids: Sequence[int], tricks_taken: Sequence[int]) -> List[int]:
    return [round_score(bid, won) for bid, won in zip(bids, tricks_taken)]


def cumulative_totals(
    previous_totals: Sequence[int],
    scores: Sequence[int],
) -> List[int]:
    return [prev + score for prev, score in zip(previous_totals, scores)]
