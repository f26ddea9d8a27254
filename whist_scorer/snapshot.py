# whist_scorer/snapshot.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .cards import parse_suit
from .config import Configuration, configuration_from_dict, configuration_to_dict
from .rules import (
    bidding_order,
    clamp,
    cumulative_totals,
    first_leader_index,
    round_scores,
)
from .state import (
    Bidding,
    Configuring,
    GameState,
    Playing,
    RoundState,
    Screen,
    Summary,
)

SNAPSHOT_FIELDS = ("config", "rounds", "ui")


def round_to_dict(round_state: RoundState) -> Dict[str, Any]:
    return {
        "round_index": round_state.round_index,
        "hand_size": round_state.hand_size,
        "suit": round_state.suit.value,
        "dealer_index": round_state.dealer_index,
        "bids": list(round_state.bids),
        "tricks_taken": list(round_state.tricks_taken),
        "round_scores": list(round_state.round_scores),
        "totals_after_round": list(round_state.totals_after_round),
        "trick_winners": list(round_state.trick_winners),
        "scored": round_state.scored,
    }


def screen_to_dict(screen: Screen) -> Dict[str, Any]:
    return {
        "screen": screen.name,
        "current_round_index": getattr(screen, "round_index", 0),
        "bid_turn": getattr(screen, "bid_turn", 0),
        "current_trick": getattr(screen, "current_trick", 1),
        "current_leader_index": getattr(screen, "leader_index", 0),
    }


def state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "config": configuration_to_dict(state.config),
        "rounds": [round_to_dict(r) for r in state.rounds],
        "ui": screen_to_dict(state.screen),
    }


# -------------------------------------------------------------------------
# Loading. Persisted data is never trusted: everything is coerced and
# clamped against the loaded configuration.
# -------------------------------------------------------------------------


def _int(value: Any, fallback: int = 0) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _int_list(values: Any, length: int) -> List[int]:
    """Coerce to exactly `length` ints, padding with zeros."""
    items = values if isinstance(values, list) else []
    result = [_int(v) for v in items[:length]]
    result.extend(0 for _ in range(length - len(result)))
    return result


def round_from_dict(
    data: Mapping[str, Any],
    position: int,
    config: Configuration,
) -> RoundState:
    players = config.player_count
    hand_size = max(1, _int(data.get("hand_size"), 1))
    winners_raw = data.get("trick_winners")
    winners = [
        w
        for w in (_int(v, -1) for v in (winners_raw if isinstance(winners_raw, list) else []))
        if 0 <= w < players
    ][:hand_size]

    return RoundState(
        round_index=position,
        hand_size=hand_size,
        suit=parse_suit(data.get("suit")),
        dealer_index=clamp(_int(data.get("dealer_index")), 0, players - 1),
        bids=[clamp(b, 0, hand_size) for b in _int_list(data.get("bids"), players)],
        tricks_taken=_int_list(data.get("tricks_taken"), players),
        round_scores=_int_list(data.get("round_scores"), players),
        totals_after_round=_int_list(data.get("totals_after_round"), players),
        trick_winners=winners,
        scored=bool(data.get("scored", False)),
    )


def rescore_rounds(rounds: List[RoundState], player_count: int) -> None:
    """
    Rebuild every derived number from the validated winner history.

    Trick counts come from `trick_winners`. A round is scored when it is
    complete, or when it is the last round and was saved as scored (a quit
    game). Scores and running totals are then recomputed in order; every
    other round is reset to unscored zeros.
    """
    previous = [0] * player_count
    for position, round_state in enumerate(rounds):
        counts = [0] * player_count
        for winner in round_state.trick_winners:
            counts[winner] += 1
        round_state.tricks_taken = counts

        quit_round = round_state.scored and position == len(rounds) - 1
        if round_state.is_complete or quit_round:
            round_state.round_scores = round_scores(round_state.bids, counts)
            round_state.totals_after_round = cumulative_totals(
                previous, round_state.round_scores
            )
            round_state.scored = True
            previous = round_state.totals_after_round
        else:
            round_state.round_scores = [0] * player_count
            round_state.totals_after_round = [0] * player_count
            round_state.scored = False


def screen_from_dict(
    data: Mapping[str, Any],
    rounds: List[RoundState],
    player_count: int,
) -> Screen:
    name = data.get("screen")
    if not rounds or name not in ("bidding", "playing", "summary"):
        return Configuring()

    round_index = clamp(_int(data.get("current_round_index")), 0, len(rounds) - 1)
    round_state = rounds[round_index]

    # Only a scored round can be shown as a summary.
    if round_state.scored:
        return Summary(round_index=round_index)

    if name == "bidding":
        order = bidding_order(round_state.dealer_index, player_count)
        bid_turn = clamp(_int(data.get("bid_turn")), 0, len(order) - 1)
        return Bidding(round_index=round_index, bid_turn=bid_turn)

    # The trick number and leader follow from the recorded winners.
    if round_state.trick_winners:
        leader = round_state.trick_winners[-1]
    else:
        leader = first_leader_index(round_state.dealer_index, player_count)
    return Playing(
        round_index=round_index,
        current_trick=clamp(round_state.tricks_played + 1, 1, round_state.hand_size),
        leader_index=leader,
    )


def state_from_dict(data: Any) -> Optional[GameState]:
    """
    Rebuild a GameState from a persisted snapshot.

    Returns None when the snapshot is missing any of its top-level fields
    or is not a mapping at all.
    """
    if not isinstance(data, Mapping):
        return None
    if any(name not in data for name in SNAPSHOT_FIELDS):
        return None
    if not isinstance(data["config"], Mapping) or not isinstance(data["ui"], Mapping):
        return None
    if not isinstance(data["rounds"], list):
        return None

    config = configuration_from_dict(data["config"])
    rounds = [
        round_from_dict(raw, position, config)
        for position, raw in enumerate(r for r in data["rounds"] if isinstance(r, Mapping))
    ]
    rescore_rounds(rounds, config.player_count)

    screen = screen_from_dict(data["ui"], rounds, config.player_count)
    return GameState(config=config, rounds=rounds, screen=screen)
