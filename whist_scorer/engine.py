# whist_scorer/engine.py
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from .config import Configuration, missing_player_names, sanitize
from .rules import (
    bidding_order,
    cumulative_totals,
    first_leader_index,
    forbidden_last_bid,
    is_bid_allowed,
    round_scores,
)
from .schedule import build_rounds
from .state import Bidding, Configuring, GameState, Playing, RoundState, Summary

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# Operations
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class UpdateConfig:
    config: Configuration


@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class SelectBid:
    """Bid for whoever holds the current bidding turn."""

    value: int


@dataclass(frozen=True)
class SetBid:
    """Edit any player's bid without moving the turn."""

    player_index: int
    value: int


@dataclass(frozen=True)
class BeginPlay:
    pass


@dataclass(frozen=True)
class RecordTrickWinner:
    player_index: int


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class QuitGame:
    pass


@dataclass(frozen=True)
class NextRound:
    pass


@dataclass(frozen=True)
class NewGame:
    pass


Operation = Union[
    UpdateConfig,
    StartGame,
    SelectBid,
    SetBid,
    BeginPlay,
    RecordTrickWinner,
    Undo,
    QuitGame,
    NextRound,
    NewGame,
]


def new_game_state(config: Optional[Configuration] = None) -> GameState:
    return GameState(config=sanitize(config or Configuration()))


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------


def _order_for(state: GameState, round_state: RoundState) -> List[int]:
    return bidding_order(round_state.dealer_index, state.num_players)


def _leader_after(state: GameState, round_state: RoundState) -> int:
    """Whoever leads the next trick given the tricks recorded so far."""
    if round_state.trick_winners:
        return round_state.trick_winners[-1]
    return first_leader_index(round_state.dealer_index, state.num_players)


def _score_round(state: GameState, round_index: int) -> None:
    """Compute round scores and running totals in place. Called exactly once per round."""
    round_state = state.rounds[round_index]
    if round_index == 0:
        previous = [0] * state.num_players
    else:
        previous = state.rounds[round_index - 1].totals_after_round
    round_state.round_scores = round_scores(round_state.bids, round_state.tricks_taken)
    round_state.totals_after_round = cumulative_totals(
        previous, round_state.round_scores
    )
    round_state.scored = True


def _unscore_round(state: GameState, round_state: RoundState) -> None:
    round_state.round_scores = [0] * state.num_players
    round_state.totals_after_round = [0] * state.num_players
    round_state.scored = False


def _pop_last_trick(round_state: RoundState) -> None:
    winner = round_state.trick_winners.pop()
    round_state.tricks_taken[winner] -= 1


# -------------------------------------------------------------------------
# Transitions: (state, operation) -> state. A rejected operation returns the
# very same state object.
# -------------------------------------------------------------------------


def update_config(state: GameState, op: UpdateConfig) -> GameState:
    if not isinstance(state.screen, Configuring):
        return state
    config = sanitize(op.config)
    if config == state.config:
        return state
    return GameState(config=config, rounds=[], screen=Configuring())


def start_game(state: GameState, op: StartGame) -> GameState:
    if not isinstance(state.screen, Configuring):
        return state
    config = sanitize(state.config)
    if not config.deck_is_valid:
        return state
    if missing_player_names(config):
        return state

    rounds = build_rounds(config)
    if not rounds:
        return state

    logger.info(
        "Starting game: %d players, starting hand %d, %d rounds",
        config.player_count,
        config.starting_hand_size,
        len(rounds),
    )
    return GameState(config=config, rounds=rounds, screen=Bidding(round_index=0))


def select_bid(state: GameState, op: SelectBid) -> GameState:
    screen = state.screen
    if not isinstance(screen, Bidding):
        return state
    round_state = state.round_at(screen.round_index)
    if round_state is None:
        return state
    order = _order_for(state, round_state)
    if not 0 <= screen.bid_turn < len(order):
        return state

    player = order[screen.bid_turn]
    if not is_bid_allowed(
        player, op.value, round_state.bids, round_state.hand_size, order
    ):
        return state

    new_state = copy.deepcopy(state)
    current = new_state.rounds[screen.round_index]
    current.bids[player] = op.value

    next_turn = screen.bid_turn + 1
    if next_turn < len(order):
        new_state.screen = Bidding(round_index=screen.round_index, bid_turn=next_turn)
    else:
        # Dealer has bid; play starts left of the dealer.
        new_state.screen = Playing(
            round_index=screen.round_index,
            current_trick=1,
            leader_index=_leader_after(new_state, current),
        )
    return new_state


def set_bid(state: GameState, op: SetBid) -> GameState:
    screen = state.screen
    if not isinstance(screen, Bidding):
        return state
    round_state = state.round_at(screen.round_index)
    if round_state is None:
        return state
    if not 0 <= op.player_index < state.num_players:
        return state
    if not 0 <= op.value <= round_state.hand_size:
        return state
    if round_state.bids[op.player_index] == op.value:
        return state

    new_state = copy.deepcopy(state)
    new_state.rounds[screen.round_index].bids[op.player_index] = op.value
    return new_state


def begin_play(state: GameState, op: BeginPlay) -> GameState:
    screen = state.screen
    if not isinstance(screen, Bidding):
        return state
    round_state = state.round_at(screen.round_index)
    if round_state is None:
        return state
    order = _order_for(state, round_state)
    forbidden = forbidden_last_bid(round_state.bids, round_state.hand_size, order)
    if forbidden is not None and round_state.bids[order[-1]] == forbidden:
        return state

    new_state = copy.deepcopy(state)
    new_state.screen = Playing(
        round_index=screen.round_index,
        current_trick=1,
        leader_index=first_leader_index(round_state.dealer_index, state.num_players),
    )
    return new_state


def record_trick_winner(state: GameState, op: RecordTrickWinner) -> GameState:
    screen = state.screen
    if not isinstance(screen, Playing):
        return state
    round_state = state.round_at(screen.round_index)
    if round_state is None or round_state.is_complete:
        return state
    if not 0 <= op.player_index < state.num_players:
        return state

    new_state = copy.deepcopy(state)
    current = new_state.rounds[screen.round_index]
    current.tricks_taken[op.player_index] += 1
    current.trick_winners.append(op.player_index)

    if current.is_complete:
        _score_round(new_state, screen.round_index)
        new_state.screen = Summary(round_index=screen.round_index)
        logger.info(
            "Finished round %d/%d (hand %d)",
            screen.round_index + 1,
            len(new_state.rounds),
            current.hand_size,
        )
    else:
        new_state.screen = Playing(
            round_index=screen.round_index,
            current_trick=current.tricks_played + 1,
            leader_index=op.player_index,
        )
    return new_state


def undo(state: GameState, op: Undo) -> GameState:
    screen = state.screen
    round_state = state.current_round
    if round_state is None:
        return state

    if isinstance(screen, Bidding):
        if screen.bid_turn <= 0:
            return state
        new_state = copy.deepcopy(state)
        new_state.screen = Bidding(
            round_index=screen.round_index, bid_turn=screen.bid_turn - 1
        )
        return new_state

    if isinstance(screen, Playing):
        new_state = copy.deepcopy(state)
        current = new_state.rounds[screen.round_index]
        if not current.trick_winners:
            # Back into bidding with the dealer's bid up for change.
            new_state.screen = Bidding(
                round_index=screen.round_index,
                bid_turn=len(_order_for(state, current)) - 1,
            )
            return new_state
        _pop_last_trick(current)
        new_state.screen = Playing(
            round_index=screen.round_index,
            current_trick=current.tricks_played + 1,
            leader_index=_leader_after(new_state, current),
        )
        return new_state

    if isinstance(screen, Summary):
        if not round_state.trick_winners:
            return state
        new_state = copy.deepcopy(state)
        current = new_state.rounds[screen.round_index]
        _pop_last_trick(current)
        _unscore_round(new_state, current)
        new_state.screen = Playing(
            round_index=screen.round_index,
            current_trick=current.tricks_played + 1,
            leader_index=_leader_after(new_state, current),
        )
        return new_state

    return state


def quit_game(state: GameState, op: QuitGame) -> GameState:
    screen = state.screen
    if not isinstance(screen, (Bidding, Playing)):
        return state
    if state.round_at(screen.round_index) is None:
        return state

    new_state = copy.deepcopy(state)
    del new_state.rounds[screen.round_index + 1 :]
    _score_round(new_state, screen.round_index)
    new_state.screen = Summary(round_index=screen.round_index)
    logger.info(
        "Game quit during round %d with %d trick(s) recorded",
        screen.round_index + 1,
        new_state.rounds[screen.round_index].tricks_played,
    )
    return new_state


def next_round(state: GameState, op: NextRound) -> GameState:
    screen = state.screen
    if not isinstance(screen, Summary):
        return state
    if state.round_at(screen.round_index + 1) is None:
        return state

    new_state = copy.deepcopy(state)
    new_state.screen = Bidding(round_index=screen.round_index + 1)
    return new_state


def new_game(state: GameState, op: NewGame) -> GameState:
    if not isinstance(state.screen, Summary):
        return state
    logger.info("New game; keeping configuration for %d players", state.num_players)
    return new_game_state(state.config)


TRANSITIONS: Dict[type, Callable[[GameState, Operation], GameState]] = {
    UpdateConfig: update_config,
    StartGame: start_game,
    SelectBid: select_bid,
    SetBid: set_bid,
    BeginPlay: begin_play,
    RecordTrickWinner: record_trick_winner,
    Undo: undo,
    QuitGame: quit_game,
    NextRound: next_round,
    NewGame: new_game,
}


def apply(state: GameState, op: Operation) -> GameState:
    """Dispatch `op` against `state`; returns `state` itself when rejected."""
    try:
        handler = TRANSITIONS[type(op)]
    except KeyError:
        raise TypeError(f"Unknown operation: {op!r}") from None
    return handler(state, op)
