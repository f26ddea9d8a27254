import json

from whist_scorer.config import Configuration
from whist_scorer.engine import (
    NextRound,
    QuitGame,
    RecordTrickWinner,
    SelectBid,
    StartGame,
    apply,
    new_game_state,
)
from whist_scorer.snapshot import state_from_dict, state_to_dict
from whist_scorer.state import Bidding, Configuring, Playing, Summary


def _make_playing_state():
    state = apply(new_game_state(Configuration()), StartGame())
    for value in (1, 0, 2, 1):
        state = apply(state, SelectBid(value))
    for winner in (2, 2, 0):
        state = apply(state, RecordTrickWinner(winner))
    return state


def test_snapshot_survives_json():
    state = _make_playing_state()
    data = json.loads(json.dumps(state_to_dict(state)))

    assert set(data) == {"config", "rounds", "ui"}
    assert data["ui"]["screen"] == "playing"
    assert data["rounds"][0]["suit"] == "C"

    restored = state_from_dict(data)
    assert restored == state


def test_missing_top_level_field_means_absent():
    data = state_to_dict(_make_playing_state())
    for name in ("config", "rounds", "ui"):
        partial = dict(data)
        del partial[name]
        assert state_from_dict(partial) is None
    assert state_from_dict(None) is None
    assert state_from_dict([1, 2, 3]) is None
    assert state_from_dict({"config": {}, "rounds": "x", "ui": {}}) is None


def test_out_of_range_winners_are_dropped():
    data = state_to_dict(_make_playing_state())
    data["rounds"][0]["trick_winners"] = [2, 9, -1, "x", 2, 0]

    restored = state_from_dict(data)
    round_state = restored.rounds[0]
    assert round_state.trick_winners == [2, 2, 0]
    # Counts are rebuilt from the surviving history
    assert round_state.tricks_taken == [1, 0, 2, 0]
    assert restored.screen == Playing(round_index=0, current_trick=4, leader_index=0)


def test_cursor_is_clamped():
    data = state_to_dict(_make_playing_state())
    data["ui"] = {"screen": "bidding", "current_round_index": 99, "bid_turn": 42}

    restored = state_from_dict(data)
    assert restored.screen == Bidding(round_index=len(restored.rounds) - 1, bid_turn=3)

    # The round is unfinished, so a summary cursor falls back to playing
    data["ui"] = {"screen": "summary", "current_round_index": -5}
    assert state_from_dict(data).screen == Playing(round_index=0, current_trick=4, leader_index=0)


def test_stale_snapshot_resized_to_config():
    data = state_to_dict(_make_playing_state())
    # Configuration shrank to 3 players after the snapshot was taken
    data["config"]["player_count"] = 3
    data["config"]["player_names"] = ["A", "B", "C"]

    restored = state_from_dict(data)
    for round_state in restored.rounds:
        assert len(round_state.bids) == 3
        assert len(round_state.tricks_taken) == 3
        assert len(round_state.totals_after_round) == 3
        assert all(0 <= w < 3 for w in round_state.trick_winners)


def test_no_rounds_falls_back_to_configuring():
    data = {"config": {"player_count": 5}, "rounds": [], "ui": {"screen": "playing"}}
    restored = state_from_dict(data)
    assert restored.screen == Configuring()
    assert restored.config.player_count == 5


def _make_finished_short_round():
    config = Configuration(starting_hand_size=2)
    state = apply(new_game_state(config), StartGame())
    for value in (0, 0, 1, 0):
        state = apply(state, SelectBid(value))
    for winner in (1, 2):
        state = apply(state, RecordTrickWinner(winner))
    assert state.screen == Summary(round_index=0)
    return state


def test_dropped_winner_unscores_the_round():
    data = state_to_dict(_make_finished_short_round())
    data["rounds"][0]["trick_winners"] = [1, 9]

    restored = state_from_dict(data)
    round_state = restored.rounds[0]
    assert round_state.tricks_taken == [0, 1, 0, 0]
    assert not round_state.scored
    assert round_state.round_scores == [0, 0, 0, 0]
    assert round_state.totals_after_round == [0, 0, 0, 0]
    assert restored.screen == Playing(round_index=0, current_trick=2, leader_index=1)
    assert apply(restored, NextRound()) is restored


def test_complete_round_with_playing_cursor_is_scored():
    finished = _make_finished_short_round()
    data = state_to_dict(finished)
    data["rounds"][0]["scored"] = False
    data["rounds"][0]["round_scores"] = [0, 0, 0, 0]
    data["rounds"][0]["totals_after_round"] = [0, 0, 0, 0]
    data["ui"] = {"screen": "playing", "current_round_index": 0}

    restored = state_from_dict(data)
    assert restored.screen == Summary(round_index=0)
    assert restored.rounds[0].scored
    assert restored.rounds[0].totals_after_round == finished.rounds[0].totals_after_round
    assert restored == finished


def test_tampered_scores_are_recomputed():
    state = apply(_make_finished_short_round(), NextRound())
    data = state_to_dict(state)
    data["rounds"][0]["round_scores"] = [99, 99, 99, 99]
    data["rounds"][0]["totals_after_round"] = [500, 500, 500, 500]
    data["rounds"][1]["totals_after_round"] = [7, 7, 7, 7]
    data["rounds"][1]["scored"] = True

    restored = state_from_dict(data)
    assert restored.rounds[0].round_scores == state.rounds[0].round_scores
    assert restored.rounds[0].totals_after_round == state.rounds[0].totals_after_round
    # The next round has no tricks yet, so it stays unscored
    assert not restored.rounds[1].scored
    assert restored.rounds[1].totals_after_round == [0, 0, 0, 0]


def test_quit_round_stays_scored():
    quit_state = apply(_make_playing_state(), QuitGame())
    assert quit_state.screen == Summary(round_index=0)

    restored = state_from_dict(json.loads(json.dumps(state_to_dict(quit_state))))
    assert restored.rounds[-1].scored
    assert restored == quit_state
