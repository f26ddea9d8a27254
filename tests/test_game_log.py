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
from whist_scorer.game_log import (
    FIELDNAMES,
    build_round_score_rows,
    leaderboard,
    write_round_scores_csv,
)


def _make_sample_game():
    """Rounds 0 and 1 played out; round 2 never started."""
    config = Configuration(player_count=3, starting_hand_size=2, player_names=["Ann", "Bo", "Cy"])
    state = apply(new_game_state(config), StartGame())
    # Bidding order [1, 2, 0]; dealer 0 may not bid 0 here (2 - 2)
    for value in (1, 1, 1):
        state = apply(state, SelectBid(value))
    for winner in (1, 2):
        state = apply(state, RecordTrickWinner(winner))
    state = apply(state, NextRound())
    # Round 1: hand 1, dealer 1, order [2, 0, 1]
    for value in (0, 0, 0):
        state = apply(state, SelectBid(value))
    state = apply(state, RecordTrickWinner(0))
    return state


def test_rows_skip_unscored_rounds():
    state = _make_sample_game()
    rows = build_round_score_rows(state)

    scored_rounds = [r for r in state.rounds if r.scored]
    assert len(rows) == len(scored_rounds) * 3
    for field in FIELDNAMES:
        assert field in rows[0]

    assert rows[0]["player_name"] == "Ann"
    assert rows[0]["round_score"] == 0
    assert rows[1]["round_score"] == 11


def test_quit_game_rows_and_leaderboard():
    config = Configuration(player_count=3, starting_hand_size=3, player_names=["Ann", "Bo", "Cy"])
    state = apply(new_game_state(config), StartGame())
    for value in (1, 1, 0):
        state = apply(state, SelectBid(value))
    state = apply(state, RecordTrickWinner(1))
    state = apply(state, QuitGame())

    rows = build_round_score_rows(state)
    assert [row["total"] for row in rows] == [10, 11, 0]
    assert leaderboard(state) == [("Bo", 11), ("Ann", 10), ("Cy", 0)]


def test_leaderboard_before_any_scores():
    state = apply(new_game_state(), StartGame())
    assert [total for _, total in leaderboard(state)] == [0, 0, 0, 0]


def test_write_round_scores_csv(tmp_path):
    state = _make_sample_game()
    path = tmp_path / "scores.csv"

    count = write_round_scores_csv(state, path)
    contents = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(contents) == count + 1

    header = contents[0].split(",")
    assert header == FIELDNAMES
