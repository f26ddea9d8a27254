import pytest

from whist_scorer.cards import SuitStart
from whist_scorer.config import (
    Configuration,
    configuration_from_dict,
    configuration_to_dict,
    missing_player_names,
    resize_player_names,
    sanitize,
)


def test_defaults_are_already_sanitized():
    config = Configuration()
    assert sanitize(config) == config
    assert config.player_names == ["Player 1", "Player 2", "Player 3", "Player 4"]
    assert config.total_rounds == 13


def test_sanitize_clamps_everything():
    raw = Configuration(
        player_count=11,
        starting_hand_size=30,
        player_names=["A", "B"],
        first_dealer_index=20,
        number_of_rounds=500,
    )
    config = sanitize(raw)

    assert config.player_count == 8
    # 52 // 8 == 6
    assert config.starting_hand_size == 6
    assert config.deck_is_valid
    assert config.player_names == ["A", "B", "", "", "", "", "", ""]
    assert config.first_dealer_index == 7
    assert config.number_of_rounds == 11


def test_sanitize_lower_bounds():
    config = sanitize(
        Configuration(
            player_count=0,
            starting_hand_size=-4,
            player_names=["A", "B", "C"],
            first_dealer_index=-1,
            number_of_rounds=0,
        )
    )
    assert config.player_count == 2
    assert config.starting_hand_size == 1
    assert config.player_names == ["A", "B"]
    assert config.first_dealer_index == 0
    assert config.number_of_rounds == 1


@pytest.mark.parametrize(
    "raw",
    [
        Configuration(),
        Configuration(player_count=9, starting_hand_size=9),
        Configuration(player_count=3, starting_hand_size=40, number_of_rounds=4),
        Configuration(player_count=1, player_names=[], first_dealer_index=5),
        Configuration(player_count="5", starting_hand_size="x", suit_start="spades"),
    ],
)
def test_sanitize_is_idempotent(raw):
    once = sanitize(raw)
    assert sanitize(once) == once
    assert len(once.player_names) == once.player_count


def test_resize_player_names():
    assert resize_player_names(["A", "B", "C"], 2) == ["A", "B"]
    assert resize_player_names(["A"], 3) == ["A", "", ""]
    assert resize_player_names([None, "B"], 2) == ["", "B"]


def test_missing_player_names():
    config = sanitize(Configuration(player_count=3, player_names=["A", "  "]))
    assert missing_player_names(config) == [1, 2]
    # Display falls back to the seat label
    assert config.player_name(1) == "Player 2"


def test_configuration_dict_roundtrip():
    config = sanitize(
        Configuration(
            player_count=5,
            starting_hand_size=8,
            suit_start=SuitStart.DIAMONDS,
            player_names=["Ann", "Bo", "Cy", "Di", "Ed"],
            first_dealer_index=2,
            number_of_rounds=6,
        )
    )
    assert configuration_from_dict(configuration_to_dict(config)) == config


def test_configuration_from_partial_or_bad_dict():
    config = configuration_from_dict(
        {"player_count": 3, "suit_start": "hearts", "player_names": ["A", 7, "C"]}
    )
    assert config.player_count == 3
    assert config.starting_hand_size == 7
    # Unknown origin falls back to clubs
    assert config.suit_start == SuitStart.CLUBS
    # Non-string names are dropped, then the list is padded
    assert config.player_names == ["A", "C", ""]

    assert configuration_from_dict("nonsense") == Configuration()
