# whist_scorer/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .cards import MAX_PLAYERS, MIN_PLAYERS, SuitStart, parse_suit_start
from .rules import clamp, clamp_round_count, max_hand_size, validate_deck_constraint

DEFAULT_PLAYER_COUNT = 4
DEFAULT_STARTING_HAND_SIZE = 7


def default_player_names(count: int) -> List[str]:
    return [f"Player {i + 1}" for i in range(count)]


@dataclass
class Configuration:
    player_count: int = DEFAULT_PLAYER_COUNT
    starting_hand_size: int = DEFAULT_STARTING_HAND_SIZE
    suit_start: SuitStart = SuitStart.CLUBS
    player_names: List[str] = field(
        default_factory=lambda: default_player_names(DEFAULT_PLAYER_COUNT)
    )
    first_dealer_index: int = 0
    # None plays the whole down-then-up sequence.
    number_of_rounds: Optional[int] = None

    @property
    def deck_is_valid(self) -> bool:
        return validate_deck_constraint(self.player_count, self.starting_hand_size)

    @property
    def total_rounds(self) -> int:
        full = max(0, self.starting_hand_size * 2 - 1)
        if self.number_of_rounds is None:
            return full
        return min(full, self.number_of_rounds)

    def player_name(self, index: int) -> str:
        if 0 <= index < len(self.player_names) and self.player_names[index].strip():
            return self.player_names[index].strip()
        return f"Player {index + 1}"


def resize_player_names(names: Sequence[Any], count: int) -> List[str]:
    """Trim or pad `names` to exactly `count` entries; padding is empty."""
    resized = ["" if name is None else str(name) for name in list(names)[:count]]
    resized.extend("" for _ in range(count - len(resized)))
    return resized


def _as_int(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def sanitize(raw: Configuration) -> Configuration:
    """
    Clamp a configuration into a playable one.

    - player_count into [MIN_PLAYERS, MAX_PLAYERS]
    - starting_hand_size into [1, 52 // player_count]
    - number_of_rounds (if set) into [1, 2 * starting_hand_size - 1]
    - player_names resized to player_count
    - first_dealer_index into [0, player_count - 1]

    sanitize(sanitize(c)) == sanitize(c).
    """
    player_count = clamp(
        _as_int(raw.player_count, DEFAULT_PLAYER_COUNT), MIN_PLAYERS, MAX_PLAYERS
    )
    hand_size = clamp(
        _as_int(raw.starting_hand_size, DEFAULT_STARTING_HAND_SIZE),
        1,
        max_hand_size(player_count),
    )
    number_of_rounds: Optional[int] = None
    if raw.number_of_rounds is not None:
        number_of_rounds = clamp_round_count(
            _as_int(raw.number_of_rounds, hand_size * 2 - 1), hand_size
        )
    return Configuration(
        player_count=player_count,
        starting_hand_size=hand_size,
        suit_start=parse_suit_start(raw.suit_start),
        player_names=resize_player_names(raw.player_names or [], player_count),
        first_dealer_index=clamp(
            _as_int(raw.first_dealer_index, 0), 0, player_count - 1
        ),
        number_of_rounds=number_of_rounds,
    )


def missing_player_names(config: Configuration) -> List[int]:
    """Seats whose display name is blank."""
    return [i for i, name in enumerate(config.player_names) if not name.strip()]


def configuration_to_dict(config: Configuration) -> Dict[str, Any]:
    return {
        "player_count": config.player_count,
        "starting_hand_size": config.starting_hand_size,
        "suit_start": config.suit_start.value,
        "player_names": list(config.player_names),
        "first_dealer_index": config.first_dealer_index,
        "number_of_rounds": config.number_of_rounds,
    }


def configuration_from_dict(data: Mapping[str, Any]) -> Configuration:
    """
    Merge a (possibly partial or ill-typed) mapping over the defaults.

    The result is always sanitized.
    """
    defaults = Configuration()
    if not isinstance(data, Mapping):
        return sanitize(defaults)

    names = data.get("player_names")
    if isinstance(names, list) and names:
        player_names = [n for n in names if isinstance(n, str)]
    else:
        player_names = defaults.player_names

    rounds = data.get("number_of_rounds")
    merged = Configuration(
        player_count=_as_int(data.get("player_count"), defaults.player_count),
        starting_hand_size=_as_int(
            data.get("starting_hand_size"), defaults.starting_hand_size
        ),
        suit_start=parse_suit_start(data.get("suit_start")),
        player_names=player_names,
        first_dealer_index=_as_int(
            data.get("first_dealer_index"), defaults.first_dealer_index
        ),
        number_of_rounds=None if rounds is None else _as_int(rounds, 1),
    )
    return sanitize(merged)
