# whist_scorer/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .cards import Suit
from .config import Configuration


@dataclass
class RoundState:
    round_index: int
    hand_size: int
    suit: Suit
    dealer_index: int
    bids: List[int]
    tricks_taken: List[int]
    round_scores: List[int]
    totals_after_round: List[int]
    # Winner of each recorded trick, in play order.
    trick_winners: List[int] = field(default_factory=list)
    # Set once scores are computed (round finished or game quit).
    scored: bool = False

    @property
    def tricks_played(self) -> int:
        return len(self.trick_winners)

    @property
    def is_complete(self) -> bool:
        return self.tricks_played >= self.hand_size


# Screens. Each carries only the cursor fields that make sense on it.


@dataclass(frozen=True)
class Configuring:
    name = "configuring"


@dataclass(frozen=True)
class Bidding:
    round_index: int
    bid_turn: int = 0
    name = "bidding"


@dataclass(frozen=True)
class Playing:
    round_index: int
    current_trick: int
    leader_index: int
    name = "playing"


@dataclass(frozen=True)
class Summary:
    round_index: int
    name = "summary"


Screen = Union[Configuring, Bidding, Playing, Summary]


@dataclass
class GameState:
    config: Configuration
    rounds: List[RoundState] = field(default_factory=list)
    screen: Screen = field(default_factory=Configuring)

    @property
    def num_players(self) -> int:
        return self.config.player_count

    @property
    def current_round_index(self) -> Optional[int]:
        return getattr(self.screen, "round_index", None)

    def round_at(self, index: Optional[int]) -> Optional[RoundState]:
        if index is None or not 0 <= index < len(self.rounds):
            return None
        return self.rounds[index]

    @property
    def current_round(self) -> Optional[RoundState]:
        return self.round_at(self.current_round_index)

    @property
    def is_final_round(self) -> bool:
        index = self.current_round_index
        return index is not None and index >= len(self.rounds) - 1
