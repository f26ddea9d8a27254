# whist_scorer/cards.py
from __future__ import annotations

from typing import Dict, List, Tuple
import enum

DECK_SIZE = 52
MIN_PLAYERS = 2
MAX_PLAYERS = 8


class Suit(enum.Enum):
    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"
    NO_TRUMP = "NT"

    @property
    def label(self) -> str:
        return SUIT_GRAPHIC[self][0]

    @property
    def symbol(self) -> str:
        return SUIT_GRAPHIC[self][1]

    def __str__(self) -> str:
        return f"{self.label} {self.symbol}"


class SuitStart(enum.Enum):
    """Where the trump rotation begins in round 0."""

    CLUBS = "clubs"
    SPADES = "spades"
    DIAMONDS = "diamonds"


SUIT_GRAPHIC: Dict[Suit, Tuple[str, str]] = {
    Suit.CLUBS: ("Clubs", "♣"),
    Suit.DIAMONDS: ("Diamonds", "♦"),
    Suit.HEARTS: ("Hearts", "♥"),
    Suit.SPADES: ("Spades", "♠"),
    Suit.NO_TRUMP: ("No Trump", "NT"),
}

# No trump always sits in the fifth slot.
SUIT_ORDERS: Dict[SuitStart, List[Suit]] = {
    SuitStart.CLUBS: [Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS, Suit.SPADES, Suit.NO_TRUMP],
    SuitStart.SPADES: [Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.NO_TRUMP],
    SuitStart.DIAMONDS: [Suit.DIAMONDS, Suit.SPADES, Suit.HEARTS, Suit.CLUBS, Suit.NO_TRUMP],
}


def parse_suit_start(value: object, default: SuitStart = SuitStart.CLUBS) -> SuitStart:
    """Map a persisted or typed value onto a SuitStart, falling back to `default`."""
    if isinstance(value, SuitStart):
        return value
    try:
        return SuitStart(str(value).strip().lower())
    except ValueError:
        return default


def parse_suit(value: object, default: Suit = Suit.NO_TRUMP) -> Suit:
    if isinstance(value, Suit):
        return value
    try:
        return Suit(str(value).strip().upper())
    except ValueError:
        return default
