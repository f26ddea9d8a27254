from .config import Configuration, sanitize, validate_deck_constraint
from .engine import apply, new_game_state
from .machine import GameStateMachine
from .persistence import JsonFileStore, MemoryStore, SnapshotStore
from .state import Bidding, Configuring, GameState, Playing, RoundState, Summary

__all__ = [
    "Configuration",
    "sanitize",
    "validate_deck_constraint",
    "apply",
    "new_game_state",
    "GameStateMachine",
    "SnapshotStore",
    "JsonFileStore",
    "MemoryStore",
    "GameState",
    "RoundState",
    "Configuring",
    "Bidding",
    "Playing",
    "Summary",
]
