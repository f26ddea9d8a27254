# whist_scorer/machine.py
from __future__ import annotations

import logging
from typing import Optional

from .config import Configuration, configuration_from_dict, configuration_to_dict
from .engine import (
    BeginPlay,
    NewGame,
    NextRound,
    Operation,
    QuitGame,
    RecordTrickWinner,
    SelectBid,
    SetBid,
    StartGame,
    Undo,
    UpdateConfig,
    apply,
    new_game_state,
)
from .persistence import SnapshotStore
from .snapshot import state_from_dict, state_to_dict
from .state import GameState

logger = logging.getLogger(__name__)


class GameStateMachine:
    """
    Owns the live GameState and runs every transition against it.

    Transitions themselves are pure (see `engine.apply`); this class only
    keeps the current value and hands each committed state to the store.
    Persistence is best effort: a failed save is logged and play goes on.
    """

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        state: Optional[GameState] = None,
        saved_state: Optional[GameState] = None,
    ) -> None:
        self.store = store
        self.state: GameState = state if state is not None else new_game_state()
        # Last persisted game that can be resumed, if any.
        self.saved_state: Optional[GameState] = saved_state

    @classmethod
    def boot(cls, store: SnapshotStore) -> "GameStateMachine":
        """
        Build a machine from whatever the store holds.

        The live state always starts on the configuration screen; a saved
        game is only offered through `resume`.
        """
        saved_state = state_from_dict(_safe_load(store.load_game, "game snapshot"))
        if saved_state is not None and not saved_state.rounds:
            saved_state = None

        raw_config = _safe_load(store.load_config, "configuration")
        if raw_config is not None:
            config = configuration_from_dict(raw_config)
        elif saved_state is not None:
            config = saved_state.config
        else:
            config = Configuration()

        return cls(store=store, state=new_game_state(config), saved_state=saved_state)

    # ---------------------------------------------------------------------
    # Dispatch
    # ---------------------------------------------------------------------

    def dispatch(self, op: Operation) -> bool:
        """Apply `op`; returns False (and changes nothing) when it is rejected."""
        new_state = apply(self.state, op)
        if new_state is self.state:
            logger.debug("Rejected %r on %s", op, self.state.screen.name)
            return False
        self.state = new_state
        self._persist()
        return True

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save_config(configuration_to_dict(self.state.config))
        except Exception as exc:
            logger.warning("Could not save configuration: %s", exc)

        # A game with no rounds has nothing to resume; keep the previous one.
        if not self.state.rounds:
            return
        try:
            self.store.save_game(state_to_dict(self.state))
        except Exception as exc:
            logger.warning("Could not save game state: %s", exc)
            return
        self.saved_state = self.state

    # ---------------------------------------------------------------------
    # Convenience wrappers
    # ---------------------------------------------------------------------

    def update_config(self, config: Configuration) -> bool:
        return self.dispatch(UpdateConfig(config))

    def start_game(self) -> bool:
        return self.dispatch(StartGame())

    def select_bid(self, value: int) -> bool:
        return self.dispatch(SelectBid(value))

    def set_bid(self, player_index: int, value: int) -> bool:
        return self.dispatch(SetBid(player_index, value))

    def begin_play(self) -> bool:
        return self.dispatch(BeginPlay())

    def record_trick_winner(self, player_index: int) -> bool:
        return self.dispatch(RecordTrickWinner(player_index))

    def undo(self) -> bool:
        return self.dispatch(Undo())

    def quit_game(self) -> bool:
        return self.dispatch(QuitGame())

    def next_round(self) -> bool:
        return self.dispatch(NextRound())

    def new_game(self) -> bool:
        return self.dispatch(NewGame())

    # ---------------------------------------------------------------------
    # Resume / reset
    # ---------------------------------------------------------------------

    def resume(self) -> bool:
        if self.saved_state is None or self.saved_state is self.state:
            return False
        self.state = self.saved_state
        logger.info("Resumed saved game at %s", self.state.screen.name)
        return True

    def reset_all(self) -> None:
        if self.store is not None:
            try:
                self.store.clear()
            except Exception as exc:
                logger.warning("Could not clear saved data: %s", exc)
        self.saved_state = None
        self.state = new_game_state()


def _safe_load(loader, label: str):
    try:
        return loader()
    except Exception as exc:
        logger.warning("Could not load saved %s: %s", label, exc)
        return None
