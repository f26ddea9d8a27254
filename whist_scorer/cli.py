# whist_scorer/cli.py
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Callable, Dict, Iterable, List, Optional, TextIO

from .cards import parse_suit_start
from .config import missing_player_names
from .game_log import leaderboard, write_round_scores_csv
from .machine import GameStateMachine
from .paths import resolve_data_path
from .persistence import JsonFileStore
from .rules import bidding_order, forbidden_last_bid, validate_deck_constraint
from .state import Bidding, Configuring, Playing

HELP_TEXT = """\
Configuration: players N | hand N | rounds N|all | suits clubs|spades|diamonds
               dealer N | name I TEXT | start
Bidding:       bid N (current bidder) | set I N (any player) | play
Playing:       win I
Any time:      undo | quit | next | new | status | export PATH | help | exit
Player numbers are 1-based."""


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep score for a game of estimation whist from the terminal."
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory for saved games (default: $WHIST_SCORER_DATA_DIR or the package data dir).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: WARNING.",
    )
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Resume the saved game, if any, instead of starting at configuration.",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Forget the saved game and configuration before starting.",
    )
    return parser.parse_args(argv)


def describe(machine: GameStateMachine) -> str:
    """One-line status for the current screen."""
    state = machine.state
    config = state.config
    screen = state.screen

    if isinstance(screen, Configuring):
        names = ", ".join(config.player_name(i) for i in range(config.player_count))
        rounds = config.total_rounds
        return (
            f"[setup] {config.player_count} players ({names}), "
            f"hand {config.starting_hand_size}, {rounds} rounds, "
            f"suits from {config.suit_start.value}, "
            f"first dealer {config.player_name(config.first_dealer_index)}"
        )

    round_state = state.current_round
    if round_state is None:
        return f"[{screen.name}]"
    header = (
        f"round {screen.round_index + 1}/{len(state.rounds)}, "
        f"hand {round_state.hand_size}, trump {round_state.suit}, "
        f"dealer {config.player_name(round_state.dealer_index)}"
    )

    if isinstance(screen, Bidding):
        order = bidding_order(round_state.dealer_index, config.player_count)
        bidder = order[screen.bid_turn]
        text = f"[bidding] {header}; {config.player_name(bidder)} to bid"
        if bidder == order[-1]:
            forbidden = forbidden_last_bid(round_state.bids, round_state.hand_size, order)
            if forbidden is not None:
                text += f" (cannot bid {forbidden})"
        return text

    if isinstance(screen, Playing):
        progress = ", ".join(
            f"{config.player_name(i)} {round_state.tricks_taken[i]}/{round_state.bids[i]}"
            for i in range(config.player_count)
        )
        return (
            f"[playing] {header}; trick {screen.current_trick}/{round_state.hand_size}, "
            f"{config.player_name(screen.leader_index)} leads; {progress}"
        )

    standings = ", ".join(f"{name} {total}" for name, total in leaderboard(state))
    suffix = " (final)" if state.is_final_round else ""
    return f"[summary{suffix}] {header}; {standings}"


def _player_arg(text: str) -> int:
    """Convert a 1-based player number to a seat index."""
    return int(text) - 1


class CommandLoop:
    def __init__(self, machine: GameStateMachine, out: TextIO) -> None:
        self.machine = machine
        self.out = out
        self.commands: Dict[str, Callable[[List[str]], bool]] = {
            "players": self._players,
            "hand": self._hand,
            "rounds": self._rounds,
            "suits": self._suits,
            "dealer": self._dealer,
            "name": self._name,
            "start": lambda args: self._start(),
            "bid": lambda args: machine.select_bid(int(args[0])),
            "set": lambda args: machine.set_bid(_player_arg(args[0]), int(args[1])),
            "play": lambda args: machine.begin_play(),
            "win": lambda args: machine.record_trick_winner(_player_arg(args[0])),
            "undo": lambda args: machine.undo(),
            "quit": lambda args: machine.quit_game(),
            "next": lambda args: machine.next_round(),
            "new": lambda args: machine.new_game(),
            "export": self._export,
        }

    def say(self, text: str) -> None:
        print(text, file=self.out)

    def _edit_config(self, **changes) -> bool:
        config = dataclasses.replace(self.machine.state.config, **changes)
        return self.machine.update_config(config)

    def _players(self, args: List[str]) -> bool:
        return self._edit_config(player_count=int(args[0]))

    def _hand(self, args: List[str]) -> bool:
        hand = int(args[0])
        players = self.machine.state.config.player_count
        if not validate_deck_constraint(players, hand):
            self.say(
                f"Invalid deck setup: {players} players x {hand} cards exceeds 52; "
                "the hand size will be reduced."
            )
        return self._edit_config(starting_hand_size=hand)

    def _rounds(self, args: List[str]) -> bool:
        value = None if args[0].lower() == "all" else int(args[0])
        return self._edit_config(number_of_rounds=value)

    def _suits(self, args: List[str]) -> bool:
        return self._edit_config(suit_start=parse_suit_start(args[0]))

    def _dealer(self, args: List[str]) -> bool:
        return self._edit_config(first_dealer_index=_player_arg(args[0]))

    def _name(self, args: List[str]) -> bool:
        index = _player_arg(args[0])
        names = list(self.machine.state.config.player_names)
        if not 0 <= index < len(names):
            return False
        names[index] = " ".join(args[1:])
        return self._edit_config(player_names=names)

    def _start(self) -> bool:
        missing = missing_player_names(self.machine.state.config)
        if missing:
            seats = ", ".join(str(i + 1) for i in missing)
            self.say(f"Every player needs a name (missing: {seats}).")
        return self.machine.start_game()

    def _export(self, args: List[str]) -> bool:
        path = resolve_data_path(
            args[0] if args else "scores.csv",
            getattr(self.machine.store, "directory", None),
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            count = write_round_scores_csv(self.machine.state, path)
        except OSError as exc:
            self.say(f"Could not write {path}: {exc}")
            return True
        self.say(f"Wrote {count} rows to {path}")
        return True

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False once the user asks to exit."""
        parts = line.split()
        if not parts:
            return True
        command, args = parts[0].lower(), parts[1:]

        if command in ("exit", "bye"):
            return False
        if command == "help":
            self.say(HELP_TEXT)
            return True
        if command == "status":
            self.say(describe(self.machine))
            return True

        handler = self.commands.get(command)
        if handler is None:
            self.say(f"Unknown command {command!r}; try 'help'.")
            return True
        try:
            accepted = handler(args)
        except (IndexError, ValueError):
            self.say(f"Bad arguments for {command!r}; try 'help'.")
            return True

        if not accepted:
            self.say("Not allowed right now.")
        self.say(describe(self.machine))
        return True

    def run(self, lines: Iterable[str]) -> None:
        self.say(describe(self.machine))
        for line in lines:
            if not self.handle(line):
                break


def main(argv: List[str] | None = None, stdin: Optional[TextIO] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    store = JsonFileStore(args.data_dir)
    if args.reset:
        try:
            store.clear()
        except OSError as exc:
            logging.warning("Could not clear saved data: %s", exc)
    machine = GameStateMachine.boot(store)
    if args.resume and not machine.resume():
        logging.info("No saved game to resume")

    CommandLoop(machine, sys.stdout).run(stdin or sys.stdin)


if __name__ == "__main__":
    main()
