"""Main entry point for text-mode Set."""

import argparse
import dataclasses
import logging
from random import Random
from typing import Callable, Iterable, Iterator

from cli.commands import Command, CommandError, parse_command
from cli.render import HELP_TEXT, render_hint, render_outcome, render_state
from config import config
from core.game import (
    ClearSelection,
    DealMore,
    EventType,
    GameEvent,
    ManualScheduler,
    Outcome,
    SelectCard,
    SetGame,
    StartOrRestart,
)
from core.rules import SetRules

logger = logging.getLogger(__name__)

RULE_PRESETS = {
    "classic": SetRules.classic,
    "instant": SetRules.instant,
    "forgiving": SetRules.forgiving,
}

DEAL_REFUSED_MESSAGES = {
    "deck_empty": "No more cards in the deck!",
    "set_on_table": "There is already a set on the table. Keep looking!",
}


class TextAdapter:
    """
    Connects a SetGame to line-based input and output.

    The game runs on a manual clock: once a valid set has been shown the
    adapter advances the clock past the display delay, so the match is
    resolved before the next prompt.
    """

    def __init__(
        self,
        game: SetGame,
        scheduler: ManualScheduler,
        write: Callable[[str], None] = print,
    ) -> None:
        self.game = game
        self.scheduler = scheduler
        self._write = write
        game.subscribe(self._on_deal_refused, EventType.DEAL_REFUSED)

    def run(self, lines: Iterable[str]) -> None:
        """Play until the input runs out or the player quits."""
        self._write("Welcome to the Set Card Game!")
        self._write("-----------------------------")
        self._write(HELP_TEXT)
        self._write(render_state(self.game.current_state()))

        for line in lines:
            if not self.handle(line):
                return
            self._write(render_state(self.game.current_state()))

    def handle(self, line: str) -> bool:
        """
        Process one line of input.

        Returns:
            False when the player quits, True otherwise
        """
        try:
            command = parse_command(line)
        except CommandError as exc:
            self._write(str(exc))
            return True

        logger.debug("Command %s", command)
        return self._execute(command)

    def _execute(self, command: Command) -> bool:
        if command.name == "quit":
            self._write("Thanks for playing Set!")
            return False

        if command.name == "help":
            self._write(HELP_TEXT)
        elif command.name == "hint":
            self._write(render_hint(self.game.find_hint(), self.game.current_state()))
        elif command.name == "select" and command.index is not None:
            self._select(command.index)
        elif command.name == "deal":
            self.game.dispatch(DealMore())
        elif command.name == "clear":
            self.game.dispatch(ClearSelection())
            self._write("Selection cleared.")
        elif command.name == "restart":
            self.game.dispatch(StartOrRestart())
            self._write("Game restarted!")
        return True

    def _select(self, index: int) -> None:
        """Toggle a card by display index and settle a full selection."""
        state = self.game.current_state()
        if not 0 <= index < len(state.table):
            self._write(f"Invalid card index: {index}")
            return

        before = state.version
        state = self.game.dispatch(SelectCard(state.table[index]))
        if state.version == before:
            self._write("Three cards are already selected. Type 'clear' to start over.")
            return

        message = render_outcome(state)
        if message is not None:
            self._write(message)

        if state.last_outcome is Outcome.VALID:
            self.scheduler.advance(self.game.rules.resolve_delay)
        elif state.last_outcome is Outcome.INVALID:
            self.game.dispatch(ClearSelection())

    def _on_deal_refused(self, event: GameEvent) -> None:
        self._write(DEAL_REFUSED_MESSAGES.get(event.data.get("reason", ""), "Cannot deal now."))


def _prompt_lines(prompt: str = "> ") -> Iterator[str]:
    """Yield input lines until EOF or Ctrl-C."""
    while True:
        try:
            yield input(prompt)
        except (EOFError, KeyboardInterrupt):
            return


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Set in the terminal")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for the shuffle")
    parser.add_argument(
        "--rules",
        choices=sorted(RULE_PRESETS),
        default=None,
        help="Use a preset table instead of the configured one",
    )
    parser.add_argument(
        "--policy",
        choices=["ignore", "restart"],
        default=None,
        help="What a tap does while three cards are selected",
    )
    parser.add_argument("--verbose", action="store_true", help="Log engine activity")
    return parser


def build_rules(args: argparse.Namespace) -> SetRules:
    """Pick the preset or configured rules, then apply --policy."""
    rules = RULE_PRESETS[args.rules]() if args.rules else config.game.rules()
    if args.policy is not None:
        rules = dataclasses.replace(rules, reselect_policy=args.policy)
    return rules


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rules = build_rules(args)
    scheduler = ManualScheduler()
    game = SetGame(rules=rules, rng=Random(args.seed), scheduler=scheduler)
    TextAdapter(game, scheduler).run(_prompt_lines())


if __name__ == "__main__":
    main()
