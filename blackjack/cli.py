"""Console blackjack: one player against the dealer."""

import argparse
import logging
from decimal import Decimal, InvalidOperation
from random import Random
from typing import Callable

from blackjack.errors import TableError
from blackjack.game.dispatch import dispatch
from blackjack.game.state import Action, RoundState
from blackjack.game.table import RoundResult, Table
from blackjack.hand import Hand
from blackjack.logging_setup import configure_logging
from blackjack.models import Player
from blackjack.rules import RuleSet
from config import config

logger = logging.getLogger(__name__)

MENU = """
=== BLACKJACK ===
1. Play a hand
2. View stats
3. Quit"""

TURN_PROMPT = """What do you want to do?
1. Hit
2. Stand"""

_TURN_CHOICES = {"1": Action.HIT, "2": Action.STAND}


class ConsoleGame:
    """Text loop around a single-seat table."""

    def __init__(
        self,
        table: Table,
        player_id: int,
        default_bet: int = 10,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.table = table
        self.player_id = player_id
        self.default_bet = default_bet
        self._read = read
        self._write = write

    def run(self) -> None:
        """Show the menu until the player quits or runs out of money."""
        while True:
            self._write(MENU)
            choice = self._read("> ").strip()
            if choice == "1":
                if not self.can_play():
                    self._write("You have no money left to bet.")
                    continue
                self.play_hand()
            elif choice == "2":
                self.show_stats()
            elif choice == "3":
                self._write("Thanks for playing!")
                return
            else:
                self._write("Invalid option. Try again.")

    def can_play(self) -> bool:
        return self.table.player(self.player_id).balance > 0

    def read_bet(self) -> Decimal:
        """Ask for a bet, falling back to the default on bad input."""
        balance = self.table.player(self.player_id).balance
        raw = self._read(f"How much do you want to bet? (max ${balance}) ")
        try:
            amount = Decimal(raw.strip())
        except InvalidOperation:
            amount = Decimal("-1")

        if amount <= 0 or amount > balance or amount > self.table.rules.max_bet:
            amount = min(Decimal(self.default_bet), balance)
            self._write(f"Invalid bet. Using ${amount}.")
        return amount

    def play_hand(self) -> list[RoundResult]:
        """Play one round from bet to settlement."""
        table = self.table
        if table.state == RoundState.FINISHED:
            table.new_round()

        dispatch(table, "bet", self.player_id, self.read_bet())
        dispatch(table, Action.START_ROUND)

        hand = table.engine.player_hand(self.player_id)
        self._write(f"\nYour cards: {self._describe(hand)}")
        self._write(f"Dealer shows: {table.engine.dealer_hand.cards[0]}")

        while table.state == RoundState.PLAYER_TURN:
            self._write(TURN_PROMPT)
            action = _TURN_CHOICES.get(self._read("> ").strip())
            if action is None:
                self._write("Invalid option. Try again.")
                continue
            try:
                dispatch(table, action, self.player_id)
            except TableError as err:
                self._write(str(err))
                continue
            if action == Action.HIT:
                self._write(f"Your cards: {self._describe(hand)}")

        self._write(f"\nDealer: {self._describe(table.engine.dealer_hand)}")
        for result in table.results:
            self._write(
                f"Result: {result.settlement} ({result.outcome}) - "
                f"paid ${result.payout}, balance ${result.balance}"
            )
        return table.results

    def show_stats(self) -> None:
        stats = self.table.stats(self.player_id)
        self._write("\n=== STATS ===")
        self._write(f"Player: {stats.name}")
        self._write(f"Balance: ${stats.balance}")
        self._write(
            f"Rounds: {stats.rounds_played} (won {stats.wins}, lost {stats.losses}, "
            f"pushed {stats.pushes}, blackjacks {stats.blackjacks})"
        )
        self._write(f"Rules: {stats.rules_name}")

    def _describe(self, hand: Hand) -> str:
        return f"{hand} = {self.table.engine.value(hand)} points"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play blackjack in the terminal")
    parser.add_argument("--name", default="Player", help="Player name")
    parser.add_argument(
        "--balance",
        type=Decimal,
        default=Decimal(config.game.starting_balance),
        help="Starting balance",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed the shoe for a repeatable game")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(config.logging, level=args.log_level)

    rules = RuleSet.from_config(config.game)
    player = Player(id=1, name=args.name, balance=args.balance)
    rng = Random(args.seed) if args.seed is not None else None
    table = Table([player], rules=rules, rng=rng)

    logger.info("Starting console game for %s with balance %s", player.name, player.balance)
    try:
        ConsoleGame(table, player.id, default_bet=config.game.default_bet).run()
    except (KeyboardInterrupt, EOFError):
        print("\nBye!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
