"""
Bets, payouts and player balances.

The engine only reports outcomes; this module turns an outcome into money.
A stake is debited when the bet is placed, and settlement credits the total
returned to the player (stake included):

    WIN        2x stake
    BLACKJACK  stake + blackjack_payout x stake  (2.5x at 3:2)
    PUSH       stake
    LOSS       nothing
    SURRENDER  surrender_refund x stake
"""

import logging
from decimal import Decimal
from enum import Enum, auto
from functools import reduce
from typing import Callable

from blackjack.errors import InvalidBetError, UnknownPlayerError
from blackjack.game.engine import Outcome
from blackjack.models import Player
from blackjack.rules import RuleSet

logger = logging.getLogger(__name__)


class Settlement(Enum):
    """How a finished hand is paid."""

    WIN = auto()
    BLACKJACK = auto()
    PUSH = auto()
    LOSS = auto()
    SURRENDER = auto()

    def __str__(self) -> str:
        return self.name.title()


def classify(
    outcome: Outcome,
    player_natural: bool = False,
    dealer_natural: bool = False,
    surrendered: bool = False,
) -> Settlement:
    """
    Decide how a hand is paid from its outcome and the naturals on the table.

    A natural beats any other 21; two naturals push.
    """
    if surrendered:
        return Settlement.SURRENDER
    if player_natural and dealer_natural:
        return Settlement.PUSH
    if player_natural:
        return Settlement.BLACKJACK
    if dealer_natural and outcome != Outcome.PLAYER_BUST:
        return Settlement.LOSS
    if outcome.player_won:
        return Settlement.WIN
    if outcome == Outcome.PUSH:
        return Settlement.PUSH
    return Settlement.LOSS


# A payout adjustment maps the amount credited so far to a new amount.
PayoutAdjustment = Callable[[Decimal], Decimal]


def compose_payouts(*adjustments: PayoutAdjustment) -> PayoutAdjustment:
    """Chain adjustments left to right."""
    return lambda amount: reduce(lambda acc, adjust: adjust(acc), adjustments, amount)


def multiply(factor: Decimal | float | int) -> PayoutAdjustment:
    factor = Decimal(str(factor))
    return lambda amount: amount * factor


def bonus(extra: Decimal) -> PayoutAdjustment:
    return lambda amount: amount + extra


def payout_for(settlement: Settlement, stake: Decimal, rules: RuleSet) -> Decimal:
    """Total credited for a settled stake (stake included)."""
    if settlement == Settlement.WIN:
        adjust = compose_payouts(multiply(rules.win_payout), bonus(stake))
    elif settlement == Settlement.BLACKJACK:
        adjust = compose_payouts(multiply(rules.blackjack_payout), bonus(stake))
    elif settlement == Settlement.PUSH:
        adjust = multiply(1)
    elif settlement == Settlement.SURRENDER:
        adjust = multiply(rules.surrender_refund)
    else:
        adjust = multiply(0)
    return adjust(stake)


class Ledger:
    """In-memory balances and open stakes for one table, keyed by player id."""

    def __init__(self, rules: RuleSet | None = None) -> None:
        self.rules = rules or RuleSet()
        self._players: dict[int, Player] = {}
        self._stakes: dict[int, Decimal] = {}

    def open_account(self, player: Player) -> None:
        self._players[player.id] = player

    def player(self, player_id: int) -> Player:
        try:
            return self._players[player_id]
        except KeyError:
            raise UnknownPlayerError(player_id) from None

    def balance(self, player_id: int) -> Decimal:
        return self.player(player_id).balance

    def stake(self, player_id: int) -> Decimal:
        """Amount currently at risk for a player (zero without a bet)."""
        return self._stakes.get(player_id, Decimal("0"))

    def has_bet(self, player_id: int) -> bool:
        return player_id in self._stakes

    def place_bet(self, player_id: int, amount: Decimal | int | float | str) -> Decimal:
        """
        Validate and debit a bet.

        Raises:
            InvalidBetError: Not positive, above the table maximum, above the
                balance, or the player already has a bet this round
        """
        amount = Decimal(str(amount))
        player = self.player(player_id)

        if amount <= 0:
            raise InvalidBetError(f"Bet must be positive, got {amount}")
        if amount > self.rules.max_bet:
            raise InvalidBetError(f"Bet cannot exceed {self.rules.max_bet}")
        if amount > player.balance:
            raise InvalidBetError(f"Bet {amount} exceeds balance {player.balance}")
        if self.has_bet(player_id):
            raise InvalidBetError(f"Player {player_id} already has a bet this round")

        self._debit(player, amount)
        self._stakes[player_id] = amount
        logger.info("Player %d bet %s", player_id, amount)
        return amount

    def add_to_stake(self, player_id: int, amount: Decimal) -> Decimal:
        """Debit ``amount`` more onto an open stake (double down)."""
        player = self.player(player_id)
        if not self.has_bet(player_id):
            raise InvalidBetError(f"Player {player_id} has no open bet")
        if amount > player.balance:
            raise InvalidBetError(f"Cannot add {amount}: balance is {player.balance}")

        self._debit(player, amount)
        self._stakes[player_id] += amount
        return self._stakes[player_id]

    def refund(self, player_id: int) -> Decimal:
        """Return an open stake untouched."""
        stake = self._stakes.pop(player_id, Decimal("0"))
        if stake:
            self._credit(self.player(player_id), stake)
        return stake

    def settle(self, player_id: int, settlement: Settlement) -> Decimal:
        """Close a player's stake and credit the payout. Returns the amount credited."""
        stake = self._stakes.pop(player_id, Decimal("0"))
        payout = payout_for(settlement, stake, self.rules)
        if payout:
            self._credit(self.player(player_id), payout)
        logger.info(
            "Player %d settled %s: stake %s, paid %s, balance %s",
            player_id,
            settlement.name,
            stake,
            payout,
            self.balance(player_id),
        )
        return payout

    def _debit(self, player: Player, amount: Decimal) -> None:
        self._players[player.id] = player.with_balance(player.balance - amount)

    def _credit(self, player: Player, amount: Decimal) -> None:
        self._players[player.id] = player.with_balance(player.balance + amount)
