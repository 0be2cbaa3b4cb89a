"""Blackjack table round engine - UI-agnostic core."""

from blackjack.cards import Card, Shoe, Rank, Suit
from blackjack.hand import Hand
from blackjack.rules import RuleSet

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "RuleSet",
]
