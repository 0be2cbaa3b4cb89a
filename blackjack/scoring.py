"""
Hand scoring.

Pure functions over a sequence of cards. Aces start at 11 and are reduced to
1, one at a time, while the total is over the limit.
"""

from typing import Iterable

from blackjack.cards import Card
from blackjack.rules import RuleSet

MAX_POINTS = 21
DEALER_STANDS_ON = 17


def soft_total(cards: Iterable[Card], max_points: int = MAX_POINTS) -> tuple[int, int]:
    """
    Score a hand.

    Returns:
        (total, soft_aces) where soft_aces is the number of aces still
        counted as 11 after reduction
    """
    total = 0
    soft_aces = 0

    for card in cards:
        if card.is_ace:
            soft_aces += 1
        total += card.value

    while total > max_points and soft_aces > 0:
        total -= 10
        soft_aces -= 1

    return total, soft_aces


def hand_value(cards: Iterable[Card], max_points: int = MAX_POINTS) -> int:
    """Return the best total that does not bust, or the lowest bust total."""
    return soft_total(cards, max_points)[0]


def is_soft(cards: Iterable[Card], max_points: int = MAX_POINTS) -> bool:
    """Check whether an ace is still counted as 11 after reduction."""
    return soft_total(cards, max_points)[1] > 0


def is_blackjack(cards: Iterable[Card], max_points: int = MAX_POINTS) -> bool:
    """A natural: exactly two cards totalling the maximum."""
    cards = list(cards)
    return len(cards) == 2 and hand_value(cards, max_points) == max_points


def is_bust(cards: Iterable[Card], max_points: int = MAX_POINTS) -> bool:
    return hand_value(cards, max_points) > max_points


def is_soft_17(cards: Iterable[Card], max_points: int = MAX_POINTS) -> bool:
    """Check for exactly 17 with an ace still counted as 11."""
    total, soft_aces = soft_total(cards, max_points)
    return total == DEALER_STANDS_ON and soft_aces > 0


def dealer_should_draw(cards: Iterable[Card], rules: RuleSet) -> bool:
    """
    Apply the dealer's fixed drawing policy.

    The dealer draws on any total below ``rules.dealer_stands_on`` and, when
    the table hits soft 17, on a soft total equal to it.
    """
    total, soft_aces = soft_total(cards, rules.max_points)
    if total < rules.dealer_stands_on:
        return True
    return rules.dealer_hits_soft_17 and total == rules.dealer_stands_on and soft_aces > 0
