"""Pytest fixtures for blackjack table tests."""

import pytest
from decimal import Decimal
from random import Random

from blackjack.cards import Card, Shoe
from blackjack.game.engine import RoundEngine
from blackjack.game.lifecycle import RoundStateMachine
from blackjack.game.table import Table
from blackjack.hand import Hand
from blackjack.ledger import Ledger
from blackjack.models import Player
from blackjack.rules import RuleSet


class StackedShoe(Shoe):
    """
    A shoe that deals the given cards first, in order, after every rebuild.

    Shuffling is a no-op so scenarios are fully scripted.
    """

    def __init__(self, *codes: str) -> None:
        self._stack = [Card.from_string(code) for code in codes]
        super().__init__(num_decks=1, rng=Random(0))

    def build(self) -> None:
        super().build()
        self._cards.extend(reversed(self._stack))

    def shuffle(self) -> None:
        pass


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled single-deck shoe."""
    return Shoe(num_decks=1, rng=rng)


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def alice():
    return Player(id=1, name="Alice", balance=Decimal("1000"))


@pytest.fixture
def bob():
    return Player(id=2, name="Bob", balance=Decimal("500"))


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand.of("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand.of("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand.of("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand.of("10S", "6H", "KC")


@pytest.fixture
def engine(rng, alice):
    """An engine with one seated player and a seeded shoe."""
    e = RoundEngine(rng=rng)
    e.configure_players([alice])
    return e


@pytest.fixture
def lifecycle():
    """A fresh round state machine."""
    return RoundStateMachine()


@pytest.fixture
def ledger(rules, alice, bob):
    """A ledger with Alice and Bob's accounts open."""
    book = Ledger(rules)
    book.open_account(alice)
    book.open_account(bob)
    return book


@pytest.fixture
def stacked_engine():
    """Factory for an engine whose shoe deals the given cards first."""

    def make(*codes: str, players=None, rules=None) -> RoundEngine:
        e = RoundEngine(rules=rules, shoe=StackedShoe(*codes))
        e.configure_players(players or [Player(id=1, name="Alice")])
        return e

    return make


@pytest.fixture
def stacked_table():
    """
    Factory for a table whose shoe deals the given cards first.

    Deal order is one card to each player, then the dealer, twice.
    """

    def make(*codes: str, players=None, rules=None) -> Table:
        rules = rules or RuleSet()
        engine = RoundEngine(rules=rules, shoe=StackedShoe(*codes))
        return Table(players or [Player(id=1, name="Alice")], rules=rules, engine=engine)

    return make


@pytest.fixture
def table(rng, alice):
    """A single-seat table with a seeded shoe."""
    return Table([alice], rng=rng)

