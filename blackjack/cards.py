"""Card and Shoe classes - immutable cards and a self-replenishing shoe."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


class Suit(Enum):
    """Card suits."""

    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self.value <= 10:
            return self.value
        if self == Rank.ACE:
            return 11
        return 10

    @property
    def is_ace(self) -> bool:
        return self == Rank.ACE


_RANK_CODES = {
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.JACK,
    "Q": Rank.QUEEN,
    "K": Rank.KING,
    "A": Rank.ACE,
}

_SUIT_CODES = {
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card. Two cards with the same suit and rank are equal."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value, counting an Ace as 11."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_CODES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_CODES[rank_str], _SUIT_CODES[suit_str])


def build_deck() -> list[Card]:
    """Return the 52 distinct cards of one deck in suit-major order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Shoe:
    """
    A replenishing source of shuffled cards.

    The shoe is logically infinite: drawing from an empty shoe rebuilds and
    reshuffles it before the draw proceeds. Each shoe owns its random number
    generator so that tables never share shuffle state.
    """

    def __init__(
        self,
        num_decks: int = 1,
        rng: Random | None = None,
        on_replenish: Callable[["Shoe"], None] | None = None,
    ) -> None:
        """
        Initialize a built and shuffled shoe.

        Args:
            num_decks: Number of 52-card decks in the shoe
            rng: Random number generator for shuffling (seed it for tests)
            on_replenish: Called after every rebuild-and-reshuffle
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng or Random()
        self.on_replenish = on_replenish
        self._cards: list[Card] = []
        self.replenish_count = 0
        self.build()
        self.shuffle()

    def build(self) -> None:
        """Reset the shoe to every card of every deck, in order."""
        self._cards = [card for _ in range(self._num_decks) for card in build_deck()]

    def shuffle(self) -> None:
        """Shuffle the remaining cards in place."""
        self._rng.shuffle(self._cards)

    def replenish(self) -> None:
        """Rebuild and reshuffle the full shoe."""
        self.build()
        self.shuffle()
        self.replenish_count += 1
        logger.debug("Shoe replenished (%d cards, replenish #%d)", len(self._cards), self.replenish_count)
        if self.on_replenish is not None:
            self.on_replenish(self)

    def draw(self) -> Card:
        """Draw the top card, replenishing first if the shoe is empty."""
        if not self._cards:
            self.replenish()
        return self._cards.pop()

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self._num_decks * 52

    @property
    def num_decks(self) -> int:
        return self._num_decks

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
