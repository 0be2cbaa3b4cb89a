"""Hand of cards held by one party."""

from dataclasses import dataclass, field
from typing import Iterator

from blackjack.cards import Card
from blackjack import scoring


@dataclass
class Hand:
    """Cards held by one player or the dealer; totals come from blackjack.scoring."""

    cards: list[Card] = field(default_factory=list)
    max_points: int = scoring.MAX_POINTS

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def clear(self) -> None:
        """Empty the hand for the next round."""
        self.cards.clear()

    @property
    def value(self) -> int:
        """Best total that does not bust, or the lowest bust total."""
        return scoring.hand_value(self.cards, self.max_points)

    @property
    def is_soft(self) -> bool:
        return scoring.is_soft(self.cards, self.max_points)

    @property
    def is_blackjack(self) -> bool:
        """Two cards totalling 21."""
        return scoring.is_blackjack(self.cards, self.max_points)

    @property
    def is_busted(self) -> bool:
        return scoring.is_bust(self.cards, self.max_points)

    @property
    def is_soft_17(self) -> bool:
        return scoring.is_soft_17(self.cards, self.max_points)

    @classmethod
    def of(cls, *codes: str, max_points: int = scoring.MAX_POINTS) -> "Hand":
        """Build a hand from card strings, e.g. ``Hand.of("AS", "6H")``."""
        return cls([Card.from_string(code) for code in codes], max_points)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        if self.is_blackjack:
            label = "BLACKJACK"
        elif self.is_busted:
            label = "BUST"
        elif self.is_soft:
            label = f"soft {self.value}"
        else:
            label = str(self.value)
        return " ".join([*(str(card) for card in self.cards), f"({label})"])

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
