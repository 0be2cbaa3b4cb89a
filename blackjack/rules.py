"""Blackjack table rules."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config import GameConfig


@dataclass(frozen=True)
class RuleSet:
    """
    Blackjack table rules configuration.

    Injected into the engine, the table and the ledger; every rule choice the
    round flow depends on lives here.
    """

    name: str = "Standard blackjack rules"

    # Deck configuration
    num_decks: int = 1

    # Scoring
    max_points: int = 21

    # Dealer rules
    dealer_stands_on: int = 17
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Betting limits
    max_bet: int = 1000

    # Payouts, as a multiple of the stake on top of the returned stake
    win_payout: float = 1.0
    blackjack_payout: float = 1.5  # 3:2

    # Surrender: "late" only as the first action, "any" also after a hit
    surrender: Literal["none", "late", "any"] = "late"
    surrender_refund: float = 0.5

    # Surrender, natural blackjack and bust settle without a dealer turn
    skip_dealer_turn: bool = True

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if self.dealer_stands_on > self.max_points:
            raise ValueError("dealer_stands_on cannot exceed max_points")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")
        if not 0.0 <= self.surrender_refund <= 1.0:
            raise ValueError("surrender_refund must be between 0 and 1")

    @classmethod
    def from_config(cls, game: "GameConfig") -> "RuleSet":
        """Build rules from the environment-backed game configuration."""
        return cls(
            num_decks=game.num_decks,
            max_bet=game.max_bet,
            dealer_hits_soft_17=game.dealer_hits_soft_17,
            blackjack_payout=game.blackjack_payout,
            surrender=game.surrender,
            surrender_refund=game.surrender_refund,
            skip_dealer_turn=game.skip_dealer_turn,
        )

    @classmethod
    def vegas_strip(cls) -> "RuleSet":
        """Dealer stands on soft 17."""
        return cls(
            name="Vegas Strip",
            num_decks=6,
            dealer_hits_soft_17=False,
        )

    @classmethod
    def no_surrender(cls) -> "RuleSet":
        return cls(name="No surrender", surrender="none")
