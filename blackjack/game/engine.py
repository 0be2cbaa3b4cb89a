"""Round engine: one shoe, one dealer hand and one hand per seated player."""

import logging
from enum import Enum, auto
from random import Random
from typing import Iterable, Protocol

from blackjack import scoring
from blackjack.cards import Card, Shoe
from blackjack.errors import (
    ConfigurationError,
    NoActiveRoundError,
    NoPlayersConfiguredError,
    RoundInProgressError,
    UnknownPlayerError,
)
from blackjack.game.events import EventEmitter, EventType
from blackjack.hand import Hand
from blackjack.models import Player, Round
from blackjack.rules import RuleSet

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """Result of one player's hand against the dealer."""

    PLAYER_BUST = auto()
    DEALER_BUST = auto()
    PLAYER_WINS = auto()
    PLAYER_LOSES = auto()
    PUSH = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def player_won(self) -> bool:
        return self in (Outcome.DEALER_BUST, Outcome.PLAYER_WINS)


class Dealer(Protocol):
    """The operations a table controller needs from a round engine."""

    def deal(self) -> None: ...

    def hit(self, player_id: int) -> Card: ...

    def dealer_play(self) -> list[Card]: ...

    def evaluate(self) -> dict[int, Outcome]: ...

    def player_hand(self, player_id: int) -> Hand: ...

    @property
    def dealer_hand(self) -> Hand: ...


def compare_hands(player_hand: Hand, dealer_hand: Hand, rules: RuleSet) -> Outcome:
    """
    Compare a final player hand with the final dealer hand.

    A bust player loses even when the dealer also busts.
    """
    player_value = scoring.hand_value(player_hand, rules.max_points)
    dealer_value = scoring.hand_value(dealer_hand, rules.max_points)

    if player_value > rules.max_points:
        return Outcome.PLAYER_BUST
    if dealer_value > rules.max_points:
        return Outcome.DEALER_BUST
    if player_value > dealer_value:
        return Outcome.PLAYER_WINS
    if player_value < dealer_value:
        return Outcome.PLAYER_LOSES
    return Outcome.PUSH


class RoundEngine:
    """
    Blackjack round engine for a single table.

    Owns the shoe, the dealer hand and a per-round arena of hands keyed by
    player id. Every in-round operation is guarded by ``round_active``; the
    coarser caller-facing protocol lives in ``RoundStateMachine``.
    """

    def __init__(
        self,
        rules: RuleSet | None = None,
        rng: Random | None = None,
        shoe: Shoe | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Initialize a new engine.

        Args:
            rules: Table rules (uses defaults if not provided)
            rng: Random number generator for reproducible shuffles
            shoe: Pre-built shoe, mainly for tests
            events: Emitter to publish to (a private one is created otherwise)
        """
        self.rules = rules or RuleSet()
        self.events = events or EventEmitter()
        self.shoe = shoe or Shoe(num_decks=self.rules.num_decks, rng=rng)
        self.shoe.on_replenish = self._shoe_replenished

        self._players: dict[int, Player] = {}
        self._hands: dict[int, Hand] = {}
        self._dealer_hand = Hand(max_points=self.rules.max_points)
        self._round: Round | None = None
        self._rounds_started = 0
        self.round_active = False

    # Players

    def configure_players(self, players: Iterable[Player]) -> None:
        """
        Seat players, giving each an empty hand.

        Raises:
            ConfigurationError: No players, or two players share an id
            RoundInProgressError: A round is active
        """
        if self.round_active:
            raise RoundInProgressError("Cannot change players during a round")

        players = list(players)
        if not players:
            raise ConfigurationError("At least one player is required")

        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise ConfigurationError(f"Duplicate player ids: {ids}")

        self._players = {p.id: p for p in players}
        self._hands = {p.id: Hand(max_points=self.rules.max_points) for p in players}
        logger.info("Configured %d player(s): %s", len(players), ", ".join(p.name for p in players))
        self.events.emit_new(EventType.PLAYERS_CONFIGURED, player_ids=ids)

    @property
    def players(self) -> list[Player]:
        """Seated players in seating order."""
        return list(self._players.values())

    @property
    def player_ids(self) -> list[int]:
        return list(self._players)

    def player(self, player_id: int) -> Player:
        try:
            return self._players[player_id]
        except KeyError:
            raise UnknownPlayerError(player_id) from None

    def update_player(self, player: Player) -> None:
        """Replace the record of a seated player (e.g. after a balance change)."""
        if player.id not in self._players:
            raise UnknownPlayerError(player.id)
        self._players[player.id] = player

    # Hands

    def player_hand(self, player_id: int) -> Hand:
        try:
            return self._hands[player_id]
        except KeyError:
            raise UnknownPlayerError(player_id) from None

    @property
    def dealer_hand(self) -> Hand:
        return self._dealer_hand

    def value(self, hand: Hand) -> int:
        """Score a hand under this table's rules."""
        return scoring.hand_value(hand, self.rules.max_points)

    def player_total(self, player_id: int) -> int:
        return self.value(self.player_hand(player_id))

    @property
    def dealer_total(self) -> int:
        return self.value(self._dealer_hand)

    # Round lifecycle

    @property
    def round(self) -> Round | None:
        """The current or most recent round."""
        return self._round

    def start_round(self) -> Round:
        """
        Clear every hand, rebuild the shoe and open a new round.

        Raises:
            NoPlayersConfiguredError: No players have been configured
        """
        if not self._hands:
            raise NoPlayersConfiguredError("Configure players before starting a round")

        self._dealer_hand.clear()
        for hand in self._hands.values():
            hand.clear()

        self.shoe.replenish()
        self.round_active = True
        self._rounds_started += 1
        self._round = Round(number=self._rounds_started)

        logger.info("Round %d started with %d player(s)", self._round.number, len(self._hands))
        self.events.emit_new(EventType.ROUND_STARTED, round=self._round.number)
        return self._round

    def deal(self) -> None:
        """Deal two cards each: one to every player, then the dealer, twice."""
        self._require_active_round()

        for _ in range(2):
            for player_id, hand in self._hands.items():
                self._deal_card_to_hand(hand, player_id)
            self._deal_card_to_hand(self._dealer_hand, None)

    def hit(self, player_id: int) -> Card:
        """Draw one card into a player's hand."""
        self._require_active_round()
        hand = self.player_hand(player_id)

        card = self._deal_card_to_hand(hand, player_id)
        self.events.emit_new(EventType.PLAYER_HIT, player_id=player_id, hand_value=self.value(hand))
        return card

    def dealer_play(self) -> list[Card]:
        """
        Draw into the dealer hand until the drawing policy says stand.

        Returns:
            The cards drawn, in order
        """
        self._require_active_round()

        drawn = []
        while scoring.dealer_should_draw(self._dealer_hand, self.rules):
            drawn.append(self._deal_card_to_hand(self._dealer_hand, None))
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_total)

        if self._dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_total)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_total)
        logger.debug("Dealer drew %d card(s) and finished on %d", len(drawn), self.dealer_total)
        return drawn

    def end_round(self, play_dealer: bool = True) -> Round:
        """
        Play out the dealer and close the round.

        Args:
            play_dealer: False when every hand settled without the dealer
        """
        self._require_active_round()
        if play_dealer:
            self.dealer_play()

        self.round_active = False
        assert self._round is not None
        self._round = self._round.finish()

        logger.info(
            "Round %d ended: dealer %d (%s)",
            self._round.number,
            self.dealer_total,
            ", ".join(f"player {pid}: {self.value(h)}" for pid, h in self._hands.items()),
        )
        self.events.emit_new(EventType.ROUND_ENDED, round=self._round.number, dealer_total=self.dealer_total)
        return self._round

    def abort_round(self) -> None:
        """Close an active round without playing the dealer or evaluating."""
        if self.round_active:
            self.round_active = False
            assert self._round is not None
            self._round = self._round.finish()
            logger.info("Round %d aborted", self._round.number)

    def evaluate(self) -> dict[int, Outcome]:
        """Outcome per player id, read from the final hands. No side effects."""
        return {
            player_id: compare_hands(hand, self._dealer_hand, self.rules)
            for player_id, hand in self._hands.items()
        }

    # Internals

    def _require_active_round(self) -> None:
        if not self.round_active:
            raise NoActiveRoundError("No active round; call start_round() first")

    def _deal_card_to_hand(self, hand: Hand, player_id: int | None) -> Card:
        card = self.shoe.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand="dealer" if player_id is None else "player",
            player_id=player_id,
            hand_value=self.value(hand),
        )
        return card

    def _shoe_replenished(self, shoe: Shoe) -> None:
        self.events.emit_new(EventType.SHOE_SHUFFLED, cards=len(shoe))
