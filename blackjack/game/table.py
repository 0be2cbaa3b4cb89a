"""Table controller: one engine, one lifecycle and one ledger per table."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from random import Random
from typing import Iterable

from blackjack.errors import (
    ActionNotAllowedError,
    InvalidBetError,
    OutOfTurnError,
    RoundInProgressError,
)
from blackjack.game.engine import Outcome, RoundEngine
from blackjack.game.events import EventEmitter, EventType
from blackjack.game.lifecycle import RoundStateMachine
from blackjack.game.state import Action, RoundState
from blackjack.ledger import Ledger, Settlement, classify
from blackjack.models import Player
from blackjack.rules import RuleSet

logger = logging.getLogger(__name__)

# Player actions after which the dealer must play the round out
_DEALER_ACTIONS = (Action.STAND, Action.DOUBLE)


@dataclass(frozen=True)
class RoundResult:
    """Settlement of one player's hand."""

    player_id: int
    outcome: Outcome
    settlement: Settlement
    player_total: int
    dealer_total: int
    stake: Decimal
    payout: Decimal
    balance: Decimal

    @property
    def net(self) -> Decimal:
        return self.payout - self.stake


@dataclass
class PlayerStats:
    """Running totals for one seat."""

    player_id: int
    name: str
    balance: Decimal
    rules_name: str
    rounds_played: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    blackjacks: int = 0
    surrenders: int = 0

    def record(self, settlement: Settlement) -> None:
        self.rounds_played += 1
        if settlement == Settlement.WIN:
            self.wins += 1
        elif settlement == Settlement.BLACKJACK:
            self.wins += 1
            self.blackjacks += 1
        elif settlement == Settlement.PUSH:
            self.pushes += 1
        elif settlement == Settlement.SURRENDER:
            self.losses += 1
            self.surrenders += 1
        else:
            self.losses += 1


class Table:
    """
    A single blackjack table.

    Every caller-facing action is checked against the round state machine
    before it reaches the engine. Players act in seating order; the last
    player's terminal action moves the round to the dealer turn or straight
    to settling.
    """

    def __init__(
        self,
        players: Iterable[Player],
        rules: RuleSet | None = None,
        rng: Random | None = None,
        engine: RoundEngine | None = None,
    ) -> None:
        """
        Seat players at a new table.

        Args:
            players: Players to seat, in turn order
            rules: Table rules (uses defaults if not provided)
            rng: Random number generator for reproducible shuffles
            engine: Pre-built engine, mainly for tests
        """
        self.rules = rules or RuleSet()
        self.engine = engine or RoundEngine(rules=self.rules, rng=rng)
        self.events: EventEmitter = self.engine.events
        self.lifecycle = RoundStateMachine(
            skip_dealer_turn=self.rules.skip_dealer_turn,
            events=self.events,
        )
        self.ledger = Ledger(self.rules)

        players = list(players)
        self.engine.configure_players(players)
        for player in players:
            self.ledger.open_account(player)

        self._stats = {
            p.id: PlayerStats(p.id, p.name, p.balance, self.rules.name) for p in players
        }
        self._turn_order: list[int] = []
        self._turn_index = 0
        self._final_actions: dict[int, Action] = {}
        self.results: list[RoundResult] = []

    # Queries

    @property
    def state(self) -> RoundState:
        return self.lifecycle.state

    def legal_actions(self) -> tuple[Action, ...]:
        return self.lifecycle.legal_actions()

    @property
    def current_player_id(self) -> int | None:
        """Player whose turn it is, or None outside the player turn."""
        if self.state != RoundState.PLAYER_TURN:
            return None
        if self._turn_index >= len(self._turn_order):
            return None
        return self._turn_order[self._turn_index]

    def player(self, player_id: int) -> Player:
        return self.ledger.player(player_id)

    @property
    def players(self) -> list[Player]:
        return [self.ledger.player(pid) for pid in self.engine.player_ids]

    def stats(self, player_id: int) -> PlayerStats:
        player = self.ledger.player(player_id)
        stats = self._stats[player_id]
        stats.balance = player.balance
        return stats

    # Betting

    def place_bet(self, player_id: int, amount: Decimal | int | float | str) -> Decimal:
        """Take a player's bet for the next round."""
        if self.state != RoundState.WAITING_FOR_BETS:
            raise RoundInProgressError(f"Bets are closed ({self.state})")

        stake = self.ledger.place_bet(player_id, amount)
        self.engine.update_player(self.ledger.player(player_id))
        self.events.emit_new(EventType.BET_PLACED, player_id=player_id, amount=str(stake))
        return stake

    # Round flow

    def start_round(self) -> RoundState:
        """
        Deal a new round once every seated player has bet.

        Players holding a natural have their turn resolved immediately.
        """
        self.lifecycle.ensure_legal(Action.START_ROUND)
        missing = [pid for pid in self.engine.player_ids if not self.ledger.has_bet(pid)]
        if missing:
            raise InvalidBetError(f"Waiting for bets from players {missing}")

        self.lifecycle.fire(Action.START_ROUND)
        self.engine.start_round()
        self.engine.deal()
        self.lifecycle.fire(Action.CARDS_DEALT)

        self._turn_order = self.engine.player_ids
        self._turn_index = 0
        self._final_actions = {}
        self.results = []
        self._resolve_naturals()
        return self.state

    def hit(self, player_id: int) -> RoundState:
        self._begin_turn_action(Action.HIT, player_id)
        self.lifecycle.fire(Action.HIT)
        self.engine.hit(player_id)

        if self.engine.player_hand(player_id).is_busted:
            self.events.emit_new(
                EventType.PLAYER_BUSTS,
                player_id=player_id,
                hand_value=self.engine.player_total(player_id),
            )
            self._finish_turn(player_id, Action.BUST)
        return self.state

    def stand(self, player_id: int) -> RoundState:
        self._begin_turn_action(Action.STAND, player_id)
        self.events.emit_new(
            EventType.PLAYER_STAND,
            player_id=player_id,
            hand_value=self.engine.player_total(player_id),
        )
        self._finish_turn(player_id, Action.STAND)
        return self.state

    def double(self, player_id: int) -> RoundState:
        """Double the stake, take exactly one card and end the turn."""
        self._begin_turn_action(Action.DOUBLE, player_id)
        if len(self.engine.player_hand(player_id)) != 2:
            raise ActionNotAllowedError("Can only double on the first two cards")

        stake = self.ledger.add_to_stake(player_id, self.ledger.stake(player_id))
        self.engine.update_player(self.ledger.player(player_id))
        self.engine.hit(player_id)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            player_id=player_id,
            hand_value=self.engine.player_total(player_id),
            new_stake=str(stake),
        )

        if self.engine.player_hand(player_id).is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, player_id=player_id)
            self._finish_turn(player_id, Action.BUST)
        else:
            self._finish_turn(player_id, Action.DOUBLE)
        return self.state

    def surrender(self, player_id: int) -> RoundState:
        """Give up the hand for the configured share of the stake."""
        self._begin_turn_action(Action.SURRENDER, player_id)
        if self.rules.surrender == "none":
            raise ActionNotAllowedError("Surrender is not allowed at this table")
        if self.rules.surrender == "late" and len(self.engine.player_hand(player_id)) > 2:
            raise ActionNotAllowedError("Can only surrender as the first action")

        self.events.emit_new(EventType.PLAYER_SURRENDER, player_id=player_id)
        self._finish_turn(player_id, Action.SURRENDER)
        return self.state

    def cancel(self) -> RoundState:
        """Abandon the round before play starts, refunding every stake."""
        self.lifecycle.fire(Action.CANCEL)
        self.engine.abort_round()
        for player_id in self.engine.player_ids:
            if self.ledger.refund(player_id):
                self.engine.update_player(self.ledger.player(player_id))
        self.events.emit_new(EventType.ROUND_CANCELLED)
        return self.state

    def new_round(self) -> RoundState:
        """Open betting for the next round."""
        self.lifecycle.fire(Action.NEW_ROUND)
        self._turn_order = []
        self._turn_index = 0
        self._final_actions = {}
        return self.state

    # Internals

    def _begin_turn_action(self, action: Action, player_id: int) -> None:
        self.lifecycle.ensure_legal(action)
        self.engine.player(player_id)
        current = self.current_player_id
        if player_id != current:
            raise OutOfTurnError(player_id, current)

    def _resolve_naturals(self) -> None:
        player_id = self.current_player_id
        if player_id is not None and self.engine.player_hand(player_id).is_blackjack:
            self.events.emit_new(EventType.PLAYER_BLACKJACK, player_id=player_id)
            self._finish_turn(player_id, Action.NATURAL_BLACKJACK)

    def _finish_turn(self, player_id: int, action: Action) -> None:
        self._final_actions[player_id] = action
        self._turn_index += 1

        if self._turn_index < len(self._turn_order):
            self.lifecycle.ensure_legal(action)
            self._resolve_naturals()
            return

        dealer_required = any(a in _DEALER_ACTIONS for a in self._final_actions.values())
        self.lifecycle.fire(action, dealer_required=dealer_required)
        if self.state == RoundState.DEALER_TURN:
            self._play_dealer()
        else:
            self.engine.end_round(play_dealer=False)
        self._settle()

    def _play_dealer(self) -> None:
        self.engine.end_round(play_dealer=True)
        dealer_hand = self.engine.dealer_hand
        if dealer_hand.is_blackjack:
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            self.lifecycle.fire(Action.DEALER_BLACKJACK)
        elif dealer_hand.is_busted:
            self.lifecycle.fire(Action.DEALER_BUSTS)
        else:
            self.lifecycle.fire(Action.DEALER_STANDS)

    def _settle(self) -> None:
        outcomes = self.engine.evaluate()
        dealer_natural = self.engine.dealer_hand.is_blackjack
        dealer_total = self.engine.dealer_total

        results = []
        for player_id, outcome in outcomes.items():
            stake = self.ledger.stake(player_id)
            settlement = classify(
                outcome,
                player_natural=self.engine.player_hand(player_id).is_blackjack,
                dealer_natural=dealer_natural,
                surrendered=self._final_actions.get(player_id) == Action.SURRENDER,
            )
            payout = self.ledger.settle(player_id, settlement)
            player = self.ledger.player(player_id)
            self.engine.update_player(player)
            self._stats[player_id].record(settlement)

            result = RoundResult(
                player_id=player_id,
                outcome=outcome,
                settlement=settlement,
                player_total=self.engine.player_total(player_id),
                dealer_total=dealer_total,
                stake=stake,
                payout=payout,
                balance=player.balance,
            )
            results.append(result)
            self.events.emit_new(
                EventType.BET_SETTLED,
                player_id=player_id,
                outcome=outcome.name,
                settlement=settlement.name,
                payout=str(payout),
            )

        self.results = results
        self.lifecycle.fire(Action.RESULTS_COMPUTED)
        logger.info(
            "Round settled: %s",
            ", ".join(f"player {r.player_id} {r.settlement.name} {r.net:+}" for r in results),
        )
