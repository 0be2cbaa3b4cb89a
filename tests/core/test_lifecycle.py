"""Tests for the round state machine."""

import pytest

from blackjack.errors import InvalidActionForStateError
from blackjack.game.events import EventEmitter, EventType
from blackjack.game.lifecycle import RoundStateMachine, Transition
from blackjack.game.state import Action, RoundState, legal_actions_for


def advance_to_player_turn(machine: RoundStateMachine) -> None:
    machine.fire(Action.START_ROUND)
    machine.fire(Action.CARDS_DEALT)


class TestInitialState:
    """Tests for a fresh machine."""

    def test_starts_waiting_for_bets(self, lifecycle):
        assert lifecycle.state == RoundState.WAITING_FOR_BETS
        assert lifecycle.history == []

    def test_legal_actions_while_waiting(self, lifecycle):
        assert lifecycle.legal_actions() == (Action.START_ROUND, Action.CANCEL)

    def test_hit_while_waiting_is_rejected(self, lifecycle):
        with pytest.raises(InvalidActionForStateError) as exc_info:
            lifecycle.fire(Action.HIT)

        err = exc_info.value
        assert err.action == Action.HIT
        assert err.state == RoundState.WAITING_FOR_BETS
        assert set(err.legal_actions) == {Action.START_ROUND, Action.CANCEL}
        assert "start_round" in str(err)
        assert lifecycle.state == RoundState.WAITING_FOR_BETS
        assert lifecycle.history == []


class TestTransitions:
    """Tests for the transition table."""

    def test_full_round_through_dealer(self, lifecycle):
        advance_to_player_turn(lifecycle)
        assert lifecycle.state == RoundState.PLAYER_TURN

        assert lifecycle.fire(Action.HIT) == RoundState.PLAYER_TURN
        assert lifecycle.fire(Action.STAND) == RoundState.DEALER_TURN
        assert lifecycle.fire(Action.DEALER_STANDS) == RoundState.SETTLING
        assert lifecycle.fire(Action.RESULTS_COMPUTED) == RoundState.FINISHED
        assert lifecycle.fire(Action.NEW_ROUND) == RoundState.WAITING_FOR_BETS

    @pytest.mark.parametrize("action", [Action.DEALER_BUSTS, Action.DEALER_BLACKJACK])
    def test_dealer_turn_endings(self, lifecycle, action):
        advance_to_player_turn(lifecycle)
        lifecycle.fire(Action.DOUBLE)
        assert lifecycle.fire(action) == RoundState.SETTLING

    @pytest.mark.parametrize("action", [Action.SURRENDER, Action.NATURAL_BLACKJACK, Action.BUST])
    def test_settled_hand_skips_dealer(self, lifecycle, action):
        advance_to_player_turn(lifecycle)
        assert lifecycle.fire(action) == RoundState.SETTLING

    @pytest.mark.parametrize("action", [Action.SURRENDER, Action.NATURAL_BLACKJACK, Action.BUST])
    def test_settled_hand_goes_to_dealer_when_required(self, lifecycle, action):
        advance_to_player_turn(lifecycle)
        assert lifecycle.fire(action, dealer_required=True) == RoundState.DEALER_TURN

    def test_settled_hand_goes_to_dealer_when_skipping_disabled(self):
        machine = RoundStateMachine(skip_dealer_turn=False)
        advance_to_player_turn(machine)
        assert machine.fire(Action.BUST) == RoundState.DEALER_TURN

    def test_cancel_from_waiting(self, lifecycle):
        assert lifecycle.fire(Action.CANCEL) == RoundState.FINISHED
        assert lifecycle.legal_actions() == (Action.NEW_ROUND,)

    def test_cancel_from_dealing(self, lifecycle):
        lifecycle.fire(Action.START_ROUND)
        assert lifecycle.fire(Action.CANCEL) == RoundState.FINISHED

    def test_cannot_cancel_during_player_turn(self, lifecycle):
        advance_to_player_turn(lifecycle)
        with pytest.raises(InvalidActionForStateError):
            lifecycle.fire(Action.CANCEL)
        assert lifecycle.state == RoundState.PLAYER_TURN

    def test_finished_only_allows_new_round(self, lifecycle):
        lifecycle.fire(Action.CANCEL)
        for action in Action:
            if action != Action.NEW_ROUND:
                assert not lifecycle.can_fire(action)

    def test_history_records_transitions(self, lifecycle):
        advance_to_player_turn(lifecycle)
        assert lifecycle.history == [
            Transition(Action.START_ROUND, RoundState.WAITING_FOR_BETS, RoundState.DEALING),
            Transition(Action.CARDS_DEALT, RoundState.DEALING, RoundState.PLAYER_TURN),
        ]


class TestLegalActions:
    """Tests for legal action queries."""

    @pytest.mark.parametrize("state", list(RoundState))
    def test_static_table_matches_machine(self, state):
        machine = RoundStateMachine()
        machine.machine.set_state(state.machine_name)
        assert machine.legal_actions() == legal_actions_for(state)

    def test_player_turn_actions(self, lifecycle):
        advance_to_player_turn(lifecycle)
        assert set(lifecycle.legal_actions()) == {
            Action.HIT,
            Action.STAND,
            Action.DOUBLE,
            Action.SURRENDER,
            Action.NATURAL_BLACKJACK,
            Action.BUST,
        }

    def test_ensure_legal_does_not_transition(self, lifecycle):
        lifecycle.ensure_legal(Action.START_ROUND)
        assert lifecycle.state == RoundState.WAITING_FOR_BETS

        with pytest.raises(InvalidActionForStateError):
            lifecycle.ensure_legal(Action.STAND)


class TestEvents:
    """Tests for state machine telemetry."""

    def test_state_changes_are_emitted(self):
        events = EventEmitter()
        machine = RoundStateMachine(events=events)
        machine.fire(Action.START_ROUND)

        changed = events.of_type(EventType.STATE_CHANGED)
        assert len(changed) == 1
        assert changed[0].data == {
            "action": "start_round",
            "source": "WAITING_FOR_BETS",
            "dest": "DEALING",
        }

    def test_rejections_are_emitted(self):
        events = EventEmitter()
        machine = RoundStateMachine(events=events)
        with pytest.raises(InvalidActionForStateError):
            machine.fire(Action.HIT)

        rejected = events.of_type(EventType.INVALID_ACTION)
        assert rejected[0].data["legal_actions"] == ["start_round", "cancel"]
