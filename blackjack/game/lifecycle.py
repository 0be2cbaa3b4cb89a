"""Round lifecycle state machine."""

import logging
from dataclasses import dataclass
from typing import Any

from transitions import Machine, MachineError

from blackjack.errors import InvalidActionForStateError
from blackjack.game.events import EventEmitter, EventType
from blackjack.game.state import TRANSITIONS, Action, RoundState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """A state change applied by the machine."""

    action: Action
    source: RoundState
    dest: RoundState


class RoundStateMachine:
    """
    Gate the high-level actions of a round.

    This is a pure transition table: it never scores hands or draws cards.
    Callers fire an action before (or instead of) calling into the engine and
    get ``InvalidActionForStateError``, listing the legal actions, when the
    action does not fit the current state.
    """

    STATES = [s.machine_name for s in RoundState]

    def __init__(
        self,
        skip_dealer_turn: bool = True,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Initialize the machine in WAITING_FOR_BETS.

        Args:
            skip_dealer_turn: Whether surrender, natural blackjack and bust go
                straight to settling when no other hand needs the dealer
            events: Emitter notified of every state change
        """
        self._skip_dealer_turn = skip_dealer_turn
        self._events = events
        self.history: list[Transition] = []

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=TRANSITIONS,
            initial=RoundState.WAITING_FOR_BETS.machine_name,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState.from_machine_name(self._machine_state)  # type: ignore[attr-defined]

    def skips_dealer_turn(self, dealer_required: bool = False, **_: Any) -> bool:
        """Transition condition for surrender, natural blackjack and bust."""
        return self._skip_dealer_turn and not dealer_required

    def legal_actions(self) -> tuple[Action, ...]:
        """Actions that have a transition out of the current state."""
        triggers = set(self.machine.get_triggers(self._machine_state))  # type: ignore[attr-defined]
        return tuple(action for action in Action if action.value in triggers)

    def can_fire(self, action: Action) -> bool:
        return action in self.legal_actions()

    def ensure_legal(self, action: Action) -> None:
        """Raise unless ``action`` is legal now, without transitioning."""
        if not self.can_fire(action):
            self._reject(action)

    def fire(self, action: Action, **context: Any) -> RoundState:
        """
        Apply ``action`` and return the new state.

        Args:
            action: The action to apply
            **context: Passed to transition conditions. ``dealer_required=True``
                means another hand still needs the dealer, so a settled-hand
                action cannot skip the dealer turn

        Raises:
            InvalidActionForStateError: The action is not legal in the current state
        """
        source = self.state
        try:
            self.trigger(action.value, **context)  # type: ignore[attr-defined]
        except MachineError as err:
            self._reject(action, err)

        dest = self.state
        self.history.append(Transition(action, source, dest))
        logger.debug("Round state %s --%s--> %s", source.name, action.value, dest.name)
        if self._events is not None:
            self._events.emit_new(
                EventType.STATE_CHANGED,
                action=action.value,
                source=source.name,
                dest=dest.name,
            )
        return dest

    def _reject(self, action: Action, cause: Exception | None = None) -> None:
        legal = self.legal_actions()
        if self._events is not None:
            self._events.emit_new(
                EventType.INVALID_ACTION,
                action=action.value,
                state=self.state.name,
                legal_actions=[a.value for a in legal],
            )
        raise InvalidActionForStateError(action, self.state, legal) from cause
