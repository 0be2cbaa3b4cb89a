"""Round lifecycle states, actions and the transition table."""

from enum import Enum, auto
from typing import Any


class RoundState(Enum):
    """
    Round state machine states.

    Flow: WAITING_FOR_BETS → DEALING → PLAYER_TURN → DEALER_TURN → SETTLING → FINISHED
    """

    # Bets are collected before any card is dealt
    WAITING_FOR_BETS = auto()

    # Initial two cards per party
    DEALING = auto()

    # Players act in seating order
    PLAYER_TURN = auto()

    # Dealer draws to its fixed policy
    DEALER_TURN = auto()

    # Outcomes evaluated, bets paid
    SETTLING = auto()

    # Round over; only a new round may follow
    FINISHED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def machine_name(self) -> str:
        """Name of this state inside the transitions machine."""
        return self.name.lower()

    @classmethod
    def from_machine_name(cls, name: str) -> "RoundState":
        return cls[name.upper()]


class Action(Enum):
    """Caller-facing actions; values are the state machine trigger names."""

    START_ROUND = "start_round"
    CANCEL = "cancel"
    CARDS_DEALT = "cards_dealt"
    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SURRENDER = "surrender"
    NATURAL_BLACKJACK = "natural_blackjack"
    BUST = "bust"
    DEALER_STANDS = "dealer_stands"
    DEALER_BUSTS = "dealer_busts"
    DEALER_BLACKJACK = "dealer_blackjack"
    RESULTS_COMPUTED = "results_computed"
    NEW_ROUND = "new_round"

    def __str__(self) -> str:
        return self.value.replace("_", " ")


# Actions that may end a player's turn without needing the dealer
SETTLED_HAND_ACTIONS = (Action.SURRENDER, Action.NATURAL_BLACKJACK, Action.BUST)

_W = RoundState.WAITING_FOR_BETS.machine_name
_D = RoundState.DEALING.machine_name
_P = RoundState.PLAYER_TURN.machine_name
_DT = RoundState.DEALER_TURN.machine_name
_S = RoundState.SETTLING.machine_name
_F = RoundState.FINISHED.machine_name


def _settled_hand_transitions(action: Action) -> list[dict[str, Any]]:
    # The first matching transition whose condition passes wins.
    return [
        {"trigger": action.value, "source": _P, "dest": _S, "conditions": "skips_dealer_turn"},
        {"trigger": action.value, "source": _P, "dest": _DT},
    ]


TRANSITIONS: list[dict[str, Any]] = [
    {"trigger": Action.START_ROUND.value, "source": _W, "dest": _D},
    {"trigger": Action.CANCEL.value, "source": [_W, _D], "dest": _F},
    {"trigger": Action.CARDS_DEALT.value, "source": _D, "dest": _P},
    {"trigger": Action.HIT.value, "source": _P, "dest": _P},
    {"trigger": Action.STAND.value, "source": _P, "dest": _DT},
    {"trigger": Action.DOUBLE.value, "source": _P, "dest": _DT},
    *_settled_hand_transitions(Action.SURRENDER),
    *_settled_hand_transitions(Action.NATURAL_BLACKJACK),
    *_settled_hand_transitions(Action.BUST),
    {"trigger": Action.DEALER_STANDS.value, "source": _DT, "dest": _S},
    {"trigger": Action.DEALER_BUSTS.value, "source": _DT, "dest": _S},
    {"trigger": Action.DEALER_BLACKJACK.value, "source": _DT, "dest": _S},
    {"trigger": Action.RESULTS_COMPUTED.value, "source": _S, "dest": _F},
    {"trigger": Action.NEW_ROUND.value, "source": _F, "dest": _W},
]


def legal_actions_for(state: RoundState) -> tuple[Action, ...]:
    """Actions with at least one transition out of ``state``, in declaration order."""
    triggers = {t["trigger"] for t in TRANSITIONS if _has_source(t, state.machine_name)}
    return tuple(action for action in Action if action.value in triggers)


def _has_source(transition: dict[str, Any], name: str) -> bool:
    source = transition["source"]
    if isinstance(source, list):
        return name in source
    return source == name
