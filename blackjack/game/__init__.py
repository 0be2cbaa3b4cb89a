"""Round engine and lifecycle state machine."""

from blackjack.game.events import GameEvent, EventType
from blackjack.game.state import Action, RoundState
from blackjack.game.engine import Outcome, RoundEngine
from blackjack.game.lifecycle import RoundStateMachine

__all__ = [
    "GameEvent",
    "EventType",
    "Action",
    "RoundState",
    "Outcome",
    "RoundEngine",
    "RoundStateMachine",
]
