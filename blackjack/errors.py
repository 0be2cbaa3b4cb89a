"""
Table errors.

Every error here is local and recoverable: callers catch ``TableError`` and
re-prompt or report. Shoe exhaustion is not an error.
"""

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from blackjack.game.state import Action, RoundState


class TableError(Exception):
    """Base class for table errors."""


class ConfigurationError(TableError):
    """Players could not be configured (empty or duplicate seating)."""


class NoPlayersConfiguredError(TableError):
    """A round was started before any player was configured."""


class NoActiveRoundError(TableError):
    """An in-round operation was attempted outside a round."""


class RoundInProgressError(TableError):
    """An operation that needs an idle table was attempted mid-round."""


class RoundAlreadyFinishedError(TableError):
    """A finished round was finished again."""


class UnknownPlayerError(TableError):
    """The player id is not seated at this table."""

    def __init__(self, player_id: int) -> None:
        super().__init__(f"Player {player_id} is not part of this round")
        self.player_id = player_id


class OutOfTurnError(TableError):
    """A player acted while another player holds the turn."""

    def __init__(self, player_id: int, current_player_id: int | None) -> None:
        super().__init__(
            f"It is not player {player_id}'s turn (current: {current_player_id})"
        )
        self.player_id = player_id
        self.current_player_id = current_player_id


class InvalidBetError(TableError, ValueError):
    """Bet amount rejected by the ledger."""


class InvalidActionForStateError(TableError):
    """The round state machine rejected an action."""

    def __init__(
        self,
        action: "Action",
        state: "RoundState",
        legal_actions: Iterable["Action"],
    ) -> None:
        self.action = action
        self.state = state
        self.legal_actions = tuple(legal_actions)
        legal = ", ".join(a.value for a in self.legal_actions) or "none"
        super().__init__(
            f"Action '{action.value}' is not valid in state {state.name}; legal actions: {legal}"
        )


class ActionNotAllowedError(TableError):
    """The action fits the round state but the table rules forbid it here."""
