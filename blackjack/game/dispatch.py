"""Single entry point that turns an action token into a table call."""

from decimal import Decimal

from blackjack.errors import ActionNotAllowedError, InvalidBetError
from blackjack.game.state import Action, RoundState
from blackjack.game.table import Table

# Actions a caller may request; the rest are fired by the table itself.
PLAYER_ACTIONS = (Action.HIT, Action.STAND, Action.DOUBLE, Action.SURRENDER)
TABLE_ACTIONS = (Action.START_ROUND, Action.CANCEL, Action.NEW_ROUND)

# Betting happens before the round exists, so it is not a state machine action.
BET = "bet"


def _normalize(token: str) -> str:
    return token.strip().lower().replace(" ", "_").replace("-", "_")


def parse_action(token: Action | str) -> Action:
    """Accept an ``Action`` or its trigger name, e.g. ``"hit"`` or ``"start round"``."""
    if isinstance(token, Action):
        return token
    try:
        return Action(_normalize(token))
    except ValueError:
        raise ActionNotAllowedError(f"Unknown action: {token!r}") from None


def dispatch(
    table: Table,
    action: Action | str,
    player_id: int | None = None,
    amount: Decimal | int | str | None = None,
) -> RoundState:
    """
    Apply one caller action to a table.

    ``"bet"`` places ``amount`` for ``player_id``. Player actions default to
    the player whose turn it is.

    Raises:
        ActionNotAllowedError: The action is internal to the table or unknown
        InvalidActionForStateError: The round state does not allow the action
        InvalidBetError: A bet without a player or an amount
    """
    if isinstance(action, str) and _normalize(action) == BET:
        if player_id is None or amount is None:
            raise InvalidBetError("A bet needs a player id and an amount")
        table.place_bet(player_id, amount)
        return table.state

    action = parse_action(action)

    if action in TABLE_ACTIONS:
        if action == Action.START_ROUND:
            return table.start_round()
        if action == Action.CANCEL:
            return table.cancel()
        return table.new_round()

    if action not in PLAYER_ACTIONS:
        raise ActionNotAllowedError(f"'{action.value}' is applied by the table, not requested")

    table.lifecycle.ensure_legal(action)
    if player_id is None:
        player_id = table.current_player_id
        if player_id is None:
            raise ActionNotAllowedError(f"No player is waiting to {action.value}")

    handlers = {
        Action.HIT: table.hit,
        Action.STAND: table.stand,
        Action.DOUBLE: table.double,
        Action.SURRENDER: table.surrender,
    }
    return handlers[action](player_id)
