"""Table API endpoints."""

from random import Random
from typing import Annotated

from fastapi import APIRouter, Depends

from api.registry import TableRegistry, get_registry
from api.schemas import (
    ActionRequest,
    BetRequest,
    CardResponse,
    ErrorResponse,
    HandResponse,
    NewTableRequest,
    RoundResultResponse,
    SeatResponse,
    StatsResponse,
    TableStateResponse,
)
from blackjack.cards import Card
from blackjack.game.dispatch import dispatch
from blackjack.game.state import RoundState
from blackjack.game.table import RoundResult, Table
from blackjack.hand import Hand
from blackjack.models import Player
from blackjack.rules import RuleSet
from config import config

router = APIRouter(
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)

Registry = Annotated[TableRegistry, Depends(get_registry)]


def _card_to_response(card: Card) -> CardResponse:
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value)


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse."""
    return HandResponse(
        cards=[_card_to_response(c) for c in hand.cards],
        value=hand.value,
        is_soft=hand.is_soft,
        is_blackjack=hand.is_blackjack,
        is_busted=hand.is_busted,
    )


def _result_to_response(result: RoundResult) -> RoundResultResponse:
    return RoundResultResponse(
        player_id=result.player_id,
        outcome=result.outcome.name,
        settlement=result.settlement.name,
        player_total=result.player_total,
        dealer_total=result.dealer_total,
        stake=float(result.stake),
        payout=float(result.payout),
        balance=float(result.balance),
    )


def _table_state_response(table_id: str, table: Table) -> TableStateResponse:
    """Convert table state to response; the hole card stays hidden during player turns."""
    engine = table.engine
    dealer_hand = engine.dealer_hand
    dealer_showing = _card_to_response(dealer_hand.cards[0]) if dealer_hand.cards else None
    if table.state == RoundState.PLAYER_TURN:
        dealer_hand = Hand(cards=dealer_hand.cards[:1], max_points=dealer_hand.max_points)

    seats = [
        SeatResponse(
            player_id=player.id,
            name=player.name,
            balance=float(player.balance),
            stake=float(table.ledger.stake(player.id)),
            hand=_hand_to_response(engine.player_hand(player.id)),
        )
        for player in table.players
    ]

    return TableStateResponse(
        table_id=table_id,
        state=table.state.name,
        legal_actions=[a.value for a in table.legal_actions()],
        round_number=engine.round.number if engine.round else None,
        current_player_id=table.current_player_id,
        seats=seats,
        dealer_hand=_hand_to_response(dealer_hand),
        dealer_showing=dealer_showing,
        results=[_result_to_response(r) for r in table.results],
    )


@router.post("")
async def new_table(request: NewTableRequest, registry: Registry) -> TableStateResponse:
    """Open a table and seat the requested players."""
    players = [Player(id=p.id, name=p.name, balance=p.balance) for p in request.players]
    rng = Random(request.seed) if request.seed is not None else None
    table = Table(players, rules=RuleSet.from_config(config.game), rng=rng)
    table_id = registry.add(table)
    return _table_state_response(table_id, table)


@router.get("/{table_id}")
async def get_table(table_id: str, registry: Registry) -> TableStateResponse:
    """Get current table state."""
    return _table_state_response(table_id, registry.get(table_id))


@router.delete("/{table_id}")
async def close_table(table_id: str, registry: Registry) -> dict[str, str]:
    registry.remove(table_id)
    return {"status": "closed"}


@router.post("/{table_id}/bets")
async def place_bet(table_id: str, request: BetRequest, registry: Registry) -> TableStateResponse:
    """Place a bet for the next round."""
    table = registry.get(table_id)
    dispatch(table, "bet", request.player_id, request.amount)
    return _table_state_response(table_id, table)


@router.post("/{table_id}/actions")
async def table_action(
    table_id: str,
    request: ActionRequest,
    registry: Registry,
) -> TableStateResponse:
    """Execute a table or player action."""
    table = registry.get(table_id)
    dispatch(table, request.action, request.player_id)
    return _table_state_response(table_id, table)


@router.get("/{table_id}/stats/{player_id}")
async def player_stats(table_id: str, player_id: int, registry: Registry) -> StatsResponse:
    """Running stats for one seat."""
    stats = registry.get(table_id).stats(player_id)
    return StatsResponse(
        player_id=stats.player_id,
        name=stats.name,
        balance=float(stats.balance),
        rules=stats.rules_name,
        rounds_played=stats.rounds_played,
        wins=stats.wins,
        losses=stats.losses,
        pushes=stats.pushes,
        blackjacks=stats.blackjacks,
        surrenders=stats.surrenders,
    )
