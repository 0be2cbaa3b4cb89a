"""Pydantic schemas for API requests and responses."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PlayerRequest(BaseModel):
    """A player to seat at a new table."""

    id: int = Field(..., ge=0)
    name: str = Field(..., min_length=1, max_length=50)
    balance: Decimal = Field(default=Decimal("1000"), gt=0)


class NewTableRequest(BaseModel):
    """Request to open a table."""

    players: list[PlayerRequest] = Field(..., min_length=1, max_length=7)
    seed: int | None = Field(default=None, description="Seed for a repeatable shoe")


class BetRequest(BaseModel):
    """Request to place a bet."""

    player_id: int
    amount: Decimal = Field(..., gt=0, description="Bet amount")


class ActionRequest(BaseModel):
    """Request for a table or player action."""

    action: Literal["start_round", "cancel", "new_round", "hit", "stand", "double", "surrender"]
    player_id: int | None = None


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool


class SeatResponse(BaseModel):
    """One seated player with their hand and money."""

    player_id: int
    name: str
    balance: float
    stake: float
    hand: HandResponse


class RoundResultResponse(BaseModel):
    """Settlement of one player's hand."""

    player_id: int
    outcome: str
    settlement: Literal["WIN", "BLACKJACK", "PUSH", "LOSS", "SURRENDER"]
    player_total: int
    dealer_total: int
    stake: float
    payout: float
    balance: float


class TableStateResponse(BaseModel):
    """Current table state."""

    table_id: str
    state: str
    legal_actions: list[str]
    round_number: int | None
    current_player_id: int | None
    seats: list[SeatResponse]
    dealer_hand: HandResponse
    dealer_showing: CardResponse | None
    results: list[RoundResultResponse]


class StatsResponse(BaseModel):
    """Running stats for one seat."""

    player_id: int
    name: str
    balance: float
    rules: str
    rounds_played: int
    wins: int
    losses: int
    pushes: int
    blackjacks: int
    surrenders: int


class ErrorResponse(BaseModel):
    """Error body; legal_actions is set for state machine rejections."""

    detail: str
    legal_actions: list[str] | None = None
