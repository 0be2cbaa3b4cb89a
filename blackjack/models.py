"""Player and round records."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal

from blackjack.errors import RoundAlreadyFinishedError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Player:
    """
    A seated player.

    Players are values: a balance change produces a new Player with the same
    id, so everything that tracks players keys on ``id``.
    """

    id: int
    name: str
    balance: Decimal = Decimal("1000")

    def with_balance(self, balance: Decimal) -> "Player":
        return replace(self, balance=balance)


@dataclass(frozen=True)
class Round:
    """One round of play, stamped when it starts and when it ends."""

    number: int
    started_at: datetime = field(default_factory=_utcnow)
    ended_at: datetime | None = None

    @property
    def is_finished(self) -> bool:
        return self.ended_at is not None

    def finish(self) -> "Round":
        """Return this round with its end time set."""
        if self.is_finished:
            raise RoundAlreadyFinishedError(f"Round {self.number} already finished")
        return replace(self, ended_at=_utcnow())
