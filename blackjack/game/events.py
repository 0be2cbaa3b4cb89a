"""Table telemetry: event types, immutable events and the emitter."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """What happened at the table."""

    # Round flow events
    PLAYERS_CONFIGURED = auto()
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()
    ROUND_CANCELLED = auto()
    STATE_CHANGED = auto()

    # Betting events
    BET_PLACED = auto()
    BET_SETTLED = auto()

    # Card events
    CARD_DEALT = auto()
    SHOE_SHUFFLED = auto()

    # Player action events
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DOUBLE = auto()
    PLAYER_SURRENDER = auto()
    PLAYER_BLACKJACK = auto()
    PLAYER_BUSTS = auto()

    # Dealer events
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()
    DEALER_BLACKJACK = auto()

    # Error events
    INVALID_ACTION = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    One immutable telemetry record.

    Events flow from the engine, the round state machine and the table
    controller to whatever is watching (console, API, tests).
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        details = ", ".join(f"{k}={v}" for k, v in self.data.items())
        return f"{self.event_type.name}({details})"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Callback list per event type, plus catch-all listeners.

    Every emitted event is also kept in an in-memory history so a table's
    round can be replayed or inspected after the fact.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._log: list[GameEvent] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Register a listener.

        Args:
            handler: Called with each matching event
            event_type: Only deliver this type; None delivers everything
        """
        self._listeners[event_type].append(handler)
        logger.debug("Subscribed %r to %s", handler, event_type.name if event_type else "all events")

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(event_type, [])
        if handler in listeners:
            listeners.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Record an event and deliver it to typed listeners, then catch-all ones."""
        self._log.append(event)
        logger.debug("Event %s", event)

        for handler in [*self._listeners.get(event.event_type, []), *self._listeners.get(None, [])]:
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data, emit it and return it."""
        event = GameEvent(event_type, data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Every event emitted so far, oldest first (a copy)."""
        return list(self._log)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        return [e for e in self._log if e.event_type == event_type]

    def clear_history(self) -> None:
        self._log.clear()
