"""Events emitted while a round is played out."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable


class EventType(str, Enum):
    """Things that happen during a round, in the order they usually occur."""

    BET_PLACED = "betPlaced"
    COMMITMENT_CREATED = "commitmentCreated"
    CARD_DEALT = "cardDealt"
    ROUND_STARTED = "roundStarted"

    PLAYER_BLACKJACK = "playerBlackjack"
    PLAYER_HIT = "playerHit"
    PLAYER_BUSTS = "playerBusts"
    PLAYER_STAND = "playerStand"

    DEALER_REVEALS = "dealerReveals"
    DEALER_HITS = "dealerHits"
    DEALER_STANDS = "dealerStands"
    DEALER_BUSTS = "dealerBusts"

    ROUND_ENDED = "roundEnded"
    SEED_REVEALED = "seedRevealed"
    NEW_ROUND = "newRound"

    STATE_RECOVERED = "stateRecovered"


@dataclass(frozen=True)
class GameEvent:
    """
    Something that happened inside one engine action.

    Events are informational. The session left behind by the action is
    the only authoritative result.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        details = " ".join(f"{k}={v}" for k, v in self.data.items())
        return f"{self.event_type.value} {details}".rstrip()


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """Fans engine events out to handlers and keeps a log of them."""

    def __init__(self) -> None:
        # None collects handlers for every event type
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._log: list[GameEvent] = []

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """Call `handler` for `event_type`, or for every event when None."""
        self._handlers.setdefault(event_type, []).append(handler)

    def emit(self, event: GameEvent) -> None:
        self._log.append(event)
        handlers = self._handlers.get(event.event_type, []) + self._handlers.get(None, [])
        for handler in handlers:
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data and emit it."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        return list(self._log)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        """Logged events of one type, oldest first."""
        return [e for e in self._log if e.event_type == event_type]

    def clear_history(self) -> None:
        self._log.clear()
