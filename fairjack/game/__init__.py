"""Game engine and state management."""

from fairjack.game.events import GameEvent, EventType
from fairjack.game.state import GameState
from fairjack.game.session import GameSession
from fairjack.game.engine import BlackjackGame

__all__ = [
    "GameEvent",
    "EventType",
    "GameState",
    "GameSession",
    "BlackjackGame",
]
