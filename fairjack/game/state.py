"""Game state enumeration."""

from enum import Enum


class GameState(Enum):
    """
    Game state machine states.

    Flow: BETTING → DEALING → PLAYING → DEALER_TURN → GAME_OVER → BETTING
    """

    # Waiting for the player's stake
    BETTING = "betting"

    # Initial four cards being dealt; never persisted
    DEALING = "dealing"

    # Player decides to hit or stand
    PLAYING = "playing"

    # Dealer draws to 17
    DEALER_TURN = "dealerTurn"

    # Round resolved, server seed revealed
    GAME_OVER = "gameOver"

    def __str__(self) -> str:
        return self.value


# Valid state transitions
VALID_TRANSITIONS: dict[GameState, list[GameState]] = {
    GameState.BETTING: [GameState.BETTING, GameState.DEALING],
    GameState.DEALING: [GameState.PLAYING, GameState.GAME_OVER],  # GAME_OVER on a natural
    GameState.PLAYING: [GameState.PLAYING, GameState.DEALER_TURN, GameState.GAME_OVER],
    GameState.DEALER_TURN: [GameState.GAME_OVER],
    GameState.GAME_OVER: [GameState.BETTING],
}


def is_valid_transition(from_state: GameState, to_state: GameState) -> bool:
    """
    Check if a state transition is part of the designed flow.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
