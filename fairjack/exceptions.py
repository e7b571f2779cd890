"""Exceptions raised by the game engine and the fairness layer."""


class GameError(Exception):
    """Recoverable user-facing error; the message is shown to the player."""


class InvalidBet(GameError):
    """Bet amount is not acceptable."""


class InsufficientBalance(InvalidBet):
    """Bet exceeds the player's balance."""


class InvalidState(GameError):
    """Action is not allowed in the current game state."""


class FairnessError(Exception):
    """Base class for commitment and verification errors."""


class SeedNotRevealed(FairnessError):
    """The server seed is still secret because the round is not finished."""


class CommitmentIntegrityError(FairnessError):
    """Stored hash does not match the stored server seed.

    This is a bookkeeping bug on the server, never a player error.
    """
