"""Pydantic schemas for API requests and responses."""

from decimal import Decimal
from pydantic import BaseModel, Field

from config import config


# Game schemas
class InitRequest(BaseModel):
    """Request to start a new session."""

    initial_balance: Decimal = Field(
        default_factory=lambda: config.game.initial_balance,
        gt=0,
        description="Starting balance",
    )


class BetRequest(BaseModel):
    """Request to place a bet. Non-positive amounts come back as a message."""

    amount: Decimal = Field(..., description="Bet amount")
    client_seed: str | None = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="Optional player seed mixed into the shuffle",
    )


class CardResponse(BaseModel):
    """Card representation. Hidden cards carry no rank or suit."""

    hidden: bool
    rank: str | None = None
    suit: str | None = None
    value: int | None = None


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int
    is_blackjack: bool
    is_busted: bool


class ProvablyFairResponse(BaseModel):
    """Public commitment data; server_seed is null until the round is over."""

    game_id: str
    client_seed: str
    hashed_server_seed: str
    server_seed: str | None
    nonce: int
    completed: bool


class GameStateResponse(BaseModel):
    """Client-safe game state."""

    session_id: str
    state: str
    dealer_hand: HandResponse
    player_hand: HandResponse
    dealer_score: int
    player_score: int
    balance: float
    bet: float
    result: str | None
    message: str = ""
    provably_fair: ProvablyFairResponse
    can_hit: bool
    can_stand: bool
    can_bet: bool


# Fairness schemas
class VerifyRequest(BaseModel):
    """Request to verify a revealed server seed."""

    server_seed: str = Field(..., min_length=1)
    hashed_server_seed: str = Field(..., min_length=1)
    client_seed: str | None = Field(
        default=None,
        description="When given, the dealing order is replayed as well",
    )


class VerifyResponse(BaseModel):
    """Verification result."""

    valid: bool
    dealing_order: list[str] | None = None


class AuditResponse(BaseModel):
    """Replay of the caller's finished round."""

    game_id: str
    valid: bool
    hash_valid: bool
    deck_matches: bool
    server_seed: str
    hashed_server_seed: str
    client_seed: str
    nonce: int
    dealt_cards: list[str]
