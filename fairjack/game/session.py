"""Per-player session data and its JSON-safe serialization."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import uuid4

from fairjack.cards import Card, Deck
from fairjack.commitment import Commitment, generate_commitment
from fairjack.game.state import GameState
from fairjack.hand import Hand, Outcome


@dataclass
class GameSession:
    """
    Everything the server knows about one player's table.

    Balance and id survive rounds; deck, hands, bet, result and
    commitment are replaced every round.
    """

    id: str
    commitment: Commitment
    balance: Decimal = Decimal("1000")
    current_bet: Decimal = Decimal("0")
    state: GameState = GameState.BETTING
    deck: Deck = field(default_factory=Deck)
    dealer_hand: Hand = field(default_factory=Hand)
    player_hand: Hand = field(default_factory=Hand)
    result: Outcome | None = None

    @classmethod
    def new(
        cls,
        session_id: str | None = None,
        balance: Decimal = Decimal("1000"),
        commitment: Commitment | None = None,
    ) -> "GameSession":
        """Create a session in the betting state with a fresh commitment."""
        return cls(
            id=session_id or str(uuid4()),
            commitment=commitment or generate_commitment(),
            balance=Decimal(str(balance)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for session storage."""
        return {
            "id": self.id,
            "state": self.state.value,
            "balance": str(self.balance),
            "current_bet": str(self.current_bet),
            "result": self.result.value if self.result else None,
            "deck": [card.to_dict() for card in self.deck.cards],
            "dealer_hand": self.dealer_hand.to_dict(),
            "player_hand": self.player_hand.to_dict(),
            "commitment": self.commitment.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameSession":
        """Restore a session from `to_dict` output."""
        return cls(
            id=data["id"],
            commitment=Commitment.from_dict(data["commitment"]),
            balance=Decimal(data["balance"]),
            current_bet=Decimal(data["current_bet"]),
            state=GameState(data["state"]),
            deck=Deck(Card.from_dict(c) for c in data["deck"]),
            dealer_hand=Hand.from_dict(data["dealer_hand"]),
            player_hand=Hand.from_dict(data["player_hand"]),
            result=Outcome(data["result"]) if data["result"] else None,
        )
