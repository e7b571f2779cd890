"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator

from fairjack.cards import Card

BLACKJACK = 21


def score(cards: Iterable[Card]) -> int:
    """
    Calculate the best value of a set of cards.

    Hidden cards are not counted. Aces start at 11 and drop to 1, one at a
    time, while the total is over 21.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.hidden:
            continue
        if card.is_ace:
            aces += 1
        total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total


@dataclass
class Hand:
    """Cards held by the dealer or the player."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    def reveal(self) -> None:
        """Turn every hidden card face up."""
        self.cards = [card.reveal() if card.hidden else card for card in self.cards]

    @property
    def value(self) -> int:
        """Value of the visible cards."""
        return score(self.cards)

    @property
    def has_hidden(self) -> bool:
        """Check if any card is face down."""
        return any(card.hidden for card in self.cards)

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    def to_dict(self) -> dict[str, Any]:
        """Serialize for session storage."""
        return {"cards": [card.to_dict() for card in self.cards]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Hand":
        """Deserialize from session storage."""
        return cls(cards=[Card.from_dict(c) for c in data["cards"]])

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        if self.is_blackjack:
            return f"{cards_str} (BLACKJACK)"
        if self.is_busted:
            return f"{cards_str} (BUST)"
        return f"{cards_str} ({self.value})"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


class Outcome(Enum):
    """Result of a finished round, from the player's point of view."""

    PLAYER_WIN = "playerWin"
    DEALER_WIN = "dealerWin"
    PUSH = "push"
    BUST = "bust"
    DEALER_BUST = "dealerBust"
    BLACKJACK = "blackjack"

    def __str__(self) -> str:
        return self.value


def determine_outcome(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare player and dealer hands.

    Order matters: a player bust loses even if the dealer busts too, and
    a natural only pushes against a dealer natural.
    """
    player_value = player_hand.value
    dealer_value = dealer_hand.value

    if player_value > BLACKJACK:
        return Outcome.BUST

    if dealer_value > BLACKJACK:
        return Outcome.DEALER_BUST

    if player_hand.is_blackjack:
        if dealer_hand.is_blackjack:
            return Outcome.PUSH
        return Outcome.BLACKJACK

    if player_value > dealer_value:
        return Outcome.PLAYER_WIN
    if dealer_value > player_value:
        return Outcome.DEALER_WIN
    return Outcome.PUSH
