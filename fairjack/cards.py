"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Iterator

from fairjack.shuffle import DECK_SIZE, shuffle


class Suit(Enum):
    """Card suits, in canonical deck order."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks, in canonical deck order."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card. `hidden` marks the dealer's hole card."""

    rank: Rank
    suit: Suit
    hidden: bool = False

    def __str__(self) -> str:
        if self.hidden:
            return "??"
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        flag = ", hidden" if self.hidden else ""
        return f"Card({self.rank.name}, {self.suit.name}{flag})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    def conceal(self) -> "Card":
        """Return a face-down copy of this card."""
        return replace(self, hidden=True)

    def reveal(self) -> "Card":
        """Return a face-up copy of this card."""
        return replace(self, hidden=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for session storage."""
        return {"rank": self.rank.value, "suit": self.suit.value, "hidden": self.hidden}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        """Deserialize from session storage."""
        return cls(Rank(data["rank"]), Suit(data["suit"]), data.get("hidden", False))

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {rank.value: rank for rank in Rank}
        rank_map["T"] = Rank.TEN

        suit_map = {
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def canonical_deck() -> list[Card]:
    """The 52 cards in canonical order: by suit, then Ace through King."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Deck:
    """An ordered stack of cards; cards are drawn from the end."""

    def __init__(self, cards: Iterable[Card] | None = None) -> None:
        """Initialize a deck holding `cards` (empty by default)."""
        self._cards: list[Card] = list(cards) if cards is not None else []

    @classmethod
    def from_seeds(cls, server_seed: str, client_seed: str) -> "Deck":
        """Build the round's deck by permuting the canonical deck with the seeds."""
        ordered = canonical_deck()
        return cls(ordered[index] for index in shuffle(server_seed, client_seed, DECK_SIZE))

    def draw(self) -> Card:
        """Draw a card from the top of the deck."""
        if not self._cards:
            raise IndexError("Cannot draw from empty deck")
        return self._cards.pop()

    @property
    def cards(self) -> list[Card]:
        """Copy of the remaining cards, bottom first."""
        return list(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)


def build_deck(server_seed: str, client_seed: str) -> Deck:
    """Deck for a round with the given seed pair."""
    return Deck.from_seeds(server_seed, client_seed)


def replay_deck(server_seed: str, client_seed: str) -> list[Card]:
    """Cards of the round in the order they are dealt."""
    return list(reversed(build_deck(server_seed, client_seed).cards))
