"""Provably fair blackjack engine - transport and storage agnostic."""

from fairjack.cards import Card, Deck, Rank, Suit
from fairjack.commitment import Commitment, generate_commitment, hash_seed
from fairjack.hand import Hand, Outcome, determine_outcome, score
from fairjack.payout import payout
from fairjack.shuffle import shuffle
from fairjack.verification import verify

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Commitment",
    "generate_commitment",
    "hash_seed",
    "Hand",
    "Outcome",
    "determine_outcome",
    "score",
    "payout",
    "shuffle",
    "verify",
]
