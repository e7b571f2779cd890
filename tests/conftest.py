"""Pytest fixtures for fairjack tests."""

import pytest
from decimal import Decimal
from unittest.mock import patch

from fairjack.cards import Card, Deck
from fairjack.commitment import Commitment, generate_commitment, hash_seed
from fairjack.game import BlackjackGame, GameSession
from fairjack.hand import Hand

SERVER_SEED = "a3f1c0de" * 8
CLIENT_SEED = "5eed" * 8


def make_cards(*codes: str) -> list[Card]:
    """Cards from short codes like 'AS', '10H', 'KD'."""
    return [Card.from_string(code) for code in codes]


def stacked_deck(*codes: str) -> Deck:
    """A deck that deals `codes` in the given order."""
    return Deck(reversed(make_cards(*codes)))


def make_hand(*codes: str) -> Hand:
    """A hand holding `codes`."""
    return Hand(cards=make_cards(*codes))


@pytest.fixture
def commitment():
    """A commitment with fixed seeds."""
    return Commitment(
        server_seed=SERVER_SEED,
        hashed_server_seed=hash_seed(SERVER_SEED),
        client_seed=CLIENT_SEED,
    )


@pytest.fixture
def session():
    """A fresh session with a 1000 balance."""
    return GameSession.new(session_id="test-session", balance=Decimal("1000"))


@pytest.fixture
def game(session):
    """A game engine bound to the fresh session."""
    return BlackjackGame(session, commitment_factory=lambda seed: generate_commitment(seed))


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def deck_of():
    """Factory for stacked decks: deck_of('9S', 'AH', ...) deals in that order."""
    return stacked_deck


@pytest.fixture
def hand_of():
    """Factory for hands from card codes."""
    return make_hand


@pytest.fixture
def rig_deck(deck_of):
    """Patch the engine so the next bet deals the given cards in order."""
    patchers = []

    def _rig(*codes: str):
        patcher = patch("fairjack.game.engine.build_deck", return_value=deck_of(*codes))
        patcher.start()
        patchers.append(patcher)

    yield _rig

    for patcher in reversed(patchers):
        patcher.stop()
