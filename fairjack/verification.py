"""Verification of revealed server seeds and replay of dealt rounds."""

import hmac
import logging
from dataclasses import dataclass, field

from fairjack.cards import Card, replay_deck
from fairjack.commitment import Commitment, hash_seed
from fairjack.exceptions import CommitmentIntegrityError, SeedNotRevealed

logger = logging.getLogger(__name__)


def verify(revealed_server_seed: str, hashed_server_seed: str) -> bool:
    """Check that a revealed seed hashes to the published commitment."""
    expected = hash_seed(revealed_server_seed).encode("utf-8")
    return hmac.compare_digest(expected, hashed_server_seed.strip().lower().encode("utf-8"))


def verify_commitment(commitment: Commitment) -> bool:
    """
    Verify a commitment held by the server.

    Raises:
        SeedNotRevealed: The round is still open
        CommitmentIntegrityError: The stored hash does not match the stored seed
    """
    if not commitment.completed:
        raise SeedNotRevealed("Server seed is revealed once the round is over")

    if not verify(commitment.server_seed, commitment.hashed_server_seed):
        logger.critical(
            "Commitment %s failed integrity check: stored hash does not match seed",
            commitment.game_id,
        )
        raise CommitmentIntegrityError(
            f"Commitment {commitment.game_id} does not match its server seed"
        )

    return True


@dataclass(frozen=True)
class AuditReport:
    """Outcome of replaying a finished round from its revealed seeds."""

    game_id: str
    hash_valid: bool
    deck_matches: bool
    dealt_cards: list[Card] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True when both the seed and the dealt order check out."""
        return self.hash_valid and self.deck_matches


def audit_round(commitment: Commitment, remaining_deck: list[Card]) -> AuditReport:
    """
    Replay a completed round and compare it with the server's deck.

    Args:
        commitment: The round's commitment (must be completed)
        remaining_deck: Undealt cards left in the deck, bottom first

    Returns:
        An AuditReport listing the dealt cards in draw order
    """
    verify_commitment(commitment)

    dealing_order = replay_deck(commitment.server_seed, commitment.client_seed)
    dealt_count = len(dealing_order) - len(remaining_deck)
    undealt = [card.reveal() for card in reversed(remaining_deck)]

    return AuditReport(
        game_id=commitment.game_id,
        hash_valid=True,
        deck_matches=dealt_count >= 0 and dealing_order[dealt_count:] == undealt,
        dealt_cards=dealing_order[: max(dealt_count, 0)],
    )
