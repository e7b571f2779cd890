"""Server seed commitments for provably fair rounds.

Before cards are dealt the server picks a secret seed and publishes only
its SHA-256 digest. Once the round is over the seed is revealed, and
anyone can check that it hashes to the published value and replay the
shuffle from it.
"""

import hashlib
import secrets
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

MIN_SERVER_SEED_BYTES = 32
MIN_CLIENT_SEED_BYTES = 16


def hash_seed(seed: str) -> str:
    """Return the SHA-256 hex digest of a seed."""
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()


@dataclass
class Commitment:
    """Seed pair for one round plus the public digest of the server seed."""

    server_seed: str
    hashed_server_seed: str
    client_seed: str
    nonce: int = 0
    completed: bool = False
    game_id: str = field(default_factory=lambda: str(uuid4()))

    def complete(self) -> None:
        """Mark the round as finished, which allows revealing the seed."""
        self.completed = True

    @property
    def revealed_server_seed(self) -> str | None:
        """Server seed if the round is complete, otherwise None."""
        return self.server_seed if self.completed else None

    def public_view(self) -> dict[str, Any]:
        """Client-safe projection of the commitment."""
        return {
            "game_id": self.game_id,
            "client_seed": self.client_seed,
            "hashed_server_seed": self.hashed_server_seed,
            "server_seed": self.revealed_server_seed,
            "nonce": self.nonce,
            "completed": self.completed,
        }

    def to_dict(self) -> dict[str, Any]:
        """Full serialization, including the secret seed. Server side only."""
        return {
            "game_id": self.game_id,
            "server_seed": self.server_seed,
            "hashed_server_seed": self.hashed_server_seed,
            "client_seed": self.client_seed,
            "nonce": self.nonce,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Commitment":
        """Restore a commitment from `to_dict` output."""
        return cls(
            server_seed=data["server_seed"],
            hashed_server_seed=data["hashed_server_seed"],
            client_seed=data["client_seed"],
            nonce=data["nonce"],
            completed=data["completed"],
            game_id=data["game_id"],
        )


def generate_commitment(
    client_seed: str | None = None,
    server_seed_bytes: int = MIN_SERVER_SEED_BYTES,
    client_seed_bytes: int = MIN_CLIENT_SEED_BYTES,
) -> Commitment:
    """
    Create a fresh commitment.

    Args:
        client_seed: Seed chosen by the player; generated if not given
        server_seed_bytes: Entropy of the server seed (at least 32 bytes)
        client_seed_bytes: Entropy of a generated client seed (at least 16 bytes)

    Returns:
        A new, uncompleted commitment with nonce 0
    """
    server_seed = secrets.token_hex(max(server_seed_bytes, MIN_SERVER_SEED_BYTES))
    if not client_seed:
        client_seed = secrets.token_hex(max(client_seed_bytes, MIN_CLIENT_SEED_BYTES))

    return Commitment(
        server_seed=server_seed,
        hashed_server_seed=hash_seed(server_seed),
        client_seed=client_seed,
    )
