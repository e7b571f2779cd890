"""Deterministic Fisher-Yates shuffle driven by the round's seeds."""

from fairjack.commitment import hash_seed

DECK_SIZE = 52

# Leading bits of each step digest used to pick the swap index
STEP_BITS = 52


def step_digest(server_seed: str, client_seed: str, step: int) -> str:
    """Hash for one shuffle step, domain-separated by the step index."""
    return hash_seed(f"{server_seed}:{client_seed}:{step}")


def step_index(digest: str, bound: int) -> int:
    """
    Map a hex digest onto an integer in [0, bound).

    The leading 52 bits are scaled by `bound` and shifted down, so every
    result is in range and the bias is below 2**-40 for a 52-card deck.
    """
    value = int(digest[: STEP_BITS // 4], 16)
    return (value * bound) >> STEP_BITS


def shuffle(server_seed: str, client_seed: str, size: int = DECK_SIZE) -> list[int]:
    """
    Return a permutation of range(size) derived from the seed pair.

    Identical seeds always produce the identical permutation.
    """
    order = list(range(size))
    for i in range(size - 1, 0, -1):
        j = step_index(step_digest(server_seed, client_seed, i), i + 1)
        order[i], order[j] = order[j], order[i]
    return order
