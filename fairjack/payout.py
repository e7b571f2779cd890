"""Payout calculation for a finished round."""

from decimal import Decimal

from fairjack.hand import Outcome

# Amount returned per unit staked; the stake was taken at bet time
PAYOUT_MULTIPLIERS: dict[Outcome, Decimal] = {
    Outcome.PLAYER_WIN: Decimal("2"),
    Outcome.DEALER_BUST: Decimal("2"),
    Outcome.PUSH: Decimal("1"),
    Outcome.BLACKJACK: Decimal("2.5"),
    Outcome.DEALER_WIN: Decimal("0"),
    Outcome.BUST: Decimal("0"),
}


def payout(bet: Decimal, outcome: Outcome) -> Decimal:
    """Amount credited back to the balance for `outcome`."""
    return bet * PAYOUT_MULTIPLIERS[outcome]


def net_result(bet: Decimal, outcome: Outcome) -> Decimal:
    """Win (positive) or loss (negative) for the round."""
    return payout(bet, outcome) - bet
