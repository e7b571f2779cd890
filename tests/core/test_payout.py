"""Tests for payout calculation."""

import pytest
from decimal import Decimal

from fairjack.hand import Outcome
from fairjack.payout import net_result, payout


@pytest.mark.parametrize(
    "outcome, expected",
    [
        (Outcome.PLAYER_WIN, Decimal("200")),
        (Outcome.DEALER_BUST, Decimal("200")),
        (Outcome.PUSH, Decimal("100")),
        (Outcome.BLACKJACK, Decimal("250")),
        (Outcome.DEALER_WIN, Decimal("0")),
        (Outcome.BUST, Decimal("0")),
    ],
)
def test_payout(outcome, expected):
    assert payout(Decimal("100"), outcome) == expected


def test_blackjack_on_odd_bet_keeps_fraction():
    """3:2 on an odd stake pays half units."""
    assert payout(Decimal("15"), Outcome.BLACKJACK) == Decimal("37.5")


def test_net_result():
    assert net_result(Decimal("100"), Outcome.PLAYER_WIN) == Decimal("100")
    assert net_result(Decimal("100"), Outcome.PUSH) == Decimal("0")
    assert net_result(Decimal("100"), Outcome.BUST) == Decimal("-100")
    assert net_result(Decimal("100"), Outcome.BLACKJACK) == Decimal("150")
