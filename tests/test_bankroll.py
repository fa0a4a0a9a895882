"""Tests for the chip balance."""

from __future__ import annotations

import pytest

from house_blackjack.bankroll import Bankroll


def test_increase_and_decrease() -> None:
    b = Bankroll(100)
    b.increase(15)
    b.decrease(5.5)
    assert b.balance == 109.5
    assert b.max_bet == 109


def test_decrease_beyond_balance_is_rejected() -> None:
    b = Bankroll(10)
    with pytest.raises(ValueError):
        b.decrease(10.5)
    assert b.balance == 10


def test_negative_amounts_are_rejected() -> None:
    b = Bankroll(10)
    with pytest.raises(ValueError):
        b.increase(-1)
    with pytest.raises(ValueError):
        b.decrease(-1)


def test_broke_below_minimum_bet() -> None:
    b = Bankroll(1)
    assert not b.is_broke
    b.decrease(0.5)
    assert b.is_broke
    assert b.can_cover(0.5)
    assert not b.can_cover(1)
