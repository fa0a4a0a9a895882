"""Fixed house rules for the table.

Blackjack pays 3:2, insurance pays 2:1, the dealer draws until reaching a soft
17 to 21 (so stands on soft 17), doubling and splitting are only offered on the
first two cards, split hands never count as blackjack and split aces take one
card each.
"""

from __future__ import annotations

import math
from typing import List

from .constants import MINIMUM_BET
from .hand import Hand
from .types import Action, Outcome

BLACKJACK_PAYOUT = 1.5
INSURANCE_PAYOUT = 2
DEALER_STAND_MIN = 17

__all__ = [
    "BLACKJACK_PAYOUT",
    "INSURANCE_PAYOUT",
    "DEALER_STAND_MIN",
    "MINIMUM_BET",
    "insurance_offered",
    "split_offered",
    "dealer_should_draw",
    "double_down_bet",
    "compare_hands",
    "starting_actions",
    "drawing_actions",
]


def insurance_offered(dealer: Hand, bet: int, balance: float) -> bool:
    # the side bet (half the main bet) must be covered on top of the main bet
    return dealer.first_card.is_ace and bet / 2 <= balance - bet


def split_offered(dealer: Hand, player: Hand, bet: int, balance: float) -> bool:
    return player.is_pair and not dealer.is_blackjack and 2 * bet <= balance


def dealer_should_draw(dealer: Hand) -> bool:
    if dealer.is_busted:
        return False
    return not (DEALER_STAND_MIN <= dealer.soft_value <= 21)


def double_down_bet(bet: int, available: float) -> int:
    return int(math.floor(min(2 * bet, available)))


def compare_hands(dealer: Hand, player: Hand) -> Outcome:
    """Settle a standing player hand against a played-out dealer hand.

    Soft values are enough for the comparison since soft >= hard and they are
    equal whenever no ace is flexed.
    """
    if player.is_busted:
        raise ValueError("compare_hands called with a busted player hand")
    if dealer.is_busted:
        return Outcome.DEALER_BUST
    if player.soft_value > dealer.soft_value:
        return Outcome.PLAYER_WIN
    if player.soft_value < dealer.soft_value:
        return Outcome.DEALER_WIN
    return Outcome.PUSH


def starting_actions(split_allowed: bool = False) -> List[Action]:
    allowed = [Action.STAY, Action.HIT, Action.DOUBLE]
    if split_allowed:
        allowed.append(Action.SPLIT)
    return allowed


def drawing_actions() -> List[Action]:
    return [Action.STAY, Action.HIT]
