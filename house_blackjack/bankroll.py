from __future__ import annotations

import math

from .constants import MINIMUM_BET, STARTING_CHIPS


class Bankroll:
    """The player's chip balance.

    Only the round engine mutates it, once per resolved bet. Balances can carry
    half chips after a 3:2 blackjack or a lost insurance bet.
    """

    def __init__(self, balance: float = STARTING_CHIPS):
        if balance < 0:
            raise ValueError("Bankroll cannot start negative")
        self._balance = float(balance)

    @property
    def balance(self) -> float:
        return self._balance

    @property
    def max_bet(self) -> int:
        return int(math.floor(self._balance))

    @property
    def is_broke(self) -> bool:
        return self._balance < MINIMUM_BET

    def can_cover(self, amount: float) -> bool:
        return 0 <= amount <= self._balance

    def increase(self, amount: float) -> None:
        if amount < 0:
            raise ValueError(f"Cannot increase bankroll by a negative amount ({amount})")
        self._balance += amount

    def decrease(self, amount: float) -> None:
        if amount < 0:
            raise ValueError(f"Cannot decrease bankroll by a negative amount ({amount})")
        if amount > self._balance:
            raise ValueError(f"Bet of {amount} exceeds balance of {self._balance}")
        self._balance -= amount

    def __repr__(self) -> str:
        return f"Bankroll(balance={self._balance:g})"
