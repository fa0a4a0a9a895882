from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional


RANKS = ["2", "3", "4", "5", "6", "7", "8", "9", "T", "J", "Q", "K", "A"]
SUITS = ["S", "H", "D", "C"]  # suits are not functionally relevant but keep for display


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    @property
    def value(self) -> int:
        return card_value(self.rank)

    @property
    def is_ace(self) -> bool:
        return self.rank == "A"

    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    def __str__(self) -> str:
        return self.label()


def card_value(rank: str) -> int:
    # aces count low here; Hand decides when one of them plays as 11
    if rank == "A":
        return 1
    if rank in ("T", "J", "Q", "K"):
        return 10
    return int(rank)


class Deck:
    """A single 52-card deck dealt from a cursor.

    The deck is reshuffled in full before every round, so the cursor never
    needs to wrap around.
    """

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)
        self._cards: List[Card] = [Card(rank, suit) for rank in RANKS for suit in SUITS]
        self._top = 0

    def shuffle(self) -> None:
        self._top = 0
        self.rng.shuffle(self._cards)

    def deal_next_card(self) -> Card:
        if self._top >= len(self._cards):
            raise RuntimeError("Deck exhausted; shuffle before dealing again")
        card = self._cards[self._top]
        self._top += 1
        return card

    def remaining(self) -> int:
        return len(self._cards) - self._top

    def __len__(self) -> int:
        return len(self._cards)
