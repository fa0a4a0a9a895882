from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .cards import Card
from .types import HandView


class Hand:
    """Cards held by one side of the table.

    Totals are kept incrementally: `hard_value` counts every ace as 1 and
    `soft_value` lets a single ace count as 11 when that stays at or under 21.
    A second ace counted as 11 would always bust, so one flex is enough.
    """

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: List[Card] = []
        self._hard_value = 0
        self._has_ace = False
        for c in cards or ():
            self.add_card(c)

    def add_card(self, card: Card) -> None:
        self._cards.append(card)
        if card.is_ace:
            self._has_ace = True
        self._hard_value += card.value

    def clone(self) -> "Hand":
        copy = Hand()
        copy._cards = list(self._cards)
        copy._hard_value = self._hard_value
        copy._has_ace = self._has_ace
        return copy

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def first_card(self) -> Card:
        return self._cards[0]

    @property
    def second_card(self) -> Card:
        return self._cards[1]

    @property
    def hard_value(self) -> int:
        return self._hard_value

    @property
    def has_ace(self) -> bool:
        return self._has_ace

    @property
    def soft_value(self) -> int:
        soft = self._hard_value + 10
        if self._has_ace and soft <= 21:
            return soft
        return self._hard_value

    @property
    def is_soft(self) -> bool:
        return self.soft_value != self._hard_value

    @property
    def is_blackjack(self) -> bool:
        return len(self._cards) == 2 and self.soft_value == 21

    @property
    def is_busted(self) -> bool:
        # bust is judged on the ace-low total
        return self._hard_value > 21

    @property
    def is_starting_hand(self) -> bool:
        return len(self._cards) == 2

    @property
    def is_pair(self) -> bool:
        # ten-valued cards pair with each other (e.g. J and Q)
        return len(self._cards) == 2 and self._cards[0].value == self._cards[1].value

    def labels(self) -> List[str]:
        return [c.label() for c in self._cards]

    def show_hand(self) -> str:
        return "[ " + "".join(f"{c.label()} " for c in self._cards) + "]"

    def show_up_card(self) -> str:
        if len(self._cards) != 2:
            raise ValueError("Up-card view is only defined for a two-card hand")
        return f"[ {self._cards[0].label()} XX ]"

    def view(self, conceal_hole: bool = False) -> HandView:
        if conceal_hole:
            # only the up-card is public while the player decides
            up = Hand([self._cards[0]])
            return HandView(
                cards=[self._cards[0].label(), "XX"],
                total=up.soft_value,
                hard_total=up.hard_value,
                is_soft=up.is_soft,
                is_blackjack=False,
                is_busted=False,
                is_pair=False,
                display=self.show_up_card(),
            )
        return HandView(
            cards=self.labels(),
            total=self.soft_value,
            hard_total=self.hard_value,
            is_soft=self.is_soft,
            is_blackjack=self.is_blackjack,
            is_busted=self.is_busted,
            is_pair=self.is_pair,
            display=self.show_hand(),
        )

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Hand({self.show_hand()}, hard={self._hard_value}, soft={self.soft_value})"

    def __str__(self) -> str:
        return self.show_hand()
