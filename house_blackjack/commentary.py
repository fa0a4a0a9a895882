"""Console narration of table events."""

from __future__ import annotations

import time
from typing import Callable, Dict

from .constants import DEALING_PAUSE, RESULT_PAUSE

_RESULT_LINES = {
    "blackjack_push": "Dealer and player both have blackjack! Push.",
    "push": "You and dealer both have {dealer_total}. Push.",
    "dealer_blackjack": "Dealer has blackjack...Dealer wins.",
    "dealer_bust": "Dealer busts! You win.",
    "dealer_win": "Dealer wins with {dealer_total}...",
    "player_blackjack": "You have blackjack!!! You win.",
    "player_bust": "You busted...Dealer wins.",
    "player_win": "You win with {player_total}!",
}

_ACTION_LINES = {
    "STAY": "Staying pat. Dealing dealer's hand...",
    "HIT": "Taking a card...",
    "DOUBLE": "Doubling down.",
}

_HAND_NAMES = ["first", "second"]


class Commentary:
    """Turns engine events into the table talk printed for a human player.

    Usable directly as a `log_fn`. Pauses are cosmetic and can be switched off
    with `pacing=False`.
    """

    def __init__(
        self,
        out: Callable[[str], None] = print,
        pause: Callable[[float], None] = time.sleep,
        pacing: bool = True,
    ):
        self.out = out
        self.pause = pause
        self.pacing = pacing

    def __call__(self, event: Dict) -> None:
        handler = getattr(self, f"_on_{event.get('event')}", None)
        if handler is not None:
            handler(event)

    def _wait(self, seconds: float) -> None:
        if self.pacing:
            self.pause(seconds)

    def _hands(self, event: Dict) -> None:
        self.out(f"Dealer: {event['dealer']}")
        self.out(f"Player: {event['player']}")
        # empty line so it's easier to see the current hands
        self.out("")

    def _on_welcome(self, event: Dict) -> None:
        self.out("Let's play some blackjack...Good luck!")
        self.out(f"You have {event['balance']:g} chips.")
        self.out("")

    def _on_goodbye(self, event: Dict) -> None:
        self.out("")
        self.out("Thank you for playing. Goodbye...")
        self._wait(DEALING_PAUSE)

    def _on_out_of_chips(self, event: Dict) -> None:
        self.out("You're out of chips. Better luck next time...")

    def _on_deal(self, event: Dict) -> None:
        self.out("Dealing...")
        self._wait(DEALING_PAUSE)
        self._hands(event)

    def _on_turn(self, event: Dict) -> None:
        self._hands(event)

    def _on_action(self, event: Dict) -> None:
        self.out(_ACTION_LINES[event["action"]])
        self._wait(DEALING_PAUSE)

    def _on_insurance(self, event: Dict) -> None:
        if not event.get("taken"):
            return
        self._wait(RESULT_PAUSE)
        if event["dealer_blackjack"]:
            self.out(f"Dealer has blackjack. Insurance pays {event['delta']:g}.")
        else:
            self.out(f"Dealer does not have blackjack. Insurance of {event['stake']:g} lost.")
        self.out("")

    def _on_split(self, event: Dict) -> None:
        self.out("Splitting hand...")
        self._wait(DEALING_PAUSE)

    def _on_split_hand(self, event: Dict) -> None:
        idx = event["hand_index"]
        name = _HAND_NAMES[idx] if idx < len(_HAND_NAMES) else f"#{idx + 1}"
        self.out(f"Dealing {name} hand...")
        self._wait(DEALING_PAUSE)

    def _on_settle(self, event: Dict) -> None:
        self._hands(event)
        self._wait(RESULT_PAUSE)
        self.out(_RESULT_LINES[event["outcome"]].format(**event))
        self.out("")
        self.out("")

    def _on_round_end(self, event: Dict) -> None:
        self.out(f"Chips: {event['balance']:g}")
        self.out("")
