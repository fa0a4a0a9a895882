from __future__ import annotations

import time
from typing import Any, Callable, Dict

from ..constants import BET_PROMPT_PAUSE, MINIMUM_BET, PROMPT_PAUSE
from ..types import Action, GameOption, Observation

_ACTION_KEYS: Dict[str, Action] = {
    "s": Action.STAY,
    "h": Action.HIT,
    "d": Action.DOUBLE,
    "p": Action.SPLIT,
}

_ACTION_LABELS: Dict[Action, str] = {
    Action.STAY: "s-stay",
    Action.HIT: "h-hit",
    Action.DOUBLE: "d-double",
    Action.SPLIT: "p-split",
}


class ConsoleAgent:
    """Human player at the terminal.

    Every prompt repeats until the answer is valid for the current phase, so
    the table only ever receives legal decisions.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        pause: Callable[[float], None] = time.sleep,
        pacing: bool = True,
    ):
        self.input_fn = input_fn
        self.pause = pause
        self.pacing = pacing

    def _wait(self, seconds: float) -> None:
        if self.pacing:
            self.pause(seconds)

    def _read(self, prompt: str) -> str:
        return self.input_fn(prompt).strip().lower()

    def choose_game_option(self, balance: float) -> GameOption:
        self._wait(PROMPT_PAUSE)
        while True:
            answer = self._read("[d-deal  q-quit]: ")
            if answer == "d":
                return GameOption.DEAL
            if answer == "q":
                return GameOption.QUIT

    def choose_bet(self, balance: float) -> int:
        self._wait(BET_PROMPT_PAUSE)
        max_bet = int(balance)
        while True:
            answer = self._read(f"[Enter bet amount ({MINIMUM_BET}-{max_bet})]: ")
            try:
                bet = int(answer)
            except ValueError:
                continue
            if MINIMUM_BET <= bet <= max_bet:
                return bet

    def insure(self, observation: Observation, info: Any) -> bool:
        while True:
            answer = self._read(f"[Insurance for {observation.bet / 2:g}? y-yes  n-no]: ")
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False

    def act(self, observation: Observation, info: Any) -> Action:
        self._wait(PROMPT_PAUSE)
        allowed = observation.allowed_actions
        prompt = "[" + "  ".join(_ACTION_LABELS[a] for a in allowed) + "]: "
        while True:
            action = _ACTION_KEYS.get(self._read(prompt))
            if action is not None and action in allowed:
                return action
