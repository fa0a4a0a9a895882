from __future__ import annotations

from typing import Any, List

from ..constants import MINIMUM_BET
from ..types import Action, GameOption, Observation


class GuardedAgent:
    """Wraps an agent so the table only ever sees legal decisions.

    - If the inner agent returns an illegal action, increments `illegal_count`,
      logs the violation in `illegal_log`, and falls back to the first legal
      action (STAY whenever it is offered).
    - Exposes `illegal_count` and `illegal_rate(decisions)` for reporting.
    - Provides `reset_illegals()` to clear counters.
    """

    def __init__(self, agent: Any):
        self.agent = agent
        self.illegal_count = 0
        self.illegal_log: List[dict] = []

    def reset_illegals(self) -> None:
        self.illegal_count = 0
        self.illegal_log.clear()

    def illegal_rate(self, decisions: int) -> float:
        return (self.illegal_count / decisions) if decisions else 0.0

    def choose_game_option(self, balance: float) -> GameOption:
        return self.agent.choose_game_option(balance)

    def choose_bet(self, balance: float) -> int:
        bet = self.agent.choose_bet(balance)
        if not isinstance(bet, int) or bet < MINIMUM_BET or bet > balance:
            self.illegal_count += 1
            self.illegal_log.append({"attempted_bet": bet, "balance": balance})
            return MINIMUM_BET
        return bet

    def insure(self, observation: Observation, info: Any) -> bool:
        return bool(self.agent.insure(observation, info))

    def act(self, observation: Observation, info: Any) -> Action:
        # Ensure info is a dict we can enrich
        if not isinstance(info, dict):
            info = {}
        a = self.agent.act(observation, info)
        if a not in observation.allowed_actions:
            self.illegal_count += 1
            self.illegal_log.append({
                "attempted": getattr(a, "name", str(a)),
                "allowed": [x.name for x in observation.allowed_actions],
            })
            info["illegal_attempt"] = getattr(a, "name", str(a))
            fb = observation.allowed_actions[0]
            info["fallback_action"] = fb.name
            return fb
        return a
