from __future__ import annotations

from typing import Any

from ..agent_utils import FlatBettor, normalize_rank, parse_dealer_upcard
from ..constants import DEFAULT_BET
from ..types import Action, Observation


class BasicStrategyAgent(FlatBettor):
    """Single-deck, S17 basic strategy for this table.

    Notes:
    - Uses common chart approximations; the dealer stands on soft 17.
    - Treats T,J,Q,K as 10 for pair logic.
    - Doubles only on the first two cards (the only time it is offered).
    - Never takes insurance.
    """

    def __init__(self, bet_size: int = DEFAULT_BET):
        self.bet_size = bet_size

    def insure(self, observation: Observation, info: Any) -> bool:
        return False

    def act(self, observation: Observation, info: Any) -> Action:
        actions = observation.allowed_actions

        # If split is available, resolve pair strategy first
        if Action.SPLIT in actions:
            pair_action = self._pair_decision(observation)
            if pair_action is not None and pair_action in actions:
                return pair_action

        if observation.player.is_soft:
            action = self._soft_total_decision(observation)
        else:
            action = self._hard_total_decision(observation)
        if action == Action.DOUBLE and Action.DOUBLE not in actions:
            return Action.HIT
        return action

    def _soft_total_decision(self, obs: Observation) -> Action:
        up = parse_dealer_upcard(obs)
        total = obs.player.total
        if total == 12:  # A,A without a split
            return Action.HIT
        if total in (13, 14):  # A,2 / A,3
            if up in (5, 6):
                return Action.DOUBLE
            return Action.HIT
        if total in (15, 16):  # A,4 / A,5
            if up in (4, 5, 6):
                return Action.DOUBLE
            return Action.HIT
        if total == 17:  # A,6
            if up in (3, 4, 5, 6):
                return Action.DOUBLE
            return Action.HIT
        if total == 18:  # A,7
            if up in (3, 4, 5, 6) and obs.can_double:
                return Action.DOUBLE
            if up in (9, 10):
                return Action.HIT
            return Action.STAY
        if total == 19:  # A,8
            if up == 6 and obs.can_double:
                return Action.DOUBLE
            return Action.STAY
        return Action.STAY

    def _hard_total_decision(self, obs: Observation) -> Action:
        up = parse_dealer_upcard(obs)
        total = obs.player.total

        if total <= 8:
            return Action.HIT
        if total == 9:
            if up in (3, 4, 5, 6):
                return Action.DOUBLE
            return Action.HIT
        if total == 10:
            if up in (2, 3, 4, 5, 6, 7, 8, 9):
                return Action.DOUBLE
            return Action.HIT
        if total == 11:
            return Action.DOUBLE
        if total == 12:
            if up in (4, 5, 6):
                return Action.STAY
            return Action.HIT
        if 13 <= total <= 16:
            if up in (2, 3, 4, 5, 6):
                return Action.STAY
            return Action.HIT
        return Action.STAY

    def _pair_decision(self, obs: Observation) -> Action | None:
        r0 = normalize_rank(obs.player.cards[0][:-1])
        r1 = normalize_rank(obs.player.cards[1][:-1])
        if r0 != r1:
            return None
        up = parse_dealer_upcard(obs)

        pair = r0
        if pair in ("A", "8"):
            return Action.SPLIT
        if pair in ("T", "5"):
            return None  # never split tens or fives
        if pair == "9":
            if up in (7, 10, 11):
                return Action.STAY
            return Action.SPLIT
        if pair == "7":
            if up in (2, 3, 4, 5, 6, 7):
                return Action.SPLIT
            return None
        if pair == "6":
            if up in (2, 3, 4, 5, 6):
                return Action.SPLIT
            return None
        if pair == "4":
            if up in (5, 6):
                return Action.SPLIT
            return None
        if pair in ("2", "3"):
            if up in (2, 3, 4, 5, 6, 7):
                return Action.SPLIT
            return None
        return None
