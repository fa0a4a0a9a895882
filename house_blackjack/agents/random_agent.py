from __future__ import annotations

import random
from typing import Any

from ..agent_utils import FlatBettor
from ..constants import DEFAULT_BET
from ..types import Action, Observation


class RandomAgent(FlatBettor):
    def __init__(self, seed: int = 0, bet_size: int = DEFAULT_BET):
        self.rng = random.Random(seed)
        self.bet_size = bet_size

    def insure(self, observation: Observation, info: Any) -> bool:
        return self.rng.random() < 0.5

    def act(self, observation: Observation, info: Any) -> Action:
        return self.rng.choice(observation.allowed_actions)
