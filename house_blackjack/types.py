from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class GameOption(Enum):
    DEAL = auto()
    QUIT = auto()


class Action(Enum):
    STAY = auto()
    HIT = auto()
    DOUBLE = auto()
    SPLIT = auto()


class Outcome(Enum):
    PLAYER_BLACKJACK = "player_blackjack"
    DEALER_BLACKJACK = "dealer_blackjack"
    BLACKJACK_PUSH = "blackjack_push"
    PLAYER_BUST = "player_bust"
    DEALER_BUST = "dealer_bust"
    PLAYER_WIN = "player_win"
    DEALER_WIN = "dealer_win"
    PUSH = "push"


@dataclass
class HandView:
    cards: List[str]
    total: int
    hard_total: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool
    is_pair: bool
    display: str


@dataclass
class Observation:
    player: HandView
    dealer: HandView
    dealer_upcard: str
    hand_index: int
    num_hands: int
    allowed_actions: List[Action]
    bet: int
    balance: float
    phase: str = "play"  # "insurance" while the side bet is on offer

    @property
    def can_split(self) -> bool:
        return Action.SPLIT in self.allowed_actions

    @property
    def can_double(self) -> bool:
        return Action.DOUBLE in self.allowed_actions

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["allowed_actions"] = [a.name for a in self.allowed_actions]
        return out


@dataclass
class HandResult:
    outcome: Outcome
    bet: int
    delta: float
    player_cards: List[str]
    dealer_cards: List[str]
    doubled: bool = False
    split_aces: bool = False

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["outcome"] = self.outcome.value
        return out


@dataclass
class InsuranceResult:
    stake: float
    dealer_blackjack: bool
    delta: float


@dataclass
class RoundResult:
    bet: int
    hands: List[HandResult]
    insurance: Optional[InsuranceResult]
    split: bool
    balance: float
    trace: Dict[str, Any] = field(default_factory=lambda: {"decisions": []})

    @property
    def net(self) -> float:
        total = sum(h.delta for h in self.hands)
        if self.insurance is not None:
            total += self.insurance.delta
        return total

    @property
    def outcomes(self) -> List[Outcome]:
        return [h.outcome for h in self.hands]

    def summary(self) -> Dict[str, Any]:
        net = self.net
        return {
            "bet": self.bet,
            "split": self.split,
            "hands": [h.to_dict() for h in self.hands],
            "insurance": asdict(self.insurance) if self.insurance else None,
            "net": net,
            "balance": self.balance,
            "result": "win" if net > 0 else ("loss" if net < 0 else "push"),
        }
