from .bankroll import Bankroll
from .cards import Card, Deck
from .engine import RoundEngine, Session
from .game import play_session
from .hand import Hand
from .types import Action, GameOption, HandView, Observation, Outcome, RoundResult

__all__ = [
    "Bankroll",
    "Card",
    "Deck",
    "Hand",
    "RoundEngine",
    "Session",
    "play_session",
    "Action",
    "GameOption",
    "HandView",
    "Observation",
    "Outcome",
    "RoundResult",
]
