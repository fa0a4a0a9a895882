"""Shared fixtures: decks with a scripted top and agents with scripted answers."""

from __future__ import annotations

from typing import Dict, Iterable, List

import pytest

from house_blackjack.bankroll import Bankroll
from house_blackjack.cards import Card, Deck
from house_blackjack.engine import RoundEngine, Session
from house_blackjack.hand import Hand
from house_blackjack.types import Action, GameOption, Observation


def card(label: str) -> Card:
    return Card(label[:-1], label[-1])


def hand(*labels: str) -> Hand:
    return Hand(card(label) for label in labels)


class StackedDeck(Deck):
    """Deck whose every shuffle puts `labels` on top, the rest in natural order.

    Deal order for a round is player, dealer, player, dealer, then draws.
    """

    def __init__(self, labels: Iterable[str]):
        super().__init__(seed=0)
        top = [card(label) for label in labels]
        assert len(set(top)) == len(top), "stacked cards must be distinct"
        rest = [c for c in self._cards if c not in top]
        self._order = top + rest

    def shuffle(self) -> None:
        self._top = 0
        self._cards = list(self._order)


class ScriptedAgent:
    def __init__(
        self,
        actions: Iterable[Action] = (),
        insure: bool = False,
        bets: Iterable[int] = (),
        options: Iterable[GameOption] = (),
    ):
        self.actions: List[Action] = list(actions)
        self.insure_answer = insure
        self.bets: List[int] = list(bets)
        self.options: List[GameOption] = list(options)
        self.observations: List[Observation] = []
        self.insurance_observations: List[Observation] = []

    def choose_game_option(self, balance: float) -> GameOption:
        return self.options.pop(0) if self.options else GameOption.DEAL

    def choose_bet(self, balance: float) -> int:
        return self.bets.pop(0)

    def insure(self, observation: Observation, info) -> bool:
        self.insurance_observations.append(observation)
        return self.insure_answer

    def act(self, observation: Observation, info) -> Action:
        self.observations.append(observation)
        if not self.actions:
            raise AssertionError(f"unexpected decision request: {observation.player.cards}")
        return self.actions.pop(0)


class EventLog:
    def __init__(self) -> None:
        self.events: List[Dict] = []

    def __call__(self, event: Dict) -> None:
        self.events.append(event)

    def kinds(self) -> List[str]:
        return [e["event"] for e in self.events]

    def of(self, kind: str) -> List[Dict]:
        return [e for e in self.events if e["event"] == kind]


def stacked_session(labels: Iterable[str], chips: float = 100) -> Session:
    return Session(deck=StackedDeck(labels), bankroll=Bankroll(chips))


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def engine(events: EventLog) -> RoundEngine:
    return RoundEngine(log_fn=events)
