from __future__ import annotations

from house_blackjack.agents.basic import BasicStrategyAgent
from house_blackjack.engine import Session
from house_blackjack.game import play_session
from house_blackjack.types import Action, GameOption
from tests.conftest import ScriptedAgent, stacked_session


def test_quit_says_goodbye_without_dealing(engine, events) -> None:
    session = stacked_session([])
    agent = ScriptedAgent(options=[GameOption.QUIT])
    results = play_session(session, agent, engine)
    assert results == []
    assert events.kinds() == ["welcome", "goodbye"]
    assert session.bankroll.balance == 100


def test_session_ends_when_chips_run_out(engine, events) -> None:
    session = stacked_session(["TS", "9H", "2C", "8D", "KC"])
    agent = ScriptedAgent([Action.HIT], bets=[100])
    results = play_session(session, agent, engine)
    assert len(results) == 1
    assert session.bankroll.is_broke
    assert events.kinds()[-1] == "out_of_chips"
    assert "goodbye" not in events.kinds()


def test_rounds_continue_until_quit(engine, events) -> None:
    session = stacked_session(["AS", "9C", "KD", "7H"])
    agent = ScriptedAgent(bets=[10, 10], options=[GameOption.DEAL, GameOption.DEAL, GameOption.QUIT])
    results = play_session(session, agent, engine)
    # the stacked deck deals the same natural every round
    assert len(results) == 2
    assert session.bankroll.balance == 130
    assert session.rounds_played == 2
    assert events.kinds()[-1] == "goodbye"


def test_max_rounds_and_round_callback(engine) -> None:
    session = Session.new(seed=3)
    seen = []
    results = play_session(
        session,
        BasicStrategyAgent(bet_size=5),
        engine,
        max_rounds=4,
        on_round=lambda i, r: seen.append((i, r.balance)),
    )
    assert len(results) == 4
    assert [i for i, _ in seen] == [0, 1, 2, 3]
    assert seen[-1][1] == session.bankroll.balance
