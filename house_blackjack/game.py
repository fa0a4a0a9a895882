from __future__ import annotations

from typing import Any, Callable, List, Optional

from .engine import RoundEngine, Session
from .types import GameOption, RoundResult


def play_session(
    session: Session,
    agent: Any,
    engine: RoundEngine,
    max_rounds: Optional[int] = None,
    on_round: Optional[Callable[[int, RoundResult], None]] = None,
) -> List[RoundResult]:
    """Deal rounds until the agent quits, the chips run out or `max_rounds` is hit.

    The agent picks deal/quit with `choose_game_option(balance)` and the stake
    with `choose_bet(balance)`; both must already be valid when returned.
    `on_round(index, result)` is called as each round finishes.
    """
    results: List[RoundResult] = []
    bankroll = session.bankroll
    engine.emit({"event": "welcome", "balance": bankroll.balance})

    while not bankroll.is_broke:
        if max_rounds is not None and len(results) >= max_rounds:
            break
        option = agent.choose_game_option(bankroll.balance)
        if option == GameOption.QUIT:
            engine.emit({"event": "goodbye", "balance": bankroll.balance})
            return results
        if option != GameOption.DEAL:
            raise ValueError(f"Unknown game option: {option!r}")

        bet = agent.choose_bet(bankroll.balance)
        result = engine.play_round(session, agent, bet)
        if on_round is not None:
            on_round(len(results), result)
        results.append(result)

        if bankroll.is_broke:
            engine.emit({"event": "out_of_chips", "balance": bankroll.balance})

    return results
