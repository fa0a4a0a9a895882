from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .agents.basic import BasicStrategyAgent
from .constants import STARTING_CHIPS
from .engine import RoundEngine, Session
from .game import play_session
from .types import Outcome, RoundResult


@dataclass
class SessionMetrics:
    rounds: int
    total_return: float
    ev_per_round: float
    final_balance: float
    decisions: int
    mistakes: int
    mistake_rate: float
    insurance_taken: int
    insurance_won: int
    splits: int
    doubles: int


def run_session_track(
    agent: Any,
    rounds: int = 1000,
    seed: int | None = 42,
    starting_chips: float = STARTING_CHIPS,
    *,
    log_fn: Optional[Callable[[Dict], None]] = None,
    table_log_fn: Optional[Callable[[Dict], None]] = None,
) -> Dict:
    """Play up to `rounds` rounds with `agent` and score its decisions.

    Each play decision is compared with `BasicStrategyAgent`; a differing
    choice counts as a mistake. `log_fn` receives one event per decision (or
    one `no_decision` event per round), `table_log_fn` the raw table events.
    """
    session = Session.new(seed=seed, chips=starting_chips)
    engine = RoundEngine(log_fn=table_log_fn)
    baseline = BasicStrategyAgent()
    # Reset illegal counters if supported (GuardedAgent)
    if hasattr(agent, "reset_illegals"):
        agent.reset_illegals()

    def scored(round_index: int, result: RoundResult) -> tuple[int, int]:
        decisions = 0
        mistakes = 0
        for j, d in enumerate(result.trace["decisions"]):
            obs = d["obs"]
            event = {
                "track": "session",
                "round": round_index,
                "decision_idx": j,
                "hand_index": d["hand_index"],
                "obs": obs.to_dict(),
                "meta": d.get("meta", {}),
                "final": result.summary(),
            }
            if "insurance" in d:
                event["insurance"] = d["insurance"]
            else:
                agent_action = d["action"]
                baseline_action = baseline.act(obs, info={})
                mistake = agent_action != baseline_action
                decisions += 1
                mistakes += int(mistake)
                event.update({
                    "agent_action": agent_action.name,
                    "baseline_action": baseline_action.name,
                    "mistake": mistake,
                })
            if log_fn is not None:
                log_fn(event)
        # If no decisions occurred (e.g., naturals), still emit a minimal event
        if log_fn is not None and not result.trace["decisions"]:
            log_fn({
                "track": "session",
                "round": round_index,
                "decision_idx": None,
                "no_decision": True,
                "final": result.summary(),
            })
        return decisions, mistakes

    totals = {"decisions": 0, "mistakes": 0}
    outcome_counts: Dict[str, int] = {o.value: 0 for o in Outcome}
    traces: List[Dict] = []

    def on_round(i: int, result: RoundResult) -> None:
        d, m = scored(i, result)
        totals["decisions"] += d
        totals["mistakes"] += m
        for o in result.outcomes:
            outcome_counts[o.value] += 1
        if i < 10:
            traces.append(result.summary())

    results = play_session(session, agent, engine, max_rounds=rounds, on_round=on_round)
    decisions = totals["decisions"]
    mistakes = totals["mistakes"]

    played = len(results)
    total_return = session.bankroll.balance - starting_chips
    metrics = SessionMetrics(
        rounds=played,
        total_return=total_return,
        ev_per_round=total_return / played if played else 0.0,
        final_balance=session.bankroll.balance,
        decisions=decisions,
        mistakes=mistakes,
        mistake_rate=mistakes / decisions if decisions else 0.0,
        insurance_taken=sum(1 for r in results if r.insurance is not None),
        insurance_won=sum(1 for r in results if r.insurance is not None and r.insurance.dealer_blackjack),
        splits=sum(1 for r in results if r.split),
        doubles=sum(1 for r in results for h in r.hands if h.doubled),
    )
    out = {
        "track": "session",
        "metrics": metrics.__dict__,
        "outcomes": outcome_counts,
        "busted_out": session.bankroll.is_broke,
        "samples": len(traces),
        "trace_preview": traces,
    }
    if hasattr(agent, "illegal_count"):
        out["metrics"]["illegal_actions"] = int(getattr(agent, "illegal_count"))
        out["metrics"]["illegal_rate"] = (getattr(agent, "illegal_count") / decisions) if decisions else 0.0
    return out
