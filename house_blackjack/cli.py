from __future__ import annotations

import argparse
import json
from typing import Any, Dict

from .agents.basic import BasicStrategyAgent
from .agents.console import ConsoleAgent
from .agents.guarded import GuardedAgent
from .agents.llm_agent import LLMAgent
from .agents.random_agent import RandomAgent
from .cli_helpers import ErrorTracker, HeartbeatTracker, create_event_emitter, setup_logging, write_event
from .commentary import Commentary
from .constants import (
    AVAILABLE_AGENTS,
    DEFAULT_BET,
    DEFAULT_HEARTBEAT_SECONDS,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_PROMPT_MODE,
    DEFAULT_ROUNDS,
    DEFAULT_SEED,
    DEFAULT_TEMPERATURE,
    STARTING_CHIPS,
    VALID_PROMPT_MODES,
)
from .engine import RoundEngine, Session
from .eval import run_session_track
from .game import play_session


def build_agent(name: str, args: argparse.Namespace | None = None) -> Any:
    bet = getattr(args, "bet", DEFAULT_BET) if args else DEFAULT_BET
    if name == "basic":
        return BasicStrategyAgent(bet_size=bet)
    if name == "random":
        seed = getattr(args, "seed", 0) if args else 0
        return RandomAgent(seed=seed or 0, bet_size=bet)
    if name == "llm":
        provider = getattr(args, "llm_provider", None) if args else None
        model = getattr(args, "llm_model", None) if args else None
        temperature = getattr(args, "llm_temperature", DEFAULT_TEMPERATURE) if args else DEFAULT_TEMPERATURE
        prompt_mode = getattr(args, "llm_prompt", DEFAULT_PROMPT_MODE) if args else DEFAULT_PROMPT_MODE
        llm_debug = getattr(args, "llm_debug", False) if args else False
        return LLMAgent(
            provider=provider or "openai",
            model=model or DEFAULT_OPENAI_MODEL,
            temperature=temperature,
            prompt_mode=prompt_mode,
            debug_log=llm_debug,
            bet_size=bet,
        )
    raise ValueError(f"Unknown agent: {name}")


def cmd_play(args: argparse.Namespace) -> None:
    commentary = Commentary(pacing=not args.no_pause)
    log_file = None
    log_fh = None
    if args.log_jsonl:
        log_file, log_fh = setup_logging(args)

    def table_log(event: Dict) -> None:
        commentary(event)
        if log_fh:
            write_event(log_fh, dict(event))

    session = Session.new(seed=args.seed, chips=args.chips)
    engine = RoundEngine(log_fn=table_log)
    agent = ConsoleAgent(pacing=not args.no_pause)
    try:
        play_session(session, agent, engine)
    except (KeyboardInterrupt, EOFError):
        print()
        print(f"Leaving the table with {session.bankroll.balance:g} chips.")
    finally:
        if log_fh:
            log_fh.close()
            print(f"table log written to {log_file}")


def cmd_simulate(args: argparse.Namespace) -> None:
    agent = build_agent(args.agent, args)
    if args.guard:
        agent = GuardedAgent(agent)

    log_file, log_fh = setup_logging(args)
    heartbeat = HeartbeatTracker(max(0, int(args.heartbeat_secs)))
    errors = ErrorTracker()
    emit = create_event_emitter(args.debug, log_fh, heartbeat, errors, args.rounds)

    try:
        result = run_session_track(
            agent,
            rounds=args.rounds,
            seed=args.seed,
            starting_chips=args.chips,
            log_fn=emit,
        )
    finally:
        log_fh.close()

    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2)
    print(json.dumps({"metrics": result["metrics"], "outcomes": result["outcomes"]}, indent=2))
    errors.print_summary(log_file)
    print(f"per-decision log written to {log_file}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="house-blackjack", description="Single-player blackjack against the house")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_play = sub.add_parser("play", help="Play interactively at the console")
    p_play.add_argument("--chips", type=float, default=STARTING_CHIPS, help="Starting chip balance")
    p_play.add_argument("--seed", type=int, default=None, help="Seed the deck for a reproducible game")
    p_play.add_argument("--no-pause", action="store_true", help="Skip the dramatic pauses between messages")
    p_play.add_argument("--log-jsonl", type=str, default=None, help="Also write every table event to this JSONL file")
    p_play.set_defaults(func=cmd_play)

    p_sim = sub.add_parser("simulate", help="Let an automated agent play a session")
    p_sim.add_argument("--agent", choices=sorted(AVAILABLE_AGENTS), default="basic")
    p_sim.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS)
    p_sim.add_argument("--seed", type=int, default=DEFAULT_SEED)
    p_sim.add_argument("--bet", type=int, default=DEFAULT_BET, help="Flat bet per round (capped at the chips left)")
    p_sim.add_argument("--chips", type=float, default=STARTING_CHIPS, help="Starting chip balance")
    p_sim.add_argument("--report", type=str, default=None)
    p_sim.add_argument("--guard", action="store_true", help="Wrap agent to log illegal actions and fall back to the first legal choice")
    # LLM settings
    p_sim.add_argument(
        "--llm-provider",
        type=str,
        default="openai",
        help="LLM provider (openai | gemini | ollama | openrouter)",
    )
    p_sim.add_argument("--llm-model", type=str, default=DEFAULT_OPENAI_MODEL, help="LLM model name for --agent llm")
    p_sim.add_argument("--llm-temperature", type=float, default=DEFAULT_TEMPERATURE, help="LLM temperature for --agent llm")
    p_sim.add_argument("--llm-prompt", type=str, choices=sorted(VALID_PROMPT_MODES), default=DEFAULT_PROMPT_MODE, help="Prompt style for --agent llm")
    p_sim.add_argument("--llm-debug", action="store_true", help="Include LLM prompt in per-decision meta (response always logged)")
    # Debug/logging
    p_sim.add_argument("--debug", action="store_true", help="Print per-decision debug lines to stdout")
    p_sim.add_argument("--log-jsonl", type=str, default=None, help="Write per-decision JSONL events to this file")
    p_sim.add_argument("--heartbeat-secs", type=int, default=DEFAULT_HEARTBEAT_SECONDS, help="Print a heartbeat line every N seconds (0 to disable)")
    p_sim.set_defaults(func=cmd_simulate)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
