"""Helper functions for CLI operations."""

from __future__ import annotations

import json
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from .constants import DEFAULT_HEARTBEAT_SECONDS, JSONL_EXTENSION, MAX_CONSECUTIVE_ERRORS


class ErrorTracker:
    """Track LLM errors and handle error thresholds."""

    def __init__(self, max_consecutive: int = MAX_CONSECUTIVE_ERRORS):
        self.error_count = 0
        self.consecutive_errors = 0
        self.last_error: Optional[str] = None
        self.max_consecutive = max_consecutive

    def record_error(self, error_msg: str, llm_model: str = "unknown") -> bool:
        """Record an error and return True if should abort."""
        self.error_count += 1
        self.consecutive_errors += 1
        self.last_error = error_msg

        print(f"❌ LLM ERROR (#{self.error_count}): {error_msg}")

        if self.consecutive_errors >= self.max_consecutive:
            print(f"🛑 ABORTING: {self.consecutive_errors} consecutive LLM errors. Last error: {error_msg}")
            print("Check your API key, model name, or network connection.")
            return True
        return False

    def record_empty_response(self, llm_model: str, attempts: int = 1) -> bool:
        """Record an empty response and return True if should abort."""
        error_msg = f"Model {llm_model} returned empty response after {attempts} attempts"
        self.error_count += 1
        self.consecutive_errors += 1
        self.last_error = error_msg

        print(f"❌ LLM EMPTY RESPONSE (#{self.error_count}): {error_msg}")

        if self.consecutive_errors >= self.max_consecutive:
            print(f"🛑 ABORTING: {self.consecutive_errors} consecutive empty responses from {llm_model}")
            print("Try using --llm-debug to see the exact prompt being sent.")
            return True
        return False

    def record_success(self) -> None:
        self.consecutive_errors = 0

    def print_summary(self, log_file: str) -> None:
        """Print error summary if any errors occurred."""
        if self.error_count > 0:
            print(f"\n⚠️  WARNING: {self.error_count} LLM errors occurred during this run.")
            print(f"   Last error: {self.last_error}")
            print(f"   Check the log file for details: {log_file}")


class HeartbeatTracker:
    """Print a progress line every `heartbeat_seconds` during a simulation."""

    def __init__(self, heartbeat_seconds: int = DEFAULT_HEARTBEAT_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.heartbeat_seconds = heartbeat_seconds
        self.clock = clock
        self.last_heartbeat = clock()
        self.start_time = self.last_heartbeat
        self.max_round_seen = -1
        self.balance: Optional[float] = None

    def should_print_heartbeat(self) -> bool:
        if self.heartbeat_seconds <= 0:
            return False
        return self.clock() - self.last_heartbeat >= self.heartbeat_seconds

    def record_round(self, round_index: Any, balance: Any = None) -> None:
        if isinstance(round_index, int):
            self.max_round_seen = max(self.max_round_seen, round_index)
        if isinstance(balance, (int, float)):
            self.balance = float(balance)

    def print_heartbeat(self, total_rounds: int) -> None:
        now = self.clock()
        elapsed = now - self.start_time
        done = self.max_round_seen + 1
        pct = (done / total_rounds) * 100 if total_rounds else 0
        chips = f" chips={self.balance:g}" if self.balance is not None else ""
        print(f"[heartbeat] {elapsed:.0f}s session: round={done}/{total_rounds} ({pct:.1f}%){chips}")
        self.last_heartbeat = now


def default_log_path(kind: str, agent: str, model: Optional[str] = None) -> str:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    Path("logs").mkdir(parents=True, exist_ok=True)
    suffix = agent
    if model:
        safe = "".join(ch if (ch.isalnum() or ch in ("-", "_")) else "-" for ch in model)
        suffix = f"{suffix}_{safe}"
    return str(Path("logs") / f"{ts}_{kind}_{suffix}{JSONL_EXTENSION}")


def setup_logging(args) -> Tuple[str, Any]:
    """Open the JSONL event log named by --log-jsonl, or a timestamped default."""
    log_file = getattr(args, "log_jsonl", None)
    if not log_file:
        model = getattr(args, "llm_model", None) if getattr(args, "agent", None) == "llm" else None
        log_file = default_log_path(args.cmd, getattr(args, "agent", "console"), model)
    log_fh = open(log_file, "a", encoding="utf-8")
    return log_file, log_fh


def write_event(log_fh: Any, event: Dict[str, Any]) -> None:
    event["timestamp"] = datetime.now().isoformat()
    log_fh.write(json.dumps(event) + "\n")
    log_fh.flush()


def create_event_emitter(
    debug: bool,
    log_fh: Optional[Any],
    heartbeat_tracker: HeartbeatTracker,
    error_tracker: ErrorTracker,
    total_rounds: int,
) -> Callable[[Dict[str, Any]], None]:
    """Create an event emission function for logging and heartbeats."""

    def emit(event: dict) -> None:
        # Handle LLM errors and empty responses
        meta = event.get("meta", {})
        llm_status = meta.get("llm_status")
        llm_error = meta.get("llm_error")
        llm_model = meta.get("llm_model", "unknown")

        should_abort = False
        if llm_status == "error" and llm_error:
            should_abort = error_tracker.record_error(llm_error, llm_model)
        elif llm_status == "empty":
            should_abort = error_tracker.record_empty_response(llm_model, meta.get("llm_attempts", 1))
        elif llm_status == "ok":
            error_tracker.record_success()

        if should_abort:
            if log_fh:
                log_fh.close()
            sys.exit(1)

        if debug and event.get("decision_idx") is not None:
            obs = event.get("obs", {})
            p = obs.get("player", {})
            up_full = obs.get("dealer_upcard")
            up = up_full[:-1] if isinstance(up_full, str) and len(up_full) >= 2 else up_full
            cards = [c[:-1] for c in p.get("cards", []) or []]
            if "insurance" in event:
                act = f"insurance={event['insurance']}"
            else:
                act = f"act={event.get('agent_action')} base={event.get('baseline_action')} mistake={event.get('mistake')}"
            illegal = meta.get("illegal_attempt") is not None
            print(f"[round {event.get('round')} d{event.get('decision_idx')}] "
                  f"up={up} cards={cards} {act} illegal={illegal}")

        heartbeat_tracker.record_round(event.get("round"), (event.get("final") or {}).get("balance"))
        if heartbeat_tracker.should_print_heartbeat():
            heartbeat_tracker.print_heartbeat(total_rounds)

        if log_fh:
            write_event(log_fh, event)

    return emit
