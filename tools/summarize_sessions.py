#!/usr/bin/env python3
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Tuple

from common import classify_decision, discover_files, format_table, load_events, norm_rank


def summarize(files: List[Path], top_n: int) -> None:
    rounds = 0
    net = 0.0
    outcomes: Dict[str, int] = {}
    class_total: Dict[str, int] = {}
    class_mis: Dict[str, int] = {}
    conf_counts: Dict[Tuple[str, str, str, str], int] = {}
    insurance_taken = 0
    insurance_offered = 0

    for f in files:
        seen_rounds = set()
        for ev in load_events(f):
            if ev.get("track") != "session":
                continue
            rnd = ev.get("round")
            final = ev.get("final") or {}
            # every decision event repeats the round summary; count it once
            if rnd not in seen_rounds and final:
                seen_rounds.add(rnd)
                rounds += 1
                net += float(final.get("net", 0.0))
                for h in final.get("hands") or []:
                    o = h.get("outcome", "?")
                    outcomes[o] = outcomes.get(o, 0) + 1

            if ev.get("decision_idx") is None:
                continue
            if "insurance" in ev:
                insurance_offered += 1
                insurance_taken += int(bool(ev["insurance"]))
                continue

            a = ev.get("agent_action")
            b = ev.get("baseline_action")
            if not isinstance(a, str) or not isinstance(b, str):
                continue
            cat = classify_decision(ev)
            class_total[cat] = class_total.get(cat, 0) + 1
            if a != b:
                class_mis[cat] = class_mis.get(cat, 0) + 1
                du_full = (ev.get("obs") or {}).get("dealer_upcard")
                du = norm_rank(du_full[:-1]) if isinstance(du_full, str) and du_full else "?"
                key = (cat, du, b, a)
                conf_counts[key] = conf_counts.get(key, 0) + 1

    decisions = sum(class_total.values())
    mistakes = sum(class_mis.values())
    ev_round = net / rounds if rounds else 0.0
    print(f"files={len(files)} rounds={rounds} net={net:g} ev_per_round={ev_round:.4f}")
    print(f"decisions={decisions} mistakes={mistakes} mistake_rate={(mistakes / decisions if decisions else 0):.3f}")
    print(f"insurance offered={insurance_offered} taken={insurance_taken}")

    print("\n# Outcomes")
    rows = [[o, str(n)] for o, n in sorted(outcomes.items(), key=lambda x: -x[1])]
    print(format_table(["outcome", "hands"], rows, right_align=["hands"]))

    print("\n# Per-class mistake rates")
    rows = []
    for k in sorted(class_total, key=lambda x: (0 if x.startswith("pair") else (1 if x.startswith("soft") else 2), x)):
        tot = class_total[k]
        mis = class_mis.get(k, 0)
        rows.append([k, str(tot), str(mis), f"{mis / tot:.3f}"])
    print(format_table(["class", "total", "mistakes", "rate"], rows, right_align=["total", "mistakes", "rate"]))

    print("\n# Top confusions")
    items = sorted(conf_counts.items(), key=lambda it: it[1], reverse=True)[:top_n]
    rows = [[cat, du, b, a, str(n)] for (cat, du, b, a), n in items]
    print(format_table(["category", "dealer", "baseline", "agent", "mistakes"], rows, right_align=["mistakes"]))


def main():
    ap = argparse.ArgumentParser(description="Summarize results and mistakes from `house-blackjack simulate` JSONL logs.")
    ap.add_argument("inputs", nargs="+", help="Files, dirs, or globs (e.g., logs/*.jsonl)")
    ap.add_argument("--top", type=int, default=15, help="Top N confusion rows")
    args = ap.parse_args()

    files = discover_files(args.inputs)
    if not files:
        raise SystemExit("No input files found")
    summarize(files, args.top)


if __name__ == "__main__":
    main()
