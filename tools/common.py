#!/usr/bin/env python3
"""
Common utilities for the session log tools.

This module provides shared functionality for:
- File discovery and JSONL parsing
- Decision classification
- Output formatting
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Optional

FACE_CARDS = {"T", "J", "Q", "K"}


def norm_rank(rank: str) -> str:
    """Collapse ten-valued ranks to 'T'."""
    return "T" if rank in FACE_CARDS else rank


def discover_files(inputs: List[str]) -> List[Path]:
    """
    Discover JSONL files from various input types.

    Args:
        inputs: List of file paths, directory paths, or glob patterns

    Returns:
        Deduplicated list of existing JSONL files
    """
    files: List[Path] = []
    for inp in inputs:
        p = Path(inp)
        if p.is_dir():
            files.extend(sorted(p.glob("*.jsonl")))
        elif any(ch in inp for ch in "*?["):
            files.extend(sorted(Path().glob(inp)))
        else:
            files.append(p)

    out: List[Path] = []
    seen = set()
    for f in files:
        if f.exists() and f.suffix == ".jsonl" and f not in seen:
            out.append(f)
            seen.add(f)
    return out


def load_events(path: Path) -> Iterable[dict]:
    """Yield parsed events from a JSONL file, skipping blank and truncated lines."""
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                # a run killed mid-write leaves a partial last line
                continue


def classify_decision(event: dict) -> str:
    """
    Classify a play decision as "pair X/X", "soft N" or "hard N".

    Pairs are only reported where a split was on offer, i.e. the first
    decision of an unsplit hand.
    """
    obs = event.get("obs") or {}
    player = obs.get("player") or {}
    cards = player.get("cards") or []
    if "SPLIT" in (obs.get("allowed_actions") or []) and len(cards) == 2:
        r = norm_rank(cards[0][:-1])
        return f"pair {r}/{r}"
    total = player.get("total")
    if player.get("is_soft"):
        return f"soft {total}"
    return f"hard {total}"


def format_table(
    headers: List[str],
    rows: List[List[str]],
    right_align: Optional[List[str]] = None
) -> str:
    """Format rows under headers with aligned columns."""
    if not rows:
        return "(no data)"

    right_align = right_align or []
    all_rows = [headers] + rows
    widths = [max(len(str(row[i])) for row in all_rows) for i in range(len(headers))]

    def fmt(row: List[str]) -> str:
        parts = []
        for i, (cell, header) in enumerate(zip(row, headers)):
            if header in right_align:
                parts.append(str(cell).rjust(widths[i]))
            else:
                parts.append(str(cell).ljust(widths[i]))
        return "  ".join(parts)

    return "\n".join(fmt(r) for r in all_rows)
