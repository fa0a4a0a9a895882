"""Shared utilities for agent implementations."""

from __future__ import annotations

from typing import List, Optional

from .constants import DEFAULT_BET, MINIMUM_BET, VALID_PROMPT_MODES
from .types import Action, GameOption, Observation


def parse_dealer_upcard(observation: Observation) -> int:
    """Extract dealer upcard value from observation.

    Args:
        observation: Blackjack observation containing dealer upcard

    Returns:
        Numeric value of dealer upcard (11 for Ace, 10 for ten-valued cards)
    """
    # dealer_upcard like '9H' or 'TS'; strip one-char suit
    rank = observation.dealer_upcard[:-1]
    if rank in ("T", "J", "Q", "K"):
        return 10
    if rank == "A":
        return 11
    return int(rank)


def normalize_rank(rank: str) -> str:
    """Collapse ten-valued ranks to 'T'."""
    if rank in ("10", "T", "t", "J", "Q", "K"):
        return "T"
    return rank


def extract_ranks_from_cards(cards: List[str]) -> str:
    """Extract ranks from card labels for prompt display.

    Args:
        cards: List of card labels (e.g., ['AH', 'TS'])

    Returns:
        Comma-separated ranks (e.g., 'A,T')
    """
    return ",".join(card[:-1] for card in cards)


def format_allowed_actions(actions: List[Action]) -> str:
    return ", ".join(a.name for a in actions)


def validate_agent_parameters(
    temperature: Optional[float] = None,
    prompt_mode: Optional[str] = None,
) -> None:
    """Validate LLM agent parameters.

    Raises:
        ValueError: If any parameter is invalid
    """
    errors = {}

    if prompt_mode is not None and prompt_mode not in VALID_PROMPT_MODES:
        errors["prompt_mode"] = f"Must be one of: {', '.join(sorted(VALID_PROMPT_MODES))}"

    if temperature is not None and (temperature < 0.0 or temperature > 2.0):
        errors["temperature"] = "Must be between 0.0 and 2.0"

    if errors:
        error_msg = "; ".join(f"{k}: {v}" for k, v in errors.items())
        raise ValueError(f"Invalid agent parameters: {error_msg}")


class FlatBettor:
    """Deal/quit and bet sizing for automated agents: always deal, flat stake.

    The stake is capped at the whole chips left, so a short stack bets what
    it has.
    """

    bet_size: int = DEFAULT_BET

    def choose_game_option(self, balance: float) -> GameOption:
        return GameOption.DEAL

    def choose_bet(self, balance: float) -> int:
        return max(MINIMUM_BET, min(int(self.bet_size), int(balance)))
